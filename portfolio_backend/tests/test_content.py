import unittest
from unittest.mock import MagicMock

from portfolio_backend.cache import Collection, ListingCache
from portfolio_backend.content import ContentService
from portfolio_backend.db import InMemoryDbClient, PostRecord, ProjectRecord
from portfolio_backend.errors import StoreError, ValidationError


class ContentServiceTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.cache = ListingCache()
        self.service = ContentService(db=self.db, cache=self.cache)

    def test_projects_are_merged_with_their_stacks(self):
        web = self.service.create_project(
            ProjectRecord(title="web", stack=["react", "node"])
        )
        cli = self.service.create_project(ProjectRecord(title="cli", stack=["rust"]))
        empty = self.service.create_project(ProjectRecord(title="empty"))

        by_id = {p["id"]: p for p in self.service.list_projects()}
        self.assertEqual(by_id[web]["stack"], ["react", "node"])
        self.assertEqual(by_id[cli]["stack"], ["rust"])
        self.assertEqual(by_id[empty]["stack"], [])

    def test_create_post_requires_content(self):
        for content in (None, ""):
            with self.subTest(content=content):
                with self.assertRaises(ValidationError) as ctx:
                    self.service.create_post(PostRecord(content=content, title="t"))
                self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(self.db.posts, {})

    def test_writes_invalidate_only_their_collection(self):
        self.service.list_posts()
        self.service.list_resources()
        self.service.create_post(PostRecord(content="hello"))

        self.assertIsNone(self.cache.get(Collection.POSTS))
        self.assertEqual(self.cache.get(Collection.RESOURCES), ())
        self.assertEqual(self.service.list_posts()[0]["content"], "hello")

    def test_failed_write_keeps_cache(self):
        db = MagicMock()
        db.list_projects.return_value = []
        db.list_stack_entries.return_value = []
        db.create_project.side_effect = StoreError("Failed to create project")
        service = ContentService(db=db, cache=self.cache)

        service.list_projects()
        generation = self.cache.generation(Collection.PROJECTS)
        with self.assertRaises(StoreError):
            service.create_project(ProjectRecord(title="x", stack=["a"]))
        self.assertEqual(self.cache.generation(Collection.PROJECTS), generation)
        self.assertEqual(self.cache.get(Collection.PROJECTS), ())


if __name__ == "__main__":
    unittest.main()

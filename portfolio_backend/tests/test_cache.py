import threading
import unittest

from portfolio_backend.cache import Collection, ListingCache


class ListingCacheTests(unittest.TestCase):
    def setUp(self):
        self.cache = ListingCache()

    def test_empty_until_populated(self):
        self.assertIsNone(self.cache.get(Collection.POSTS))
        self.assertTrue(self.cache.set(Collection.POSTS, [{"id": 1}]))
        self.assertEqual(self.cache.get(Collection.POSTS), ({"id": 1},))

    def test_slots_are_independent(self):
        self.cache.set(Collection.POSTS, [{"id": 1}])
        self.cache.invalidate(Collection.RESOURCES)
        self.assertIsNotNone(self.cache.get(Collection.POSTS))
        self.assertIsNone(self.cache.get("resources"))

    def test_get_or_load_calls_loader_once(self):
        calls = []

        def loader():
            calls.append(1)
            return [{"id": 7}]

        first = self.cache.get_or_load(Collection.PROJECTS, loader)
        second = self.cache.get_or_load(Collection.PROJECTS, loader)
        self.assertEqual(first, second)
        self.assertEqual(len(calls), 1)

        self.cache.invalidate(Collection.PROJECTS)
        self.cache.get_or_load(Collection.PROJECTS, loader)
        self.assertEqual(len(calls), 2)

    def test_stale_populate_is_discarded(self):
        started_under = self.cache.generation(Collection.RESOURCES)
        self.cache.invalidate(Collection.RESOURCES)
        stored = self.cache.set(
            Collection.RESOURCES, [{"id": 1}], generation=started_under
        )
        self.assertFalse(stored)
        self.assertIsNone(self.cache.get(Collection.RESOURCES))

    def test_invalidate_during_load_wins(self):
        def loader():
            # A write commits while the read is still in flight.
            self.cache.invalidate(Collection.POSTS)
            return [{"id": 1, "content": "old"}]

        listing = self.cache.get_or_load(Collection.POSTS, loader)
        self.assertEqual(listing, ({"id": 1, "content": "old"},))
        self.assertIsNone(self.cache.get(Collection.POSTS))

    def test_concurrent_invalidate_never_resurrects_old_listing(self):
        loading = threading.Event()
        release = threading.Event()

        def slow_loader():
            loading.set()
            release.wait(timeout=5)
            return [{"id": 1, "title": "stale"}]

        reader = threading.Thread(
            target=self.cache.get_or_load, args=(Collection.PROJECTS, slow_loader)
        )
        reader.start()
        self.assertTrue(loading.wait(timeout=5))
        self.cache.invalidate(Collection.PROJECTS)
        release.set()
        reader.join(timeout=5)

        self.assertIsNone(self.cache.get(Collection.PROJECTS))
        fresh = self.cache.get_or_load(
            Collection.PROJECTS, lambda: [{"id": 1, "title": "fresh"}]
        )
        self.assertEqual(fresh[0]["title"], "fresh")

    def test_reset_clears_everything(self):
        for collection in Collection:
            self.cache.set(collection, [])
        self.cache.reset()
        for collection in Collection:
            self.assertIsNone(self.cache.get(collection))


if __name__ == "__main__":
    unittest.main()

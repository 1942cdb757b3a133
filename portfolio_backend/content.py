"""
Read and write paths for projects, resources and posts.

Reads are served from the listing cache; writes go to the store and clear
the matching cache slot once they have committed.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from portfolio_backend.cache import Collection, Listing, ListingCache
from portfolio_backend.db import DbClient, PostRecord, ProjectRecord, ResourceRecord
from portfolio_backend.errors import ValidationError

logger = logging.getLogger(__name__)


class ContentService:
    def __init__(self, db: DbClient, cache: ListingCache):
        self.db = db
        self.cache = cache

    # Listings

    def list_projects(self) -> Listing:
        return self.cache.get_or_load(Collection.PROJECTS, self._load_projects)

    def list_resources(self) -> Listing:
        return self.cache.get_or_load(
            Collection.RESOURCES,
            lambda: [resource.as_dict() for resource in self.db.list_resources()],
        )

    def list_posts(self) -> Listing:
        return self.cache.get_or_load(
            Collection.POSTS,
            lambda: [post.as_dict() for post in self.db.list_posts()],
        )

    def _load_projects(self) -> list[dict]:
        projects = self.db.list_projects()
        stacks: dict[int, list[str]] = defaultdict(list)
        for entry in self.db.list_stack_entries():
            stacks[entry.project_id].append(entry.technology)
        listing = []
        for project in projects:
            project.stack = list(stacks.get(project.id, []))
            listing.append(project.as_dict())
        return listing

    # Writes

    def create_project(self, project: ProjectRecord) -> int:
        project_id = self.db.create_project(project)
        self.cache.invalidate(Collection.PROJECTS)
        logger.info(
            "Created project %s with %d stack entries", project_id, len(project.stack)
        )
        return project_id

    def create_resource(self, resource: ResourceRecord) -> int:
        resource_id = self.db.create_resource(resource)
        self.cache.invalidate(Collection.RESOURCES)
        logger.info("Created resource %s", resource_id)
        return resource_id

    def create_post(self, post: PostRecord) -> int:
        if not post.content:
            raise ValidationError("'content' field is required")
        post_id = self.db.create_post(post)
        self.cache.invalidate(Collection.POSTS)
        logger.info("Created post %s", post_id)
        return post_id

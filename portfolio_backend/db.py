"""
Database abstraction for MySQL (via SQLAlchemy) and an in-memory test implementation.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Protocol

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_backend.errors import StoreError

logger = logging.getLogger(__name__)


class DbClient(Protocol):
    """Interface for database access."""

    def list_projects(self) -> list["ProjectRecord"]:
        ...

    def list_stack_entries(self) -> list["StackEntry"]:
        ...

    def create_project(self, project: "ProjectRecord") -> int:
        ...

    def list_resources(self) -> list["ResourceRecord"]:
        ...

    def create_resource(self, resource: "ResourceRecord") -> int:
        ...

    def list_posts(self) -> list["PostRecord"]:
        ...

    def create_post(self, post: "PostRecord") -> int:
        ...


@dataclass
class ProjectRecord:
    title: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    source_code: Optional[str] = None
    image_url: Optional[str] = None
    youtube_url: Optional[str] = None
    stack: list[str] = field(default_factory=list)
    id: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "short_description": self.short_description,
            "description": self.description,
            "link": self.link,
            "source_code": self.source_code,
            "image_url": self.image_url,
            "youtube_url": self.youtube_url,
            "stack": list(self.stack),
        }


@dataclass(frozen=True)
class StackEntry:
    project_id: int
    technology: str


@dataclass
class ResourceRecord:
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    image_url: Optional[str] = None
    id: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "image_url": self.image_url,
        }


@dataclass
class PostRecord:
    content: str
    title: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    id: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "content": self.content,
            "description": self.description,
        }


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self.projects: dict[int, ProjectRecord] = {}
        self.stack_entries: list[StackEntry] = []
        self.resources: dict[int, ResourceRecord] = {}
        self.posts: dict[int, PostRecord] = {}
        self._ids = {
            "projects": itertools.count(1),
            "resources": itertools.count(1),
            "posts": itertools.count(1),
        }

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.projects.clear()
            self.stack_entries.clear()
            self.resources.clear()
            self.posts.clear()
            self._ids = {name: itertools.count(1) for name in self._ids}

    def list_projects(self) -> list[ProjectRecord]:
        with self._lock:
            return [
                ProjectRecord(**{**project.as_dict(), "stack": []})
                for project in self.projects.values()
            ]

    def list_stack_entries(self) -> list[StackEntry]:
        with self._lock:
            return list(self.stack_entries)

    def create_project(self, project: ProjectRecord) -> int:
        # Stage everything first so a bad entry leaves no trace.
        for technology in project.stack:
            if not isinstance(technology, str):
                raise StoreError("Stack technology must be a string")
        with self._lock:
            project_id = next(self._ids["projects"])
            self.projects[project_id] = ProjectRecord(
                **{**project.as_dict(), "id": project_id, "stack": []}
            )
            self.stack_entries.extend(
                StackEntry(project_id=project_id, technology=technology)
                for technology in project.stack
            )
        return project_id

    def list_resources(self) -> list[ResourceRecord]:
        with self._lock:
            return [ResourceRecord(**r.as_dict()) for r in self.resources.values()]

    def create_resource(self, resource: ResourceRecord) -> int:
        with self._lock:
            resource_id = next(self._ids["resources"])
            self.resources[resource_id] = ResourceRecord(
                **{**resource.as_dict(), "id": resource_id}
            )
        return resource_id

    def list_posts(self) -> list[PostRecord]:
        with self._lock:
            return [
                PostRecord(**self.posts[post_id].as_dict())
                for post_id in sorted(self.posts, reverse=True)
            ]

    def create_post(self, post: PostRecord) -> int:
        with self._lock:
            post_id = next(self._ids["posts"])
            self.posts[post_id] = PostRecord(**{**post.as_dict(), "id": post_id})
        return post_id


def _engine_options(database_url: str) -> dict:
    options: dict = {"future": True, "pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in (
            "sqlite://",
            "sqlite+pysqlite://",
        ):
            # A single shared connection, otherwise each thread gets its own db.
            options["poolclass"] = StaticPool
    else:
        options["pool_recycle"] = 1800
    return options


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL
    (e.g., mysql+pymysql in production or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("A database URL is required for SqlDbClient")
        self.engine = create_engine(database_url, **_engine_options(database_url))
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_project_record(self, row: "ProjectRow") -> ProjectRecord:
        return ProjectRecord(
            id=row.id,
            title=row.title,
            short_description=row.short_description,
            description=row.description,
            link=row.link,
            source_code=row.source_code,
            image_url=row.image_url,
            youtube_url=row.youtube_url,
        )

    def _to_resource_record(self, row: "ResourceRow") -> ResourceRecord:
        return ResourceRecord(
            id=row.id,
            title=row.title,
            description=row.description,
            link=row.link,
            image_url=row.image_url,
        )

    def _to_post_record(self, row: "PostRow") -> PostRecord:
        return PostRecord(
            id=row.id,
            title=row.title,
            date=row.date,
            content=row.content,
            description=row.description,
        )

    def _insert_stack_entry(
        self, session: Session, project_id: int, technology: str
    ) -> None:
        session.add(ProjectStackRow(project_id=project_id, technology=technology))
        session.flush()

    def list_projects(self) -> list[ProjectRecord]:
        try:
            with self.Session() as session:
                rows = session.execute(
                    select(ProjectRow).order_by(ProjectRow.id)
                ).scalars()
                return [self._to_project_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError("Failed to query projects") from exc

    def list_stack_entries(self) -> list[StackEntry]:
        try:
            with self.Session() as session:
                rows = session.execute(
                    select(ProjectStackRow).order_by(ProjectStackRow.id)
                ).scalars()
                return [
                    StackEntry(project_id=row.project_id, technology=row.technology)
                    for row in rows
                ]
        except SQLAlchemyError as exc:
            raise StoreError("Failed to query project stacks") from exc

    def create_project(self, project: ProjectRecord) -> int:
        try:
            with self.Session() as session, session.begin():
                row = ProjectRow(
                    title=project.title,
                    short_description=project.short_description,
                    description=project.description,
                    link=project.link,
                    source_code=project.source_code,
                    image_url=project.image_url,
                    youtube_url=project.youtube_url,
                )
                session.add(row)
                session.flush()
                for technology in project.stack:
                    self._insert_stack_entry(session, row.id, technology)
                project_id = row.id
        except SQLAlchemyError as exc:
            logger.warning("Project transaction rolled back: %s", exc)
            raise StoreError("Failed to create project") from exc
        return project_id

    def list_resources(self) -> list[ResourceRecord]:
        try:
            with self.Session() as session:
                rows = session.execute(
                    select(ResourceRow).order_by(ResourceRow.id)
                ).scalars()
                return [self._to_resource_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError("Failed to query resources") from exc

    def create_resource(self, resource: ResourceRecord) -> int:
        try:
            with self.Session() as session, session.begin():
                row = ResourceRow(
                    title=resource.title,
                    description=resource.description,
                    link=resource.link,
                    image_url=resource.image_url,
                )
                session.add(row)
                session.flush()
                resource_id = row.id
        except SQLAlchemyError as exc:
            raise StoreError("Failed to create resource") from exc
        return resource_id

    def list_posts(self) -> list[PostRecord]:
        try:
            with self.Session() as session:
                rows = session.execute(
                    select(PostRow).order_by(PostRow.id.desc())
                ).scalars()
                return [self._to_post_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError("Failed to query posts") from exc

    def create_post(self, post: PostRecord) -> int:
        try:
            with self.Session() as session, session.begin():
                row = PostRow(
                    title=post.title,
                    date=post.date,
                    content=post.content,
                    description=post.description,
                )
                session.add(row)
                session.flush()
                post_id = row.id
        except SQLAlchemyError as exc:
            raise StoreError("Failed to create post") from exc
        return post_id


Base = declarative_base()


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=True)
    short_description = Column(String(512), nullable=True)
    description = Column(Text, nullable=True)
    link = Column(String(512), nullable=True)
    source_code = Column(String(512), nullable=True)
    image_url = Column(String(512), nullable=True)
    youtube_url = Column(String(512), nullable=True)


class ProjectStackRow(Base):
    __tablename__ = "project_stack"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    technology = Column(String(128), nullable=False)


class ResourceRow(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    link = Column(String(512), nullable=True)
    image_url = Column(String(512), nullable=True)


class PostRow(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=True)
    date = Column(String(64), nullable=True)
    content = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from fastapi import Depends

from portfolio_backend.cache import ListingCache
from portfolio_backend.config import get_settings
from portfolio_backend.content import ContentService
from portfolio_backend.db import DbClient, InMemoryDbClient, SqlDbClient
from portfolio_backend.notifier import (
    EmbedStyle,
    InMemoryNotifier,
    Notifier,
    WebhookNotifier,
)

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_listing_cache: ListingCache | None = None
_notifier: Notifier | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client; the SQL client owns the connection pool.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    database_url = settings.sqlalchemy_url()
    if settings.use_in_memory_backends or not database_url:
        logger.warning("No database configured, using in-memory store")
        _db_client = InMemoryDbClient()
    else:
        _db_client = SqlDbClient(database_url)
    return _db_client


def get_listing_cache() -> ListingCache:
    global _listing_cache
    if _listing_cache is None:
        _listing_cache = ListingCache()
    return _listing_cache


def get_notifier() -> Notifier:
    global _notifier
    if _notifier:
        return _notifier

    settings = get_settings()
    style = EmbedStyle(
        username=settings.notifier_username,
        avatar_url=settings.notifier_avatar_url,
        footer_text=settings.notifier_footer_text,
        footer_icon_url=settings.notifier_avatar_url,
        color=settings.notifier_color,
        content=settings.notifier_content,
    )
    if settings.use_in_memory_backends or not settings.webhook_url:
        _notifier = InMemoryNotifier(style=style)
    else:
        _notifier = WebhookNotifier(url=settings.webhook_url, style=style)
    return _notifier


def get_content_service(
    db: DbClient = Depends(get_db_client),
    cache: ListingCache = Depends(get_listing_cache),
) -> ContentService:
    return ContentService(db=db, cache=cache)

"""
HTTP routes for the portfolio backend.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import PlainTextResponse

from portfolio_backend.auth import require_basic_auth
from portfolio_backend.config import Settings, get_settings
from portfolio_backend.content import ContentService
from portfolio_backend.db import PostRecord, ProjectRecord, ResourceRecord
from portfolio_backend.dependencies import get_content_service, get_notifier
from portfolio_backend.errors import StoreError
from portfolio_backend.notifier import Notifier
from portfolio_backend.schemas import (
    CreatedResponse,
    PostCreate,
    PostResponse,
    ProjectCreate,
    ProjectResponse,
    ResourceCreate,
    ResourceResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _server_error(message: str) -> PlainTextResponse:
    logger.exception(message)
    return PlainTextResponse(message, status_code=500)


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Backend is running"


@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(service: ContentService = Depends(get_content_service)):
    try:
        return list(service.list_projects())
    except StoreError:
        return _server_error("Failed to fetch projects")


@router.post(
    "/projects",
    response_model=CreatedResponse,
    status_code=201,
    dependencies=[Depends(require_basic_auth)],
)
def create_project(
    payload: ProjectCreate,
    service: ContentService = Depends(get_content_service),
):
    try:
        project_id = service.create_project(ProjectRecord(**payload.model_dump()))
    except StoreError:
        return _server_error("Failed to create project")
    return CreatedResponse(message="Project created", id=project_id)


@router.get("/resources", response_model=list[ResourceResponse])
def list_resources(service: ContentService = Depends(get_content_service)):
    try:
        return list(service.list_resources())
    except StoreError:
        return _server_error("Failed to fetch resources")


@router.post(
    "/resources",
    response_model=CreatedResponse,
    status_code=201,
    dependencies=[Depends(require_basic_auth)],
)
def create_resource(
    payload: ResourceCreate,
    service: ContentService = Depends(get_content_service),
):
    try:
        resource_id = service.create_resource(ResourceRecord(**payload.model_dump()))
    except StoreError:
        return _server_error("Failed to create resource")
    return CreatedResponse(message="Resource created", id=resource_id)


@router.get("/posts", response_model=list[PostResponse])
def list_posts(service: ContentService = Depends(get_content_service)):
    try:
        return list(service.list_posts())
    except StoreError:
        return _server_error("Failed to fetch posts")


@router.post(
    "/posts",
    response_model=CreatedResponse,
    status_code=201,
    dependencies=[Depends(require_basic_auth)],
)
def create_post(
    background_tasks: BackgroundTasks,
    payload: Optional[PostCreate] = None,
    service: ContentService = Depends(get_content_service),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    """
    Store the post, then notify the webhook once the response is out.
    A missing ``content`` surfaces as a 400 via the ValidationError handler.
    """
    if payload is None:
        payload = PostCreate()
    try:
        post_id = service.create_post(PostRecord(**payload.model_dump()))
    except StoreError:
        return _server_error("Failed to create post")
    background_tasks.add_task(
        notifier.notify,
        payload.title,
        settings.post_url_template.format(id=post_id),
        payload.description,
    )
    return CreatedResponse(message="Post created", id=post_id)

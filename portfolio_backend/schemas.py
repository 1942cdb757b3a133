"""
Pydantic schemas for the portfolio backend.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    title: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    stack: list[str] = Field(default_factory=list)
    link: Optional[str] = None
    source_code: Optional[str] = None
    image_url: Optional[str] = None
    youtube_url: Optional[str] = None


class ProjectResponse(BaseModel):
    id: int
    title: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    source_code: Optional[str] = None
    image_url: Optional[str] = None
    youtube_url: Optional[str] = None
    stack: list[str] = Field(default_factory=list)


class ResourceCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    image_url: Optional[str] = None


class ResourceResponse(ResourceCreate):
    id: int


class PostCreate(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None
    # Checked by the write path so a missing value maps to a 400, not a 422.
    content: Optional[str] = None
    description: Optional[str] = None


class PostResponse(PostCreate):
    id: int


class CreatedResponse(BaseModel):
    message: str
    id: int

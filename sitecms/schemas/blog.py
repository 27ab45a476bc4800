"""Pydantic schemas for blog endpoints."""

from datetime import datetime

from sitecms.schemas.base import CamelModel, ListEnvelope


class BlogResponse(CamelModel):
    id: int
    title: str
    slug: str
    excerpt: str | None
    content: str | None
    category: str | None
    tags: list[str] | str
    author: str | None
    publish_date: datetime | None
    meta_title: str | None
    meta_description: str | None
    status: str
    image_url: str | None
    image_key: str | None
    created_at: datetime
    updated_at: datetime


class BlogListResponse(ListEnvelope):
    items: list[BlogResponse]

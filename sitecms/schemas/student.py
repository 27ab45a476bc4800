"""Pydantic schemas for student endpoints."""

from datetime import datetime
from typing import Any

from sitecms.schemas.base import CamelModel, ListEnvelope


class StudentResponse(CamelModel):
    id: int
    slug: str
    name: str
    title: str | None
    image_url: str | None
    image_key: str | None
    cover_image_url: str | None
    cover_image_key: str | None
    badges: list[str] | str
    location: str | None
    email: str | None
    phone: str | None
    experience: str | None
    bio: str | None
    specializations: list[str] | str
    education: list[dict[str, Any]] | str
    testimonials: list[dict[str, Any]] | str
    projects: list[dict[str, Any]] | str
    created_at: datetime
    updated_at: datetime


class StudentListResponse(ListEnvelope):
    items: list[StudentResponse]
    total_pages: int

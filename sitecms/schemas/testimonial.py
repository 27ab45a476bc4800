"""Pydantic schemas for testimonial and success story endpoints."""

from datetime import datetime

from sitecms.schemas.base import CamelModel, ListEnvelope


class TestimonialResponse(CamelModel):
    id: int
    name: str
    designation: str
    content: str
    rating: int
    media_url: str | None
    media_key: str | None
    media_type: str
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


class StoryResponse(TestimonialResponse):
    profile_image_url: str | None
    profile_image_key: str | None
    location: str | None


class TestimonialListResponse(ListEnvelope):
    items: list[TestimonialResponse]


class StoryListResponse(ListEnvelope):
    items: list[StoryResponse]

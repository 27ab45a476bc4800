"""Pydantic schemas for course endpoints."""

from datetime import datetime

from sitecms.schemas.base import CamelModel, ListEnvelope


class CourseResponse(CamelModel):
    id: int
    title: str
    slug: str
    description: str
    short_description: str | None
    price: float
    original_price: float | None
    rating: float
    total_ratings: int
    image_url: str
    image_key: str
    category: str
    instructor: str
    duration: str | None
    level: str
    language: str
    features: list[str] | str
    requirements: list[str] | str
    what_you_will_learn: list[str] | str
    is_active: bool
    is_featured: bool
    enrollment_count: int
    certificate_included: bool
    lifetime_access: bool
    mobile_access: bool
    created_at: datetime
    updated_at: datetime


class CourseListResponse(ListEnvelope):
    items: list[CourseResponse]


class RatingRequest(CamelModel):
    rating: float | None = None

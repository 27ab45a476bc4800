"""Pydantic schemas for service category endpoints."""

from datetime import datetime

from sitecms.schemas.base import CamelModel, ListEnvelope


class SubServiceResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: str
    image_url: str | None
    image_key: str | None


class ServiceCategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: str
    main_image_url: str
    main_image_key: str
    is_active: bool
    sub_services: list[SubServiceResponse] = []
    created_at: datetime
    updated_at: datetime


class ServiceCategoryListResponse(ListEnvelope):
    items: list[ServiceCategoryResponse]

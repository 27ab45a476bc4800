"""Service categories and their sub-services."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from fastapi import Depends
from sqlalchemy.orm import Session

from sitecms.config import get_settings
from sitecms.dependencies import get_media_store
from sitecms.errors import UpstreamFailure, ValidationError
from sitecms.models.service_category import ServiceCategory, SubService
from sitecms.services.content import (
    SLUG_MESSAGE,
    SLUG_PATTERN,
    EntitySchema,
    EntityService,
    FieldSpec,
    MediaChangeSet,
    MediaSlot,
    decode_json_field,
    slugify,
)
from sitecms.services.media import MediaFile, MediaStore

logger = logging.getLogger("sitecms.content")

MAIN_FOLDER = "services/main"
SUB_FOLDER = "services/sub"
SUB_IMAGE_FIELD = "subServiceImage_{}"

SERVICE_SCHEMA = EntitySchema(
    label="Service",
    model=ServiceCategory,
    fields={
        "name": FieldSpec(required=True),
        "slug": FieldSpec(required=True, pattern=SLUG_PATTERN, pattern_message=SLUG_MESSAGE),
        "description": FieldSpec(required=True),
        "is_active": FieldSpec(kind="bool"),
    },
    media=(
        MediaSlot(
            field="mainImage",
            url_attr="main_image_url",
            key_attr="main_image_key",
            folder=MAIN_FOLDER,
            required=True,
        ),
    ),
    unique=("name", "slug"),
    search=("name", "description"),
)


def _sub_service_id(item: Mapping[str, Any]) -> int | None:
    value = item.get("id")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


class ServiceCategoryService(EntityService):
    """Service categories. Each sub-service may carry its own image."""

    def __init__(self, media: MediaStore, max_upload_mb: int = 100) -> None:
        super().__init__(SERVICE_SCHEMA, media, max_upload_mb)

    def parse_sub_services(self, raw: Mapping[str, Any]) -> list[dict[str, Any]] | None:
        """Read the sub-service list from the payload. None when the payload has none."""
        value = raw.get("subServices", raw.get("subServicesData"))
        if value is None:
            return None
        items = decode_json_field("subServices", value)
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ValidationError("Sub-services must be a JSON list of objects.")

        parsed = []
        for index, item in enumerate(items):
            name = str(item.get("name") or "").strip()
            description = str(item.get("description") or "").strip()
            if not name or not description:
                raise ValidationError(f"Sub-service {index + 1} requires a name and description.")
            slug = str(item.get("slug") or "").strip() or slugify(name)
            if not SLUG_PATTERN.match(slug):
                raise ValidationError(f"Sub-service {index + 1}: {SLUG_MESSAGE}")
            parsed.append(
                {
                    "id": _sub_service_id(item),
                    "name": name,
                    "slug": slug,
                    "description": description,
                    "image_url": item.get("imageUrl") or item.get("image_url"),
                }
            )
        return parsed

    async def upload_media(
        self, entity: Any, files: Mapping[str, MediaFile], changes: MediaChangeSet, replacing: bool
    ) -> None:
        # On creation the main image is uploaded together with the sub-service images.
        if replacing:
            await super().upload_media(entity, files, changes, replacing)

    async def apply_nested(
        self,
        db: Session,
        entity: Any,
        raw: Mapping[str, Any],
        files: Mapping[str, MediaFile],
        changes: MediaChangeSet,
        creating: bool,
    ) -> None:
        items = self.parse_sub_services(raw)
        if creating:
            await self._create_with_uploads(entity, items or [], files, changes)
        elif items is not None:
            await self._reconcile(entity, items, files, changes)

    async def _create_with_uploads(
        self,
        entity: ServiceCategory,
        items: list[dict[str, Any]],
        files: Mapping[str, MediaFile],
        changes: MediaChangeSet,
    ) -> None:
        """Upload the main image and all sub-service images concurrently.

        A failed sub-service upload leaves that sub-service without an image;
        a failed main image upload fails the request.
        """
        sub_indexes = [i for i in range(len(items)) if SUB_IMAGE_FIELD.format(i) in files]
        main_slot = self.schema.media[0]
        results = await asyncio.gather(
            changes.upload(files[main_slot.field], main_slot.folder),
            *(changes.try_upload(files[SUB_IMAGE_FIELD.format(i)], SUB_FOLDER) for i in sub_indexes),
            return_exceptions=True,
        )
        main_result, sub_results = results[0], results[1:]
        if isinstance(main_result, BaseException):
            if isinstance(main_result, UpstreamFailure):
                raise main_result
            raise UpstreamFailure("Failed to upload mainImage.") from main_result
        self._assign_slot(entity, main_slot, main_result, files[main_slot.field])

        uploaded = dict(zip(sub_indexes, sub_results))
        sub_services = []
        for index, item in enumerate(items):
            stored = uploaded.get(index)
            if isinstance(stored, BaseException):
                logger.warning("Sub-service image %d upload failed", index, exc_info=stored)
                stored = None
            sub_services.append(
                SubService(
                    position=index,
                    name=item["name"],
                    slug=item["slug"],
                    description=item["description"],
                    image_url=stored.url if stored else None,
                    image_key=stored.key if stored else None,
                )
            )
        entity.sub_services = sub_services

    async def _reconcile(
        self,
        entity: ServiceCategory,
        items: list[dict[str, Any]],
        files: Mapping[str, MediaFile],
        changes: MediaChangeSet,
    ) -> None:
        """Match incoming sub-services to stored ones by id and settle their images."""
        existing = {sub.id: sub for sub in entity.sub_services}
        incoming_ids = {item["id"] for item in items if item["id"] in existing}
        for sub in entity.sub_services:
            if sub.id not in incoming_ids:
                changes.supersede(sub.image_key)

        sub_services = []
        for index, item in enumerate(items):
            old = existing.get(item["id"])
            new_file = files.get(SUB_IMAGE_FIELD.format(index))
            sub = old or SubService()
            if new_file:
                stored = await changes.upload(new_file, SUB_FOLDER)
                if old:
                    changes.supersede(old.image_key)
                sub.image_url, sub.image_key = stored.url, stored.key
            elif old and not item["image_url"]:
                changes.supersede(old.image_key)
                sub.image_url, sub.image_key = None, None
            elif not old:
                sub.image_url, sub.image_key = None, None
            sub.position = index
            sub.name = item["name"]
            sub.slug = item["slug"]
            sub.description = item["description"]
            sub_services.append(sub)
        entity.sub_services = sub_services

    def owned_keys(self, entity: ServiceCategory) -> list[str]:
        keys = super().owned_keys(entity)
        keys.extend(sub.image_key for sub in entity.sub_services if sub.image_key)
        return keys

    def list_public(self, db: Session) -> list[ServiceCategory]:
        """Active service categories sorted by name."""
        items, _ = self.list(db, filters={"is_active": True}, ordering=("name",))
        return items


def get_service_category_service(media: MediaStore = Depends(get_media_store)) -> ServiceCategoryService:
    return ServiceCategoryService(media, get_settings().MAX_UPLOAD_SIZE_MB)

"""Testimonials and student success stories.

Both are ordered explicitly (``order`` ascending, then newest first) and
carry a single image-or-video attachment whose kind is recorded alongside it.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from sitecms.config import get_settings
from sitecms.dependencies import get_media_store
from sitecms.models.testimonial import StudentSuccessStory, Testimonial
from sitecms.services.content import EntitySchema, EntityService, FieldSpec, MediaSlot
from sitecms.services.media import MediaStore

RANKED_ORDERING = ("order", "-created_at", "-id")


def _feedback_fields(**extra: FieldSpec) -> dict[str, FieldSpec]:
    return {
        "name": FieldSpec(required=True),
        "designation": FieldSpec(required=True),
        "content": FieldSpec(required=True),
        "rating": FieldSpec(kind="int", minimum=1, maximum=5, default=5),
        "is_active": FieldSpec(kind="bool"),
        "order": FieldSpec(kind="int", default=0),
        **extra,
    }


TESTIMONIAL_SCHEMA = EntitySchema(
    label="Testimonial",
    model=Testimonial,
    fields=_feedback_fields(),
    media=(
        MediaSlot(
            field="media", url_attr="media_url", key_attr="media_key", folder="testimonials", type_attr="media_type"
        ),
    ),
    unique=(),
    search=("name", "designation", "content"),
    ordering=RANKED_ORDERING,
)

STORY_SCHEMA = EntitySchema(
    label="Story",
    model=StudentSuccessStory,
    fields=_feedback_fields(location=FieldSpec()),
    media=(
        MediaSlot(
            field="media",
            url_attr="media_url",
            key_attr="media_key",
            folder="student-success-stories",
            type_attr="media_type",
        ),
        MediaSlot(
            field="profileImage",
            url_attr="profile_image_url",
            key_attr="profile_image_key",
            folder="student-success-stories",
        ),
    ),
    unique=(),
    search=("name", "designation", "content", "location"),
    ordering=RANKED_ORDERING,
)


class RankedEntityService(EntityService):
    """Entities shown in explicit order, optionally filtered by the active flag."""

    def list_ranked(self, db: Session, is_active: bool | None = None) -> list:
        items, _ = self.list(db, filters={"is_active": is_active})
        return items


def get_testimonial_service(media: MediaStore = Depends(get_media_store)) -> RankedEntityService:
    return RankedEntityService(TESTIMONIAL_SCHEMA, media, get_settings().MAX_UPLOAD_SIZE_MB)


def get_story_service(media: MediaStore = Depends(get_media_store)) -> RankedEntityService:
    return RankedEntityService(STORY_SCHEMA, media, get_settings().MAX_UPLOAD_SIZE_MB)

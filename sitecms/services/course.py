"""Courses."""

from fastapi import Depends
from sqlalchemy.orm import Session

from sitecms.config import get_settings
from sitecms.dependencies import get_media_store
from sitecms.errors import ValidationError
from sitecms.models.course import COURSE_LEVELS, Course
from sitecms.services.content import SLUG_MESSAGE, SLUG_PATTERN, EntitySchema, EntityService, FieldSpec, MediaSlot
from sitecms.services.media import MediaStore

COURSE_SCHEMA = EntitySchema(
    label="Course",
    model=Course,
    fields={
        "title": FieldSpec(required=True),
        "slug": FieldSpec(required=True, pattern=SLUG_PATTERN, pattern_message=SLUG_MESSAGE),
        "description": FieldSpec(required=True),
        "short_description": FieldSpec(),
        "price": FieldSpec(kind="float", required=True, minimum=0),
        "original_price": FieldSpec(kind="float", minimum=0),
        "category": FieldSpec(required=True),
        "instructor": FieldSpec(default="Admin"),
        "duration": FieldSpec(),
        "level": FieldSpec(choices=COURSE_LEVELS, default="Beginner"),
        "language": FieldSpec(default="English"),
        "features": FieldSpec(kind="list"),
        "requirements": FieldSpec(kind="list"),
        "what_you_will_learn": FieldSpec(kind="list"),
        "is_active": FieldSpec(kind="bool"),
        "is_featured": FieldSpec(kind="bool"),
        "certificate_included": FieldSpec(kind="bool"),
        "lifetime_access": FieldSpec(kind="bool"),
        "mobile_access": FieldSpec(kind="bool"),
    },
    media=(
        MediaSlot(field="image", url_attr="image_url", key_attr="image_key", folder="courses", required=True),
    ),
    unique=("title", "slug"),
    search=("title", "description", "category"),
)


class CourseService(EntityService):
    """Courses, with public catalogue queries and ratings."""

    def __init__(self, media: MediaStore, max_upload_mb: int = 100) -> None:
        super().__init__(COURSE_SCHEMA, media, max_upload_mb)

    def list_public(self, db: Session, featured: bool = False) -> list[Course]:
        """Active courses, newest first; optionally only featured ones."""
        filters = {"is_active": True, "is_featured": True if featured else None}
        items, _ = self.list(db, filters=filters)
        return items

    def search(
        self,
        db: Session,
        q: str | None = None,
        category: str | None = None,
        level: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Course]:
        """Search active courses by text, category, level and price range."""
        criteria = []
        if min_price is not None:
            criteria.append(Course.price >= min_price)
        if max_price is not None:
            criteria.append(Course.price <= max_price)
        items, _ = self.list(
            db,
            search=q,
            filters={"is_active": True, "category": category or None, "level": level or None},
            criteria=criteria,
        )
        return items

    def rate(self, db: Session, course_id: int, rating: float) -> Course:
        """Fold a 1-5 rating into the running average, rounded to one decimal."""
        if rating is None or rating < 1 or rating > 5:
            raise ValidationError("Rating must be between 1 and 5.")
        course = self.get(db, course_id)
        total = course.total_ratings + 1
        course.rating = round((course.rating * course.total_ratings + rating) / total, 1)
        course.total_ratings = total
        db.commit()
        db.refresh(course)
        return course


def get_course_service(media: MediaStore = Depends(get_media_store)) -> CourseService:
    return CourseService(media, get_settings().MAX_UPLOAD_SIZE_MB)

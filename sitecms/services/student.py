"""Student profiles."""

import re
from collections.abc import Mapping
from typing import Any

from fastapi import Depends
from sqlalchemy.orm import Session

from sitecms.dependencies import get_media_store
from sitecms.errors import ValidationError
from sitecms.models.student import Student
from sitecms.services.content import (
    SLUG_MESSAGE,
    SLUG_PATTERN,
    EntitySchema,
    EntityService,
    FieldSpec,
    MediaChangeSet,
    MediaSlot,
    delete_quietly,
    json_array_contains,
    json_array_not_empty,
)
from sitecms.services.media import MediaFile, MediaStore

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
YEAR_PATTERN = re.compile(r"^\d{4}$")
MIN_TESTIMONIAL_LENGTH = 10

STUDENT_SCHEMA = EntitySchema(
    label="Student",
    model=Student,
    fields={
        "name": FieldSpec(required=True),
        "slug": FieldSpec(required=True, pattern=SLUG_PATTERN, pattern_message=SLUG_MESSAGE),
        "title": FieldSpec(),
        "location": FieldSpec(),
        "email": FieldSpec(pattern=EMAIL_PATTERN, pattern_message="Please provide a valid email address"),
        "phone": FieldSpec(),
        "experience": FieldSpec(),
        "bio": FieldSpec(),
        "badges": FieldSpec(kind="list"),
        "specializations": FieldSpec(kind="list"),
        "education": FieldSpec(kind="json"),
        "testimonials": FieldSpec(kind="json"),
        "projects": FieldSpec(kind="json"),
    },
    media=(
        MediaSlot(field="image", url_attr="image_url", key_attr="image_key", folder="students"),
        MediaSlot(field="coverImage", url_attr="cover_image_url", key_attr="cover_image_key", folder="students"),
    ),
    search=("name", "title", "bio"),
    max_upload_mb=10,
)


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def _project_keys(student: Student) -> list[str]:
    return [p["imageKey"] for p in _as_list(student.projects) if isinstance(p, dict) and p.get("imageKey")]


def _require(raw: Mapping[str, Any], *names: str) -> dict[str, str]:
    values = {name: str(raw.get(name) or "").strip() for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError(f"{', '.join(missing)} are required" if len(missing) > 1 else f"{missing[0]} is required")
    return values


class StudentService(EntityService):
    """Student profiles with embedded education, testimonials and projects."""

    def __init__(self, media: MediaStore) -> None:
        super().__init__(STUDENT_SCHEMA, media)

    def validate(self, values: dict[str, Any], existing: Any = None) -> None:
        if values.get("phone"):
            phone = re.sub(r"\s", "", values["phone"])
            if not PHONE_PATTERN.match(phone):
                raise ValidationError("Please provide a valid phone number")
            values["phone"] = phone
        if isinstance(values.get("projects"), list):
            # Image references on projects can only point at blobs this student already owns.
            known = set(_project_keys(existing)) if existing is not None else set()
            for project in values["projects"]:
                if isinstance(project, dict) and project.get("imageKey") not in known:
                    project.pop("imageKey", None)
                    project.pop("imageUrl", None)

    def owned_keys(self, entity: Student) -> list[str]:
        return super().owned_keys(entity) + _project_keys(entity)

    async def update(
        self, db: Session, entity_id: int, raw: Mapping[str, Any], files: Mapping[str, MediaFile] | None = None
    ) -> Student:
        before = set(_project_keys(self.get(db, entity_id)))
        student = await super().update(db, entity_id, raw, files)
        for key in before - set(_project_keys(student)):
            await delete_quietly(self.media, key)
        return student

    def list_students(
        self, db: Session, page: int = 1, limit: int = 10, search: str | None = None, specialization: str | None = None
    ) -> tuple[list[Student], int]:
        criteria = [json_array_contains(Student.specializations, specialization)] if specialization else []
        return self.list(db, search=search, criteria=criteria, page=page, limit=limit)

    def list_by_specialization(self, db: Session, specialization: str) -> list[Student]:
        items, _ = self.list(db, criteria=[json_array_contains(Student.specializations, specialization)])
        return items

    def list_featured(self, db: Session, limit: int = 6) -> list[Student]:
        """Students that carry at least one badge."""
        items, _ = self.list(db, criteria=[json_array_not_empty(Student.badges)], limit=limit)
        return items

    def _append(self, db: Session, student: Student, attr: str, item: dict[str, Any]) -> Student:
        # JSON columns are not mutation-tracked; assign a new list.
        setattr(student, attr, [*_as_list(getattr(student, attr)), item])
        db.commit()
        db.refresh(student)
        return student

    def add_testimonial(self, db: Session, student_id: int, raw: Mapping[str, Any]) -> Student:
        values = _require(raw, "name", "role", "text")
        if len(values["text"]) < MIN_TESTIMONIAL_LENGTH:
            raise ValidationError(f"Testimonial text must be at least {MIN_TESTIMONIAL_LENGTH} characters long")
        return self._append(db, self.get(db, student_id), "testimonials", values)

    def add_education(self, db: Session, student_id: int, raw: Mapping[str, Any]) -> Student:
        values = _require(raw, "degree", "institution", "year")
        if not YEAR_PATTERN.match(values["year"]):
            raise ValidationError("Year must be a 4-digit number")
        values["achievement"] = str(raw.get("achievement") or "").strip()
        return self._append(db, self.get(db, student_id), "education", values)

    async def add_project(
        self, db: Session, student_id: int, raw: Mapping[str, Any], image: MediaFile | None = None
    ) -> Student:
        values: dict[str, Any] = _require(raw, "name", "description", "year")
        if not YEAR_PATTERN.match(values["year"]):
            raise ValidationError("Year must be a 4-digit number")
        student = self.get(db, student_id)
        changes = MediaChangeSet(self.media)
        if image:
            self.check_files({image.field_name: image})
            stored = await changes.upload(image, "students/projects")
            values["imageUrl"], values["imageKey"] = stored.url, stored.key
        try:
            return self._append(db, student, "projects", values)
        except Exception:
            db.rollback()
            await changes.discard()
            raise


def get_student_service(media: MediaStore = Depends(get_media_store)) -> StudentService:
    return StudentService(media)

"""Generic lifecycle for content entities.

Every content type (blog posts, courses, service categories, students,
testimonials, success stories) is described by an ``EntitySchema``: which
fields it accepts and how to coerce them from form data, which fields must be
unique, where its media lives. ``EntityService`` runs the shared
create/update/delete/list sequence against that description, and subclasses
add the handful of type-specific queries.

Media ordering: new blobs are uploaded before the record is written, and blobs
they replace are deleted only after the write succeeded. If the write fails,
the freshly uploaded blobs are deleted again.
"""

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import String, and_, cast, or_
from sqlalchemy.exc import IntegrityError
from slugify import slugify as python_slugify
from sqlalchemy.orm import Query, Session

from sitecms.errors import DuplicateEntity, NotFound, UpstreamFailure, ValidationError
from sitecms.services.media import MediaFile, MediaStore, StoredMedia, validate_media

logger = logging.getLogger("sitecms.content")

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
SLUG_MESSAGE = "Slug must contain only lowercase letters, numbers, and hyphens"
TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}


def slugify(text: str) -> str:
    """Transliterate ``text`` to ASCII and join its alphanumeric runs with hyphens."""
    return python_slugify(text)


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def decode_json_field(name: str, raw: Any) -> Any:
    """Decode a JSON-encoded form value.

    Undecodable text is kept as-is rather than rejected. Clients that send
    malformed JSON therefore store a plain string; the fallback is logged so
    such submissions can be traced.
    """
    if not isinstance(raw, str):
        return raw
    if not raw.strip():
        return []
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Could not decode field '%s' as JSON; storing raw text", name)
        return raw


def split_csv(raw: Any) -> Any:
    """Decode a comma-separated (or JSON list) form value into a list of strings."""
    if not isinstance(raw, str):
        return raw
    if raw.strip().startswith("["):
        return decode_json_field("tags", raw)
    return [part.strip() for part in raw.split(",") if part.strip()]


def string_list(label: str, value: Any) -> Any:
    """Check a decoded array field holds scalars and render them as strings.

    Raw text kept by the decode fallback passes through unchanged.
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, list):
        raise ValidationError(f"{label} must be a list")
    items = []
    for item in value:
        if isinstance(item, (dict, list)):
            raise ValidationError(f"{label} must be a list of text values")
        if item is not None:
            items.append(str(item))
    return items


def object_list(label: str, value: Any) -> Any:
    """Check a decoded field is a list of objects (raw fallback text passes through)."""
    if isinstance(value, str):
        return value
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValidationError(f"{label} must be a list of objects")
    return value


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def json_array_contains(column, value: str):
    """Match rows whose JSON array column contains ``value``."""
    return cast(column, String).contains(json.dumps(value), autoescape=True)


def json_array_not_empty(column):
    """Match rows whose JSON array column holds at least one element."""
    text = cast(column, String)
    return and_(column.isnot(None), text != "[]", text != "null")


@dataclass(frozen=True)
class FieldSpec:
    """How a single form field is read and validated."""

    kind: str = "str"  # str, int, float, bool, list, csv, json, datetime
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] | None = None
    minimum: float | None = None
    maximum: float | None = None
    pattern: re.Pattern | None = None
    pattern_message: str | None = None
    aliases: tuple[str, ...] = ()
    label: str | None = None


@dataclass(frozen=True)
class MediaSlot:
    """A file field whose upload is recorded on the entity as URL + key."""

    field: str
    url_attr: str
    key_attr: str
    folder: str
    required: bool = False
    type_attr: str | None = None


@dataclass(frozen=True)
class EntitySchema:
    """Declarative description of a content type."""

    label: str
    model: type
    fields: dict[str, FieldSpec]
    media: tuple[MediaSlot, ...] = ()
    slug_from: str | None = None
    unique: tuple[str, ...] = ("slug",)
    search: tuple[str, ...] = ()
    ordering: tuple[str, ...] = ("-created_at", "-id")
    max_upload_mb: int | None = None


class MediaChangeSet:
    """Blobs written and superseded while handling one request."""

    def __init__(self, store: MediaStore) -> None:
        self.store = store
        self.uploaded: list[str] = []
        self.superseded: list[str] = []

    async def upload(self, media: MediaFile, folder: str) -> StoredMedia:
        try:
            stored = await run_in_threadpool(self.store.upload, media.data, folder, media.filename, media.content_type)
        except Exception as e:
            logger.error("Upload of %s to %s failed", media.filename, folder, exc_info=True)
            raise UpstreamFailure(f"Failed to upload {media.field_name}.") from e
        self.uploaded.append(stored.key)
        return stored

    async def try_upload(self, media: MediaFile, folder: str) -> StoredMedia | None:
        """Upload, logging and returning None on failure."""
        try:
            return await self.upload(media, folder)
        except UpstreamFailure:
            return None

    def supersede(self, key: str | None) -> None:
        if key:
            self.superseded.append(key)

    async def discard(self) -> None:
        """Delete everything uploaded so far. Used when the record could not be saved."""
        for key in self.uploaded:
            await delete_quietly(self.store, key)
        self.uploaded = []

    async def release(self) -> None:
        """Delete blobs that the saved record no longer references."""
        for key in self.superseded:
            await delete_quietly(self.store, key)
        self.superseded = []


async def delete_quietly(store: MediaStore, key: str | None) -> bool:
    """Best-effort blob deletion. Failures are logged and reported as False."""
    if not key:
        return True
    try:
        await run_in_threadpool(store.delete, key)
    except Exception:
        logger.warning("Failed to delete media %s", key, exc_info=True)
        return False
    return True


class EntityService:
    """Create, read, update, delete and list one content type."""

    def __init__(self, schema: EntitySchema, media: MediaStore, max_upload_mb: int = 100) -> None:
        self.schema = schema
        self.model = schema.model
        self.media = media
        self.max_upload_bytes = (schema.max_upload_mb or max_upload_mb) * 1024 * 1024

    # --- field coercion ---

    def _label(self, name: str, spec: FieldSpec) -> str:
        return spec.label or name.replace("_", " ").capitalize()

    def _lookup(self, raw: Mapping[str, Any], name: str, spec: FieldSpec) -> tuple[bool, Any]:
        for key in (to_camel(name), name, *spec.aliases):
            if key in raw:
                return True, raw[key]
        return False, None

    def _is_blank(self, value: Any) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())

    def _convert(self, name: str, spec: FieldSpec, value: Any) -> Any:
        label = self._label(name, spec)
        if spec.kind == "str":
            value = str(value).strip()
            if spec.choices and value not in spec.choices:
                raise ValidationError(f"{label} must be one of: {', '.join(spec.choices)}")
            if spec.pattern and not spec.pattern.match(value):
                raise ValidationError(spec.pattern_message or f"{label} has an invalid format")
            return value
        if spec.kind in ("int", "float"):
            if isinstance(value, bool):
                raise ValidationError(f"{label} must be a number")
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{label} must be a number") from None
            if spec.kind == "int":
                if not number.is_integer():
                    raise ValidationError(f"{label} must be a whole number")
                number = int(number)
            if spec.minimum is not None and number < spec.minimum:
                raise ValidationError(f"{label} cannot be less than {spec.minimum:g}")
            if spec.maximum is not None and number > spec.maximum:
                raise ValidationError(f"{label} cannot exceed {spec.maximum:g}")
            return number
        if spec.kind == "bool":
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in TRUE_VALUES:
                return True
            if text in FALSE_VALUES:
                return False
            raise ValidationError(f"{label} must be true or false")
        if spec.kind == "list":
            return string_list(label, decode_json_field(name, value))
        if spec.kind == "json":
            return object_list(label, decode_json_field(name, value))
        if spec.kind == "csv":
            return string_list(label, split_csv(value))
        if spec.kind == "datetime":
            if isinstance(value, datetime):
                return value
            try:
                return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")).replace(tzinfo=None)
            except ValueError:
                raise ValidationError(f"{label} must be an ISO 8601 date") from None
        raise ValueError(f"Unknown field kind '{spec.kind}'")

    def _blank_value(self, spec: FieldSpec) -> Any:
        if spec.default is not None:
            return spec.default
        return [] if spec.kind in ("list", "json", "csv") else None

    def coerce(self, raw: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
        """Convert submitted fields into model values.

        With ``partial`` (updates) absent fields are omitted from the result so
        they keep their stored value.
        """
        values: dict[str, Any] = {}
        missing = []
        for name, spec in self.schema.fields.items():
            present, value = self._lookup(raw, name, spec)
            if self._is_blank(value):
                if spec.required and (present or not partial):
                    missing.append(name)
                elif present and partial and spec.kind != "bool":
                    values[name] = self._blank_value(spec)
                continue
            values[name] = self._convert(name, spec, value)
        if missing:
            if partial:
                raise ValidationError(f"{self._label(missing[0], self.schema.fields[missing[0]])} cannot be empty.")
            raise ValidationError(f"Missing required fields: {', '.join(to_camel(m) for m in missing)}")
        return values

    def apply_slug(self, values: dict[str, Any], existing: Any = None) -> None:
        """Derive the slug from its source field when the type does not take one directly."""
        source = self.schema.slug_from
        if not source or "slug" in self.schema.fields or source not in values:
            return
        if existing is not None and values[source] == getattr(existing, source):
            return
        slug = slugify(values[source] or "")
        if not slug:
            raise ValidationError(f"Cannot derive a slug from {source}")
        values["slug"] = slug

    def ensure_unique(self, db: Session, values: Mapping[str, Any], exclude_id: int | None = None) -> None:
        """Raise DuplicateEntity when another record already uses one of the unique values."""
        clauses = [
            getattr(self.model, name) == values[name]
            for name in self.schema.unique
            if values.get(name) is not None
        ]
        if not clauses:
            return
        query = db.query(self.model).filter(or_(*clauses))
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        if query.first():
            fields = " or ".join(self.schema.unique)
            raise DuplicateEntity(f"A {self.schema.label.lower()} with this {fields} already exists.")

    def check_files(self, files: Mapping[str, MediaFile]) -> None:
        for media in files.values():
            error = validate_media(media, self.max_upload_bytes)
            if error:
                raise ValidationError(error)

    def validate(self, values: dict[str, Any], existing: Any = None) -> None:
        """Cross-field validation hook for subclasses."""

    # --- media hooks ---

    async def upload_media(
        self, entity: Any, files: Mapping[str, MediaFile], changes: MediaChangeSet, replacing: bool
    ) -> None:
        """Upload files for the schema's media slots and record them on ``entity``."""
        for slot in self.schema.media:
            media = files.get(slot.field)
            if media is None:
                continue
            stored = await changes.upload(media, slot.folder)
            if replacing:
                changes.supersede(getattr(entity, slot.key_attr))
            self._assign_slot(entity, slot, stored, media)

    def _assign_slot(self, entity: Any, slot: MediaSlot, stored: StoredMedia | None, media: MediaFile | None) -> None:
        setattr(entity, slot.url_attr, stored.url if stored else None)
        setattr(entity, slot.key_attr, stored.key if stored else None)
        if slot.type_attr:
            setattr(entity, slot.type_attr, media.media_type if media and stored else "none")

    async def apply_nested(
        self,
        db: Session,
        entity: Any,
        raw: Mapping[str, Any],
        files: Mapping[str, MediaFile],
        changes: MediaChangeSet,
        creating: bool,
    ) -> None:
        """Hook for types with nested sub-items that carry their own media."""

    def owned_keys(self, entity: Any) -> list[str]:
        """Every blob key the entity references."""
        return [key for slot in self.schema.media if (key := getattr(entity, slot.key_attr))]

    # --- lifecycle ---

    async def _save(self, db: Session, entity: Any, changes: MediaChangeSet) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            await changes.discard()
            raise DuplicateEntity(f"A {self.schema.label.lower()} with these values already exists.") from e
        except Exception:
            db.rollback()
            await changes.discard()
            raise
        db.refresh(entity)

    async def create(self, db: Session, raw: Mapping[str, Any], files: Mapping[str, MediaFile] | None = None) -> Any:
        """Validate, upload media, and persist a new entity."""
        files = files or {}
        values = self.coerce(raw)
        self.apply_slug(values)
        self.validate(values)
        self.ensure_unique(db, values)
        self.check_files(files)
        for slot in self.schema.media:
            if slot.required and slot.field not in files:
                raise ValidationError(f"{self.schema.label} {slot.field} is required.")

        changes = MediaChangeSet(self.media)
        entity = self.model(**values)
        try:
            await self.upload_media(entity, files, changes, replacing=False)
            await self.apply_nested(db, entity, raw, files, changes, creating=True)
        except Exception:
            await changes.discard()
            raise
        db.add(entity)
        await self._save(db, entity, changes)
        logger.info("Created %s %s", self.schema.label.lower(), entity.id)
        return entity

    async def update(
        self, db: Session, entity_id: int, raw: Mapping[str, Any], files: Mapping[str, MediaFile] | None = None
    ) -> Any:
        """Apply a partial update; replaced media is deleted after the record is saved."""
        files = files or {}
        entity = self.get(db, entity_id)
        values = self.coerce(raw, partial=True)
        self.apply_slug(values, existing=entity)
        self.validate(values, existing=entity)
        changed_unique = {
            name: values[name]
            for name in self.schema.unique
            if name in values and values[name] != getattr(entity, name)
        }
        self.ensure_unique(db, changed_unique, exclude_id=entity.id)
        self.check_files(files)

        changes = MediaChangeSet(self.media)
        for name, value in values.items():
            setattr(entity, name, value)
        try:
            await self.upload_media(entity, files, changes, replacing=True)
            await self.apply_nested(db, entity, raw, files, changes, creating=False)
        except Exception:
            db.rollback()
            await changes.discard()
            raise
        await self._save(db, entity, changes)
        await changes.release()
        logger.info("Updated %s %s", self.schema.label.lower(), entity.id)
        return entity

    async def delete(self, db: Session, entity_id: int) -> None:
        """Delete the entity after a best-effort cleanup of its media."""
        entity = self.get(db, entity_id)
        for key in self.owned_keys(entity):
            await delete_quietly(self.media, key)
        db.delete(entity)
        db.commit()
        logger.info("Deleted %s %s", self.schema.label.lower(), entity_id)

    # --- reads ---

    def get(self, db: Session, entity_id: int) -> Any:
        entity = db.get(self.model, entity_id)
        if not entity:
            raise NotFound(f"{self.schema.label} not found.")
        return entity

    def get_by_slug(self, db: Session, slug: str, active_only: bool = False) -> Any:
        query = db.query(self.model).filter(self.model.slug == slug)
        if active_only:
            query = query.filter(self.model.is_active.is_(True))
        entity = query.first()
        if not entity:
            raise NotFound(f"{self.schema.label} not found.")
        return entity

    def get_by_slug_or_id(self, db: Session, slug_or_id: str, active_only: bool = False) -> Any:
        """Look up by slug first, then by numeric id."""
        query = db.query(self.model)
        if active_only:
            query = query.filter(self.model.is_active.is_(True))
        entity = query.filter(self.model.slug == slug_or_id).first()
        if not entity and slug_or_id.isdigit():
            entity = query.filter(self.model.id == int(slug_or_id)).first()
        if not entity:
            suffix = " or is not currently active" if active_only else ""
            raise NotFound(f"{self.schema.label} not found{suffix}.")
        return entity

    def _order_by(self, ordering: Sequence[str]) -> list:
        criteria = []
        for name in ordering:
            column = getattr(self.model, name.lstrip("-"))
            criteria.append(column.desc() if name.startswith("-") else column.asc())
        return criteria

    def query(
        self,
        db: Session,
        search: str | None = None,
        filters: Mapping[str, Any] | None = None,
        criteria: Sequence[Any] = (),
    ) -> Query:
        query = db.query(self.model)
        for name, value in (filters or {}).items():
            if value is not None:
                query = query.filter(getattr(self.model, name) == value)
        for criterion in criteria:
            query = query.filter(criterion)
        if search and self.schema.search:
            term = f"%{escape_like(search.strip())}%"
            query = query.filter(
                or_(*(getattr(self.model, name).ilike(term, escape="\\") for name in self.schema.search))
            )
        return query

    def list(
        self,
        db: Session,
        search: str | None = None,
        filters: Mapping[str, Any] | None = None,
        criteria: Sequence[Any] = (),
        page: int = 1,
        limit: int | None = None,
        ordering: Sequence[str] | None = None,
    ) -> tuple[list[Any], int]:
        """List entities with optional search, filters and pagination. Returns (items, total_count)."""
        query = self.query(db, search=search, filters=filters, criteria=criteria)
        total = query.count()
        query = query.order_by(*self._order_by(ordering or self.schema.ordering))
        if limit:
            query = query.offset((max(page, 1) - 1) * limit).limit(limit)
        return query.all(), total

"""Media storage backends and upload validation.

Two backends implement the same small interface: S3 (boto3) for deployed
environments and the local filesystem for development. Both address blobs by
a key of the form ``{folder}/{millis}-{random}-{filename}`` and return a
public URL alongside it.
"""

import logging
import os
import re
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import boto3

from sitecms.config import Settings

logger = logging.getLogger("sitecms.media")

ALLOWED_MIME_PREFIXES = ("image/", "video/")
ALLOWED_MIME_TYPES = {"application/pdf"}


@dataclass
class MediaFile:
    """An uploaded file read fully into memory."""

    field_name: str
    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def media_type(self) -> str:
        """Coarse kind used by testimonial-style entities."""
        if self.content_type and self.content_type.startswith("image/"):
            return "image"
        if self.content_type and self.content_type.startswith("video/"):
            return "video"
        return "none"


@dataclass
class StoredMedia:
    """Location of a stored blob."""

    url: str
    key: str


def validate_media(media: MediaFile, max_bytes: int) -> str | None:
    """Validate an upload's content type and size. Returns error message or None if valid."""
    content_type = media.content_type or ""
    if not (content_type.startswith(ALLOWED_MIME_PREFIXES) or content_type in ALLOWED_MIME_TYPES):
        return f"Invalid file type '{content_type or 'unknown'}'. Only images, PDFs, and videos are allowed."
    if media.size > max_bytes:
        return f"File too large ({media.size // (1024 * 1024)}MB). Maximum: {max_bytes // (1024 * 1024)}MB"
    return None


def build_object_key(folder: str, filename: str) -> str:
    """Build a collision-resistant object key under ``folder``."""
    name = re.sub(r"[^A-Za-z0-9._-]+", "-", Path(filename or "upload.bin").name).strip("-") or "upload.bin"
    return f"{folder.strip('/')}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{name}"


class MediaStore(ABC):
    """Blob storage addressed by key."""

    @abstractmethod
    def upload(self, data: bytes, folder: str, filename: str, content_type: str | None = None) -> StoredMedia:
        """Store ``data`` and return its public URL and deletion key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete the blob stored under ``key``. Raises on failure."""


class LocalMediaStore(MediaStore):
    """Stores blobs on local disk; served by the app under ``base_url``."""

    def __init__(self, root: str, base_url: str = "/media") -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def upload(self, data: bytes, folder: str, filename: str, content_type: str | None = None) -> StoredMedia:
        key = build_object_key(folder, filename)
        file_path = self.root / key
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(data)
        return StoredMedia(url=f"{self.base_url}/{key}", key=key)

    def delete(self, key: str) -> None:
        file_path = self.root / key
        if file_path.exists():
            os.remove(file_path)


class S3MediaStore(MediaStore):
    """Stores blobs in an S3 bucket with public object URLs."""

    def __init__(self, bucket: str, region: str, client=None) -> None:
        self.bucket = bucket
        self.region = region
        self.client = client or boto3.client("s3", region_name=region)

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, data: bytes, folder: str, filename: str, content_type: str | None = None) -> StoredMedia:
        key = build_object_key(folder, filename)
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )
        return StoredMedia(url=self.object_url(key), key=key)

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)


def build_media_store(settings: Settings) -> MediaStore:
    """Construct the configured media backend."""
    if settings.MEDIA_BACKEND == "s3":
        client = boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )
        logger.info("Using S3 media store (bucket %s)", settings.AWS_BUCKET_NAME)
        return S3MediaStore(settings.AWS_BUCKET_NAME, settings.AWS_REGION, client=client)  # type: ignore[arg-type]
    logger.info("Using local media store at %s", settings.UPLOAD_DIR)
    return LocalMediaStore(settings.UPLOAD_DIR)

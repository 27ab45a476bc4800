"""Unit tests for field coercion, media backends and notifiers."""

import asyncio
import logging
from unittest.mock import MagicMock, patch

import pytest

from sitecms.config import Settings
from sitecms.errors import ValidationError
from sitecms.services.course import COURSE_SCHEMA
from sitecms.services.content import EntityService, MediaChangeSet, decode_json_field, slugify, split_csv
from sitecms.services.media import (
    LocalMediaStore,
    MediaFile,
    S3MediaStore,
    build_media_store,
    build_object_key,
    validate_media,
)
from sitecms.services.notifier import ConsoleNotifier, SMTPNotifier, build_notifier


class TestFieldCoercion:
    """Tests for converting submitted form values."""

    def setup_method(self) -> None:
        self.service = EntityService(COURSE_SCHEMA, media=MagicMock())

    def test_coerces_types_from_form_strings(self):
        values = self.service.coerce(
            {
                "title": " X ",
                "slug": "x",
                "description": "d",
                "price": "10.5",
                "category": "c",
                "isActive": "false",
                "whatYouWillLearn": '["a"]',
            }
        )
        assert values["title"] == "X"
        assert values["price"] == 10.5
        assert values["is_active"] is False
        assert values["what_you_will_learn"] == ["a"]

    def test_accepts_snake_case_names(self):
        values = self.service.coerce({"short_description": "s"}, partial=True)
        assert values == {"short_description": "s"}

    def test_partial_omits_absent_fields(self):
        assert self.service.coerce({"price": "15"}, partial=True) == {"price": 15.0}

    def test_non_numeric_price(self):
        with pytest.raises(ValidationError, match="Price must be a number"):
            self.service.coerce({"price": "ten"}, partial=True)

    def test_list_items_must_be_scalars(self):
        values = self.service.coerce({"features": ["a", 3]}, partial=True)
        assert values == {"features": ["a", "3"]}
        with pytest.raises(ValidationError, match="list of text values"):
            self.service.coerce({"features": [{"a": 1}]}, partial=True)

    def test_invalid_boolean(self):
        with pytest.raises(ValidationError):
            self.service.coerce({"isFeatured": "maybe"}, partial=True)

    def test_missing_fields_listed_in_camel_case(self):
        with pytest.raises(ValidationError) as exc:
            self.service.coerce({"title": "X", "slug": "x", "description": "d"})
        assert exc.value.message == "Missing required fields: price, category"


class TestDecoding:
    """Tests for permissive JSON decoding."""

    def test_decode_valid_json(self):
        assert decode_json_field("features", '["a", "b"]') == ["a", "b"]

    def test_decode_blank_is_empty_list(self):
        assert decode_json_field("features", "  ") == []

    def test_decode_failure_keeps_text_and_logs(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sitecms.content"):
            assert decode_json_field("features", "{broken") == "{broken"
        assert "features" in caplog.text

    def test_split_csv(self):
        assert split_csv("a, b,,c ") == ["a", "b", "c"]
        assert split_csv('["x"]') == ["x"]

    def test_slugify(self):
        assert slugify("  Hello, World! 2026 ") == "hello-world-2026"
        assert slugify("Crème Brûlée") == "creme-brulee"


class TestMediaValidation:
    """Tests for upload checks and key generation."""

    def test_accepts_images_videos_and_pdfs(self):
        for content_type in ("image/jpeg", "video/mp4", "application/pdf"):
            assert validate_media(MediaFile("f", "a", content_type, b"x"), 1024) is None

    def test_rejects_other_types(self):
        error = validate_media(MediaFile("f", "a.exe", "application/octet-stream", b"x"), 1024)
        assert "Invalid file type" in error

    def test_rejects_large_files(self):
        error = validate_media(MediaFile("f", "a.png", "image/png", b"x" * 2048), 1024)
        assert "too large" in error

    def test_object_key_is_unique_and_safe(self):
        first = build_object_key("courses", "../My Photo (1).png")
        second = build_object_key("courses", "../My Photo (1).png")
        assert first != second
        assert first.startswith("courses/")
        assert first.endswith("-My-Photo-1-.png")
        assert ".." not in first

    def test_media_type(self):
        assert MediaFile("f", "a", "image/png", b"").media_type == "image"
        assert MediaFile("f", "a", "video/webm", b"").media_type == "video"
        assert MediaFile("f", "a", "application/pdf", b"").media_type == "none"


class TestMediaStores:
    """Tests for the storage backends."""

    def test_local_store_round_trip(self, tmp_path):
        store = LocalMediaStore(str(tmp_path))
        stored = store.upload(b"data", "blogs", "a.png", "image/png")
        assert stored.url == f"/media/{stored.key}"
        assert (tmp_path / stored.key).read_bytes() == b"data"

        store.delete(stored.key)
        assert not (tmp_path / stored.key).exists()
        store.delete(stored.key)

    def test_s3_store_calls_client(self):
        client = MagicMock()
        store = S3MediaStore("bucket", "eu-west-1", client=client)
        stored = store.upload(b"data", "courses", "a.png", "image/png")
        assert stored.url == f"https://bucket.s3.eu-west-1.amazonaws.com/{stored.key}"
        client.put_object.assert_called_once_with(
            Bucket="bucket", Key=stored.key, Body=b"data", ContentType="image/png"
        )

        store.delete(stored.key)
        client.delete_object.assert_called_once_with(Bucket="bucket", Key=stored.key)

    def test_build_media_store_local_by_default(self):
        settings = Settings()
        settings.MEDIA_BACKEND = "local"
        assert isinstance(build_media_store(settings), LocalMediaStore)

    def test_build_media_store_s3(self):
        settings = Settings()
        settings.MEDIA_BACKEND = "s3"
        settings.AWS_BUCKET_NAME = "bucket"
        settings.AWS_REGION = "us-east-1"
        with patch("sitecms.services.media.boto3.client") as client_factory:
            store = build_media_store(settings)
        assert isinstance(store, S3MediaStore)
        client_factory.assert_called_once()


class TestMediaChangeSet:
    """Tests for upload bookkeeping."""

    def test_discard_deletes_uploads_and_tolerates_failures(self):
        store = MagicMock()
        store.upload.side_effect = lambda data, folder, filename, content_type: MagicMock(key=f"{folder}/{filename}")
        store.delete.side_effect = [ConnectionError("down"), None]
        changes = MediaChangeSet(store)

        async def run() -> None:
            await changes.upload(MediaFile("a", "a.png", "image/png", b"1"), "x")
            await changes.upload(MediaFile("b", "b.png", "image/png", b"2"), "x")
            await changes.discard()

        asyncio.run(run())
        assert store.delete.call_count == 2
        assert changes.uploaded == []

    def test_release_deletes_superseded(self):
        store = MagicMock()
        changes = MediaChangeSet(store)
        changes.supersede("old/key")
        changes.supersede(None)
        asyncio.run(changes.release())
        store.delete.assert_called_once_with("old/key")


class TestNotifiers:
    """Tests for mail delivery."""

    def test_build_message(self):
        notifier = SMTPNotifier("smtp.test", 587, "user", "pw", "noreply@test", "SiteCMS")
        message = notifier.build_message("a@b.com", "Subject", "Plain", "<p>Html</p>")
        assert message["To"] == "a@b.com"
        assert message["From"] == "SiteCMS <noreply@test>"
        assert len(message.get_payload()) == 2

    def test_smtp_send_uses_aiosmtplib(self):
        notifier = SMTPNotifier("smtp.test", 587, "user", "pw", "noreply@test", "SiteCMS")
        with patch("sitecms.services.notifier.aiosmtplib.send") as send:
            asyncio.run(notifier.send("a@b.com", "Subject", "Plain"))
        assert send.call_args.kwargs["hostname"] == "smtp.test"
        assert send.call_args.kwargs["start_tls"] is True

    def test_console_notifier_when_smtp_unconfigured(self):
        settings = Settings()
        settings.SMTP_HOST = None
        assert isinstance(build_notifier(settings), ConsoleNotifier)

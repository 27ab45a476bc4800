"""Tests for service category endpoints."""

import json

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from sitecms.models.service_category import ServiceCategory, SubService

PNG_DATA = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _png(name: str) -> tuple:
    return (name, PNG_DATA, "image/png")


def _create(client: TestClient, admin: dict, sub_services: list | None = None, sub_images: int = 0, **overrides):
    fields = {
        "name": "Web Development",
        "slug": "web-development",
        "description": "Sites and apps",
        "subServices": json.dumps(sub_services or []),
        **overrides,
    }
    files = {"mainImage": _png("main.png")}
    for index in range(sub_images):
        files[f"subServiceImage_{index}"] = _png(f"sub{index}.png")
    return client.post("/services/create", data=fields, files=files, headers=admin["headers"])


SUBS = [
    {"name": "Frontend", "description": "React sites"},
    {"name": "Backend", "slug": "apis", "description": "APIs"},
]


class TestCreateService:
    """Tests for service category creation."""

    def test_create_with_sub_services(self, client: TestClient, admin: dict, media_store):
        response = _create(client, admin, SUBS, sub_images=2)
        assert response.status_code == 201
        data = response.json()
        assert data["mainImageUrl"].startswith("https://media.test/services/main/")
        subs = data["subServices"]
        assert [s["slug"] for s in subs] == ["frontend", "apis"]
        assert all(s["imageKey"].startswith("services/sub/") for s in subs)
        assert len(media_store.uploads) == 3

    def test_sub_service_upload_failure_is_partial(self, client: TestClient, admin: dict, media_store):
        """A failed sub-service image leaves that sub-service without an image."""
        media_store.fail_folders = {"services/sub"}
        response = _create(client, admin, SUBS, sub_images=2)
        assert response.status_code == 201
        subs = response.json()["subServices"]
        assert [s["imageUrl"] for s in subs] == [None, None]
        assert response.json()["mainImageKey"]

    def test_main_image_upload_failure_discards_sub_images(
        self, client: TestClient, admin: dict, media_store, db_session: Session
    ):
        media_store.fail_folders = {"services/main"}
        response = _create(client, admin, SUBS, sub_images=2)
        assert response.status_code == 500
        assert sorted(media_store.deletes) == sorted(media_store.uploads)
        assert db_session.query(ServiceCategory).count() == 0

    def test_main_image_required(self, client: TestClient, admin: dict):
        response = client.post(
            "/services/create",
            data={"name": "N", "slug": "n", "description": "d"},
            headers=admin["headers"],
        )
        assert response.status_code == 400

    def test_sub_services_must_be_list(self, client: TestClient, admin: dict, media_store):
        response = _create(client, admin, subServices='{"name": "x"}')
        assert response.status_code == 400
        assert media_store.uploads == []

    def test_duplicate_name(self, client: TestClient, admin: dict):
        _create(client, admin)
        response = _create(client, admin, slug="other")
        assert response.status_code == 400


class TestUpdateService:
    """Tests for sub-service reconciliation on update."""

    def test_removed_sub_service_image_deleted(self, client: TestClient, admin: dict, media_store, db_session):
        created = _create(client, admin, SUBS, sub_images=2).json()
        keep, drop = created["subServices"]
        payload = [{"id": keep["id"], "name": "Frontend", "description": "React sites", "imageUrl": keep["imageUrl"]}]
        response = client.put(
            f"/services/{created['id']}", data={"subServices": json.dumps(payload)}, headers=admin["headers"]
        )
        assert response.status_code == 200
        subs = response.json()["subServices"]
        assert [s["id"] for s in subs] == [keep["id"]]
        assert subs[0]["imageKey"] == keep["imageKey"]
        assert media_store.deletes == [drop["imageKey"]]
        assert db_session.query(SubService).count() == 1

    def test_new_sub_image_replaces_old(self, client: TestClient, admin: dict, media_store):
        created = _create(client, admin, SUBS[:1], sub_images=1).json()
        sub = created["subServices"][0]
        payload = [{"id": sub["id"], "name": "Frontend", "description": "React sites", "imageUrl": sub["imageUrl"]}]
        response = client.put(
            f"/services/{created['id']}",
            data={"subServices": json.dumps(payload)},
            files={"subServiceImage_0": _png("fresh.png")},
            headers=admin["headers"],
        )
        assert response.status_code == 200
        new_key = response.json()["subServices"][0]["imageKey"]
        assert new_key != sub["imageKey"]
        assert media_store.deletes == [sub["imageKey"]]

    def test_omitted_image_url_clears_image(self, client: TestClient, admin: dict, media_store):
        created = _create(client, admin, SUBS[:1], sub_images=1).json()
        sub = created["subServices"][0]
        payload = [{"id": sub["id"], "name": "Frontend", "description": "React sites"}]
        response = client.put(
            f"/services/{created['id']}", data={"subServices": json.dumps(payload)}, headers=admin["headers"]
        )
        assert response.status_code == 200
        updated = response.json()["subServices"][0]
        assert updated["imageUrl"] is None
        assert updated["imageKey"] is None
        assert media_store.deletes == [sub["imageKey"]]

    def test_update_without_sub_services_leaves_them(self, client: TestClient, admin: dict, media_store):
        created = _create(client, admin, SUBS, sub_images=2).json()
        response = client.put(
            f"/services/{created['id']}", json={"description": "New description"}, headers=admin["headers"]
        )
        assert response.status_code == 200
        assert len(response.json()["subServices"]) == 2
        assert media_store.deletes == []

    def test_replace_main_image(self, client: TestClient, admin: dict, media_store):
        created = _create(client, admin).json()
        response = client.put(
            f"/services/{created['id']}", files={"mainImage": _png("new-main.png")}, headers=admin["headers"]
        )
        assert response.status_code == 200
        assert media_store.deletes == [created["mainImageKey"]]


class TestDeleteAndQueryService:
    """Tests for deletion and public lookups."""

    def test_delete_removes_all_blobs(self, client: TestClient, admin: dict, media_store, db_session: Session):
        created = _create(client, admin, SUBS, sub_images=2).json()
        response = client.delete(f"/services/{created['id']}", headers=admin["headers"])
        assert response.status_code == 200
        assert sorted(media_store.deletes) == sorted(media_store.uploads)
        assert db_session.query(ServiceCategory).count() == 0
        assert db_session.query(SubService).count() == 0

    def test_public_sorted_by_name(self, client: TestClient, admin: dict):
        _create(client, admin, name="Zeta", slug="zeta")
        _create(client, admin, name="Alpha", slug="alpha")
        _create(client, admin, name="Hidden", slug="hidden", isActive="false")
        data = client.get("/services/public").json()
        assert [s["name"] for s in data["items"]] == ["Alpha", "Zeta"]

    def test_find_all(self, client: TestClient, admin: dict):
        _create(client, admin, name="Hidden", slug="hidden", isActive="false")
        data = client.get("/services/find", headers=admin["headers"]).json()
        assert data["total"] == 1

    def test_get_by_slug_or_id(self, client: TestClient, admin: dict):
        created = _create(client, admin).json()
        assert client.get("/services/web-development").json()["id"] == created["id"]
        assert client.get(f"/services/{created['id']}").status_code == 200
        assert client.get("/services/missing").status_code == 404

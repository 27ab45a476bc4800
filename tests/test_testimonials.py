"""Tests for testimonial and student success story endpoints."""

from fastapi.testclient import TestClient

PNG = ("face.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 32, "image/png")
MP4 = ("clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")


def _fields(**overrides) -> dict:
    return {"name": "Sam", "designation": "Engineer", "content": "Great course", **overrides}


class TestTestimonials:
    """Tests for the testimonial lifecycle."""

    def test_create_without_media(self, client: TestClient, admin: dict):
        response = client.post("/testimonials/create", data=_fields(), headers=admin["headers"])
        assert response.status_code == 201
        data = response.json()
        assert data["rating"] == 5
        assert data["mediaType"] == "none"
        assert data["isActive"] is True
        assert data["order"] == 0

    def test_create_with_video_records_media_type(self, client: TestClient, admin: dict):
        response = client.post(
            "/testimonials/create", data=_fields(), files={"media": MP4}, headers=admin["headers"]
        )
        assert response.status_code == 201
        assert response.json()["mediaType"] == "video"
        assert response.json()["mediaKey"].startswith("testimonials/")

    def test_rating_bounds(self, client: TestClient, admin: dict):
        response = client.post("/testimonials/create", data=_fields(rating="6"), headers=admin["headers"])
        assert response.status_code == 400

    def test_rating_must_be_whole_number(self, client: TestClient, admin: dict):
        response = client.post("/testimonials/create", json=_fields(rating=4.7), headers=admin["headers"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Rating must be a whole number"

        response = client.post("/testimonials/create", json=_fields(rating=True), headers=admin["headers"])
        assert response.status_code == 400

        response = client.post("/testimonials/create", json=_fields(rating=4.0), headers=admin["headers"])
        assert response.json()["rating"] == 4

    def test_missing_fields(self, client: TestClient, admin: dict):
        response = client.post("/testimonials/create", data={"name": "Sam"}, headers=admin["headers"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields: designation, content"

    def test_list_ordering_and_active_filter(self, client: TestClient, admin: dict):
        client.post("/testimonials/create", data=_fields(name="B", order="2"), headers=admin["headers"])
        client.post("/testimonials/create", data=_fields(name="A", order="1"), headers=admin["headers"])
        client.post("/testimonials/create", data=_fields(name="C", order="1"), headers=admin["headers"])
        client.post(
            "/testimonials/create", data=_fields(name="Off", isActive="false"), headers=admin["headers"]
        )

        names = [t["name"] for t in client.get("/testimonials").json()["items"]]
        assert names == ["Off", "C", "A", "B"]

        active = [t["name"] for t in client.get("/testimonials", params={"isActive": "true"}).json()["items"]]
        assert active == ["C", "A", "B"]

    def test_replace_media_with_image(self, client: TestClient, admin: dict, media_store):
        created = client.post(
            "/testimonials/create", data=_fields(), files={"media": MP4}, headers=admin["headers"]
        ).json()
        response = client.put(
            f"/testimonials/{created['id']}", files={"media": PNG}, headers=admin["headers"]
        )
        assert response.status_code == 200
        assert response.json()["mediaType"] == "image"
        assert media_store.deletes == [created["mediaKey"]]

    def test_get_update_delete(self, client: TestClient, admin: dict, media_store):
        created = client.post(
            "/testimonials/create", data=_fields(), files={"media": PNG}, headers=admin["headers"]
        ).json()
        assert client.get(f"/testimonials/{created['id']}").json()["name"] == "Sam"

        updated = client.put(
            f"/testimonials/{created['id']}", json={"content": "Changed my career"}, headers=admin["headers"]
        )
        assert updated.json()["content"] == "Changed my career"
        assert updated.json()["mediaKey"] == created["mediaKey"]

        assert client.delete(f"/testimonials/{created['id']}", headers=admin["headers"]).status_code == 200
        assert media_store.deletes == [created["mediaKey"]]
        assert client.get(f"/testimonials/{created['id']}").status_code == 404


class TestStudentSuccessStories:
    """Tests for the success story lifecycle."""

    def test_create_with_media_and_profile_image(self, client: TestClient, admin: dict):
        response = client.post(
            "/student-success-stories/create",
            data=_fields(location="Lagos"),
            files={"media": MP4, "profileImage": PNG},
            headers=admin["headers"],
        )
        assert response.status_code == 201
        data = response.json()
        assert data["location"] == "Lagos"
        assert data["mediaType"] == "video"
        assert data["profileImageKey"].startswith("student-success-stories/")

    def test_delete_removes_both_blobs(self, client: TestClient, admin: dict, media_store):
        created = client.post(
            "/student-success-stories/create",
            data=_fields(),
            files={"media": MP4, "profileImage": PNG},
            headers=admin["headers"],
        ).json()
        response = client.delete(f"/student-success-stories/{created['id']}", headers=admin["headers"])
        assert response.status_code == 200
        assert sorted(media_store.deletes) == sorted([created["mediaKey"], created["profileImageKey"]])

    def test_not_found(self, client: TestClient):
        response = client.get("/student-success-stories/42")
        assert response.status_code == 404
        assert response.json()["detail"] == "Story not found."

    def test_list(self, client: TestClient, admin: dict):
        client.post("/student-success-stories/create", data=_fields(), headers=admin["headers"])
        data = client.get("/student-success-stories").json()
        assert data["total"] == 1

"""Tests for the user profile and profile image upload."""

import io

from conftest import auth_header, make_image
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.storage import LocalStorage


def upload(client: TestClient, token: str, content: bytes, filename: str = "avatar.jpg", content_type="image/jpeg"):
    return client.post(
        "/user/profile-image",
        files={"profile_image": (filename, io.BytesIO(content), content_type)},
        headers=auth_header(token),
    )


def stored_files(storage: LocalStorage) -> list[str]:
    directory = storage.root / "profile_images"
    if not directory.exists():
        return []
    return sorted(p.name for p in directory.iterdir())


class TestProfile:
    """Tests for GET /user."""

    def test_get_profile(self, client: TestClient, test_user: dict):
        response = client.get("/user", headers=auth_header(test_user["token"]))
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Successfully retrieved user profile"
        user = body["data"]["user"]
        assert user["id"] == test_user["user_id"]
        assert user["username"] == "test_user"
        assert user["email"] == "test@example.com"
        assert set(user) == {
            "id",
            "username",
            "email",
            "profile_image",
            "email_verified_at",
            "created_at",
            "updated_at",
        }

    def test_get_profile_requires_auth(self, client: TestClient):
        assert client.get("/user").status_code == 401


class TestProfileImageUpload:
    """Tests for POST /user/profile-image."""

    def test_upload_jpeg(self, client: TestClient, db_session: Session, storage: LocalStorage, test_user: dict):
        """Upload a 150x150 JPEG and get a public URL back."""
        response = upload(client, test_user["token"], make_image(150, 150))
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile image uploaded successfully"

        url = body["data"]["user"]["profile_image"]
        assert url.startswith("http://testserver/storage/profile_images/profile-")
        assert url.endswith(".jpg")

        user = db_session.get(User, test_user["user_id"])
        assert storage.exists(user.profile_image)
        assert url == storage.url(user.profile_image)

    def test_upload_png_keeps_png_extension(self, client: TestClient, test_user: dict):
        response = upload(client, test_user["token"], make_image(120, 120, "PNG"), "me.png", "image/png")
        assert response.status_code == 200
        assert response.json()["data"]["user"]["profile_image"].endswith(".png")

    def test_extension_follows_content(self, client: TestClient, test_user: dict):
        """The stored extension comes from the decoded image, not the client filename."""
        response = upload(client, test_user["token"], make_image(), "avatar.png", "image/png")
        assert response.status_code == 200
        assert response.json()["data"]["user"]["profile_image"].endswith(".jpg")

    def test_replace_removes_old_file(
        self, client: TestClient, db_session: Session, storage: LocalStorage, test_user: dict
    ):
        """Replacing leaves exactly one stored file, at the new path."""
        upload(client, test_user["token"], make_image())
        first_path = db_session.get(User, test_user["user_id"]).profile_image

        response = upload(client, test_user["token"], make_image(200, 200))
        assert response.status_code == 200

        db_session.expire_all()
        new_path = db_session.get(User, test_user["user_id"]).profile_image
        assert new_path != first_path
        assert not storage.exists(first_path)
        assert storage.exists(new_path)
        assert stored_files(storage) == [new_path.rsplit("/", 1)[-1]]

    def test_replace_when_old_file_missing(
        self, client: TestClient, db_session: Session, storage: LocalStorage, test_user: dict
    ):
        """A dangling image path does not block the upload."""
        user = db_session.get(User, test_user["user_id"])
        user.profile_image = "profile_images/profile-gone.jpg"
        db_session.commit()

        response = upload(client, test_user["token"], make_image())
        assert response.status_code == 200
        assert response.json()["data"]["user"]["profile_image"] != storage.url("profile_images/profile-gone.jpg")

    def test_delete_failure_is_logged_and_ignored(
        self, client: TestClient, db_session: Session, storage: LocalStorage, test_user: dict, monkeypatch, caplog
    ):
        upload(client, test_user["token"], make_image())

        def failing_delete(path):
            raise PermissionError("read-only file system")

        monkeypatch.setattr(storage, "delete", failing_delete)
        response = upload(client, test_user["token"], make_image())

        assert response.status_code == 200
        assert "Could not delete old profile image" in caplog.text

    def test_storage_failure(self, client: TestClient, db_session: Session, storage: LocalStorage, test_user: dict,
                             monkeypatch):
        """A failed write returns a generic 500 and does not touch the user record."""

        def failing_put(path, content):
            raise OSError("No space left on device")

        monkeypatch.setattr(storage, "put", failing_put)
        response = upload(client, test_user["token"], make_image())

        assert response.status_code == 500
        assert "No space left" not in response.text
        assert db_session.get(User, test_user["user_id"]).profile_image is None

    def test_upload_requires_auth(self, client: TestClient):
        response = client.post(
            "/user/profile-image",
            files={"profile_image": ("avatar.jpg", io.BytesIO(make_image()), "image/jpeg")},
        )
        assert response.status_code == 401


class TestProfileImageValidation:
    """Tests for profile image validation errors."""

    def test_missing_file(self, client: TestClient, test_user: dict):
        response = client.post("/user/profile-image", headers=auth_header(test_user["token"]))
        assert response.status_code == 422
        assert response.json()["errors"]["profile_image"] == ["The profile image field is required."]

    def test_too_small(self, client: TestClient, storage: LocalStorage, test_user: dict):
        response = upload(client, test_user["token"], make_image(50, 50))
        assert response.status_code == 422
        assert response.json()["errors"]["profile_image"] == ["The profile image field has invalid image dimensions."]
        assert stored_files(storage) == []

    def test_one_dimension_too_small(self, client: TestClient, test_user: dict):
        response = upload(client, test_user["token"], make_image(300, 99))
        assert response.status_code == 422

    def test_not_an_image(self, client: TestClient, test_user: dict):
        response = upload(client, test_user["token"], b"just some text", "notes.txt", "text/plain")
        assert response.status_code == 422
        assert response.json()["errors"]["profile_image"] == ["The profile image field must be an image."]

    def test_image_bytes_with_wrong_content_type(self, client: TestClient, test_user: dict):
        response = upload(client, test_user["token"], make_image(), "avatar.jpg", "application/octet-stream")
        assert response.status_code == 422

    def test_too_large(self, client: TestClient, db_session: Session, test_user: dict):
        content = b"\xff\xd8\xff" + b"\x00" * (2048 * 1024)
        response = upload(client, test_user["token"], content)
        assert response.status_code == 422
        assert response.json()["errors"]["profile_image"] == [
            "The profile image field must not be greater than 2048 kilobytes."
        ]
        assert db_session.get(User, test_user["user_id"]).profile_image is None


class TestRegistrationScenario:
    """End-to-end: register, login, fetch profile, upload image."""

    def test_full_flow(self, client: TestClient):
        register = client.post(
            "/auth/register",
            json={
                "username": "john_doe",
                "email": "john@example.com",
                "password": "Password123!",
                "password_confirmation": "Password123!",
            },
        )
        assert register.status_code == 200
        registered_user = register.json()["data"]["user"]
        assert registered_user["email_verified_at"] is None

        login = client.post("/auth/login", json={"username": "john_doe", "password": "Password123!"})
        assert login.status_code == 200
        token = login.json()["data"]["access_token"]
        assert token

        me = client.get("/user", headers=auth_header(token))
        assert me.status_code == 200
        assert me.json()["data"]["user"]["id"] == registered_user["id"]

        uploaded = upload(client, token, make_image(150, 150), "photo.jpg")
        assert uploaded.status_code == 200
        assert uploaded.json()["data"]["user"]["profile_image"].endswith(".jpg")

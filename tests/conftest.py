# tests/conftest.py
import io

import pytest

from snapshare import create_app
from fakes import FakeBucket, FakeFirestore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def app(db, bucket):
    app = create_app('testing', db=db, bucket=bucket)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def image_file(name="photo.png"):
    return (io.BytesIO(PNG_BYTES), name)


def register_user(app, username, email=None, password="secret123", display_name=None, avatar=False, **extra):
    """Registers through the API and returns (logged-in client, user payload)."""
    user_client = app.test_client()
    form = {
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
        "displayName": display_name or username.title(),
    }
    form.update(extra)
    if avatar:
        form["avatar"] = image_file("avatar.png")
    response = user_client.post("/api/auth/register", data=form, content_type="multipart/form-data")
    assert response.status_code == 201, response.get_json()
    return user_client, response.get_json()["user"]


def create_post(user_client, title="Sunset", caption="golden hour"):
    response = user_client.post(
        "/api/posts",
        data={"title": title, "caption": caption, "image": image_file()},
        content_type="multipart/form-data",
    )
    assert response.status_code == 201, response.get_json()
    return response.get_json()["post"]


@pytest.fixture
def make_user(app):
    def _make(username, **kwargs):
        return register_user(app, username, **kwargs)
    return _make


@pytest.fixture
def make_post():
    return create_post

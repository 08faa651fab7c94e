# tests/test_auth.py
from datetime import timedelta

import pytest

from snapshare.core.exceptions import AuthError
from snapshare.core.security import issue_token, issue_tokens, verify_token
from conftest import image_file, register_user


def test_register_sets_session_cookies(app, db):
    user_client, user = register_user(app, "Valid_User1", display_name="Valid User")

    assert user["username"] == "valid_user1"
    assert user["displayName"] == "Valid User"
    assert "password" not in user and "password_hash" not in user
    assert user_client.get_cookie("accessToken") is not None
    assert user_client.get_cookie("refreshToken") is not None
    stored = db.all("users")[user["id"]]
    assert stored["password_hash"] != "secret123"
    assert db.all("usernames")["valid_user1"]["user_id"] == user["id"]


def test_register_defaults_bio_and_avatar(app):
    user_client, _ = register_user(app, "alice", display_name="Alice Kim")

    me = user_client.get("/api/auth/me").get_json()["user"]

    assert me["bio"] == "Hi, I'm using SnapShare!"
    assert me["avatarUrl"].startswith("https://ui-avatars.com/api/?name=Alice%20Kim")


def test_register_with_avatar_uploads_it(app, bucket):
    _, user = register_user(app, "alice", avatar=True)

    assert len(bucket.blobs) == 1
    blob_path = next(iter(bucket.blobs))
    assert blob_path.startswith("avatars/")
    assert user["avatarUrl"].endswith(blob_path)


@pytest.mark.parametrize("username", ["ab", "has space", "x" * 31, "dash-name"])
def test_register_rejects_bad_usernames(client, username):
    response = client.post("/api/auth/register", json={
        "username": username, "email": "someone@example.com",
        "password": "secret123", "displayName": "Someone",
    })
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "VALIDATION_ERROR"


def test_register_requires_all_fields(client):
    response = client.post("/api/auth/register", json={"username": "alice", "password": "secret123"})
    assert response.status_code == 400


def test_register_rejects_short_password(client):
    response = client.post("/api/auth/register", json={
        "username": "alice", "email": "alice@example.com", "password": "123", "displayName": "Alice",
    })
    assert response.status_code == 400
    assert "password" in response.get_json()["details"]


def test_duplicate_username_is_conflict(app, client):
    register_user(app, "alice")
    response = client.post("/api/auth/register", json={
        "username": "ALICE", "email": "other@example.com", "password": "secret123", "displayName": "Other",
    })
    assert response.status_code == 409
    assert response.get_json()["error_code"] == "USERNAME_TAKEN"


def test_duplicate_email_is_conflict_and_frees_username(app, client, db):
    register_user(app, "alice")
    response = client.post("/api/auth/register", json={
        "username": "bob", "email": "alice@example.com", "password": "secret123", "displayName": "Bob",
    })
    assert response.status_code == 409
    assert response.get_json()["error_code"] == "EMAIL_TAKEN"
    assert "bob" not in db.all("usernames")
    # the name is usable again
    register_user(app, "bob")


def test_failed_avatar_upload_rolls_back_registration(app, client, db, bucket):
    bucket.fail_uploads = True
    response = client.post("/api/auth/register", data={
        "username": "alice", "email": "alice@example.com", "password": "secret123",
        "displayName": "Alice", "avatar": image_file("me.png"),
    }, content_type="multipart/form-data")

    assert response.status_code == 502
    assert response.get_json()["error_code"] == "STORAGE_ERROR"
    assert db.all("users") == {}
    assert db.all("usernames") == {}
    assert db.all("emails") == {}


def test_login_by_username_and_email(app):
    register_user(app, "alice", password="pa55word")

    by_name = app.test_client().post("/api/auth/login", json={"username": "alice", "password": "pa55word"})
    by_email = app.test_client().post("/api/auth/login", json={"email": "ALICE@example.com", "password": "pa55word"})

    assert by_name.status_code == 200
    assert by_email.status_code == 200
    assert by_email.get_json()["user"]["username"] == "alice"


def test_login_sets_cookie_usable_for_me(app):
    register_user(app, "alice")
    login_client = app.test_client()
    login_client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})

    response = login_client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.get_json()["user"]["username"] == "alice"


def test_login_wrong_password_is_401(app, client):
    register_user(app, "alice")
    response = client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
    assert response.status_code == 401
    assert response.get_json()["error_code"] == "INVALID_CREDENTIALS"


def test_login_unknown_user_is_404(client):
    response = client.post("/api/auth/login", json={"username": "ghost", "password": "secret123"})
    assert response.status_code == 404
    assert response.get_json()["error_code"] == "USER_NOT_FOUND"


def test_login_requires_a_name(client):
    response = client.post("/api/auth/login", json={"password": "secret123"})
    assert response.status_code == 400


def test_logout_clears_cookies(app):
    user_client, _ = register_user(app, "alice")

    assert user_client.post("/api/auth/logout").status_code == 200
    assert user_client.get_cookie("accessToken") is None
    assert user_client.get("/api/auth/me").status_code == 401


def test_refresh_issues_new_access_cookie(app):
    user_client, user = register_user(app, "alice")
    user_client.delete_cookie("accessToken")
    assert user_client.get("/api/auth/me").status_code == 401

    response = user_client.post("/api/auth/refresh")

    assert response.status_code == 200
    assert user_client.get("/api/auth/me").get_json()["user"]["id"] == user["id"]


def test_tampered_cookie_is_401(client):
    client.set_cookie("accessToken", "not.a.token")
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.get_json()["error_code"] == "INVALID_TOKEN"


def test_verify_token(app):
    user = {"user_id": "0b6f3c52-7a59-4c55-9a9e-4a8a1c5f2d10", "username": "alice", "email": "alice@example.com"}
    with app.app_context():
        access_token, refresh_token = issue_tokens(user)

        identity = verify_token(access_token)
        assert identity.user_id == user["user_id"]
        assert identity.username == "alice"
        assert verify_token(refresh_token, refresh=True).email == "alice@example.com"

        with pytest.raises(AuthError) as wrong_type:
            verify_token(access_token, refresh=True)
        assert wrong_type.value.error_code == "INVALID_TOKEN"
        assert wrong_type.value.message == "Expected a refresh token"

        with pytest.raises(AuthError) as wrong_kind:
            verify_token(refresh_token)
        assert wrong_kind.value.message == "Expected an access token"

        expired = issue_token(user["user_id"], {}, ttl=timedelta(seconds=-5))
        with pytest.raises(AuthError) as exc:
            verify_token(expired)
        assert exc.value.error_code == "TOKEN_EXPIRED"

        with pytest.raises(AuthError):
            verify_token("garbage")

# tests/test_likes.py
import uuid

import pytest

from snapshare.core.exceptions import InvalidInputError, NotFoundError


def _toggle(user_client, post_id):
    return user_client.post("/api/likes/toggle", json={"postId": post_id})


def test_like_then_unlike_scenario(make_user, make_post, db):
    owner_client, _ = make_user("owner")
    liker_client, _ = make_user("alice")
    post = make_post(owner_client)

    first = _toggle(liker_client, post["id"])
    assert first.status_code == 200
    assert first.get_json() == {"liked": True, "likeCount": 1}
    assert db.all("posts")[post["id"]]["like_count"] == 1

    second = _toggle(liker_client, post["id"])
    assert second.status_code == 200
    assert second.get_json() == {"liked": False, "likeCount": 0}
    assert db.all("likes") == {}


def test_repeated_toggles_alternate_and_return_to_start(make_user, make_post, db):
    owner_client, _ = make_user("owner")
    liker_client, _ = make_user("alice")
    post = make_post(owner_client)

    states = [_toggle(liker_client, post["id"]).get_json()["liked"] for _ in range(6)]

    assert states == [True, False, True, False, True, False]
    assert db.all("posts")[post["id"]]["like_count"] == 0
    assert db.all("likes") == {}


def test_likes_from_different_users_accumulate(make_user, make_post):
    owner_client, _ = make_user("owner")
    post = make_post(owner_client)
    counts = []
    for name in ("alice", "bob", "carol"):
        user_client, _ = make_user(name)
        counts.append(_toggle(user_client, post["id"]).get_json()["likeCount"])
    assert counts == [1, 2, 3]


def test_toggle_requires_post_id(make_user):
    user_client, _ = make_user("alice")
    response = user_client.post("/api/likes/toggle", json={})
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "VALIDATION_ERROR"


def test_toggle_rejects_malformed_post_id(make_user):
    user_client, _ = make_user("alice")
    response = _toggle(user_client, "not-an-id")
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "VALIDATION_ERROR"


def test_toggle_unknown_post_is_404(make_user):
    user_client, _ = make_user("alice")
    response = _toggle(user_client, str(uuid.uuid4()))
    assert response.status_code == 404
    assert response.get_json()["error_code"] == "POST_NOT_FOUND"


def test_toggle_requires_authentication(client):
    response = client.post("/api/likes/toggle", json={"postId": str(uuid.uuid4())})
    assert response.status_code == 401


def test_concurrent_duplicate_like_counts_once(app, make_user, make_post, db):
    owner_client, _ = make_user("owner")
    _, alice = make_user("alice")
    post = make_post(owner_client)
    like_service = app.services["likes"]
    concurrent_results = []

    def racing_request(op, reference):
        # The second request completes its whole like between our read and our insert.
        if op == "create" and reference.path.startswith("likes/"):
            db.before_write = None
            concurrent_results.append(like_service.toggle_like(alice["id"], post["id"]))

    db.before_write = racing_request
    result = like_service.toggle_like(alice["id"], post["id"])

    assert concurrent_results[0].liked is True
    assert result.liked is True
    assert result.like_count == 1
    assert len(db.all("likes")) == 1
    assert db.all("posts")[post["id"]]["like_count"] == 1


def test_concurrent_unlike_decrements_once(app, make_user, make_post, db):
    owner_client, _ = make_user("owner")
    _, alice = make_user("alice")
    post = make_post(owner_client)
    like_service = app.services["likes"]
    like_service.toggle_like(alice["id"], post["id"])
    concurrent_results = []

    def racing_request(op, reference):
        if op == "delete" and reference.path.startswith("likes/"):
            db.before_write = None
            concurrent_results.append(like_service.toggle_like(alice["id"], post["id"]))

    db.before_write = racing_request
    result = like_service.toggle_like(alice["id"], post["id"])

    assert concurrent_results[0].liked is False
    assert result.liked is False
    assert result.like_count == 0
    assert db.all("likes") == {}
    assert db.all("posts")[post["id"]]["like_count"] == 0


def test_service_validates_ids(app):
    like_service = app.services["likes"]
    with pytest.raises(InvalidInputError):
        like_service.toggle_like("someone", "")
    with pytest.raises(NotFoundError):
        like_service.toggle_like("someone", str(uuid.uuid4()))


def test_cached_counter_drifts_after_cascade_but_exact_count_is_recomputed(app, make_user, make_post, db):
    owner_client, _ = make_user("owner")
    liker_client, liker = make_user("alice")
    post = make_post(owner_client)
    _toggle(liker_client, post["id"])

    liker_client.delete(f"/api/users/{liker['id']}")

    assert db.all("posts")[post["id"]]["like_count"] == 1
    status = owner_client.get(f"/api/likes/{post['id']}").get_json()
    assert status == {"postId": post["id"], "likeCount": 0, "liked": False}


def test_post_deleted_before_like_insert_leaves_no_like(app, make_user, make_post, db):
    owner_client, owner = make_user("owner")
    _, alice = make_user("alice")
    post = make_post(owner_client)

    def post_removed(op, reference):
        if op == "create" and reference.path.startswith("likes/"):
            db.before_write = None
            app.services["cascade"].delete_post(post["id"], owner["id"])

    db.before_write = post_removed
    with pytest.raises(NotFoundError) as exc:
        app.services["likes"].toggle_like(alice["id"], post["id"])

    assert exc.value.error_code == "POST_NOT_FOUND"
    assert db.all("likes") == {}
    assert db.all("posts") == {}


def test_post_deleted_during_unlike_is_not_found(app, make_user, make_post, db):
    owner_client, owner = make_user("owner")
    _, alice = make_user("alice")
    post = make_post(owner_client)
    like_service = app.services["likes"]
    like_service.toggle_like(alice["id"], post["id"])

    def post_removed(op, reference):
        if op == "update" and reference.path.startswith("posts/"):
            db.before_write = None
            app.services["cascade"].delete_post(post["id"], owner["id"])

    db.before_write = post_removed
    with pytest.raises(NotFoundError):
        like_service.toggle_like(alice["id"], post["id"])

    assert db.all("likes") == {}
    assert db.all("posts") == {}

# tests/test_approval.py
import pytest
from sqlalchemy.exc import SQLAlchemyError

from peekhour.models import Notification, PendingPost, Post
from peekhour.services.notification import NotificationService

SUBMIT_URL = "/api/departments/enhancements/posts/submit"


def _review_url(post_id):
    return f"/api/departments/enhancements/posts/{post_id}/review"


def _pending_url(department_id):
    return f"/api/departments/enhancements/{department_id}/pending-posts"


@pytest.fixture()
def gated(alice, bob, make_department, add_member):
    """Department run by alice that requires approval, with bob as member."""
    department = make_department(alice, require_approval=True)
    add_member(department, bob)
    return department


@pytest.fixture()
def submitted(client, gated, bob, auth_headers):
    headers = auth_headers(bob)
    post = client.post(
        "/api/posts",
        json={"content": "Lantern walk tonight", "department_id": gated.id},
        headers=headers,
    ).json()["data"]
    res = client.post(
        SUBMIT_URL,
        json={"post_id": post["id"], "department_id": gated.id},
        headers=headers,
    )
    assert res.status_code == 200
    return post


def test_post_in_gated_department_starts_hidden(client, gated, bob, auth_headers):
    res = client.post(
        "/api/posts",
        json={"content": "hello", "department_id": gated.id},
        headers=auth_headers(bob),
    )

    assert res.status_code == 201
    assert res.json()["data"]["is_active"] is False


def test_submitted_post_is_queued_and_invisible(client, db, gated, submitted):
    pending = db.query(PendingPost).one()
    assert pending.status == "pending"
    assert pending.post_id == submitted["id"]

    res = client.get(f"/api/posts/{submitted['id']}")
    assert res.status_code == 404


def test_author_still_sees_own_pending_post(client, submitted, bob, auth_headers):
    res = client.get(f"/api/posts/{submitted['id']}", headers=auth_headers(bob))

    assert res.status_code == 200
    assert res.json()["data"]["is_active"] is False


def test_creator_lists_pending_posts(client, gated, submitted, alice, bob, auth_headers):
    res = client.get(_pending_url(gated.id), headers=auth_headers(alice))

    assert res.status_code == 200
    queue = res.json()["data"]
    assert len(queue) == 1
    assert queue[0]["post"]["content"] == "Lantern walk tonight"
    assert queue[0]["submitter"]["id"] == bob.id


def test_member_cannot_list_pending_posts(client, gated, submitted, bob, auth_headers):
    res = client.get(_pending_url(gated.id), headers=auth_headers(bob))

    assert res.status_code == 403
    assert res.json()["error"] == "Only admins and moderators can view pending posts"


def test_approve_makes_post_visible_and_notifies(
    client, db, gated, submitted, alice, bob, auth_headers
):
    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "approve"},
        headers=auth_headers(alice),
    )

    assert res.status_code == 200
    assert res.json()["message"] == "Post approved successfully"
    data = res.json()["data"]
    assert data["status"] == "approved"
    assert data["reviewed_by"] == alice.id
    assert data["reviewed_at"] is not None

    assert client.get(f"/api/posts/{submitted['id']}").status_code == 200

    note = db.query(Notification).filter(Notification.user_id == bob.id).one()
    assert note.type == "post_approved"

    listed = client.get(f"/api/departments/{gated.id}/posts").json()["data"]
    assert [p["id"] for p in listed["posts"]] == [submitted["id"]]


def test_reject_keeps_post_hidden_with_default_reason(
    client, db, submitted, alice, bob, auth_headers
):
    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "reject"},
        headers=auth_headers(alice),
    )

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["status"] == "rejected"
    assert data["rejection_reason"] == "No reason provided"

    assert client.get(f"/api/posts/{submitted['id']}").status_code == 404
    note = db.query(Notification).filter(Notification.user_id == bob.id).one()
    assert note.type == "post_rejected"


def test_reject_with_reason(client, submitted, alice, auth_headers):
    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "reject", "rejection_reason": "Off topic"},
        headers=auth_headers(alice),
    )

    assert res.json()["data"]["rejection_reason"] == "Off topic"


def test_review_happens_once(client, submitted, alice, auth_headers):
    headers = auth_headers(alice)
    client.post(_review_url(submitted["id"]), json={"action": "approve"}, headers=headers)

    res = client.post(
        _review_url(submitted["id"]), json={"action": "reject"}, headers=headers
    )

    assert res.status_code == 404
    assert res.json()["error"] == "Pending post not found"


def test_unknown_action_is_rejected(client, submitted, alice, auth_headers):
    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "maybe"},
        headers=auth_headers(alice),
    )

    assert res.status_code == 400
    assert res.json()["error"] == "Invalid action"


def test_member_cannot_review(client, submitted, bob, auth_headers):
    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "approve"},
        headers=auth_headers(bob),
    )

    assert res.status_code == 403
    assert res.json()["error"] == "Only admins and moderators can review posts"


def test_moderator_review_follows_approve_permission(
    client, db, gated, submitted, alice, carol, add_member, auth_headers
):
    add_member(gated, carol)
    moderators_url = f"/api/departments/enhancements/{gated.id}/moderators"
    client.post(
        moderators_url,
        json={"user_id": carol.id, "permissions": {"canApprovePost": False}},
        headers=auth_headers(alice),
    )

    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "approve"},
        headers=auth_headers(carol),
    )
    assert res.status_code == 403
    assert res.json()["error"] == "You do not have permission to approve posts"

    client.patch(
        f"{moderators_url}/{carol.id}/permissions",
        json={"permissions": {"canApprovePost": True}},
        headers=auth_headers(alice),
    )

    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "approve"},
        headers=auth_headers(carol),
    )
    assert res.status_code == 200
    assert res.json()["data"]["reviewed_by"] == carol.id


def test_resubmission_is_blocked(client, gated, submitted, alice, bob, auth_headers):
    client.post(
        _review_url(submitted["id"]),
        json={"action": "reject"},
        headers=auth_headers(alice),
    )

    res = client.post(
        SUBMIT_URL,
        json={"post_id": submitted["id"], "department_id": gated.id},
        headers=auth_headers(bob),
    )

    assert res.status_code == 400
    assert res.json()["error"] == "Post already submitted for approval"


def test_only_author_can_submit(client, db, gated, alice, bob, make_post, auth_headers):
    post = make_post(bob, department=gated)

    res = client.post(
        SUBMIT_URL,
        json={"post_id": post.id, "department_id": gated.id},
        headers=auth_headers(alice),
    )

    assert res.status_code == 404
    assert db.query(PendingPost).count() == 0


def test_submitting_hides_a_published_post(
    client, db, gated, bob, make_post, auth_headers
):
    post = make_post(bob, department=gated, is_active=True)

    client.post(
        SUBMIT_URL,
        json={"post_id": post.id, "department_id": gated.id},
        headers=auth_headers(bob),
    )

    db.expire_all()
    assert db.get(Post, post.id).is_active is False


def test_deleted_post_cannot_be_submitted(client, db, gated, bob, auth_headers):
    headers = auth_headers(bob)
    post = client.post(
        "/api/posts",
        json={"content": "Second thoughts", "department_id": gated.id},
        headers=headers,
    ).json()["data"]
    client.delete(f"/api/posts/{post['id']}", headers=headers)

    res = client.post(
        SUBMIT_URL,
        json={"post_id": post["id"], "department_id": gated.id},
        headers=headers,
    )

    assert res.status_code == 404
    assert res.json()["error"] == "Post not found"
    assert db.query(PendingPost).count() == 0


def test_post_deleted_while_pending_is_never_published(
    client, db, gated, submitted, alice, bob, auth_headers
):
    client.delete(f"/api/posts/{submitted['id']}", headers=auth_headers(bob))

    queue = client.get(_pending_url(gated.id), headers=auth_headers(alice))
    assert queue.json()["data"] == []

    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "approve"},
        headers=auth_headers(alice),
    )

    assert res.status_code == 404
    assert res.json()["error"] == "Pending post not found"
    db.expire_all()
    assert db.get(Post, submitted["id"]).is_active is False
    assert client.get(f"/api/posts/{submitted['id']}").status_code == 404
    assert db.query(Notification).count() == 0


def test_removed_post_cannot_be_submitted_again(
    client, db, gated, alice, bob, make_post, auth_headers
):
    post = make_post(bob, department=gated, is_active=True)
    client.delete(
        f"/api/departments/enhancements/{gated.id}/posts/{post.id}",
        headers=auth_headers(alice),
    )

    res = client.post(
        SUBMIT_URL,
        json={"post_id": post.id, "department_id": gated.id},
        headers=auth_headers(bob),
    )

    assert res.status_code == 404
    db.expire_all()
    assert db.get(Post, post.id).is_active is False


def test_failed_review_leaves_queue_untouched(
    client, db, submitted, alice, bob, auth_headers, monkeypatch
):
    def fail(self, *args, **kwargs):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(NotificationService, "notify", fail)

    res = client.post(
        _review_url(submitted["id"]),
        json={"action": "approve"},
        headers=auth_headers(alice),
    )

    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "Failed to review post"}
    db.expire_all()
    pending = db.query(PendingPost).one()
    assert pending.status == "pending"
    assert pending.reviewed_by is None
    assert pending.reviewed_at is None
    assert db.get(Post, submitted["id"]).is_active is False
    assert db.query(Notification).count() == 0


def test_mentions_in_gated_post_notify_on_approval(
    client, db, gated, alice, bob, carol, auth_headers
):
    headers = auth_headers(bob)
    post = client.post(
        "/api/posts",
        json={"content": f"Ask @{carol.username} about it", "department_id": gated.id},
        headers=headers,
    ).json()["data"]
    client.post(
        SUBMIT_URL,
        json={"post_id": post["id"], "department_id": gated.id},
        headers=headers,
    )
    assert db.query(Notification).filter(Notification.user_id == carol.id).count() == 0

    client.post(
        _review_url(post["id"]),
        json={"action": "approve"},
        headers=auth_headers(alice),
    )

    note = db.query(Notification).filter(Notification.user_id == carol.id).one()
    assert note.type == "mention"
    assert note.actor_id == bob.id
    assert note.post_id == post["id"]

# tests/test_comments.py
from peekhour.models import Comment, Notification


def _comment(client, headers, post_id, content="Nice shot"):
    return client.post(
        f"/api/posts/{post_id}/comments", json={"content": content}, headers=headers
    )


def _reply(client, headers, post_id, parent_id, content="Agreed"):
    return client.post(
        f"/api/posts/{post_id}/comments/{parent_id}/reply",
        json={"content": content},
        headers=headers,
    )


def test_add_comment_creates_root_and_notifies_author(
    client, db, alice, bob, make_post, auth_headers
):
    post = make_post(alice)

    res = _comment(client, auth_headers(bob), post.id)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["data"]["depth"] == 0
    assert body["data"]["parent_comment_id"] is None
    assert body["data"]["author"]["username"] == bob.username

    notes = db.query(Notification).filter(Notification.user_id == alice.id).all()
    assert len(notes) == 1
    assert notes[0].type == "comment"
    assert notes[0].actor_id == bob.id


def test_comment_on_own_post_does_not_notify(client, db, alice, make_post, auth_headers):
    post = make_post(alice)

    res = _comment(client, auth_headers(alice), post.id)

    assert res.status_code == 201
    assert db.query(Notification).count() == 0


def test_empty_comment_is_rejected(client, alice, make_post, auth_headers):
    post = make_post(alice)

    res = _comment(client, auth_headers(alice), post.id, content="   ")

    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Comment content is required"}


def test_comment_on_hidden_post_is_404(client, alice, bob, make_post, auth_headers):
    post = make_post(alice, is_active=False)

    res = _comment(client, auth_headers(bob), post.id)

    assert res.status_code == 404
    assert res.json()["error"] == "Post not found"


def test_comment_requires_token(client, alice, make_post):
    post = make_post(alice)

    res = client.post(f"/api/posts/{post.id}/comments", json={"content": "hi"})

    assert res.status_code == 401
    assert res.json()["success"] is False


def test_list_comments_returns_roots_oldest_first_with_pagination(
    client, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    first = _comment(client, auth_headers(bob), post.id, "first").json()["data"]
    _comment(client, auth_headers(bob), post.id, "second")
    _comment(client, auth_headers(alice), post.id, "third")
    _reply(client, auth_headers(alice), post.id, first["id"])

    res = client.get(f"/api/posts/{post.id}/comments?page=1&size=2")

    assert res.status_code == 200
    data = res.json()["data"]
    assert [c["content"] for c in data["comments"]] == ["first", "second"]
    assert data["comments"][0]["replies_count"] == 1
    assert data["pagination"] == {"total": 3, "page": 1, "size": 2, "total_pages": 2}


def test_reply_depth_is_parent_depth_plus_one(
    client, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(alice), post.id).json()["data"]

    res = _reply(client, auth_headers(bob), post.id, root["id"])

    assert res.status_code == 201
    reply = res.json()["data"]
    assert reply["depth"] == 1
    assert reply["parent_comment_id"] == root["id"]
    assert reply["author"]["name"] == "Bob"


def test_reply_notifies_parent_author_in_same_write(
    client, db, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(alice), post.id).json()["data"]

    reply = _reply(client, auth_headers(bob), post.id, root["id"]).json()["data"]

    note = db.query(Notification).filter(Notification.type == "reply").one()
    assert note.user_id == alice.id
    assert note.comment_id == reply["id"]


def test_self_reply_sends_no_notification(client, db, alice, make_post, auth_headers):
    post = make_post(alice)
    root = _comment(client, auth_headers(alice), post.id).json()["data"]

    _reply(client, auth_headers(alice), post.id, root["id"])

    assert db.query(Notification).count() == 0


def test_nesting_stops_at_max_depth(client, alice, bob, make_post, auth_headers):
    post = make_post(alice)
    parent = _comment(client, auth_headers(alice), post.id).json()["data"]

    for expected_depth in range(1, 6):
        res = _reply(client, auth_headers(bob), post.id, parent["id"])
        assert res.status_code == 201
        parent = res.json()["data"]
        assert parent["depth"] == expected_depth

    res = _reply(client, auth_headers(bob), post.id, parent["id"])

    assert res.status_code == 400
    assert res.json()["error"] == "Maximum nesting depth reached"


def test_reply_validation_order(client, alice, bob, make_post, auth_headers):
    post = make_post(alice)
    other_post = make_post(alice, content="Another one")
    root = _comment(client, auth_headers(alice), post.id).json()["data"]
    headers = auth_headers(bob)

    # Empty content wins even when the parent does not exist
    res = _reply(client, headers, post.id, 9999, content="")
    assert res.status_code == 400
    assert res.json()["error"] == "Comment content is required"

    res = _reply(client, headers, post.id, 9999)
    assert res.status_code == 404
    assert res.json()["error"] == "Parent comment not found"

    # Parent must belong to the post in the path
    res = _reply(client, headers, other_post.id, root["id"])
    assert res.status_code == 404
    assert res.json()["error"] == "Parent comment not found"


def test_reply_on_hidden_post_is_404(client, db, alice, bob, make_post, auth_headers):
    post = make_post(alice)
    root = _comment(client, auth_headers(bob), post.id).json()["data"]
    post.is_active = False
    db.commit()

    res = _reply(client, auth_headers(bob), post.id, root["id"])

    assert res.status_code == 404
    assert res.json()["error"] == "Post not found"
    assert db.query(Comment).count() == 1


def test_reply_to_hidden_comment_is_404(client, db, alice, bob, make_post, auth_headers):
    post = make_post(alice)
    root = _comment(client, auth_headers(bob), post.id).json()["data"]
    db.get(Comment, root["id"]).is_active = False
    db.commit()

    res = _reply(client, auth_headers(alice), post.id, root["id"])

    assert res.status_code == 404
    assert res.json()["error"] == "Parent comment not found"


def test_get_replies_are_direct_children_in_order(
    client, alice, bob, carol, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(alice), post.id).json()["data"]
    r1 = _reply(client, auth_headers(bob), post.id, root["id"], "r1").json()["data"]
    _reply(client, auth_headers(carol), post.id, root["id"], "r2")
    _reply(client, auth_headers(alice), post.id, r1["id"], "r1.1")
    client.post(
        f"/api/reactions/comments/{r1['id']}/react",
        json={"reaction_type": "love"},
        headers=auth_headers(carol),
    )

    res = client.get(f"/api/comments/{root['id']}/replies", headers=auth_headers(carol))

    assert res.status_code == 200
    replies = res.json()["data"]
    assert [r["content"] for r in replies] == ["r1", "r2"]
    assert replies[0]["replies_count"] == 1
    assert replies[0]["reactions_count"] == 1
    assert replies[0]["user_reaction"] == "love"
    assert replies[0]["has_reacted"] is True
    assert replies[1]["has_reacted"] is False


def test_replies_anonymous_have_no_viewer_reaction(
    client, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(alice), post.id).json()["data"]
    _reply(client, auth_headers(bob), post.id, root["id"])

    replies = client.get(f"/api/comments/{root['id']}/replies").json()["data"]

    assert replies[0]["user_reaction"] is None
    assert replies[0]["has_reacted"] is False


def test_thread_is_preorder_with_levels_and_paths(
    client, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    h = auth_headers(bob)
    root = _comment(client, auth_headers(alice), post.id, "root").json()["data"]
    a = _reply(client, h, post.id, root["id"], "a").json()["data"]
    b = _reply(client, h, post.id, root["id"], "b").json()["data"]
    a1 = _reply(client, h, post.id, a["id"], "a1").json()["data"]
    a1x = _reply(client, h, post.id, a1["id"], "a1x").json()["data"]
    a2 = _reply(client, h, post.id, a["id"], "a2").json()["data"]
    b1 = _reply(client, h, post.id, b["id"], "b1").json()["data"]

    res = client.get(f"/api/comments/{root['id']}/thread")

    assert res.status_code == 200
    thread = res.json()["data"]
    assert [c["content"] for c in thread] == ["root", "a", "a1", "a1x", "a2", "b", "b1"]
    by_content = {c["content"]: c for c in thread}
    assert by_content["root"]["level"] == 0
    assert by_content["a1x"]["level"] == 3
    assert by_content["a1x"]["path"] == [root["id"], a["id"], a1["id"], a1x["id"]]
    assert by_content["b1"]["path"] == [root["id"], b["id"], b1["id"]]
    assert by_content["a2"]["path"] == [root["id"], a["id"], a2["id"]]


def test_thread_of_subtree_counts_levels_from_requested_comment(
    client, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    h = auth_headers(bob)
    root = _comment(client, auth_headers(alice), post.id).json()["data"]
    a = _reply(client, h, post.id, root["id"], "a").json()["data"]
    _reply(client, h, post.id, a["id"], "a1")

    thread = client.get(f"/api/comments/{a['id']}/thread").json()["data"]

    assert [(c["content"], c["level"]) for c in thread] == [("a", 0), ("a1", 1)]
    assert thread[1]["depth"] == 2


def test_thread_missing_comment_is_404(client):
    res = client.get("/api/comments/12345/thread")

    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Comment not found"}


def test_thread_and_replies_of_hidden_post_are_author_only(
    client, db, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(bob), post.id).json()["data"]
    _reply(client, auth_headers(alice), post.id, root["id"])
    post.is_active = False
    db.commit()

    for url in (
        f"/api/comments/{root['id']}/thread",
        f"/api/comments/{root['id']}/replies",
    ):
        res = client.get(url)
        assert res.status_code == 404
        assert res.json()["error"] == "Post not found"
        assert client.get(url, headers=auth_headers(bob)).status_code == 404
        assert client.get(url, headers=auth_headers(alice)).status_code == 200


def test_thread_of_deleted_post_is_gone_for_everyone(
    client, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(bob), post.id).json()["data"]
    client.delete(f"/api/posts/{post.id}", headers=auth_headers(alice))

    res = client.get(
        f"/api/comments/{root['id']}/thread", headers=auth_headers(alice)
    )

    assert res.status_code == 404


def test_replies_of_hidden_comment_are_404(
    client, db, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(bob), post.id).json()["data"]
    _reply(client, auth_headers(alice), post.id, root["id"])
    db.get(Comment, root["id"]).is_active = False
    db.commit()

    res = client.get(f"/api/comments/{root['id']}/replies")

    assert res.status_code == 404
    assert res.json()["error"] == "Comment not found"


def test_edit_comment_owner_only(client, alice, bob, make_post, auth_headers):
    post = make_post(alice)
    root = _comment(client, auth_headers(bob), post.id).json()["data"]

    res = client.put(
        f"/api/comments/{root['id']}",
        json={"content": "hijacked"},
        headers=auth_headers(alice),
    )
    assert res.status_code == 403
    assert res.json()["error"] == "Only the comment author can edit this comment"

    res = client.put(
        f"/api/comments/{root['id']}",
        json={"content": "edited"},
        headers=auth_headers(bob),
    )
    assert res.status_code == 200
    assert res.json()["data"]["content"] == "edited"
    assert res.json()["data"]["edited_at"] is not None


def test_edit_missing_comment_is_404(client, alice, auth_headers):
    res = client.put(
        "/api/comments/777", json={"content": "x"}, headers=auth_headers(alice)
    )

    assert res.status_code == 404


def test_delete_removes_whole_subtree(
    client, db, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    h = auth_headers(bob)
    root = _comment(client, h, post.id, "root").json()["data"]
    keep = _comment(client, h, post.id, "keep").json()["data"]
    a = _reply(client, h, post.id, root["id"]).json()["data"]
    _reply(client, h, post.id, a["id"])

    res = client.delete(f"/api/comments/{root['id']}", headers=h)

    assert res.status_code == 200
    assert res.json()["success"] is True
    remaining = [c.id for c in db.query(Comment).all()]
    assert remaining == [keep["id"]]


def test_delete_keeps_notifications_but_clears_comment_link(
    client, db, alice, bob, make_post, auth_headers
):
    post = make_post(alice)
    comment = _comment(client, auth_headers(bob), post.id).json()["data"]

    client.delete(f"/api/comments/{comment['id']}", headers=auth_headers(bob))

    note = db.query(Notification).one()
    assert note.comment_id is None


def test_delete_by_non_owner_is_forbidden(client, alice, bob, make_post, auth_headers):
    post = make_post(alice)
    comment = _comment(client, auth_headers(bob), post.id).json()["data"]

    res = client.delete(f"/api/comments/{comment['id']}", headers=auth_headers(alice))

    assert res.status_code == 403


def test_comment_mentions_notify_known_users(
    client, db, alice, bob, carol, make_post, auth_headers
):
    post = make_post(alice)

    comment = _comment(
        client,
        auth_headers(bob),
        post.id,
        f"@{carol.username} look at this, @nobody and @{bob.username} agree",
    ).json()["data"]

    mention = db.query(Notification).filter(Notification.type == "mention").one()
    assert mention.user_id == carol.id
    assert mention.comment_id == comment["id"]
    assert mention.content == f"@{bob.username} mentioned you in a comment"
    assert db.query(Notification).filter(Notification.user_id == bob.id).count() == 0


def test_reply_mentions_notify_known_users(
    client, db, alice, bob, carol, make_post, auth_headers
):
    post = make_post(alice)
    root = _comment(client, auth_headers(alice), post.id).json()["data"]

    reply = _reply(
        client, auth_headers(bob), post.id, root["id"], f"cc @{carol.username}"
    ).json()["data"]

    mention = db.query(Notification).filter(Notification.type == "mention").one()
    assert mention.user_id == carol.id
    assert mention.comment_id == reply["id"]

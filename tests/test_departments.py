# tests/test_departments.py
from peekhour.models import DepartmentMember


def test_create_department_makes_creator_admin(client, db, alice, auth_headers):
    res = client.post(
        "/api/departments",
        json={"name": "Film Club", "type": "club", "require_approval": True},
        headers=auth_headers(alice),
    )

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["created_by"] == alice.id
    assert data["require_approval"] is True
    assert data["members_count"] == 1
    assert data["user_role"] == "admin"

    membership = db.query(DepartmentMember).one()
    assert membership.user_id == alice.id
    assert membership.role == "admin"


def test_create_department_validation(client, alice, auth_headers):
    res = client.post(
        "/api/departments", json={"name": "x", "type": "club"}, headers=auth_headers(alice)
    )

    assert res.status_code == 400
    assert res.json()["success"] is False


def test_join_and_view_department(client, alice, bob, make_department, auth_headers):
    department = make_department(alice)

    res = client.post(f"/api/departments/{department.id}/join", headers=auth_headers(bob))
    assert res.status_code == 200
    assert res.json()["data"]["role"] == "member"

    res = client.get(f"/api/departments/{department.id}", headers=auth_headers(bob))
    data = res.json()["data"]
    assert data["members_count"] == 2
    assert data["is_member"] is True
    assert data["user_role"] == "member"


def test_join_twice_or_as_creator(client, alice, bob, make_department, auth_headers):
    department = make_department(alice)
    url = f"/api/departments/{department.id}/join"
    client.post(url, headers=auth_headers(bob))

    res = client.post(url, headers=auth_headers(bob))
    assert res.status_code == 400
    assert res.json()["error"] == "Already a member of this department"

    res = client.post(url, headers=auth_headers(alice))
    assert res.status_code == 400
    assert res.json()["error"] == "You are the creator of this department"


def test_last_admin_cannot_leave(client, alice, make_department, auth_headers):
    department = make_department(alice)

    res = client.post(
        f"/api/departments/{department.id}/leave", headers=auth_headers(alice)
    )

    assert res.status_code == 400
    assert res.json()["error"] == "The last admin cannot leave the department"


def test_member_leaves(client, alice, bob, make_department, add_member, auth_headers):
    department = make_department(alice)
    add_member(department, bob)
    url = f"/api/departments/{department.id}/leave"

    assert client.post(url, headers=auth_headers(bob)).status_code == 200
    res = client.post(url, headers=auth_headers(bob))
    assert res.status_code == 404
    assert res.json()["error"] == "Not a member of this department"


def test_missing_department(client):
    res = client.get("/api/departments/404")

    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Department not found"}


def test_non_member_cannot_post(client, alice, bob, make_department, auth_headers):
    department = make_department(alice)

    res = client.post(
        "/api/posts",
        json={"content": "hi", "department_id": department.id},
        headers=auth_headers(bob),
    )

    assert res.status_code == 403
    assert res.json()["error"] == "Must be a member to post in this department"


def test_post_needs_content_or_media(client, alice, auth_headers):
    res = client.post("/api/posts", json={"media_type": "none"}, headers=auth_headers(alice))

    assert res.status_code == 400
    assert res.json()["error"] == "Post content or media is required"


def test_open_department_posts_are_listed_newest_first(
    client, alice, bob, make_department, add_member, auth_headers
):
    department = make_department(alice)
    add_member(department, bob)
    for content in ("one", "two"):
        res = client.post(
            "/api/posts",
            json={"content": content, "department_id": department.id},
            headers=auth_headers(bob),
        )
        assert res.json()["data"]["is_active"] is True

    data = client.get(f"/api/departments/{department.id}/posts").json()["data"]

    assert [p["content"] for p in data["posts"]] == ["two", "one"]
    assert data["pagination"]["total"] == 2


def test_author_deletes_post(client, alice, bob, make_post, auth_headers):
    post = make_post(alice)

    assert client.delete(f"/api/posts/{post.id}", headers=auth_headers(bob)).status_code == 403
    assert client.delete(f"/api/posts/{post.id}", headers=auth_headers(alice)).status_code == 200
    assert client.get(f"/api/posts/{post.id}").status_code == 404

# tests/test_health.py


def test_root(client):
    res = client.get("/")

    assert res.status_code == 200
    assert res.json()["success"] is True
    assert res.json()["data"]["status"] == "healthy"


def test_health_check(client):
    res = client.get("/api/health")

    assert res.status_code == 200
    assert res.json()["data"]["database"] == "healthy"
    assert "X-Request-ID" in res.headers
    assert "X-Process-Time" in res.headers


def test_unknown_route_uses_error_envelope(client):
    res = client.get("/api/does-not-exist")

    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Not Found"}


def test_missing_token_uses_error_envelope(client):
    res = client.get("/api/notifications")

    assert res.status_code == 401
    assert res.json() == {"success": False, "error": "Access denied. No token provided."}


def test_bad_token_is_rejected(client):
    res = client.get(
        "/api/notifications", headers={"Authorization": "Bearer not-a-token"}
    )

    assert res.status_code == 401
    assert res.json()["success"] is False


def test_validation_error_is_400(client, alice, make_post, auth_headers):
    post = make_post(alice)

    res = client.post(
        f"/api/reactions/posts/{post.id}/react",
        json={"reaction_type": 5},
        headers=auth_headers(alice),
    )

    assert res.status_code == 400
    assert res.json()["success"] is False

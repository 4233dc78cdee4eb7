# tests/test_security.py
import time
from datetime import timedelta

from jose import jwt

from peekhour.core.security import jwt_manager


def test_token_expiry_is_measured_from_real_epoch(alice):
    token = jwt_manager.create_access_token(alice, timedelta(minutes=30))

    claims = jwt.get_unverified_claims(token)

    now = time.time()
    assert abs(claims["iat"] - now) < 5
    assert abs(claims["exp"] - (now + 30 * 60)) < 5


def test_expired_token_is_refused(client, alice):
    token = jwt_manager.create_access_token(alice, timedelta(seconds=-30))

    res = client.get(
        "/api/notifications", headers={"Authorization": f"Bearer {token}"}
    )

    assert res.status_code == 401
    assert res.json() == {"success": False, "error": "Invalid or expired token"}

# tests/test_scheduler.py
from datetime import datetime, timedelta, timezone

from peekhour.core import schedular
from peekhour.models import UserBan


def test_expire_bans_lifts_only_expired(
    monkeypatch, db, session_factory, alice, bob, carol, make_user
):
    admin = make_user("Site Admin", role="admin")
    now = datetime.now(timezone.utc)
    db.add_all(
        [
            UserBan(
                user_id=alice.id,
                banned_by=admin.id,
                reason="old",
                expires_at=now - timedelta(days=1),
            ),
            UserBan(
                user_id=bob.id,
                banned_by=admin.id,
                reason="fresh",
                expires_at=now + timedelta(days=1),
            ),
            UserBan(user_id=carol.id, banned_by=admin.id, reason="forever"),
        ]
    )
    db.commit()
    monkeypatch.setattr(schedular, "SessionLocal", session_factory)

    schedular.expire_bans()

    db.expire_all()
    active = {ban.reason: ban.is_active for ban in db.query(UserBan).all()}
    assert active == {"old": False, "fresh": True, "forever": True}


def test_expired_ban_no_longer_blocks(
    client, db, alice, make_user, make_post, auth_headers
):
    admin = make_user("Site Admin", role="admin")
    post = make_post(alice)
    db.add(
        UserBan(
            user_id=alice.id,
            banned_by=admin.id,
            reason="short",
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=5),
        )
    )
    db.commit()

    res = client.put(
        f"/api/posts/{post.id}", json={"content": "back"}, headers=auth_headers(alice)
    )

    assert res.status_code == 200

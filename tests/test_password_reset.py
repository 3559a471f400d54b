import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlmodel import select

from app.core.auth import read_session_token
from app.core.config import get_settings
from app.core.security import hash_token
from app.models.user import TemporaryCredential
from tests.factories import API, make_user

settings = get_settings()


def request_reset(client, email="alice@example.com"):
    return client.post(f"{API}/auth/forgot-password", data={"email": email})


def test_forgot_password_emails_link_and_stores_hash(client, db, outbox):
    user = make_user(db)

    r = request_reset(client)
    assert r.json()["success"] is True

    mail = outbox[-1]
    assert mail["to_email"] == user.email
    assert "http://shop.test/reset-password?token=" in mail["text_body"]

    token = outbox.last_reset_token()
    row = db.exec(select(TemporaryCredential).where(TemporaryCredential.user_id == user.id)).one()
    assert row.token_hash == hash_token(token)
    assert row.otp_code is None


def test_forgot_password_unknown_or_unverified(client, db, outbox):
    make_user(db, verified=False)
    for email in ("alice@example.com", "nobody@example.com"):
        r = request_reset(client, email)
        assert r.json() == {
            "success": False,
            "message": "No verified account found with this email",
        }
    assert outbox == []


def test_reset_replaces_password_and_logs_in(client, db, outbox):
    user = make_user(db)
    request_reset(client)
    token = outbox.last_reset_token()

    r = client.post(
        f"{API}/auth/reset-password",
        data={"password": "brand-new-pass", "token": token},
    )
    assert r.json()["success"] is True

    claims = read_session_token(client.cookies.get("_auth_token"))
    assert claims is not None
    assert claims.user_id == user.id

    assert db.exec(select(TemporaryCredential)).all() == []

    client.cookies.clear()
    old = client.post(f"{API}/auth/login", data={"email": user.email, "password": "correct-horse"})
    assert old.json() == {"success": False, "message": "Invalid password"}

    new = client.post(f"{API}/auth/login", data={"email": user.email, "password": "brand-new-pass"})
    assert new.json()["success"] is True


def test_reset_token_cannot_be_reused(client, db, outbox):
    make_user(db)
    request_reset(client)
    token = outbox.last_reset_token()

    first = client.post(f"{API}/auth/reset-password", data={"password": "brand-new-pass", "token": token})
    assert first.json()["success"] is True

    second = client.post(f"{API}/auth/reset-password", data={"password": "another-pass", "token": token})
    assert second.json() == {"success": False, "message": "Reset token expired or used"}


def test_reset_rejects_wrong_purpose_even_if_signed(client, db):
    user = make_user(db)
    token = jwt.encode(
        {
            "user_id": str(user.id),
            "email": user.email,
            "purpose": "email_change",
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )
    # Even a stored hash does not help a token with the wrong purpose.
    db.add(
        TemporaryCredential(
            user_id=user.id,
            token_hash=hash_token(token),
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )
    )
    db.commit()

    r = client.post(f"{API}/auth/reset-password", data={"password": "brand-new-pass", "token": token})
    assert r.json() == {"success": False, "message": "Invalid reset token"}


def test_reset_rejects_session_token(client, db):
    user = make_user(db)
    client.post(f"{API}/auth/login", data={"email": user.email, "password": "correct-horse"})
    session_token = client.cookies.get("_auth_token")

    r = client.post(
        f"{API}/auth/reset-password",
        data={"password": "brand-new-pass", "token": session_token},
    )
    assert r.json() == {"success": False, "message": "Invalid reset token"}


def test_reset_rejects_bad_signature(client):
    forged = jwt.encode(
        {"user_id": str(uuid.uuid4()), "purpose": "password_reset"},
        "not-our-secret",
        algorithm="HS256",
    )
    r = client.post(f"{API}/auth/reset-password", data={"password": "brand-new-pass", "token": forged})
    assert r.json() == {"success": False, "message": "Invalid or expired token"}


def test_reset_rejects_expired_stored_hash(client, db, outbox):
    make_user(db)
    request_reset(client)
    token = outbox.last_reset_token()

    row = db.exec(select(TemporaryCredential)).one()
    row.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.add(row)
    db.commit()

    r = client.post(f"{API}/auth/reset-password", data={"password": "brand-new-pass", "token": token})
    assert r.json() == {"success": False, "message": "Reset token expired or used"}


def test_reset_validates_password_length(client):
    r = client.post(f"{API}/auth/reset-password", data={"password": "short", "token": "x"})
    assert r.json() == {"success": False, "message": "Password must be 8+ characters"}

# app/core/security.py
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import get_settings

settings = get_settings()

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

PASSWORD_ALGO = "argon2id"
RESET_PURPOSE = "password_reset"
OTP_LENGTH = 6


class TokenError(Exception):
    """Raised when a signed token fails to verify (bad signature, expired, malformed)."""


# ----- Passwords -----


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# ----- OTP -----


def generate_otp() -> str:
    """Return a 6-digit numeric code in 100000..999999."""
    return str(100000 + secrets.randbelow(900000))


def otp_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)


# ----- Signed tokens -----


def _encode(claims: dict[str, Any], expires_in: timedelta) -> str:
    to_encode = claims.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_in
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry of a token issued by this service.

    Raises:
        TokenError: on any verification failure.
    """
    if not token:
        raise TokenError("Missing token")
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError as exc:
        raise TokenError(str(exc)) from exc


def create_session_token(
    *,
    user_id: str,
    email: str,
    name: str,
    is_active: bool,
    role: str,
) -> str:
    """
    Self-contained session token carried in the `_auth_token` cookie.
    """
    return _encode(
        {
            "user_id": user_id,
            "email": email,
            "name": name,
            "is_active": is_active,
            "role": role,
        },
        timedelta(days=settings.SESSION_TOKEN_EXPIRE_DAYS),
    )


def create_reset_token(*, user_id: str, email: str) -> str:
    return _encode(
        {"user_id": user_id, "email": email, "purpose": RESET_PURPOSE},
        timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    )


def reset_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(
        minutes=settings.RESET_TOKEN_EXPIRE_MINUTES
    )


def hash_token(token: str) -> str:
    """sha256 hex digest; only this is stored server side."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

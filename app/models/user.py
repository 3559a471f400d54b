# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Persistent identity record for a storefront customer or admin.

    Lifecycle:
      - created inactive and unverified on registration
      - activated (is_active + is_email_verified) by a successful OTP check

    Role:
      - "user" | "admin"
      - "guest" is represented by the absence of a session cookie.

    Passwords live in `user_credential`, never on this row.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        max_length=255,
        unique=True,
        index=True,
    )

    phone: str = Field(
        max_length=20,
        unique=True,
        description="10-digit contact number",
    )

    name: str = Field(
        max_length=255,
        description="Customer display name",
    )

    is_active: bool = Field(default=False, index=True)
    is_email_verified: bool = Field(default=False)
    is_phone_verified: bool = Field(default=False)

    # Application role
    role: str = Field(
        default="user",
        max_length=20,
        description="Application role: user | admin",
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class UserCredential(SQLModel, table=True):
    """
    Password hash for a user. One row per user; replaced on password reset.
    """

    __tablename__ = "user_credential"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        index=True,
    )

    password_hash: str
    password_algo: str = Field(default="argon2id", max_length=32)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TemporaryCredential(SQLModel, table=True):
    """
    Short-lived verification record.

    Holds either:
      - otp_code: 6-digit code for email verification / OTP login
      - token_hash: sha256 hex of a signed password-reset token

    Several live rows may exist for the same user when requests are repeated.
    """

    __tablename__ = "user_temp_credentials"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        index=True,
    )

    otp_code: str | None = Field(default=None, max_length=6)
    token_hash: str | None = Field(default=None)

    attempts: int = Field(default=0, ge=0)
    is_verified: bool = Field(default=False)

    expires_at: datetime = Field(index=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

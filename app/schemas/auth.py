# app/schemas/auth.py
import re
import uuid

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel

from app.schemas.user import Role, UserRead

PHONE_RE = re.compile(r"^\d{10}$")


class SessionClaims(SQLModel):
    """
    Payload carried by the `_auth_token` cookie.

    Self-contained: reads trust it without touching the database.
    """

    user_id: uuid.UUID
    email: str
    name: str
    is_active: bool
    role: Role = "user"


class RegisterForm(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    email: EmailStr
    phone: str
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > 50:
            raise ValueError("Name must be at most 50 characters")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if not PHONE_RE.match(v):
            raise ValueError("Phone must be 10 digits")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be 8+ characters")
        return v


class VerifyOtpForm(SQLModel):
    pin: str

    @field_validator("pin")
    @classmethod
    def validate_pin(cls, v: str) -> str:
        if len(v) != 6:
            raise ValueError("OTP must be 6 digits")
        return v


class LoginForm(SQLModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        # Passwords are compared as typed, surrounding spaces included.
        if not v.strip():
            raise ValueError("Password is required")
        return v


class EmailForm(SQLModel):
    """Single-field form used by OTP login and forgot-password."""

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v


class ResetPasswordForm(SQLModel):
    password: str
    token: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be 8+ characters")
        return v

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not v:
            raise ValueError("Reset token required")
        return v


class SessionInfo(SQLModel):
    """Response of the session read: who is logged in, if anyone."""

    is_authenticated: bool
    user: UserRead | None = None

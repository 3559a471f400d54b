# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["user", "admin"]


class UserRead(SQLModel):
    """Public view of a user row. Never includes credentials."""

    id: uuid.UUID
    email: str
    phone: str
    name: str
    role: Role
    is_active: bool
    is_email_verified: bool
    created_at: datetime

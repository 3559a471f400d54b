# app/schemas/common.py
from sqlmodel import SQLModel


class ActionResult(SQLModel):
    """
    Uniform response for form actions.

    `success=False` always carries a message; successful actions may omit it.
    """

    success: bool
    message: str | None = None

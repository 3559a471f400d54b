# app/core/actions.py
"""
Action boundary helpers.

Every form action answers with the same `{success, message}` shape instead of
raising HTTP errors. Services raise:

  - ActionError       : business-rule failure with a user-facing message
  - ValidationError   : pydantic schema mismatch on the submitted form

and routers turn any exception into an ActionResult with `action_failure`.
"""

import logging

from pydantic import ValidationError

from app.schemas.common import ActionResult

logger = logging.getLogger(__name__)


class ActionError(Exception):
    """Business-rule failure whose message is safe to show to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def validation_message(exc: ValidationError) -> str:
    """
    First human-readable message from a pydantic ValidationError.

    Custom validators raise ValueError("..."); pydantic prefixes those with
    "Value error, " which we strip.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    msg = str(errors[0].get("msg", "Invalid input"))
    return msg.removeprefix("Value error, ")


def action_failure(exc: Exception, fallback: str) -> ActionResult:
    """
    Map an exception raised inside an action to the uniform failure shape.

    Only ActionError and ValidationError messages reach the caller; anything
    else (DB, mail, storage) collapses to `fallback`.
    """
    if isinstance(exc, ActionError):
        return ActionResult(success=False, message=exc.message)
    if isinstance(exc, ValidationError):
        return ActionResult(success=False, message=validation_message(exc))

    logger.exception("Action failed: %s", fallback)
    return ActionResult(success=False, message=fallback)

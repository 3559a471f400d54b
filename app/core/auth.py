# app/core/auth.py
import uuid

from fastapi import Depends, HTTPException, Request, Response, status
from pydantic import ValidationError

from app.core.actions import ActionError
from app.core.config import get_settings
from app.core.security import TokenError, decode_token
from app.schemas.auth import SessionClaims

settings = get_settings()

AUTH_COOKIE = "_auth_token"
VERIFICATION_COOKIE = "_auth_verification"

SESSION_MAX_AGE = settings.SESSION_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
VERIFICATION_MAX_AGE = settings.OTP_EXPIRE_MINUTES * 60


# ----- Cookies -----


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        AUTH_COOKIE,
        token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )


def set_verification_cookie(response: Response, user_id: uuid.UUID) -> None:
    """
    Remember which user is mid-verification. Holds the raw user id.
    """
    response.set_cookie(
        VERIFICATION_COOKIE,
        str(user_id),
        max_age=VERIFICATION_MAX_AGE,
        httponly=True,
        samesite="lax",
    )


def clear_verification_cookie(response: Response) -> None:
    response.delete_cookie(VERIFICATION_COOKIE)


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(AUTH_COOKIE)
    response.delete_cookie(VERIFICATION_COOKIE)


# ----- Session decoding -----


def read_session_token(token: str | None) -> SessionClaims | None:
    """
    Decode a session token.

    Missing, expired, malformed and purpose-tagged (reset) tokens are all
    treated the same way: None.
    """
    if not token:
        return None
    try:
        payload = decode_token(token)
    except TokenError:
        return None
    if payload.get("purpose"):
        return None
    try:
        return SessionClaims.model_validate(payload)
    except ValidationError:
        return None


def get_session_claims(request: Request) -> SessionClaims | None:
    """
    FastAPI dependency: claims from the `_auth_token` cookie, or None for guests.
    """
    return read_session_token(request.cookies.get(AUTH_COOKIE))


def ensure_admin(request: Request) -> SessionClaims:
    """
    Admin check used inside form actions.

    Raises ActionError so the caller receives the uniform failure shape.
    """
    token = request.cookies.get(AUTH_COOKIE)
    if not token:
        raise ActionError("Unauthorized")
    claims = read_session_token(token)
    if claims is None:
        raise ActionError("Invalid token")
    if claims.role != "admin":
        raise ActionError("Admin access required")
    return claims


def require_auth(
    claims: SessionClaims | None = Depends(get_session_claims),
) -> SessionClaims:
    """
    Enforce authentication on page views.

    Raises:
        HTTPException(401): if no valid session cookie.
    """
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return claims


def require_admin(claims: SessionClaims = Depends(require_auth)) -> SessionClaims:
    """
    Enforce admin role on page views.

    Raises:
        HTTPException(403): if role is not admin.
    """
    if claims.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return claims

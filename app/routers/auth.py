# app/routers/auth.py
from fastapi import APIRouter, Cookie, Depends, Form, Response
from sqlmodel import Session

from app.core.actions import action_failure
from app.core.auth import (
    VERIFICATION_COOKIE,
    clear_auth_cookies,
    clear_verification_cookie,
    get_session_claims,
    set_session_cookie,
    set_verification_cookie,
)
from app.database import get_session
from app.repositories.temp_credential_repo import TemporaryCredentialRepository
from app.repositories.user_repo import UserRepository
from app.schemas.auth import (
    EmailForm,
    LoginForm,
    RegisterForm,
    ResetPasswordForm,
    SessionClaims,
    SessionInfo,
    VerifyOtpForm,
)
from app.schemas.common import ActionResult
from app.services.auth_service import AuthService
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AuthService(
    UserRepository(),
    TemporaryCredentialRepository(),
    NotificationService(),
)

# Form fields are optional at the HTTP layer so that missing fields surface
# as `{success: false, message}` from schema validation instead of a 422.


@router.post("/register", response_model=ActionResult)
def register(
    response: Response,
    name: str | None = Form(None),
    email: str | None = Form(None),
    phone: str | None = Form(None),
    password: str | None = Form(None),
    session: Session = Depends(get_session),
):
    """
    Create an unverified account and email a 6-digit OTP.

    Sets `_auth_verification` (user id, 10 minutes) for the verify step.
    """
    try:
        form = RegisterForm(name=name, email=email, phone=phone, password=password)
        user = service.register(session, form)
    except Exception as exc:
        return action_failure(exc, "Registration failed. Try again.")

    set_verification_cookie(response, user.id)
    return ActionResult(success=True, message="OTP sent successfully")


@router.post("/verify-otp", response_model=ActionResult)
def verify_otp(
    response: Response,
    pin: str | None = Form(None),
    pending_user_id: str | None = Cookie(None, alias=VERIFICATION_COOKIE),
    session: Session = Depends(get_session),
):
    """
    Activate the pending user and log them in.
    """
    try:
        form = VerifyOtpForm(pin=pin)
        token = service.verify_otp(session, pending_user_id, form)
    except Exception as exc:
        return action_failure(exc, "OTP verification failed")

    set_session_cookie(response, token)
    clear_verification_cookie(response)
    return ActionResult(success=True)


@router.post("/resend-otp", response_model=ActionResult)
def resend_otp(
    response: Response,
    pending_user_id: str | None = Cookie(None, alias=VERIFICATION_COOKIE),
    session: Session = Depends(get_session),
):
    """Send a fresh OTP to the user in the verification cookie."""
    try:
        user = service.resend_otp(session, pending_user_id)
    except Exception as exc:
        return action_failure(exc, "Failed to send OTP")

    set_verification_cookie(response, user.id)
    return ActionResult(success=True, message="OTP sent successfully")


@router.post("/login", response_model=ActionResult)
def login(
    response: Response,
    email: str | None = Form(None),
    password: str | None = Form(None),
    session: Session = Depends(get_session),
):
    """Password login for verified, active accounts."""
    try:
        form = LoginForm(email=email, password=password)
        token = service.login(session, form)
    except Exception as exc:
        return action_failure(exc, "Login failed")

    set_session_cookie(response, token)
    return ActionResult(success=True)


@router.post("/login-otp", response_model=ActionResult)
def login_with_otp(
    response: Response,
    email: str | None = Form(None),
    session: Session = Depends(get_session),
):
    """
    Passwordless login: email an OTP, then finish at /verify-otp.
    """
    try:
        form = EmailForm(email=email)
        user = service.request_login_otp(session, form)
    except Exception as exc:
        return action_failure(exc, "Failed to send OTP")

    set_verification_cookie(response, user.id)
    return ActionResult(success=True)


@router.post("/forgot-password", response_model=ActionResult)
def forgot_password(
    email: str | None = Form(None),
    session: Session = Depends(get_session),
):
    """Email a one-hour password-reset link."""
    try:
        form = EmailForm(email=email)
        service.forgot_password(session, form)
    except Exception as exc:
        return action_failure(exc, "Failed to send reset link")

    return ActionResult(success=True)


@router.post("/reset-password", response_model=ActionResult)
def reset_password(
    response: Response,
    password: str | None = Form(None),
    token: str | None = Form(None),
    session: Session = Depends(get_session),
):
    """
    Set a new password from a reset link and log the user in.
    """
    try:
        form = ResetPasswordForm(password=password, token=token)
        session_token = service.reset_password(session, form)
    except Exception as exc:
        return action_failure(exc, "Password reset failed")

    set_session_cookie(response, session_token)
    return ActionResult(success=True)


@router.get("/me", response_model=SessionInfo)
def read_session(
    claims: SessionClaims | None = Depends(get_session_claims),
    session: Session = Depends(get_session),
):
    """
    Who is logged in. Any cookie problem reads as a guest.
    """
    return service.get_session_info(session, claims)


@router.post("/logout", response_model=ActionResult)
def logout(response: Response):
    """
    Drop both auth cookies. Issued tokens stay valid until they expire.
    """
    clear_auth_cookies(response)
    return ActionResult(success=True)

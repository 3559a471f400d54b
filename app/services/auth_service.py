# app/services/auth_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.actions import ActionError
from app.core.config import get_settings
from app.core.security import (
    PASSWORD_ALGO,
    RESET_PURPOSE,
    TokenError,
    create_reset_token,
    create_session_token,
    decode_token,
    generate_otp,
    get_password_hash,
    hash_token,
    otp_expiry,
    reset_token_expiry,
    verify_password,
)
from app.models.user import TemporaryCredential, User, utcnow
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
from app.schemas.user import UserRead
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)
settings = get_settings()

PENDING_EXPIRED = "Session expired. Please register again."


def _parse_user_id(raw: object) -> uuid.UUID | None:
    if not raw:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


class AuthService:
    """
    Registration, verification, login and password-reset flows.

    State per user:
        unregistered -> pending verification (inactive) -> active
        active -> (password reset) -> active with a fresh credential

    Methods raise ActionError for business-rule failures; routers turn them
    into the uniform `{success, message}` shape and own all cookie writes.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        temp_repo: TemporaryCredentialRepository,
        notifier: NotificationService,
    ):
        self.user_repo = user_repo
        self.temp_repo = temp_repo
        self.notifier = notifier

    # ----- Helpers -----

    @staticmethod
    def issue_session_token(user: User) -> str:
        return create_session_token(
            user_id=str(user.id),
            email=user.email,
            name=user.name,
            is_active=user.is_active,
            role=user.role,
        )

    def _issue_otp(self, session: Session, user: User) -> None:
        """
        Persist a fresh 6-digit OTP for the user and email it.

        Earlier OTP rows are left in place; any live one still verifies.
        """
        otp = generate_otp()
        self.temp_repo.create(
            session,
            TemporaryCredential(
                user_id=user.id,
                otp_code=otp,
                expires_at=otp_expiry(),
            ),
        )
        self.notifier.send_otp(user.email, otp)
        logger.info("OTP issued for user %s", user.id)

    def _get_verified_user(self, session: Session, email: str, message: str) -> User:
        user = self.user_repo.get_by_email(session, email)
        if not user or not user.is_email_verified or not user.is_active:
            raise ActionError(message)
        return user

    # ----- Registration / verification -----

    def register(self, session: Session, form: RegisterForm) -> User:
        """
        Create an inactive user + credential and send the first OTP.

        Returns the pending user; the caller stores its id in the
        verification cookie.

        An email whose earlier signup never got verified (e.g. the OTP mail
        failed) may register again: the pending row is taken over with the
        new details.
        """
        existing = self.user_repo.get_by_email(session, form.email)
        if existing and (existing.is_email_verified or existing.is_active):
            raise ActionError("User already exists")

        phone_owner = self.user_repo.get_by_phone(session, form.phone)
        if phone_owner and (existing is None or phone_owner.id != existing.id):
            raise ActionError("Phone number already registered")

        password_hash = get_password_hash(form.password)
        if existing:
            user = self.user_repo.restart_pending(
                session,
                existing,
                name=form.name,
                phone=form.phone,
                password_hash=password_hash,
                password_algo=PASSWORD_ALGO,
            )
            logger.info("Restarted pending signup for user %s", user.id)
        else:
            user = self.user_repo.create_with_credential(
                session,
                User(name=form.name, email=form.email, phone=form.phone),
                password_hash=password_hash,
                password_algo=PASSWORD_ALGO,
            )
            logger.info("Registered user %s (pending verification)", user.id)

        self._issue_otp(session, user)
        return user

    def verify_otp(
        self,
        session: Session,
        pending_user_id: str | None,
        form: VerifyOtpForm,
    ) -> str:
        """
        Check the OTP for the pending user, activate them and return a
        session token.
        """
        user_id = _parse_user_id(pending_user_id)
        if user_id is None:
            raise ActionError(PENDING_EXPIRED)

        record = self.temp_repo.find_live_otp(
            session, user_id, form.pin, settings.OTP_MAX_ATTEMPTS
        )
        if record is None:
            self.temp_repo.record_failed_otp_attempt(session, user_id)
            raise ActionError("Invalid or expired OTP")

        user = self.user_repo.get_by_id(session, user_id)
        if user is None:
            raise ActionError(PENDING_EXPIRED)

        user.is_active = True
        user.is_email_verified = True
        user.updated_at = utcnow()
        session.add(user)
        self.temp_repo.delete_otp(session, user.id, form.pin)
        session.commit()
        session.refresh(user)

        logger.info("User %s verified", user.id)
        return self.issue_session_token(user)

    def resend_otp(self, session: Session, pending_user_id: str | None) -> User:
        user_id = _parse_user_id(pending_user_id)
        user = self.user_repo.get_by_id(session, user_id) if user_id else None
        if user is None:
            raise ActionError(PENDING_EXPIRED)
        self._issue_otp(session, user)
        return user

    # ----- Login -----

    def login(self, session: Session, form: LoginForm) -> str:
        """
        Password login. Unverified or inactive accounts are refused before
        the password is even looked at.
        """
        user = self._get_verified_user(
            session, form.email, "Account not found or not verified"
        )

        credential = self.user_repo.get_credential(session, user.id)
        if credential is None or not verify_password(
            form.password, credential.password_hash
        ):
            logger.info("Failed password login for user %s", user.id)
            raise ActionError("Invalid password")

        return self.issue_session_token(user)

    def request_login_otp(self, session: Session, form: EmailForm) -> User:
        """
        OTP login: send a fresh code to a verified, active user.
        """
        user = self._get_verified_user(
            session, form.email, "User not found or account not verified"
        )
        self._issue_otp(session, user)
        return user

    # ----- Password reset -----

    def forgot_password(self, session: Session, form: EmailForm) -> None:
        user = self._get_verified_user(
            session, form.email, "No verified account found with this email"
        )

        token = create_reset_token(user_id=str(user.id), email=user.email)
        self.temp_repo.create(
            session,
            TemporaryCredential(
                user_id=user.id,
                token_hash=hash_token(token),
                expires_at=reset_token_expiry(),
            ),
        )
        self.notifier.send_password_reset(user.email, token)
        logger.info("Password reset requested for user %s", user.id)

    def reset_password(self, session: Session, form: ResetPasswordForm) -> str:
        """
        Replace the password of the token's user and return a new session
        token (auto-login).

        The token must verify, carry the reset purpose, and match a live
        stored hash.
        """
        try:
            payload = decode_token(form.token)
        except TokenError:
            raise ActionError("Invalid or expired token")

        if payload.get("purpose") != RESET_PURPOSE:
            raise ActionError("Invalid reset token")

        user_id = _parse_user_id(payload.get("user_id"))
        if user_id is None:
            raise ActionError("Invalid reset token")

        token_hash = hash_token(form.token)
        if self.temp_repo.find_live_token(session, user_id, token_hash) is None:
            raise ActionError("Reset token expired or used")

        user = self.user_repo.get_by_id(session, user_id)
        if user is None:
            raise ActionError("Reset token expired or used")

        self.user_repo.replace_password(
            session,
            user_id,
            password_hash=get_password_hash(form.password),
            password_algo=PASSWORD_ALGO,
        )
        self.temp_repo.delete_token(session, token_hash)
        session.commit()
        session.refresh(user)

        logger.info("Password reset completed for user %s", user.id)
        return self.issue_session_token(user)

    # ----- Session -----

    def get_session_info(
        self,
        session: Session,
        claims: SessionClaims | None,
    ) -> SessionInfo:
        """
        Resolve the cookie claims against the database; inactive or deleted
        users read as unauthenticated.
        """
        if claims is None:
            return SessionInfo(is_authenticated=False)

        user = self.user_repo.get_by_id(session, claims.user_id)
        if not user or not user.is_active:
            return SessionInfo(is_authenticated=False)

        return SessionInfo(
            is_authenticated=True,
            user=UserRead.model_validate(user),
        )

# app/repositories/temp_credential_repo.py
import uuid

from sqlmodel import Session, select

from app.models.user import TemporaryCredential, utcnow


class TemporaryCredentialRepository:
    """
    Data access layer for OTP codes and reset-token hashes.
    """

    def create(
        self,
        session: Session,
        temp: TemporaryCredential,
    ) -> TemporaryCredential:
        session.add(temp)
        session.commit()
        session.refresh(temp)
        return temp

    def find_live_otp(
        self,
        session: Session,
        user_id: uuid.UUID,
        otp_code: str,
        max_attempts: int,
    ) -> TemporaryCredential | None:
        """
        Matching, non-expired OTP row that has not hit the attempt limit.
        """
        stmt = select(TemporaryCredential).where(
            TemporaryCredential.user_id == user_id,
            TemporaryCredential.otp_code == otp_code,
            TemporaryCredential.expires_at > utcnow(),
            TemporaryCredential.attempts < max_attempts,
        )
        return session.exec(stmt).first()

    def record_failed_otp_attempt(self, session: Session, user_id: uuid.UUID) -> None:
        """Bump `attempts` on every live OTP row of the user."""
        stmt = select(TemporaryCredential).where(
            TemporaryCredential.user_id == user_id,
            TemporaryCredential.otp_code.is_not(None),
            TemporaryCredential.expires_at > utcnow(),
        )
        for row in session.exec(stmt).all():
            row.attempts += 1
            row.updated_at = utcnow()
            session.add(row)
        session.commit()

    def delete_otp(self, session: Session, user_id: uuid.UUID, otp_code: str) -> None:
        """Does not commit."""
        stmt = select(TemporaryCredential).where(
            TemporaryCredential.user_id == user_id,
            TemporaryCredential.otp_code == otp_code,
        )
        for row in session.exec(stmt).all():
            session.delete(row)

    def find_live_token(
        self,
        session: Session,
        user_id: uuid.UUID,
        token_hash: str,
    ) -> TemporaryCredential | None:
        stmt = select(TemporaryCredential).where(
            TemporaryCredential.user_id == user_id,
            TemporaryCredential.token_hash == token_hash,
            TemporaryCredential.expires_at > utcnow(),
        )
        return session.exec(stmt).first()

    def delete_token(self, session: Session, token_hash: str) -> None:
        """Does not commit."""
        stmt = select(TemporaryCredential).where(
            TemporaryCredential.token_hash == token_hash
        )
        for row in session.exec(stmt).all():
            session.delete(row)

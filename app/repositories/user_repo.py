# app/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from app.models.user import User, UserCredential, utcnow


class UserRepository:
    """
    Data access layer for User and UserCredential.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Users -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def get_by_phone(self, session: Session, phone: str) -> User | None:
        stmt = select(User).where(User.phone == phone)
        return session.exec(stmt).first()

    def create_with_credential(
        self,
        session: Session,
        user: User,
        password_hash: str,
        password_algo: str,
    ) -> User:
        """
        Insert a user and its credential in one transaction.
        """
        session.add(user)
        session.flush()
        session.add(
            UserCredential(
                user_id=user.id,
                password_hash=password_hash,
                password_algo=password_algo,
            )
        )
        session.commit()
        session.refresh(user)
        return user

    def restart_pending(
        self,
        session: Session,
        user: User,
        name: str,
        phone: str,
        password_hash: str,
        password_algo: str,
    ) -> User:
        """
        Overwrite an unverified user's details and credential in one commit.
        """
        user.name = name
        user.phone = phone
        user.updated_at = utcnow()
        session.add(user)
        self.replace_password(session, user.id, password_hash, password_algo)
        session.commit()
        session.refresh(user)
        return user

    # ----- Credentials -----

    def get_credential(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> UserCredential | None:
        stmt = select(UserCredential).where(UserCredential.user_id == user_id)
        return session.exec(stmt).first()

    def replace_password(
        self,
        session: Session,
        user_id: uuid.UUID,
        password_hash: str,
        password_algo: str,
    ) -> None:
        """
        Replace the stored hash wholesale. Does not commit; the caller
        finishes the reset transaction.
        """
        credential = self.get_credential(session, user_id)
        if credential is None:
            credential = UserCredential(user_id=user_id, password_hash=password_hash)
        credential.password_hash = password_hash
        credential.password_algo = password_algo
        credential.updated_at = utcnow()
        session.add(credential)

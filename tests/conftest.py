"""Test configuration and fixtures.

Runs the app against an in-memory SQLite database (shared through a static
pool) and captures outgoing email instead of talking to SMTP.
"""

import os
import re
from urllib.parse import parse_qs, urlparse

# Set env BEFORE importing application modules (settings are cached)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["APP_URL"] = "http://shop.test"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from app.core import email_client
from app.database import engine
from app.main import app
from tests.factories import make_user, session_token_for


@pytest.fixture(autouse=True)
def create_test_db():
    """Fresh schema for every test."""
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def db():
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


class Outbox(list):
    """Captured emails: dicts of to_email / subject / text_body / html_body."""

    def last_otp(self) -> str:
        match = re.search(r"\b(\d{6})\b", self[-1]["text_body"])
        assert match, self[-1]["text_body"]
        return match.group(1)

    def last_reset_token(self) -> str:
        url = re.search(r"(https?://\S+)", self[-1]["text_body"]).group(1)
        return parse_qs(urlparse(url).query)["token"][0]


@pytest.fixture(autouse=True)
def outbox(monkeypatch) -> Outbox:
    sent = Outbox()

    def fake_send_email(to_email, subject, text_body, html_body=None):
        sent.append(
            {
                "to_email": to_email,
                "subject": subject,
                "text_body": text_body,
                "html_body": html_body,
            }
        )

    monkeypatch.setattr(email_client, "send_email", fake_send_email)
    return sent


@pytest.fixture()
def admin_client(client: TestClient, db: Session) -> TestClient:
    admin = make_user(db, email="admin@example.com", phone="1112223333", role="admin")
    client.cookies.set("_auth_token", session_token_for(admin.id, role="admin", email=admin.email))
    return client


@pytest.fixture()
def user_client(client: TestClient, db: Session) -> TestClient:
    user = make_user(db)
    client.cookies.set("_auth_token", session_token_for(user.id, email=user.email))
    return client

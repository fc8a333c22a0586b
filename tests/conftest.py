"""Shared fixtures: in-memory SQLite database, fixed clock and fake transports."""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_TIMEZONE"] = "Asia/Shanghai"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from blog_notifications.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from blog_notifications.domain.entities import Recipient  # noqa: E402
from blog_notifications.infrastructure import database  # noqa: E402
from blog_notifications.infrastructure.models import UserModel  # noqa: E402

SHANGHAI = ZoneInfo("Asia/Shanghai")


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Return an aware datetime in the application timezone."""

    return datetime(year, month, day, hour, minute, tzinfo=SHANGHAI)


class FixedClock:
    """Clock whose reading only changes when a test moves it."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeEmailSender:
    """Record every email instead of calling SendGrid."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.sent: list[tuple[str, str, str]] = []
        self.recipients: list[Recipient] = []

    def __call__(self, recipient: Recipient, subject: str, html_content: str) -> bool:
        self.recipients.append(recipient)
        self.sent.append((subject, html_content, recipient.email))
        if self.error is not None:
            raise self.error
        return self.result


class RecordingPublisher:
    def __init__(self) -> None:
        self.dispatched = []

    def dispatch(self, notification) -> None:
        self.dispatched.append(notification)


@pytest.fixture()
def session():
    database.initialize_database()
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
        database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture()
def make_user(session):
    """Insert a user row and return its id."""

    counter = {"value": 0}

    def _make_user(
        *,
        email: str | None = "reader@example.com",
        display_name: str | None = "Reader",
        role: str = "user",
        status: str = "active",
    ) -> int:
        counter["value"] += 1
        model = UserModel(
            username=f"user{counter['value']}",
            display_name=display_name,
            email=email,
            role=role,
            status=status,
        )
        session.add(model)
        session.commit()
        return model.id

    return _make_user


@pytest.fixture()
def clock() -> FixedClock:
    # Monday 2024-01-15 10:00 in Asia/Shanghai
    return FixedClock(local(2024, 1, 15, 10, 0))


@pytest.fixture()
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()

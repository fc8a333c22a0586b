"""Tests for the digest sweep and queue maintenance."""

import time

import pytest

from blog_notifications.application.use_cases.digests import DigestDispatcher, SweepResult
from blog_notifications.application.use_cases.notification_preferences import (
    update_preferences,
)
from blog_notifications.application.use_cases.notifications import (
    NotificationEngine,
    delete_notification,
)
from blog_notifications.domain.entities import (
    DigestType,
    NotificationEvent,
    NotificationType,
)
from blog_notifications.infrastructure.models import DigestQueueEntryModel, NotificationModel
from conftest import FakeEmailSender, FixedClock, RecordingPublisher


@pytest.fixture()
def queue_notification(session, clock):
    engine = NotificationEngine(
        session,
        clock=clock,
        email_sender=FakeEmailSender(),
        publisher=RecordingPublisher(),
    )

    def _queue(user_id: int, title: str):
        return engine.deliver(
            NotificationEvent(
                user_id=user_id,
                type=NotificationType.INTERACTION,
                subtype="comment",
                title=title,
            )
        )

    return _queue


@pytest.fixture()
def daily_user(session, make_user):
    def _daily_user(**kwargs) -> int:
        user_id = make_user(**kwargs)
        update_preferences(session, user_id, {"interaction": {"frequency": "daily"}})
        return user_id

    return _daily_user


def make_dispatcher(session, clock, sender, **kwargs) -> DigestDispatcher:
    sweep_clock = FixedClock(clock.now)
    sweep_clock.advance(days=1)
    return DigestDispatcher(session, clock=sweep_clock, email_sender=sender, **kwargs)


def test_one_email_per_user_with_newest_first(session, daily_user, queue_notification, clock):
    user_id = daily_user(email="digest@example.com")
    first = queue_notification(user_id, "First comment")
    clock.advance(minutes=5)
    second = queue_notification(user_id, "Second comment")
    sender = FakeEmailSender()

    result = make_dispatcher(session, clock, sender).run_sweep(DigestType.DAILY)

    assert result == SweepResult(processed=2, failed=0)
    assert len(sender.sent) == 1
    subject, html_content, recipient = sender.sent[0]
    assert recipient == "digest@example.com"
    assert [item.name for item in sender.recipients] == ["Reader"]
    assert "2 new notifications" in subject
    assert html_content.index("Second comment") < html_content.index("First comment")

    session.expire_all()
    rows = session.query(DigestQueueEntryModel).all()
    assert all(row.is_sent and row.sent_at is not None for row in rows)
    for notification in (first, second):
        assert session.get(NotificationModel, notification.id).is_email_sent is True


def test_sweep_is_idempotent(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    queue_notification(user_id, "Only comment")
    sender = FakeEmailSender()
    dispatcher = make_dispatcher(session, clock, sender)

    assert dispatcher.run_sweep("daily") == SweepResult(processed=1, failed=0)
    assert dispatcher.run_sweep("daily") == SweepResult(processed=0, failed=0)
    assert len(sender.sent) == 1


def test_entries_are_not_due_before_schedule(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    queue_notification(user_id, "Too early")
    sender = FakeEmailSender()

    dispatcher = DigestDispatcher(session, clock=clock, email_sender=sender)

    assert dispatcher.run_sweep("daily") == SweepResult()
    assert sender.sent == []


def test_other_digest_type_is_untouched(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    queue_notification(user_id, "Daily only")

    result = make_dispatcher(session, clock, FakeEmailSender()).run_sweep("weekly")

    assert result == SweepResult()


def test_groups_are_independent(session, daily_user, queue_notification, clock):
    good_user = daily_user(email="good@example.com")
    silent_user = daily_user(email=None)
    queue_notification(good_user, "For good user")
    queue_notification(silent_user, "For silent user")
    queue_notification(silent_user, "Another for silent user")
    sender = FakeEmailSender()

    result = make_dispatcher(session, clock, sender).run_sweep("daily")

    assert result == SweepResult(processed=1, failed=2)
    assert [recipient for _, _, recipient in sender.sent] == ["good@example.com"]

    session.expire_all()
    pending = session.query(DigestQueueEntryModel).filter_by(is_sent=False).all()
    assert {row.user_id for row in pending} == {silent_user}
    assert all(row.retry_count == 1 for row in pending)
    assert all(row.error_message == "Recipient has no email address" for row in pending)


def test_failed_send_is_retried_next_sweep(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    notification = queue_notification(user_id, "Retry me")
    sender = FakeEmailSender(result=False)
    dispatcher = make_dispatcher(session, clock, sender)

    assert dispatcher.run_sweep("daily") == SweepResult(processed=0, failed=1)
    session.expire_all()
    assert session.get(NotificationModel, notification.id).is_email_sent is False

    sender.result = True
    assert dispatcher.run_sweep("daily") == SweepResult(processed=1, failed=0)

    session.expire_all()
    row = session.query(DigestQueueEntryModel).one()
    assert row.is_sent is True
    assert row.retry_count == 1
    assert row.error_message is None


def test_transport_exception_counts_as_failure(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    queue_notification(user_id, "Boom")
    sender = FakeEmailSender(error=ConnectionError("connection reset"))

    result = make_dispatcher(session, clock, sender).run_sweep("daily")

    assert result == SweepResult(processed=0, failed=1)
    session.expire_all()
    assert session.query(DigestQueueEntryModel).one().error_message == "connection reset"


def test_slow_send_times_out(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    queue_notification(user_id, "Slow")

    def slow_sender(recipient, subject, html_content):
        time.sleep(0.5)
        return True

    dispatcher = make_dispatcher(session, clock, slow_sender, send_timeout=0.05)

    assert dispatcher.run_sweep("daily") == SweepResult(processed=0, failed=1)
    session.expire_all()
    assert "timed out" in session.query(DigestQueueEntryModel).one().error_message


def test_deleted_notifications_are_skipped(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    kept = queue_notification(user_id, "Keep me")
    dropped = queue_notification(user_id, "Drop me")
    delete_notification(session, dropped.id, user_id=user_id)
    sender = FakeEmailSender()

    result = make_dispatcher(session, clock, sender).run_sweep("daily")

    assert result == SweepResult(processed=1, failed=0)
    _, html_content, _ = sender.sent[0]
    assert "Keep me" in html_content
    assert "Drop me" not in html_content
    session.expire_all()
    assert session.get(NotificationModel, kept.id).is_email_sent is True


def test_cleanup_sent_and_stats(session, daily_user, queue_notification, clock):
    user_id = daily_user()
    queue_notification(user_id, "Old news")
    queue_notification(user_id, "Also old")
    dispatcher = make_dispatcher(session, clock, FakeEmailSender())
    dispatcher.run_sweep("daily")
    queue_notification(user_id, "Still pending")

    assert dispatcher.stats() == {
        "daily": {"pending": 1, "sent": 2},
        "weekly": {"pending": 0, "sent": 0},
    }

    assert dispatcher.cleanup_sent(days=30) == 0
    dispatcher.clock.advance(days=31)
    assert dispatcher.cleanup_sent(days=30) == 2
    assert dispatcher.stats()["daily"] == {"pending": 1, "sent": 0}


def test_cleanup_rejects_non_positive_window(session):
    with pytest.raises(ValueError):
        DigestDispatcher(session, email_sender=FakeEmailSender()).cleanup_sent(days=0)

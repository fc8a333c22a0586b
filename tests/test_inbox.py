"""Tests for the inbox operations and the retention sweep."""

import pytest

from blog_notifications.application.use_cases.notifications import (
    MAX_PAGE_SIZE,
    NotificationEngine,
    NotificationNotFoundError,
    cleanup_old_notifications,
    delete_notification,
    get_unread_count,
    list_notifications,
    mark_all_as_read,
    mark_as_read,
    notify_interaction,
    notify_system,
)
from blog_notifications.application.use_cases.notification_preferences import (
    update_preferences,
)
from blog_notifications.domain.entities import NotificationType
from blog_notifications.infrastructure.models import DigestQueueEntryModel, NotificationModel
from conftest import local


@pytest.fixture()
def engine(session, clock, email_sender, publisher):
    return NotificationEngine(session, clock=clock, email_sender=email_sender, publisher=publisher)


@pytest.fixture()
def inbox(session, make_user, engine, clock):
    """A user with three interactions and two system notices, one minute apart."""

    user_id = make_user()
    created = []
    for index in range(3):
        created.append(
            notify_interaction(
                session, user_id=user_id, subtype="like", title=f"Like {index}", engine=engine
            )
        )
        clock.advance(minutes=1)
    for index in range(2):
        created.append(notify_system(session, user_id=user_id, title=f"Notice {index}", engine=engine))
        clock.advance(minutes=1)
    return user_id, created


def test_list_is_newest_first_and_paginated(session, inbox):
    user_id, created = inbox

    page = list_notifications(session, user_id, page=1, limit=2)

    assert [item.title for item in page.items] == ["Notice 1", "Notice 0"]
    assert (page.total, page.total_pages) == (5, 3)

    last = list_notifications(session, user_id, page=3, limit=2)
    assert [item.title for item in last.items] == ["Like 0"]


def test_list_clamps_limit_and_page(session, inbox):
    user_id, _ = inbox

    page = list_notifications(session, user_id, page=0, limit=500)

    assert page.page == 1
    assert page.limit == MAX_PAGE_SIZE
    assert len(page.items) == 5


def test_list_filters(session, inbox):
    user_id, created = inbox
    mark_as_read(session, created[0].id, user_id=user_id)

    system_only = list_notifications(session, user_id, notification_type="system")
    unread = list_notifications(session, user_id, is_read=False)

    assert {item.type for item in system_only.items} == {NotificationType.SYSTEM}
    assert system_only.total == 2
    assert unread.total == 4


def test_unread_count_by_type(session, inbox):
    user_id, created = inbox
    mark_as_read(session, created[3].id, user_id=user_id)

    counts = get_unread_count(session, user_id)

    assert counts.total == 4
    assert counts.by_type == {"system": 1, "interaction": 3}


def test_mark_as_read_checks_ownership(session, inbox, make_user):
    user_id, created = inbox
    stranger = make_user(email="stranger@example.com")

    with pytest.raises(NotificationNotFoundError):
        mark_as_read(session, created[0].id, user_id=stranger)

    mark_as_read(session, created[0].id, user_id=user_id)
    session.expire_all()
    row = session.get(NotificationModel, created[0].id)
    assert row.is_read is True
    assert row.read_at is not None


def test_mark_all_as_read_by_type(session, inbox):
    user_id, _ = inbox

    assert mark_all_as_read(session, user_id, notification_type="interaction") == 3
    assert get_unread_count(session, user_id).by_type == {"system": 2, "interaction": 0}
    assert mark_all_as_read(session, user_id) == 2
    assert get_unread_count(session, user_id).total == 0


def test_deleted_notifications_disappear(session, inbox):
    user_id, created = inbox

    delete_notification(session, created[1].id, user_id=user_id)

    titles = [item.title for item in list_notifications(session, user_id).items]
    assert "Like 1" not in titles
    assert get_unread_count(session, user_id).total == 4
    with pytest.raises(NotificationNotFoundError):
        delete_notification(session, created[1].id, user_id=user_id)
    with pytest.raises(NotificationNotFoundError):
        mark_as_read(session, created[1].id, user_id=user_id)


def test_cleanup_old_notifications(session, make_user, engine, clock):
    user_id = make_user()
    update_preferences(session, user_id, {"system": {"frequency": "daily"}})
    notify_system(session, user_id=user_id, title="Ancient", engine=engine)
    clock.now = local(2024, 4, 1, 10, 0)
    notify_system(session, user_id=user_id, title="Recent", engine=engine)

    deleted = cleanup_old_notifications(session, days=30, now=local(2024, 4, 10, 10, 0))

    assert deleted == 1
    assert [row.title for row in session.query(NotificationModel).all()] == ["Recent"]
    assert session.query(DigestQueueEntryModel).count() == 1


def test_cleanup_rejects_non_positive_window(session):
    with pytest.raises(ValueError):
        cleanup_old_notifications(session, days=0)

"""Decide how a notification event reaches its user and carry it out."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from sqlalchemy.orm import Session

from blog_notifications.application.use_cases.notification_preferences import get_preferences
from blog_notifications.domain.digest_schedule import next_digest_run
from blog_notifications.domain.do_not_disturb import should_send_now
from blog_notifications.domain.entities import (
    DeliveryOptions,
    DigestQueueEntry,
    DigestType,
    InteractionSubtype,
    Notification,
    NotificationChannel,
    NotificationEvent,
    NotificationFrequency,
    NotificationPreference,
    NotificationSubtype,
    NotificationType,
    coerce_subtype,
)
from blog_notifications.infrastructure.cache import PreferenceCache
from blog_notifications.infrastructure.email import (
    EmailSender,
    render_notification_email,
    send_email,
)
from blog_notifications.infrastructure.notifications import (
    InAppPublisher,
    notification_publisher,
)
from blog_notifications.infrastructure.repositories import (
    DigestQueueRepository,
    NotificationRepository,
    UserRepository,
)
from blog_notifications.utils import now_in_app_timezone, to_user_timezone

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_DIGEST_FREQUENCIES = {
    NotificationFrequency.DAILY: DigestType.DAILY,
    NotificationFrequency.WEEKLY: DigestType.WEEKLY,
}
_INTERACTION_SUBTYPES = {subtype.value for subtype in InteractionSubtype}


class NotificationEngine:
    """Turn producer events into stored notifications, emails and digest entries.

    ``deliver`` never raises: policy suppression returns ``None`` and delivery
    problems are logged so the action that triggered the event still succeeds.
    """

    def __init__(
        self,
        session: Session,
        *,
        clock: Clock = now_in_app_timezone,
        email_sender: EmailSender = send_email,
        publisher: InAppPublisher | None = notification_publisher,
        cache: PreferenceCache | None = None,
    ) -> None:
        self.session = session
        self.clock = clock
        self.email_sender = email_sender
        self.publisher = publisher
        self.cache = cache
        self.notifications = NotificationRepository(session)
        self.digest_queue = DigestQueueRepository(session)
        self.users = UserRepository(session)

    def deliver(
        self, event: NotificationEvent, options: DeliveryOptions | None = None
    ) -> Notification | None:
        options = options or DeliveryOptions()

        try:
            notification_type = NotificationType(event.type)
        except ValueError:
            logger.warning(
                "Rejected notification for user %s with unknown type %r",
                event.user_id,
                event.type,
            )
            return None
        subtype = coerce_subtype(event.subtype)

        try:
            preference = get_preferences(self.session, event.user_id, cache=self.cache)
        except Exception:
            self.session.rollback()
            logger.exception("Could not load notification preferences of user %s", event.user_id)
            return None

        settings = preference.settings_for(notification_type.value)
        frequency = NotificationFrequency(settings.frequency)
        if frequency is NotificationFrequency.OFF:
            logger.debug("%s notifications are off for user %s", notification_type.value, event.user_id)
            return None

        if self._is_subtype_muted(preference, notification_type, subtype):
            logger.debug(
                "%s notifications are off for user %s",
                getattr(subtype, "value", subtype),
                event.user_id,
            )
            return None

        now = self.clock()
        local_now = to_user_timezone(now, preference.do_not_disturb.timezone)
        want_email = (
            not options.skip_email
            and settings.email
            and should_send_now(preference.do_not_disturb, NotificationChannel.EMAIL, local_now)
        )
        want_in_app = not options.skip_in_app and settings.in_app

        if frequency is NotificationFrequency.REALTIME and not (want_in_app or want_email):
            logger.debug("No channel left for notification of user %s", event.user_id)
            return None

        try:
            notification = self.notifications.add(
                Notification(
                    id=None,
                    user_id=event.user_id,
                    type=notification_type,
                    subtype=subtype,
                    title=event.title,
                    content=event.content,
                    related_data=dict(event.related_data or {}),
                    is_in_app_sent=want_in_app,
                    is_email_sent=False,
                    created_at=now,
                )
            )
            if frequency is not NotificationFrequency.REALTIME:
                self._enqueue(notification, _DIGEST_FREQUENCIES[frequency], preference, local_now)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.exception("Could not store notification for user %s", event.user_id)
            return None

        if want_in_app:
            self._publish(notification)

        if (
            frequency is NotificationFrequency.REALTIME
            and want_email
            and self._send_email(notification)
        ):
            notification = replace(notification, is_email_sent=True)

        return notification

    @staticmethod
    def _is_subtype_muted(
        preference: NotificationPreference,
        notification_type: NotificationType,
        subtype: NotificationSubtype | str | None,
    ) -> bool:
        if notification_type is not NotificationType.INTERACTION or subtype is None:
            return False
        key = getattr(subtype, "value", subtype)
        if key not in _INTERACTION_SUBTYPES:
            return False
        return not preference.interaction.subtypes.get(key, True)

    def _publish(self, notification: Notification) -> None:
        if self.publisher is None:
            return
        try:
            self.publisher.dispatch(notification)
        except Exception:
            logger.exception("Realtime push of notification %s failed", notification.id)

    def _send_email(self, notification: Notification) -> bool:
        try:
            recipient = self.users.get(notification.user_id)
            if recipient is None or not recipient.email:
                logger.info(
                    "User %s has no email address; notification %s stays unsent",
                    notification.user_id,
                    notification.id,
                )
                return False

            subject, html_content = render_notification_email(notification, recipient)
            if not self.email_sender(recipient, subject, html_content):
                logger.warning("Email for notification %s was not delivered", notification.id)
                return False

            self.notifications.set_email_sent(notification.id, True)
        except Exception:
            self.session.rollback()
            logger.exception("Email for notification %s failed", notification.id)
            return False
        return True

    def _enqueue(
        self,
        notification: Notification,
        digest_type: DigestType,
        preference: NotificationPreference,
        local_now: datetime,
    ) -> None:
        scheduled_at = next_digest_run(local_now, digest_type, preference.digest_time)
        self.digest_queue.enqueue(
            DigestQueueEntry(
                id=None,
                user_id=notification.user_id,
                notification_id=notification.id,
                digest_type=digest_type,
                scheduled_at=scheduled_at,
                created_at=local_now,
            )
        )


__all__ = ["Clock", "NotificationEngine"]

"""Persistence helpers for the email digest queue."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from blog_notifications.domain.entities import DigestQueueEntry, DigestType, Notification
from blog_notifications.infrastructure.models import (
    DigestQueueEntryModel,
    NotificationModel,
)
from blog_notifications.infrastructure.repositories.notification_repository import (
    NotificationRepository,
)
from blog_notifications.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

_ERROR_MESSAGE_LIMIT = 500


class DigestQueueRepository:
    """Enqueue, select and settle digest queue rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def enqueue(self, entry: DigestQueueEntry) -> DigestQueueEntry:
        """Stage a queue row in the current transaction; the caller commits."""

        model = DigestQueueEntryModel(
            user_id=entry.user_id,
            notification_id=entry.notification_id,
            digest_type=DigestType(entry.digest_type).value,
            scheduled_at=ensure_app_naive_datetime(entry.scheduled_at),
            is_sent=False,
            retry_count=0,
            created_at=ensure_app_naive_datetime(entry.created_at or now_in_app_timezone()),
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def list_for_notification(self, notification_id: int) -> Sequence[DigestQueueEntry]:
        query = self.session.query(DigestQueueEntryModel).filter(
            DigestQueueEntryModel.notification_id == notification_id
        )
        return [self._to_entity(model) for model in query.all()]

    def list_due(
        self, digest_type: DigestType, now: datetime
    ) -> Sequence[tuple[DigestQueueEntry, Notification]]:
        """Return unsent rows of ``digest_type`` due at ``now`` with their live notification.

        Rows are ordered by user and, within a user, newest notification first.
        Rows whose notification was soft-deleted are left out.
        """

        query = (
            self.session.query(DigestQueueEntryModel, NotificationModel)
            .join(NotificationModel, DigestQueueEntryModel.notification_id == NotificationModel.id)
            .filter(DigestQueueEntryModel.digest_type == DigestType(digest_type).value)
            .filter(DigestQueueEntryModel.is_sent.is_(False))
            .filter(DigestQueueEntryModel.scheduled_at <= ensure_app_naive_datetime(now))
            .filter(NotificationModel.deleted_at.is_(None))
            .order_by(
                DigestQueueEntryModel.user_id,
                NotificationModel.created_at.desc(),
                NotificationModel.id.desc(),
            )
        )
        return [
            (self._to_entity(entry), NotificationRepository._to_entity(notification))
            for entry, notification in query.all()
        ]

    def mark_group_sent(
        self,
        queue_ids: Sequence[int],
        notification_ids: Sequence[int],
        *,
        sent_at: datetime,
    ) -> None:
        """Settle one user's digest in a single transaction.

        Queue rows are only flipped while still unsent, so a repeated call is a
        no-op for rows another sweep already settled.
        """

        naive_sent_at = ensure_app_naive_datetime(sent_at)
        try:
            self.session.query(DigestQueueEntryModel).filter(
                DigestQueueEntryModel.id.in_(list(queue_ids)),
                DigestQueueEntryModel.is_sent.is_(False),
            ).update(
                {
                    DigestQueueEntryModel.is_sent: True,
                    DigestQueueEntryModel.sent_at: naive_sent_at,
                    DigestQueueEntryModel.error_message: None,
                },
                synchronize_session=False,
            )
            self.session.query(NotificationModel).filter(
                NotificationModel.id.in_(list(notification_ids))
            ).update({NotificationModel.is_email_sent: True}, synchronize_session=False)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def record_failure(self, queue_ids: Sequence[int], reason: str) -> None:
        """Keep rows pending but remember why the last attempt failed."""

        if not queue_ids:
            return
        self.session.query(DigestQueueEntryModel).filter(
            DigestQueueEntryModel.id.in_(list(queue_ids)),
            DigestQueueEntryModel.is_sent.is_(False),
        ).update(
            {
                DigestQueueEntryModel.error_message: reason[:_ERROR_MESSAGE_LIMIT],
                DigestQueueEntryModel.retry_count: DigestQueueEntryModel.retry_count + 1,
            },
            synchronize_session=False,
        )
        self.session.commit()

    def delete_sent_before(self, cutoff: datetime) -> int:
        deleted = (
            self.session.query(DigestQueueEntryModel)
            .filter(
                DigestQueueEntryModel.is_sent.is_(True),
                DigestQueueEntryModel.sent_at < ensure_app_naive_datetime(cutoff),
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def count_by_status(self) -> dict[str, dict[str, int]]:
        rows = (
            self.session.query(
                DigestQueueEntryModel.digest_type,
                DigestQueueEntryModel.is_sent,
                func.count(DigestQueueEntryModel.id),
            )
            .group_by(DigestQueueEntryModel.digest_type, DigestQueueEntryModel.is_sent)
            .all()
        )
        stats = {digest_type.value: {"pending": 0, "sent": 0} for digest_type in DigestType}
        for digest_type, is_sent, count in rows:
            if digest_type not in stats:
                continue
            stats[digest_type]["sent" if is_sent else "pending"] = count
        return stats

    @staticmethod
    def _to_entity(model: DigestQueueEntryModel) -> DigestQueueEntry:
        return DigestQueueEntry(
            id=model.id,
            user_id=model.user_id,
            notification_id=model.notification_id,
            digest_type=DigestType(model.digest_type),
            scheduled_at=ensure_app_timezone(model.scheduled_at),
            is_sent=bool(model.is_sent),
            sent_at=ensure_app_timezone(model.sent_at),
            error_message=model.error_message,
            retry_count=model.retry_count or 0,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["DigestQueueRepository"]

"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from blog_notifications.domain.entities import (
    Notification,
    NotificationType,
    coerce_subtype,
)
from blog_notifications.infrastructure.models import (
    DigestQueueEntryModel,
    NotificationModel,
)
from blog_notifications.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int, *, include_deleted: bool = False) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None or (model.deleted_at is not None and not include_deleted):
            return None
        return self._to_entity(model)

    def list_for_user(
        self,
        user_id: int,
        *,
        offset: int = 0,
        limit: int | None = 20,
        notification_type: NotificationType | None = None,
        is_read: bool | None = None,
    ) -> tuple[Sequence[Notification], int]:
        """Return a page of live notifications and the total matching count."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.deleted_at.is_(None))
        )
        if notification_type is not None:
            query = query.filter(NotificationModel.type == NotificationType(notification_type).value)
        if is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(is_read))

        total = query.count()
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        ).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()], total

    def count_unread_by_type(self, user_id: int) -> dict[str, int]:
        rows = (
            self.session.query(NotificationModel.type, func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .filter(NotificationModel.deleted_at.is_(None))
            .group_by(NotificationModel.type)
            .all()
        )
        counts = {notification_type.value: 0 for notification_type in NotificationType}
        for notification_type, count in rows:
            if notification_type in counts:
                counts[notification_type] = count
        return counts

    def add(self, notification: Notification) -> Notification:
        """Stage ``notification`` in the current transaction; the caller commits."""

        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def set_email_sent(self, notification_id: int, sent: bool) -> None:
        self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        ).update({NotificationModel.is_email_sent: sent}, synchronize_session=False)
        self.session.commit()

    def mark_as_read(self, notification_id: int, *, user_id: int) -> bool:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
                NotificationModel.deleted_at.is_(None),
            )
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: self._now(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated > 0

    def mark_all_as_read(
        self, user_id: int, *, notification_type: NotificationType | None = None
    ) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id,
            NotificationModel.is_read.is_(False),
            NotificationModel.deleted_at.is_(None),
        )
        if notification_type is not None:
            query = query.filter(NotificationModel.type == NotificationType(notification_type).value)
        updated = query.update(
            {NotificationModel.is_read: True, NotificationModel.read_at: self._now()},
            synchronize_session=False,
        )
        self.session.commit()
        return updated

    def soft_delete(self, notification_id: int, *, user_id: int) -> bool:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
                NotificationModel.deleted_at.is_(None),
            )
            .update({NotificationModel.deleted_at: self._now()}, synchronize_session=False)
        )
        self.session.commit()
        return updated > 0

    def delete_created_before(self, cutoff: datetime) -> int:
        """Physically remove notifications older than ``cutoff`` and their queue rows."""

        naive_cutoff = ensure_app_naive_datetime(cutoff)
        expired_ids = self.session.query(NotificationModel.id).filter(
            NotificationModel.created_at < naive_cutoff
        )
        self.session.query(DigestQueueEntryModel).filter(
            DigestQueueEntryModel.notification_id.in_(expired_ids.scalar_subquery())
        ).delete(synchronize_session=False)
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.created_at < naive_cutoff)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @staticmethod
    def _now() -> datetime | None:
        return ensure_app_naive_datetime(now_in_app_timezone())

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.user_id = notification.user_id
        model.type = NotificationType(notification.type).value
        subtype = coerce_subtype(notification.subtype)
        model.subtype = getattr(subtype, "value", subtype)
        model.title = notification.title
        model.content = notification.content
        model.related_data = notification.related_data or None
        model.is_in_app_sent = notification.is_in_app_sent
        model.is_email_sent = notification.is_email_sent
        model.is_read = notification.is_read
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.deleted_at = ensure_app_naive_datetime(notification.deleted_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            subtype=coerce_subtype(model.subtype),
            title=model.title,
            content=model.content,
            related_data=dict(model.related_data or {}),
            is_in_app_sent=bool(model.is_in_app_sent),
            is_email_sent=bool(model.is_email_sent),
            is_read=bool(model.is_read),
            read_at=ensure_app_timezone(model.read_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]

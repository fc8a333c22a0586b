"""Persistence layer for notification preferences."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blog_notifications.domain.entities import (
    ChannelSettings,
    DigestTime,
    DoNotDisturbWindow,
    InteractionSettings,
    InteractionSubtype,
    NotificationFrequency,
    NotificationPreference,
)
from blog_notifications.infrastructure.models import NotificationPreferenceModel
from blog_notifications.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

logger = logging.getLogger(__name__)

_SUBTYPE_COLUMNS = {
    InteractionSubtype.COMMENT.value: "interaction_comment",
    InteractionSubtype.LIKE.value: "interaction_like",
    InteractionSubtype.FAVORITE.value: "interaction_favorite",
    InteractionSubtype.MENTION.value: "interaction_mention",
    InteractionSubtype.REPLY.value: "interaction_reply",
    InteractionSubtype.FOLLOW.value: "interaction_follow",
}


class NotificationPreferenceRepository:
    """Store one :class:`NotificationPreference` row per user.

    Rows are created lazily. ``get`` never writes; ``create_default_if_absent``
    performs the insert and tolerates a concurrent insert of the same user by
    re-reading the row that won the race.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> NotificationPreference | None:
        model = self._get_model(user_id)
        return self._to_entity(model) if model else None

    def create_default_if_absent(self, user_id: int) -> NotificationPreference:
        existing = self._get_model(user_id)
        if existing is not None:
            return self._to_entity(existing)

        model = NotificationPreferenceModel()
        self._apply_entity_to_model(model, NotificationPreference(user_id=user_id))
        now = ensure_app_naive_datetime(now_in_app_timezone())
        model.created_at = now
        model.updated_at = now
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.debug("Preference row for user %s created concurrently; re-reading", user_id)
            winner = self._get_model(user_id)
            if winner is None:
                raise
            return self._to_entity(winner)

        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, preference: NotificationPreference) -> NotificationPreference:
        model = self._get_model(preference.user_id)
        if model is None:
            msg = f"Notification preference for user {preference.user_id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, preference)
        model.updated_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(self, user_id: int) -> NotificationPreferenceModel | None:
        return (
            self.session.query(NotificationPreferenceModel)
            .filter(NotificationPreferenceModel.user_id == user_id)
            .one_or_none()
        )

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationPreferenceModel, preference: NotificationPreference
    ) -> None:
        model.user_id = preference.user_id

        model.system_in_app = preference.system.in_app
        model.system_email = preference.system.email
        model.system_frequency = NotificationFrequency(preference.system.frequency).value

        interaction = preference.interaction
        model.interaction_in_app = interaction.in_app
        model.interaction_email = interaction.email
        model.interaction_frequency = NotificationFrequency(interaction.frequency).value
        for subtype, column in _SUBTYPE_COLUMNS.items():
            setattr(model, column, bool(interaction.subtypes.get(subtype, True)))

        window = preference.do_not_disturb
        model.dnd_enabled = window.enabled
        model.dnd_start = window.start
        model.dnd_end = window.end
        model.dnd_timezone = window.timezone

        model.digest_daily_time = preference.digest_time.daily
        model.digest_weekly_day = preference.digest_time.weekly_day
        model.digest_weekly_time = preference.digest_time.weekly_time

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreference:
        defaults = NotificationPreference(user_id=model.user_id)
        return NotificationPreference(
            id=model.id,
            user_id=model.user_id,
            system=ChannelSettings(
                in_app=bool(model.system_in_app),
                email=bool(model.system_email),
                frequency=NotificationFrequency(model.system_frequency),
            ),
            interaction=InteractionSettings(
                in_app=bool(model.interaction_in_app),
                email=bool(model.interaction_email),
                frequency=NotificationFrequency(model.interaction_frequency),
                subtypes={
                    subtype: bool(getattr(model, column))
                    for subtype, column in _SUBTYPE_COLUMNS.items()
                },
            ),
            do_not_disturb=DoNotDisturbWindow(
                enabled=bool(model.dnd_enabled),
                start=model.dnd_start,
                end=model.dnd_end,
                timezone=model.dnd_timezone or defaults.do_not_disturb.timezone,
            ),
            digest_time=DigestTime(
                daily=model.digest_daily_time or defaults.digest_time.daily,
                weekly_day=(
                    model.digest_weekly_day
                    if model.digest_weekly_day is not None
                    else defaults.digest_time.weekly_day
                ),
                weekly_time=model.digest_weekly_time or defaults.digest_time.weekly_time,
            ),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationPreferenceRepository"]

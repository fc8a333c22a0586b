"""Use cases for reading notification preferences."""

from __future__ import annotations

from sqlalchemy.orm import Session

from blog_notifications.domain.entities import (
    NotificationFrequency,
    NotificationPreference,
    NotificationSubtype,
    NotificationType,
)
from blog_notifications.infrastructure.cache import PreferenceCache
from blog_notifications.infrastructure.repositories import NotificationPreferenceRepository


def get_preferences(
    session: Session, user_id: int, *, cache: PreferenceCache | None = None
) -> NotificationPreference:
    """Return the preferences of ``user_id``, creating the default row on first access."""

    if cache is not None:
        cached = cache.get(user_id)
        if cached is not None:
            return cached

    repository = NotificationPreferenceRepository(session)
    preference = repository.get(user_id)
    if preference is None:
        preference = repository.create_default_if_absent(user_id)

    if cache is not None:
        cache.set(preference)
    return preference


def is_type_enabled(
    session: Session,
    user_id: int,
    notification_type: NotificationType | str,
    *,
    cache: PreferenceCache | None = None,
) -> bool:
    preference = get_preferences(session, user_id, cache=cache)
    settings = preference.settings_for(NotificationType(notification_type).value)
    return settings.frequency != NotificationFrequency.OFF


def is_subtype_enabled(
    session: Session,
    user_id: int,
    subtype: NotificationSubtype | str,
    *,
    cache: PreferenceCache | None = None,
) -> bool:
    """Return whether an interaction ``subtype`` is currently wanted.

    Unknown subtypes default to enabled unless interactions are off entirely.
    """

    preference = get_preferences(session, user_id, cache=cache)
    if preference.interaction.frequency == NotificationFrequency.OFF:
        return False
    key = getattr(subtype, "value", subtype)
    return preference.interaction.subtypes.get(key, True)

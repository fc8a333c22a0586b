"""Use case for partially updating notification preferences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from typing import Any

from sqlalchemy.orm import Session

from blog_notifications.domain.entities import (
    ChannelSettings,
    DigestTime,
    DoNotDisturbWindow,
    InteractionSettings,
    NotificationFrequency,
    NotificationPreference,
)
from blog_notifications.infrastructure.cache import PreferenceCache
from blog_notifications.infrastructure.repositories import NotificationPreferenceRepository

from .get_preferences import get_preferences
from .validators import PreferenceValidationError, validate_preference

_SECTIONS = ("system", "interaction", "do_not_disturb", "digest_time")


def _merge(current: dict[str, Any], changes: Mapping[str, Any], path: str) -> dict[str, Any]:
    merged = dict(current)
    for key, value in changes.items():
        location = f"{path}.{key}" if path else key
        if key not in current:
            raise PreferenceValidationError(f"Unknown preference field: {location}")
        if isinstance(current[key], dict):
            if not isinstance(value, Mapping):
                raise PreferenceValidationError(f"{location} must be an object")
            merged[key] = _merge(current[key], value, location)
        else:
            merged[key] = value
    return merged


def _frequency(value: Any) -> Any:
    try:
        return NotificationFrequency(value)
    except ValueError:
        return value


def _build_preference(
    current: NotificationPreference, data: dict[str, Any]
) -> NotificationPreference:
    system = data["system"]
    interaction = data["interaction"]
    return NotificationPreference(
        id=current.id,
        user_id=current.user_id,
        system=ChannelSettings(
            in_app=system["in_app"],
            email=system["email"],
            frequency=_frequency(system["frequency"]),
        ),
        interaction=InteractionSettings(
            in_app=interaction["in_app"],
            email=interaction["email"],
            frequency=_frequency(interaction["frequency"]),
            subtypes=dict(interaction["subtypes"]),
        ),
        do_not_disturb=DoNotDisturbWindow(**data["do_not_disturb"]),
        digest_time=DigestTime(**data["digest_time"]),
        created_at=current.created_at,
        updated_at=current.updated_at,
    )


def update_preferences(
    session: Session,
    user_id: int,
    changes: Mapping[str, Any],
    *,
    cache: PreferenceCache | None = None,
) -> NotificationPreference:
    """Deep merge ``changes`` into the stored preferences of ``user_id``.

    Only the provided fields change; interaction subtypes merge one by one.
    The merged result is validated as a whole and nothing is written when any
    field is invalid.
    """

    current = get_preferences(session, user_id)
    if not changes:
        return current

    snapshot = {section: asdict(getattr(current, section)) for section in _SECTIONS}
    merged = _merge(snapshot, changes, "")
    updated = _build_preference(current, merged)
    validate_preference(updated)

    saved = NotificationPreferenceRepository(session).update(updated)
    if cache is not None:
        cache.invalidate(user_id)
    return saved

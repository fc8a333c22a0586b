"""Endpoints to read and change notification preferences."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from blog_notifications.application.use_cases.notification_preferences import (
    PreferenceValidationError,
    get_preferences,
    update_preferences,
)
from blog_notifications.domain.do_not_disturb import describe_status, minutes_until_end
from blog_notifications.domain.entities import Recipient
from blog_notifications.infrastructure.cache import PreferenceCache
from blog_notifications.infrastructure.database import get_db
from blog_notifications.interfaces.api.dependencies import get_current_active_user
from blog_notifications.interfaces.api.schemas import (
    DoNotDisturbStatusRead,
    NotificationSettingsRead,
    NotificationSettingsUpdate,
)
from blog_notifications.utils import now_in_app_timezone, to_user_timezone

router = APIRouter(prefix="/notifications/settings", tags=["notification-settings"])


def get_preference_cache(request: Request) -> PreferenceCache | None:
    return getattr(request.app.state, "preference_cache", None)


@router.get("", response_model=NotificationSettingsRead)
def read_settings(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
    cache: PreferenceCache | None = Depends(get_preference_cache),
) -> NotificationSettingsRead:
    preference = get_preferences(db, current_user.id, cache=cache)
    return NotificationSettingsRead.model_validate(preference)


@router.put("", response_model=NotificationSettingsRead)
def change_settings(
    payload: NotificationSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
    cache: PreferenceCache | None = Depends(get_preference_cache),
) -> NotificationSettingsRead:
    """Apply a partial update to the caller's notification preferences."""

    try:
        preference = update_preferences(db, current_user.id, payload.to_changes(), cache=cache)
    except PreferenceValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return NotificationSettingsRead.model_validate(preference)


@router.get("/do-not-disturb", response_model=DoNotDisturbStatusRead)
def read_do_not_disturb_status(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
    cache: PreferenceCache | None = Depends(get_preference_cache),
) -> DoNotDisturbStatusRead:
    window = get_preferences(db, current_user.id, cache=cache).do_not_disturb
    local_now = to_user_timezone(now_in_app_timezone(), window.timezone)
    window_status = describe_status(window, local_now)
    return DoNotDisturbStatusRead(
        enabled=window.enabled,
        is_active=window_status.is_active,
        description=window_status.description,
        start=window.start,
        end=window.end,
        timezone=window.timezone,
        minutes_until_end=minutes_until_end(window, local_now),
    )

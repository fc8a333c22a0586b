"""Administrator endpoints for announcements and digest monitoring."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from blog_notifications.application.use_cases.digests import DigestDispatcher
from blog_notifications.application.use_cases.notifications import (
    BroadcastRequestError,
    broadcast_system_notification,
)
from blog_notifications.domain.entities import Recipient
from blog_notifications.infrastructure.database import get_db
from blog_notifications.interfaces.api.dependencies import require_admin
from blog_notifications.interfaces.api.schemas import (
    BroadcastRequest,
    BroadcastResponse,
    DigestStatsResponse,
)

router = APIRouter(prefix="/admin/notifications", tags=["admin-notifications"])


@router.post("", response_model=BroadcastResponse)
def send_announcement(
    payload: BroadcastRequest,
    db: Session = Depends(get_db),
    _: Recipient = Depends(require_admin),
) -> BroadcastResponse:
    """Send a system announcement to every active user or to ``user_ids``."""

    if payload.target == "specific_users" and not payload.user_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User IDs are required"
        )

    try:
        result = broadcast_system_notification(
            db,
            title=payload.title,
            content=payload.content,
            channels=payload.channels,
            user_ids=payload.user_ids if payload.target == "specific_users" else None,
        )
    except BroadcastRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return BroadcastResponse(
        sent_count=result.sent_count,
        failed_count=result.failed_count,
        errors=result.errors,
    )


@router.get("/digest-stats", response_model=DigestStatsResponse)
def read_digest_stats(
    db: Session = Depends(get_db),
    _: Recipient = Depends(require_admin),
) -> DigestStatsResponse:
    return DigestStatsResponse.model_validate(DigestDispatcher(db).stats())

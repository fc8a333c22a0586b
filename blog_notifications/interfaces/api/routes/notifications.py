"""Inbox endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from blog_notifications.application.use_cases.notifications import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    NotificationNotFoundError,
    delete_notification,
    get_unread_count,
    list_notifications,
    mark_all_as_read,
    mark_as_read,
)
from blog_notifications.domain.entities import NotificationType, Recipient
from blog_notifications.infrastructure.database import SessionLocal, get_db
from blog_notifications.infrastructure.notifications import notification_manager
from blog_notifications.interfaces.api.dependencies import (
    get_current_active_user,
    resolve_current_user,
)
from blog_notifications.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    PaginationRead,
    UnreadCountResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def read_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    type: NotificationType | None = Query(None),
    is_read: bool | None = Query(None),
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return the caller's notifications, newest first."""

    result = list_notifications(
        db,
        current_user.id,
        page=page,
        limit=limit,
        notification_type=type,
        is_read=is_read,
    )
    return NotificationListResponse(
        items=[NotificationRead.model_validate(item) for item in result.items],
        pagination=PaginationRead(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
) -> UnreadCountResponse:
    counts = get_unread_count(db, current_user.id)
    return UnreadCountResponse(total=counts.total, by_type=counts.by_type)


@router.put("/read-all", response_model=MarkAllReadResponse)
def read_all(
    type: NotificationType | None = Query(None),
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
) -> MarkAllReadResponse:
    updated = mark_all_as_read(db, current_user.id, notification_type=type)
    return MarkAllReadResponse(updated=updated)


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def read_one(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
) -> Response:
    try:
        mark_as_read(db, notification_id, user_id=current_user.id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: Recipient = Depends(get_current_active_user),
) -> Response:
    try:
        delete_notification(db, notification_id, user_id=current_user.id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream new notifications to the authenticated user.

    The token travels in the ``token`` query parameter. Clients may send
    ``{"type": "ping"}`` and ``{"type": "ack", "ids": [...]}``.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        unread = get_unread_count(session, user.id)
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    try:
        await notification_manager.connect(
            user.id, websocket, unread_total=unread.total, unread_by_type=unread.by_type
        )
        while True:
            message = await websocket.receive_json()
            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    _acknowledge(user.id, ids)
    except WebSocketDisconnect:
        pass
    finally:
        notification_manager.disconnect(user.id, websocket)


def _acknowledge(user_id: int, ids: list) -> None:
    ack_session = SessionLocal()
    try:
        for notification_id in ids:
            if not isinstance(notification_id, int):
                continue
            try:
                mark_as_read(ack_session, notification_id, user_id=user_id)
            except NotificationNotFoundError:
                logger.debug("Ignoring ack of unknown notification %s", notification_id)
    finally:
        ack_session.close()

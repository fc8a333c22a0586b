from fastapi import FastAPI

from .admin_notifications import router as admin_notifications_router
from .notification_settings import router as notification_settings_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notification_settings_router)
    app.include_router(notifications_router)
    app.include_router(admin_notifications_router)

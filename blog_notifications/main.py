from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blog_notifications.config import get_settings
from blog_notifications.infrastructure.cache import PreferenceCache
from blog_notifications.infrastructure.database import engine, initialize_database
from blog_notifications.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup and release the pool on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Build the notification API application."""

    settings = get_settings()
    app = FastAPI(title=f"{settings.site_name} notifications", lifespan=lifespan)
    app.state.preference_cache = PreferenceCache(
        settings.preference_cache_ttl_seconds,
        max_entries=settings.preference_cache_max_entries,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.site_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app

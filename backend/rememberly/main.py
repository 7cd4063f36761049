"""
Rememberly - FastAPI Application Entry Point.

Feature-based modular architecture:
  Each feature in rememberly/features/ has its own router, schemas, and
  store or service.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rememberly.config import get_settings
from rememberly.core.session import SessionRegistry
from rememberly.features.notifications.factory import create_notification_scheduler

# ── Feature Routers ──────────────────────────────────────
from rememberly.features.auth.router import router as auth_router
from rememberly.features.notes.router import router as notes_router
from rememberly.features.reminders.router import router as reminders_router
from rememberly.features.notifications.router import router as notifications_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: notification scheduler and sessions."""
    settings = get_settings()
    logger.info(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    logger.info(f"🔗 Supabase: {settings.SUPABASE_URL[:40]}...")

    notifier = create_notification_scheduler(settings)
    notifier.start()
    app.state.notifier = notifier
    app.state.sessions = SessionRegistry(notifier)
    yield
    await app.state.sessions.close_all()
    notifier.shutdown()
    logger.info("👋 Shutting down...")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Notes with AI summaries and scheduled reminders",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Register Feature Routers ─────────────────────────
    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    app.include_router(notes_router, prefix="/api/notes", tags=["Notes"])
    app.include_router(reminders_router, prefix="/api/reminders", tags=["Reminders"])
    app.include_router(notifications_router, prefix="/api/notifications", tags=["Notifications"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()

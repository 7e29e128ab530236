"""
FastAPI application factory.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from smartsupply.config import settings
from smartsupply.database import async_session, create_tables
from smartsupply.core.middleware import setup_access_log, setup_cors
from smartsupply.core.exceptions import register_exception_handlers
from smartsupply.core.permissions import Role
from smartsupply.core.security import hash_password
from smartsupply.services import user_directory
from smartsupply.api.v1 import router as api_v1_router

log = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def seed_admin(db: AsyncSession) -> None:
    """Create the configured admin user if both seed settings are present."""
    if not settings.SEED_ADMIN_EMAIL or not settings.SEED_ADMIN_PASSWORD:
        log.info("Admin seed not configured — skipping")
        return
    if await user_directory.find_by_email(db, settings.SEED_ADMIN_EMAIL) is not None:
        log.info("Admin user already exists — skipping seed")
        return
    await user_directory.create(
        db,
        email=settings.SEED_ADMIN_EMAIL,
        password_hash=await run_in_threadpool(hash_password, settings.SEED_ADMIN_PASSWORD),
        first_name="Admin",
        last_name="User",
        role=Role.ADMIN,
    )
    await db.commit()
    log.info("Default admin user created")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    # ── Startup ──────────────────────────────────────────
    configure_logging()
    log.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    if settings.DB_AUTO_CREATE:
        await create_tables()
    async with async_session() as db:
        await seed_admin(db)
    yield
    # ── Shutdown ─────────────────────────────────────────
    log.info("Shutting down")


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Warehouse and inventory management API",
        lifespan=lifespan,
    )

    # Middleware
    setup_cors(app)
    setup_access_log(app)

    # Exception handlers
    register_exception_handlers(app)

    # Routers
    app.include_router(api_v1_router, prefix=settings.API_PREFIX)

    # Health check
    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()

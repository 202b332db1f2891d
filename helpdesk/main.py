import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from redis.asyncio import Redis
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from helpdesk.core import redis as redis_module
from helpdesk.core.config import settings
from helpdesk.core.exceptions import register_exception_handlers
from helpdesk.core.log_config import RequestLoggingMiddleware, setup_logging
from helpdesk.core.rate_limit import limiter
from helpdesk.db.session import SessionLocal
from helpdesk.tickets.routes import comments as comments_routes
from helpdesk.tickets.routes import sessions as sessions_routes

setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "starting",
        user_system_enabled=settings.USER_SYSTEM_ENABLED,
        allow_attachments=settings.ALLOW_ATTACHMENTS,
        storage_backend=settings.STORAGE_BACKEND,
    )
    redis_module.redis_client = Redis.from_url(
        settings.REDIS_URL, decode_responses=True, encoding="utf-8"
    )
    if not await _redis_healthy():
        # Guest sessions fail per request until Redis comes back
        logger.error("redis_unavailable_at_startup")

    yield

    await redis_module.redis_client.aclose()
    redis_module.redis_client = None
    logger.info("stopped")


async def _redis_healthy() -> bool:
    if redis_module.redis_client is None:
        return False
    try:
        await redis_module.redis_client.ping()
    except Exception as e:
        logger.warning("redis_ping_failed", error=str(e))
        return False
    return True


def _database_healthy() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("database_ping_failed", error=str(e))
        return False
    finally:
        db.close()
    return True


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Support ticket comments, guest ticket sessions and reply notifications",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

if settings.STORAGE_BACKEND == "local":
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

app.include_router(comments_routes.router, prefix=settings.API_V1_PREFIX, tags=["tickets"])
app.include_router(sessions_routes.router, prefix=settings.API_V1_PREFIX, tags=["tickets"])


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": settings.PROJECT_NAME, "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    checks = {
        "redis": await _redis_healthy(),
        "database": _database_healthy(),
    }
    statuses = {name: "healthy" if ok else "unhealthy" for name, ok in checks.items()}
    return {"status": "healthy" if all(checks.values()) else "degraded", **statuses}

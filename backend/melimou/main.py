"""MeliMou Backend: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# configure_structlog must run before the other melimou imports: structlog
# caches the processor chain on first use.
from melimou.core.logging import configure_structlog
from melimou.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from melimou.api.routes import api_router
from melimou.api.routes import pages
from melimou.core.config import DEFAULT_AUTH_SECRET, get_settings
from melimou.core.exceptions import MeliMouError
from melimou.db import init_db, close_db, init_redis, close_redis
from melimou.db.seed import seed_subscription_plans
from melimou.middleware.access_gate import AccessGateMiddleware
from melimou.middleware.correlation import (
    setup_correlation_middleware,
    get_correlation_id,
)
from melimou.middleware.timing import RequestTimingMiddleware

logger = structlog.get_logger(__name__)


def validate_auth_secret() -> None:
    """Fail fast when production would sign sessions with the dev secret."""
    settings = get_settings()
    if settings.debug:
        return
    if not settings.auth_secret or settings.auth_secret == DEFAULT_AUTH_SECRET:
        raise RuntimeError("AUTH_SECRET must be set to a non-default value outside debug mode")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # SIGTERM flips this so /api/health returns 503 while draining
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    validate_auth_secret()

    await init_db()
    logger.info("db_initialized")

    await init_redis()
    logger.info("redis_initialized")

    await seed_subscription_plans()
    logger.info("subscription_plans_seeded")

    yield

    logger.info("shutdown_begin")
    await close_redis()
    await close_db()
    logger.info("shutdown_complete")


def _error_response(request: Request, status_code: int, detail, event: str, **extra) -> JSONResponse:
    debug_id = str(uuid.uuid4())
    logger.error(
        event,
        status_code=status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        detail=detail,
        **extra,
    )
    return JSONResponse(status_code=status_code, content={"detail": detail, "debug_id": debug_id})


async def domain_exception_handler(request: Request, exc: MeliMouError) -> JSONResponse:
    """Map service-layer errors onto their HTTP status."""
    extra = {}
    fields = getattr(exc, "fields", None)
    if fields:
        extra["fields"] = fields
    return _error_response(request, exc.status_code, exc.message, "domain_exception", error_type=type(exc).__name__, **extra)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Global exception handler for HTTPException with debug_id tracking."""
    return _error_response(request, exc.status_code, exc.detail, "http_exception")


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled errors with debug_id tracking.

    Logs full exception with traceback, returns generic 500 to client.
    """
    debug_id = str(uuid.uuid4())

    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="MeliMou - Greek language learning platform",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Innermost first: gate, then timing, CORS, and correlation outermost
    app.add_middleware(AccessGateMiddleware)
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url, "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_correlation_middleware(app)

    app.exception_handler(MeliMouError)(domain_exception_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")
    # Catch-all, so it must come last
    app.include_router(pages.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "melimou.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

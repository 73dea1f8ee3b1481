"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Can create multiple app instances if needed (e.g., for testing)

The Socket.IO transport is layered in front of the FastAPI app, so the
ASGI entry point is `asgi_app`, not `app`.

For local development:
    uvicorn src.main:asgi_app --reload

For production:
    gunicorn src.main:asgi_app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from .api.errors import error_response
from .api.middleware import PathScopedCORSMiddleware
from .api.routes import health, pages, socket, videos
from .config.settings import Settings, get_settings
from .infrastructure.mongodb.client import MongoConfig, MongoConnectionError, create_mongo_pool
from .infrastructure.realtime.server import create_realtime_server
from .infrastructure.supabase.client import (
    SupabaseConfig,
    create_auth_client,
    create_profile_store,
)

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)

SOCKET_PATH = "/api/socket"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup connects the database pool and starts the realtime server;
    shutdown releases both.
    """
    settings: Settings = app.state.settings

    logger.info(
        "EduVerse API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {
                "mongodb": settings.mongodb_mock_mode,
                "supabase": settings.supabase_mock_mode,
                "realtime": settings.realtime_mock_mode,
            }
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    try:
        await app.state.mongo_pool.connect()
    except MongoConnectionError as e:
        # Requests retry the connection lazily; readiness reports it meanwhile
        logger.error("Database unavailable at startup", extra={"error": str(e)})

    app.state.realtime.start()

    yield

    app.state.realtime.stop()
    await app.state.mongo_pool.close()
    logger.info("EduVerse API shutting down")


def _build_collaborators(app: FastAPI, settings: Settings) -> None:
    """Create the long-lived clients and keep them on app.state."""
    supabase_config = None
    if not settings.supabase_mock_mode:
        supabase_config = SupabaseConfig(
            url=settings.supabase_url or "",
            anon_key=settings.supabase_anon_key,
            timeout_seconds=settings.supabase_timeout_seconds,
        )

    mongo_config = None
    if not settings.mongodb_mock_mode:
        mongo_config = MongoConfig(
            uri=settings.mongodb_uri,
            database=settings.mongodb_database,
        )

    app.state.settings = settings
    app.state.auth = create_auth_client(supabase_config, mock_mode=settings.supabase_mock_mode)
    app.state.profiles = create_profile_store(supabase_config, mock_mode=settings.supabase_mock_mode)
    app.state.mongo_pool = create_mongo_pool(mongo_config, mock_mode=settings.mongodb_mock_mode)
    app.state.realtime = create_realtime_server(
        auth=app.state.auth,
        mock_mode=settings.realtime_mock_mode,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Pass settings explicitly in tests; otherwise they come from the
    environment.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Course video listings, student and teacher dashboards, and the
        handshake endpoint for the Socket.IO transport.

        ## Authentication

        Pages read the Supabase access token from the `sb-access-token`
        cookie. API clients may send `Authorization: Bearer <token>`.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    _build_collaborators(app, settings)

    # The handshake route sends its own CORS headers
    app.add_middleware(
        PathScopedCORSMiddleware,
        exempt_paths=[SOCKET_PATH],
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        videos.router,
        prefix="/api",
        tags=["Videos"],
    )

    app.include_router(
        socket.router,
        prefix=SOCKET_PATH,
        tags=["Realtime"],
    )

    app.include_router(pages.router, tags=["Pages"])

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Stack traces never reach clients. We log the full error server-side
        but return the generic error body.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return error_response(500, "Internal server error")

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
app = create_app()

# This is what uvicorn/gunicorn will import
asgi_app = app.state.realtime.wrap(app)


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.main:asgi_app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )

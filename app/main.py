"""
FastAPI application entry point.
"""
import logging
import os
import resource
import time
from contextlib import asynccontextmanager
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, settings
from app.infrastructure.database import get_database
from app.infrastructure.rate_limiter import build_limiter, rate_limit_exceeded_handler
from app.middleware.error_handler import (
    ErrorHandlerMiddleware,
    http_exception_handler,
    request_validation_exception_handler,
)
from app.middleware.request_logger import RequestLoggingMiddleware
from app.api.routers import photos, stats, trash
from app.utils.timestamps import utc_now_iso


def build_log_handlers(config: Settings) -> list[logging.Handler]:
    """
    Console handler, plus a file handler rotated at midnight when file logging is on.

    Args:
        config: Settings providing log_to_file and log_dir

    Returns:
        Handlers for logging.basicConfig
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_to_file:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(TimedRotatingFileHandler(
            log_dir / "app.log",
            when="midnight",
            backupCount=14,
            utc=True,
            encoding="utf-8",
        ))
    return handlers


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=build_log_handlers(settings),
)
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Prepares the database schema on startup and releases connections on shutdown.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")
    logger.info(f"Log level: {settings.log_level} "
                f"(file={settings.log_dir if settings.log_to_file else 'off'})")
    logger.info(f"Photo uploads: dir={settings.upload_dir}, max={settings.max_photo_size_bytes} bytes")
    logger.info(f"Hotspots: cell_size={settings.hotspot_cell_size}, "
                f"radius={settings.hotspot_radius_m}m, max={settings.max_hotspots}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute "
                f"(enabled={settings.rate_limit_enabled})")

    database = get_database()
    database.create_all()

    yield

    # Shutdown
    logger.info("Shutting down application...")
    database.dispose()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Community Litter Log API

    Log litter sightings with their location and an optional photo, browse them,
    and view aggregate statistics.

    ## Features

    - **Entry logging**: trash type, GPS coordinates, optional JPEG/PNG photo and name
    - **Browsing**: newest-first listing with date range and type filters and pagination
    - **Statistics**: counts per type, most common type, date range covered
    - **Hotspots**: entries grouped on a 0.01 degree grid, top five clusters by size
    - **Rate Limiting**: protects the API from abuse
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Rate limiter lives on the app state, where SlowAPIMiddleware looks it up
app.state.limiter = build_limiter(settings)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)

# Middleware, innermost first
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(trash.router, prefix="/api")
app.include_router(stats.router, prefix="/api")
app.include_router(photos.router, prefix="/api")
# Entries reference their photos as /photos/<filename>
app.include_router(photos.router, include_in_schema=False)


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status with uptime and peak memory use
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "environment": settings.environment,
        "timestamp": utc_now_iso(),
        "uptime": f"{int(time.monotonic() - STARTED_AT)}s",
        "memory": {
            # ru_maxrss is reported in kilobytes on Linux
            "peak_rss_kb": resource.getrusage(resource.RUSAGE_SELF).ru_maxrss,
        },
    }


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=settings.debug)

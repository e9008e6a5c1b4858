"""
PackVault Sidecar API.

FastAPI application exposing add-on uploads, installed/active addon listings
and the console command relay of a game server running in an ephemeral
container. Archived packs missing from the installation directories are
restored before the first request is served.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from backend.api.v1 import addons, commands
from backend.config import settings
from backend.models.common import HealthResponse
from backend.rate_limit import limiter
from packvault.manager import PackManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def restore_on_startup() -> None:
    """Startup hook: reinstall missing packs. Errors are logged, never raised."""
    try:
        result = PackManager(settings.layout()).restore_missing()
    except Exception as e:
        logger.error(f"Pack restoration failed: {e}", exc_info=True)
        return

    for outcome in result.failed:
        logger.warning(f"Could not restore {outcome.kind.value} pack {outcome.name}: {outcome.error}")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Data root: {settings.data_root}")
    restore_on_startup()
    yield
    logger.info("Shutting down PackVault Sidecar API")


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Register rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include routers
app.include_router(addons.router)
app.include_router(commands.router)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    # Strict CSP for API routes; skip for docs pages that need inline scripts
    if request.url.path not in ("/docs", "/redoc", "/openapi.json"):
        response.headers["Content-Security-Policy"] = "default-src 'none'"
    return response


@app.get("/health", response_model=HealthResponse)
async def health_check(response: Response):
    """
    Health check endpoint.

    Returns service status and whether the pack archive root is present.
    """
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"

    archive_root = settings.layout().archive_root
    archive_status = "available" if archive_root.is_dir() else "missing"

    return HealthResponse(
        status="healthy",
        version=settings.api_version,
        archive=archive_status,
        timestamp=datetime.now(timezone.utc),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    """
    Handle validation errors and return 400 instead of 422.
    """
    logger.warning(f"Validation error: {exc}")

    errors = exc.errors()
    error_msg = "Invalid parameters"
    code = "INVALID_PARAMETER"

    if errors:
        first_error = errors[0]
        if first_error.get("type") == "missing":
            field = first_error.get("loc", [])[-1]
            error_msg = f"Missing required parameter: {field}"
            code = "MISSING_PARAMETER"
        else:
            error_msg = first_error.get("msg", "Invalid parameters")

    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": code,
                "message": error_msg,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(_request, exc):
    """
    Global exception handler for unhandled errors.
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
    )

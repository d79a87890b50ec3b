"""
Taskboard API.

FastAPI application serving health, user and task endpoints. Data comes from
MongoDB when a connection is available and from fixed fallback data otherwise.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.api import tasks, users
from taskboard.config import Settings, settings
from taskboard.db import ConnectionManager, HealthReporter
from taskboard.models.common import HealthResponse
from taskboard.rate_limit import limiter
from taskboard.services import TaskService, UserService

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "style-src 'self' 'unsafe-inline'",
        "script-src 'self'",
        "img-src 'self' data: https:",
        "connect-src 'self' http://localhost:3000 http://localhost:3001",
    ]
)


def apply_security_headers(request: Request, response: Response) -> Response:
    """Set the security headers sent with every response."""
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["X-XSS-Protection"] = "0"
    # Docs pages load inline scripts from a CDN
    if request.url.path not in DOCS_PATHS:
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler: one database connection attempt, then serve."""
    app_settings: Settings = app.state.settings
    manager: ConnectionManager = app.state.connection_manager

    logger.info(f"Starting {app_settings.api_title} v{app_settings.api_version}")
    logger.info(f"Environment: {app_settings.environment}")

    state = await manager.connect()
    if state.is_connected:
        logger.info(f"Database: {app_settings.mongo_database} on {state.host}:{state.port}")
    else:
        logger.info("Database: not connected, serving fallback data")

    yield

    await manager.close()
    logger.info(f"Shutting down {app_settings.api_title}")


def create_app(
    app_settings: Settings | None = None,
    manager: ConnectionManager | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the global settings)
        manager: Connection manager to use (defaults to one built from settings)

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings
    manager = manager or ConnectionManager.from_settings(app_settings)

    app = FastAPI(
        title=app_settings.api_title,
        version=app_settings.api_version,
        description=app_settings.api_description,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.settings = app_settings
    app.state.connection_manager = manager
    app.state.health_reporter = HealthReporter(manager)
    app.state.user_service = UserService(manager)
    app.state.task_service = TaskService(manager)

    # Register rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        """Add security headers to all responses."""
        response = await call_next(request)
        return apply_security_headers(request, response)

    # Include routers
    app.include_router(users.router)
    app.include_router(tasks.router)

    @app.get("/api/health", response_model=HealthResponse, tags=["health"])
    @app.get("/health", response_model=HealthResponse, include_in_schema=False)
    async def health_check(request: Request, response: Response):
        """
        Health check endpoint.

        Reports service status and the current database connection state.
        """
        # Set no-cache headers
        response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"

        return HealthResponse(
            status="OK",
            message="Server is running!",
            environment=request.app.state.settings.environment,
            db=request.app.state.health_reporter.snapshot(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError):
        """
        Handle malformed request bodies and return 400 instead of 422.
        """
        logger.warning(f"Validation error: {exc}")

        errors = exc.errors()
        error_msg = "Invalid request"
        if errors:
            first_error = errors[0]
            if first_error.get("type") == "json_invalid":
                error_msg = "Invalid JSON body"
            else:
                field = ".".join(str(part) for part in first_error.get("loc", [])[1:])
                error_msg = first_error.get("msg", error_msg)
                if field:
                    error_msg = f"Invalid field {field}: {error_msg}"

        return JSONResponse(status_code=400, content={"error": error_msg})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Return errors in the ``{"error": ...}`` shape."""
        if exc.status_code == 404 and request.url.path.startswith("/api"):
            return JSONResponse(status_code=404, content={"error": "API route not found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Global exception handler for unhandled errors.
        """
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        message = "Internal server error"
        if not request.app.state.settings.is_production:
            message = str(exc)

        response = JSONResponse(
            status_code=500,
            content={"error": "Something went wrong!", "message": message},
        )
        # Sent by ServerErrorMiddleware, outside add_security_headers
        return apply_security_headers(request, response)

    if app_settings.is_production:
        mount_frontend(app, Path(app_settings.frontend_dist))

    return app


def mount_frontend(app: FastAPI, dist: Path) -> None:
    """
    Serve the built single-page frontend.

    Existing files are returned as-is; every other non-API path gets
    ``index.html`` so client-side routing works.
    """
    index = dist / "index.html"
    if not index.is_file():
        logger.warning(f"Frontend build not found at {dist}, not serving static files")
        return

    root = dist.resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_frontend(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404)

        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)

    logger.info(f"Serving frontend from {dist}")


# Create FastAPI app
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "taskboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )

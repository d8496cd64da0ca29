"""FastAPI application factory.

Creates and configures the FastAPI application with all routes, middleware
and error handlers.

## Usage

```python
from sports_tracker.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3000)
```

## Error responses

Every failure is rendered as `{"error": "<message>"}`:
- `SportsTrackerError` subclasses use their own status and message
  (5xx messages are replaced with a generic one after logging)
- Unknown routes give 404 `Route not found: <path>`
- Malformed request bodies give 400
- Anything else gives 500 `Unexpected server error.`
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sports_tracker.config import get_settings
from sports_tracker.database.connection import close_db, init_db
from sports_tracker.exceptions import SportsTrackerError

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "Unexpected server error."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the database engine on startup and disposes it on shutdown.
    """
    settings = get_settings()

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    await init_db()

    yield

    logger.info("Shutting down")
    await close_db()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_service_error(request: Request, exc: SportsTrackerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
            exc_info=exc,
        )
        return _error(exc.status_code, UNEXPECTED_ERROR)
    return _error(exc.status_code, exc.message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, f"Route not found: {request.url.path}")
    return _error(exc.status_code, str(exc.detail))


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request.")
        return _error(400, f"{location}: {message}" if location else message)
    return _error(400, "Invalid request.")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return _error(500, UNEXPECTED_ERROR)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Activity logging with a public feed, likes, comments and local weather",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SportsTrackerError, handle_service_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Include routers
    from sports_tracker.api.routes import activities, auth, engagement, users, weather

    app.include_router(auth.router, prefix="/api", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/user", tags=["Account"])
    app.include_router(activities.router, prefix="/api/activities", tags=["Activities"])
    app.include_router(engagement.router, prefix="/api", tags=["Engagement"])
    app.include_router(weather.router, prefix="/api/weather", tags=["Weather"])

    @app.get("/api/health", tags=["Health"])
    async def health_check() -> dict:
        """Liveness probe; no authentication."""
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app

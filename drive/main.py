"""FastAPI application for Drive.

Wires the versioned routers, maps core errors to HTTP responses, and
owns startup and shutdown of the database engine.

Run with:
    uvicorn drive.main:app --reload

Tests:
    - tests/unit/test_main.py
    - tests/integration/test_api_files.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from drive import __version__
from drive.api.v1 import router as v1_router
from drive.config import get_settings
from drive.database import check_db_connection, close_db, init_db
from drive.errors import DriveError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[str, int] = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "content_not_found": status.HTTP_404_NOT_FOUND,
    "invalid_argument": status.HTTP_400_BAD_REQUEST,
    "would_create_cycle": status.HTTP_400_BAD_REQUEST,
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "already_exists": status.HTTP_409_CONFLICT,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class HealthResponse(BaseModel):
    """Liveness plus database reachability."""

    status: str
    version: str
    database: bool


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the signing secret, ensure tables exist, and dispose the engine on exit."""
    logger.info("Starting Drive v%s", __version__)
    if settings.uses_default_secret:
        if settings.is_production:
            raise RuntimeError("JWT_SECRET_KEY must be set in production")
        logger.warning("JWT_SECRET_KEY is the default placeholder; set it before deploying")

    try:
        await init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error("Database initialization failed: %s", e)

    yield

    logger.info("Shutting down Drive")
    await close_db()


settings = get_settings()

app = FastAPI(
    title="Drive",
    description="Personal file storage with folders and time-scoped share links",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.exception_handler(DriveError)
async def drive_error_handler(request: Request, exc: DriveError):
    """Map core errors to one stable status code each."""
    status_code = ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("Storage error on %s: %s", request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.code == "unauthorized" else None
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "code": exc.code, "detail": None},
        headers=headers,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Render HTTPExceptions in the same body shape as core errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "detail": None},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Last-resort handler; the detail is only exposed in debug mode."""
    logger.exception("Unexpected error: %s", exc)

    detail = str(exc) if settings.DEBUG else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "detail": detail},
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Check application and database health."""
    db_healthy = await check_db_connection()
    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=__version__,
        database=db_healthy,
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with basic info."""
    return {
        "name": "Drive",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "drive.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )

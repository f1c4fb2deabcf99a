"""
backend/app/main.py

Purpose:
    FastAPI application bootstrap: lifespan (logging, database, seed admin,
    feed client shutdown), middleware and router wiring, and the mapping of
    domain and infrastructure errors onto the {success, message} envelope.

Dependencies:
    - app.database
    - app.errors
    - app.services.sports_service
"""

import logging
from contextlib import asynccontextmanager

from bson.errors import InvalidId
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    OperationFailure,
    ServerSelectionTimeoutError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

import app.database as _db
from app.config import settings
from app.database import close_db, connect_db
from app.errors import BetPlatformError
from app.middleware.logging import StructuredLoggingMiddleware, setup_logging
from app.services.sports_service import close_sports_feed_service
from app.utils import utcnow

logger = logging.getLogger("bibet")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await connect_db()

    from app.seed import seed_initial_user
    await seed_initial_user()
    logger.info("Bibet API started (%s)", settings.ENVIRONMENT)

    yield

    await close_sports_feed_service()
    await close_db()


app = FastAPI(
    title="Bibet888 API",
    description="Betting exchange, mini-games and live sports feeds",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CLIENT_URL.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Structured logging
app.add_middleware(StructuredLoggingMiddleware)

# Routers
from app.routers.auth import router as auth_router
from app.routers.betting import router as betting_router
from app.routers.games import router as games_router
from app.routers.sports import router as sports_router
from app.routers.users import router as users_router

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(betting_router)
app.include_router(games_router)
app.include_router(sports_router)


def _error(status_code: int, message: str, exc: Exception | None = None, **extra) -> JSONResponse:
    content = {"success": False, "message": message, **extra}
    if exc is not None and settings.is_development:
        content["error"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(BetPlatformError)
async def platform_error_handler(request: Request, exc: BetPlatformError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        if not settings.is_development:
            return _error(exc.status_code, BetPlatformError.default_message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error(404, f"Route {request.url.path} not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(InvalidId)
async def invalid_object_id_handler(request: Request, exc: InvalidId):
    return _error(400, "Invalid ID")


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Return clean validation errors without leaking internal field paths."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc", ())
        # Strip the "body" / "query" prefix for cleaner messages
        field = ".".join(str(l) for l in loc[1:]) if len(loc) > 1 else str(loc[-1]) if loc else "unknown"
        errors.append({"field": field, "message": err.get("msg", "Invalid value.")})
    return _error(400, "Validation failed", errors=errors)


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    key_value = (exc.details or {}).get("keyValue") or {}
    field = next(iter(key_value), "Entry")
    return _error(409, f"{field} already exists")


@app.exception_handler(ServerSelectionTimeoutError)
async def db_timeout_handler(request: Request, exc: ServerSelectionTimeoutError):
    logger.error("Database timeout: %s %s", request.method, request.url.path)
    return _error(503, "Service temporarily unavailable")


@app.exception_handler(ConnectionFailure)
async def db_connection_handler(request: Request, exc: ConnectionFailure):
    logger.error("Database connection failure: %s %s", request.method, request.url.path)
    return _error(503, "Service temporarily unavailable")


@app.exception_handler(OperationFailure)
async def db_operation_handler(request: Request, exc: OperationFailure):
    logger.error("Database operation error on %s %s: %s", request.method, request.url.path, exc)
    return _error(500, "Internal server error", exc)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning("ValueError on %s %s: %s", request.method, request.url.path, exc)
    return _error(400, "Invalid input", exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all: log the real error, return a safe generic message."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error", exc)


@app.get("/health")
async def health():
    """Health check -- verifies the DB connection."""
    try:
        result = await _db.db.command("ping")
        db_ok = result.get("ok") == 1.0
    except Exception:
        db_ok = False

    return {
        "success": True,
        "message": "Server is running",
        "status": "healthy" if db_ok else "degraded",
        "db": "connected" if db_ok else "disconnected",
        "timestamp": utcnow().isoformat(),
        "environment": settings.ENVIRONMENT,
    }


@app.get("/")
async def root():
    return {
        "success": True,
        "message": "Welcome to Bibet888 API",
        "version": "1.0.0",
        "documentation": "/docs",
    }

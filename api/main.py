from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from auth import security
from core import responses
from core.db import Database
from core.errors import AppError
from core.log_config import configure_logging
from products import router as products_router
from shops import router as shops_router
from users import router as users_router

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Token settings are a startup invariant; refuse to boot without them.
    security.validate_settings()

    db = Database.from_env()
    await db.connect()
    app.state.db = db
    logger.info("startup_complete")
    try:
        yield
    finally:
        await db.close()


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = str(first.get("msg") or "Invalid value.")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return responses.failure(exc.message, status_code=exc.status_code)


async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return responses.failure(str(exc.detail), status_code=exc.status_code)


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return responses.failure(_first_validation_message(exc), status_code=400)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    message = str(exc) if debug_enabled() else "An unexpected error occurred"
    return responses.failure(message, status_code=500)


def create_app() -> FastAPI:
    app = FastAPI(title="storefront-api", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(products_router.router, tags=["products"])
    app.include_router(shops_router.router, tags=["shops"])
    app.include_router(users_router.router, tags=["users"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()

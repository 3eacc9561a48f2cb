"""
FastAPI application entry point for the workshop backend.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from workshop_api.config import DEFAULT_SESSION_SECRET, Settings, get_settings
from workshop_api.errors import ApiError
from workshop_api.routes import admin_router, router

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        parts.append(f"{field}: {err.get('msg')}")
    return "; ".join(parts) or "Invalid request"


def _register_error_handlers(app: FastAPI, settings: Settings) -> None:
    static_dir = Path(settings.static_dir) if settings.static_dir else None

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown non-API paths fall through to the SPA when it is being served.
        if (
            exc.status_code == 404
            and static_dir is not None
            and request.method == "GET"
            and not request.url.path.startswith(settings.api_prefix)
        ):
            return FileResponse(static_dir / "index.html")
        if exc.status_code == 404:
            return _error(404, "Not found")
        return _error(exc.status_code, str(exc.detail))


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Workshop Backend (FastAPI)", version="0.1.0")

    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(admin_router, prefix=settings.api_prefix)

    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("SESSION_SECRET is not set; using the insecure default")
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie_name,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept"],
        allow_credentials=True,
    )

    if settings.static_dir:
        app.mount(
            "/assets",
            StaticFiles(directory=Path(settings.static_dir) / "assets", check_dir=False),
            name="assets",
        )
        logger.info("Serving frontend from %s", settings.static_dir)

    _register_error_handlers(app, settings)

    logger.info("Registered routes:")
    for route in app.routes:
        path = getattr(route, "path", None)
        if path is None:
            continue
        methods = ",".join(sorted(getattr(route, "methods", None) or []))
        logger.info("  %s %s", methods, path)
    return app


app = create_app()

"""
Main entrypoint for the Exam Simulator API.

This module assembles the FastAPI application: logging, CORS, the
versioned routers, error rendering and startup tasks.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn exam_simulator_api.app.main:app --reload

Every error reaches the client as ``{"success": false, "error": ...}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.exceptions import AppError, ValidationError
from .core.logging_config import setup_logging
from .core.store import init_storage
from .services.user_service import UserService

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, **extra})


def _describe_validation(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        # Drop the leading "body"/"path"/"query" part of the location.
        loc = [str(part) for part in error.get("loc", ())[1:]]
        field = ".".join(loc) or "body"
        problems.append(f"{field}: {error.get('msg')}")
    return "Invalid request: " + "; ".join(problems)


def register_error_handlers(app: FastAPI) -> None:
    """Render application, HTTP and unexpected errors in the common shape."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        if isinstance(exc, ValidationError) and exc.violations:
            return _error(exc.status_code, exc.message, violations=exc.violations)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _describe_validation(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error(404, "Route not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, str(exc) or "Something went wrong!")


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Performs one-time setup such as configuring logging, CORS and the
    versioned API routers.  Returns a fully configured FastAPI
    instance ready to be served.
    """
    # Logging first so that everything below can log.
    setup_logging(
        settings.log_level,
        settings.log_file or None,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix=settings.api_prefix)
    register_error_handlers(app)

    @app.on_event("startup")
    async def startup_event() -> None:
        # Create data folders and the default admin before serving.
        init_storage()
        await UserService.ensure_default_admin()
        logger.info("%s ready, data in %s", settings.project_name, settings.data_dir)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()

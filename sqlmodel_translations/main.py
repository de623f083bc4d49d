from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlmodel import Session
from typing import Optional, Sequence
import logging
import os
import traceback
from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.database import engine
from sqlmodel_translations.core.exceptions import (
    TranslationsException,
    ValidationError,
    NotFoundError,
    ConflictError,
)
from sqlmodel_translations.api.v1 import create_api_router
from sqlmodel_translations.services.language_service import ensure_languages_table

logger = logging.getLogger(__name__)

# Check if we're in development mode
IS_DEVELOPMENT = os.getenv("ENVIRONMENT", "production").lower() in ("development", "dev", "local")


def register_exception_handlers(app: FastAPI):
    """Attach the plugin's JSON error handlers to an application."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Log validation errors with full details for debugging."""
        logger.error(f"Validation error on {request.method} {request.url.path}")
        logger.error(f"Validation errors: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"success": False, "message": "The given data was invalid.", "errors": jsonable_errors(exc)},
        )

    @app.exception_handler(TranslationsException)
    async def translations_exception_handler(request: Request, exc: TranslationsException):
        """Handle plugin exceptions."""
        if isinstance(exc, ValidationError):
            status_code = status.HTTP_400_BAD_REQUEST
        elif isinstance(exc, NotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        elif isinstance(exc, ConflictError):
            status_code = status.HTTP_409_CONFLICT
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        logger.warning(f"Translations exception on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR and not IS_DEVELOPMENT:
            message = "An internal server error occurred. Please try again later."
        else:
            message = str(exc)
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "message": message, "type": type(exc).__name__},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch all unhandled exceptions so internals never leak in production."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)

        if IS_DEVELOPMENT:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "success": False,
                    "message": str(exc),
                    "type": type(exc).__name__,
                    "traceback": traceback.format_exc()
                },
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "An internal server error occurred. Please try again later.",
                "type": "InternalServerError"
            },
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw input/ctx objects (not always JSON serializable)."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def create_app(
    dependencies: Optional[Sequence] = None,
    provision_languages: bool = True,
) -> FastAPI:
    """
    Build a standalone FastAPI app serving the translations API.

    Args:
        dependencies: Extra route dependencies (auth etc.) applied to every route
        provision_languages: Create and seed the languages table on startup
    """
    app = FastAPI(title="Translations API", version="1.0.0")

    register_exception_handlers(app)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if provision_languages:
        @app.on_event("startup")
        async def startup_event():
            """Make sure the languages table exists and has its defaults."""
            with Session(engine) as session:
                ensure_languages_table(session)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    app.include_router(create_api_router(dependencies), prefix=settings.api_prefix)
    return app


app = create_app()

"""
Languages endpoint.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
import logging

from sqlmodel_translations.api.v1.endpoints.utils import require_manage_permission
from sqlmodel_translations.core.database import get_session
from sqlmodel_translations.core.exceptions import ConflictError
from sqlmodel_translations.schemas.language import (
    LanguageMessageResponse,
    LanguageResponse,
    LanguagesResponse,
    SaveLanguageRequest,
    UpdateLanguageRequest,
)
from sqlmodel_translations.services import language_service
from sqlmodel_translations.utils.text_utils import is_valid_language_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/languages", tags=["languages"])


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@router.get("", response_model=LanguagesResponse)
async def get_languages(
    session: Session = Depends(get_session)
):
    """Get all languages, ordered by sort_order then name."""
    languages = language_service.get_all_languages(session)
    return LanguagesResponse(
        data=[LanguageResponse.model_validate(lang) for lang in languages]
    )


@router.get("/active", response_model=LanguagesResponse)
async def get_active_languages(
    session: Session = Depends(get_session)
):
    """Get active languages only."""
    languages = language_service.get_active_languages(session)
    return LanguagesResponse(
        data=[LanguageResponse.model_validate(lang) for lang in languages]
    )


def _save(session: Session, data: dict, status_code: int):
    try:
        language = language_service.save_language(session, data)
    except (ConflictError, SQLAlchemyError) as e:
        session.rollback()
        logger.error(f"Database error saving language {data.get('language_code')}: {e}")
        return _failure(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Language code already exists or database error occurred",
        )

    return JSONResponse(
        status_code=status_code,
        content=LanguageMessageResponse(
            success=True,
            message="Language saved successfully",
            data=LanguageResponse.model_validate(language),
        ).model_dump(mode="json"),
    )


@router.post(
    "",
    response_model=LanguageMessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_manage_permission)],
)
async def store_language(
    request: SaveLanguageRequest,
    session: Session = Depends(get_session)
):
    """Create a language, or update the existing one with the same code."""
    return _save(session, request.model_dump(exclude_unset=True), status.HTTP_201_CREATED)


@router.put(
    "/{language_code}",
    response_model=LanguageMessageResponse,
    dependencies=[Depends(require_manage_permission)],
)
async def update_language(
    language_code: str,
    request: UpdateLanguageRequest,
    session: Session = Depends(get_session)
):
    """Update a language by code (created if missing)."""
    if not is_valid_language_code(language_code):
        return _failure(status.HTTP_400_BAD_REQUEST, "Invalid language code format")

    data = request.model_dump(exclude_unset=True)
    data["language_code"] = language_code
    return _save(session, data, status.HTTP_200_OK)


@router.patch(
    "/{language_code}/toggle",
    response_model=LanguageMessageResponse,
    dependencies=[Depends(require_manage_permission)],
)
async def toggle_language(
    language_code: str,
    session: Session = Depends(get_session)
):
    """Flip a language's active flag."""
    if not is_valid_language_code(language_code):
        return _failure(status.HTTP_400_BAD_REQUEST, "Invalid language code format")

    try:
        toggled = language_service.toggle_language(session, language_code)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error toggling language status for {language_code}: {e}")
        return _failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An error occurred while updating the language status",
        )

    if not toggled:
        return _failure(status.HTTP_404_NOT_FOUND, "Language not found")

    language = language_service.get_language(session, language_code)
    return LanguageMessageResponse(
        success=True,
        message="Language status updated successfully",
        data=LanguageResponse.model_validate(language),
    )


@router.delete(
    "/{language_code}",
    response_model=LanguageMessageResponse,
    dependencies=[Depends(require_manage_permission)],
)
async def delete_language(
    language_code: str,
    session: Session = Depends(get_session)
):
    """Delete a language by code."""
    if not is_valid_language_code(language_code):
        return _failure(status.HTTP_400_BAD_REQUEST, "Invalid language code format")

    try:
        deleted = language_service.delete_language(session, language_code)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error deleting language {language_code}: {e}")
        return _failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An error occurred while deleting the language",
        )

    if not deleted:
        return _failure(status.HTTP_404_NOT_FOUND, "Language not found")

    return LanguageMessageResponse(success=True, message="Language deleted successfully")

"""
API v1 router aggregation.
"""
from typing import Optional, Sequence
from fastapi import APIRouter, Depends
from fastapi.params import Depends as DependsParam
from sqlmodel_translations.api.v1.endpoints import languages
from sqlmodel_translations.api.v1.endpoints.utils import rate_limiter


def create_api_router(dependencies: Optional[Sequence[DependsParam]] = None) -> APIRouter:
    """
    Build the translations API router.

    Every route is rate limited; host applications pass their own auth/session
    dependencies through ``dependencies`` (the equivalent of route middleware).
    """
    api_router = APIRouter(dependencies=[Depends(rate_limiter), *(dependencies or [])])

    # Note: Each router already defines its own prefix, so we don't add another one here
    api_router.include_router(languages.router)
    return api_router

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from sqlmodel_translations.utils.text_utils import is_valid_language_code


class LanguageResponse(BaseModel):
    """Language response schema."""
    id: Optional[int] = None
    language_code: str
    name: str
    native_name: Optional[str] = None
    is_active: bool = False
    sort_order: int = 0
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LanguagesResponse(BaseModel):
    """List of languages response schema."""
    success: bool = True
    data: List[LanguageResponse]


class LanguageMessageResponse(BaseModel):
    """Response schema for write operations."""
    success: bool
    message: str
    data: Optional[LanguageResponse] = None


class LanguageBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    native_name: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = False
    sort_order: int = Field(default=0, ge=0)


class SaveLanguageRequest(LanguageBase):
    """Request schema for creating or updating a language (upsert by code)."""
    language_code: str = Field(max_length=10)

    @field_validator("language_code")
    @classmethod
    def check_language_code(cls, value: str) -> str:
        if not is_valid_language_code(value):
            raise ValueError("Invalid language code format")
        return value


class UpdateLanguageRequest(LanguageBase):
    """Request schema for PUT /languages/{code}; the code comes from the path."""
    pass

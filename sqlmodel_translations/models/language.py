"""
Language model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Index
from typing import Optional
from datetime import datetime
from sqlmodel_translations.core.config import settings


class Language(SQLModel, table=True):
    """Language table - stores supported languages and whether they are offered for editing."""
    __tablename__ = settings.languages_table
    __table_args__ = (
        Index(f"{settings.languages_table}_is_active_sort_order_index", "is_active", "sort_order"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    language_code: str = Field(unique=True, index=True, max_length=10)  # e.g., 'en', 'pt-BR'
    name: str = Field(max_length=255)  # English, French, Spanish, etc.
    native_name: Optional[str] = Field(default=None, max_length=255)  # Français, Español, ...
    is_active: bool = Field(default=False)
    sort_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        """Native name if set, otherwise the English name."""
        return self.native_name or self.name

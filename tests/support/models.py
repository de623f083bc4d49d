"""
Base entities used by the test suite.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from sqlmodel_translations.models.translatable import TranslatableMixin


class Post(TranslatableMixin, SQLModel, table=True):
    """Blog post with a translatable title and body."""
    __tablename__ = "posts"
    __translatable__ = ("title", "body")

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    body: Optional[str] = None
    status: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Orphan(TranslatableMixin):
    """Declares translatable fields but has no translation model."""
    __translatable__ = ("name",)

"""
Language service - CRUD over the languages table and its first-use provisioning.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
from sqlmodel import Session, select
from sqlalchemy import func, inspect
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional
from datetime import datetime
import logging

from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.exceptions import ConfigurationError, ConflictError, ValidationError
from sqlmodel_translations.models.language import Language
from sqlmodel_translations.utils.text_utils import is_valid_language_code, is_valid_table_name

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES: List[Dict[str, Any]] = [
    {'language_code': 'en', 'name': 'English', 'native_name': 'English', 'is_active': True, 'sort_order': 1},
    {'language_code': 'es', 'name': 'Spanish', 'native_name': 'Español', 'is_active': False, 'sort_order': 2},
    {'language_code': 'fr', 'name': 'French', 'native_name': 'Français', 'is_active': False, 'sort_order': 3},
    {'language_code': 'de', 'name': 'German', 'native_name': 'Deutsch', 'is_active': False, 'sort_order': 4},
    {'language_code': 'it', 'name': 'Italian', 'native_name': 'Italiano', 'is_active': False, 'sort_order': 5},
    {'language_code': 'pt', 'name': 'Portuguese', 'native_name': 'Português', 'is_active': False, 'sort_order': 6},
    {'language_code': 'ar', 'name': 'Arabic', 'native_name': 'العربية', 'is_active': False, 'sort_order': 7},
    {'language_code': 'zh', 'name': 'Chinese', 'native_name': '中文', 'is_active': False, 'sort_order': 8},
]

# Fields a caller may set on a language row
LANGUAGE_FIELDS = ('language_code', 'name', 'native_name', 'is_active', 'sort_order')


def languages_table_exists(session: Session) -> bool:
    return inspect(session.get_bind()).has_table(settings.languages_table)


def ensure_languages_table(session: Session) -> bool:
    """
    Create the languages table if it is missing and seed the default languages
    when the table is empty.

    Args:
        session: Database session

    Returns:
        True if the table had to be created, False if it already existed

    Raises:
        ConfigurationError: If the configured table name is not a plain identifier
    """
    table_name = settings.languages_table
    if not is_valid_table_name(table_name):
        raise ConfigurationError(f"Invalid table name format: {table_name!r}")

    created = False
    if not languages_table_exists(session):
        logger.info(f"Creating languages table '{table_name}'")
        Language.__table__.create(session.get_bind(), checkfirst=True)
        created = True

    count = session.exec(select(func.count()).select_from(Language)).one()
    if count == 0:
        seed_default_languages(session)

    return created


def seed_default_languages(session: Session) -> int:
    """Insert the default languages that don't exist yet. Returns the number inserted."""
    inserted = 0
    for data in DEFAULT_LANGUAGES:
        if get_language(session, data['language_code']) is None:
            session.add(Language(**data))
            inserted += 1
    session.commit()
    logger.info(f"Seeded {inserted} default languages")
    return inserted


def _ordered(statement):
    return statement.order_by(Language.sort_order, Language.name)


def get_all_languages(session: Session) -> List[Language]:
    """All languages ordered by sort_order, then name."""
    return list(session.exec(_ordered(select(Language))).all())


def get_active_languages(session: Session) -> List[Language]:
    """Active languages ordered by sort_order, then name."""
    statement = _ordered(select(Language).where(Language.is_active == True))  # noqa: E712
    return list(session.exec(statement).all())


def get_language(session: Session, language_code: str) -> Optional[Language]:
    return session.exec(
        select(Language).where(Language.language_code == language_code)
    ).first()


def save_language(session: Session, data: Dict[str, Any]) -> Language:
    """
    Create or update a language, matched by language_code.

    Args:
        session: Database session
        data: Language fields; must include language_code

    Returns:
        The saved language

    Raises:
        ValidationError: If language_code is missing or malformed
        ConflictError: On a unique constraint violation
    """
    language_code = data.get('language_code')
    if not language_code or not is_valid_language_code(language_code):
        raise ValidationError(f"Invalid language code format: {language_code!r}")

    values = {key: value for key, value in data.items() if key in LANGUAGE_FIELDS}

    language = get_language(session, language_code)
    if language is None:
        language = Language(**values)
    else:
        for key, value in values.items():
            setattr(language, key, value)
        language.updated_at = datetime.utcnow()

    try:
        session.add(language)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.error("Database integrity error saving language: %s", str(e))
        raise ConflictError(f"Language code {language_code} already exists") from e

    session.refresh(language)
    logger.info(f"Saved language {language_code}")
    return language


def toggle_language(session: Session, language_code: str) -> bool:
    """Flip is_active. Returns False if the language doesn't exist."""
    language = get_language(session, language_code)
    if language is None:
        return False

    language.is_active = not language.is_active
    language.updated_at = datetime.utcnow()
    session.add(language)
    session.commit()
    logger.info(f"Language {language_code} is now {'active' if language.is_active else 'inactive'}")
    return True


def delete_language(session: Session, language_code: str) -> bool:
    """Delete a language. Returns False if it doesn't exist."""
    language = get_language(session, language_code)
    if language is None:
        return False

    session.delete(language)
    session.commit()
    logger.info(f"Deleted language {language_code}")
    return True

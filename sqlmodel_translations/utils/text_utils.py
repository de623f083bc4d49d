"""
Text utility functions.
"""
import re

from sqlmodel_translations.core.config import settings

LANGUAGE_CODE_PATTERN = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")
MODEL_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
TABLE_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def is_valid_language_code(code: str) -> bool:
    """
    Check a language code against the ISO 639-1 (+ optional region) format.

    Examples: 'en', 'pt-BR'. Always True when code validation is disabled.
    """
    if not settings.validate_language_codes:
        return bool(code)
    if not isinstance(code, str):
        return False
    return LANGUAGE_CODE_PATTERN.fullmatch(code) is not None


def is_valid_model_name(name: str) -> bool:
    """Model names must start with a letter and contain only letters, digits and underscores."""
    return MODEL_NAME_PATTERN.fullmatch(name or "") is not None


def is_valid_table_name(name: str) -> bool:
    return TABLE_NAME_PATTERN.fullmatch(name or "") is not None


def to_snake_case(name: str) -> str:
    """
    Convert a StudlyCase model name to snake_case.

    Args:
        name: Model name, e.g. 'BlogPost'

    Returns:
        snake_case name, e.g. 'blog_post'
    """
    if not name:
        return name
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


def pluralize(word: str) -> str:
    """
    Naive English pluralization, good enough for table names.

    Examples:
    - "post" -> "posts"
    - "category" -> "categories"
    - "box" -> "boxes"
    """
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def table_name_for_model(model_name: str) -> str:
    """Derive the base table name for a model: 'BlogCategory' -> 'blog_categories'."""
    return pluralize(to_snake_case(model_name))

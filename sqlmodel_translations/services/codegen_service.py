"""
Code generation service for scaffolding translation models and migrations.
"""
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional
import logging
import re

from sqlalchemy import inspect
from sqlmodel import Session

from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.exceptions import ValidationError
from sqlmodel_translations.templating import render
from sqlmodel_translations.utils.text_utils import (
    is_valid_model_name,
    table_name_for_model,
    to_snake_case,
)

logger = logging.getLogger(__name__)

# Columns never offered for translation
NON_TRANSLATABLE_FIELDS = (
    'id', 'created_at', 'updated_at', 'deleted_at', 'email_verified_at',
    'password', 'remember_token', 'email', 'phone', 'status',
)

_REVISION_RE = re.compile(r"^revision\s*(?::\s*[\w\[\], ]+)?\s*=\s*['\"]([^'\"]+)['\"]", re.MULTILINE)
_DOWN_REVISION_RE = re.compile(r"^down_revision\s*(?::\s*[\w\[\], ]+)?\s*=\s*(.+)$", re.MULTILINE)
_QUOTED_RE = re.compile(r"['\"]([^'\"]+)['\"]")


def validate_model_name(model_name: str) -> str:
    """
    Raises:
        ValidationError: If model_name isn't a simple identifier starting with a letter
    """
    if not is_valid_model_name(model_name):
        raise ValidationError(
            "Invalid model name. Must contain only letters, numbers, and underscores, starting with a letter."
        )
    return model_name


def translation_table_name(model_name: str) -> str:
    """'BlogPost' -> 'blog_post_translations'."""
    return f"{to_snake_case(model_name)}{settings.translation_suffix}"


def translation_foreign_key(model_name: str) -> str:
    return f"{to_snake_case(model_name)}_id"


def get_model_fields(session: Session, model_name: str, table_name: Optional[str] = None) -> Optional[List[str]]:
    """
    Read the base table's columns, minus the non-translatable ones.

    Args:
        session: Database session
        model_name: Base model name, e.g. 'Post'
        table_name: Base table name; derived from model_name ('posts') when omitted

    Returns:
        Candidate column names in table order, or None if the table doesn't exist
    """
    table_name = table_name or table_name_for_model(model_name)
    inspector = inspect(session.get_bind())

    if not inspector.has_table(table_name):
        logger.warning(f"Table '{table_name}' for model {model_name} not found")
        return None

    columns = [column['name'] for column in inspector.get_columns(table_name)]
    return [column for column in columns if column not in NON_TRANSLATABLE_FIELDS]


def common_translatable_fields(fields: Iterable[str]) -> List[str]:
    """Fields that appear in the configured list of commonly translatable fields."""
    common = set(settings.common_translatable_fields)
    return [field for field in fields if field in common]


def parse_selection(selection: str, fields: List[str]) -> List[str]:
    """
    Turn a comma-separated list of indices into field names.

    Examples (fields = ['title', 'body', 'slug']):
    - "0,2" -> ['title', 'slug']
    - "2, 0, 9, x" -> ['slug', 'title']   (invalid indices are ignored)
    """
    selected: List[str] = []
    for part in (selection or "").split(","):
        part = part.strip()
        if not part.lstrip("-").isdigit():
            continue
        index = int(part)
        if 0 <= index < len(fields) and fields[index] not in selected:
            selected.append(fields[index])
    return selected


def fillable_fields(fields: Iterable[str]) -> List[str]:
    """Allow-list of the generated translation model: selected fields plus language_code."""
    return [*fields, 'language_code']


def _template_context(model_name: str, fields: List[str], base_table: Optional[str]) -> dict:
    table_name = translation_table_name(model_name)
    foreign_key = translation_foreign_key(model_name)
    return {
        'model_name': model_name,
        'translation_model_name': f"{model_name}Translation",
        'table_name': table_name,
        'foreign_key': foreign_key,
        'foreign_table': base_table or table_name_for_model(model_name),
        'unique_name': f"uq_{table_name}_{foreign_key}_language_code",
        'fields': list(fields),
    }


def render_translation_model(model_name: str, fields: List[str], base_table: Optional[str] = None) -> str:
    """Source of the <Model>Translation SQLModel class."""
    validate_model_name(model_name)
    context = _template_context(model_name, fields, base_table)
    context['fillable_literal'] = repr(tuple(fillable_fields(fields)))
    return render('translation_model.py.j2', **context)


def render_translation_migration(
    model_name: str,
    fields: List[str],
    revision: str,
    down_revision: Optional[str] = None,
    base_table: Optional[str] = None,
    create_date: Optional[datetime] = None,
) -> str:
    """Source of the Alembic migration creating the translations table."""
    validate_model_name(model_name)
    context = _template_context(model_name, fields, base_table)
    context.update(
        revision=revision,
        revision_literal=repr(revision),
        down_revision=down_revision,
        down_revision_literal=repr(down_revision),
        create_date=(create_date or datetime.now()).strftime("%Y-%m-%d %H:%M:%S.%f"),
    )
    return render('translation_migration.py.j2', **context)


def find_head_revision(versions_dir: Path) -> Optional[str]:
    """
    Find the single head revision among the Alembic migrations in a directory.

    Returns:
        The head revision id, or None when the directory has no migrations
        or more than one head
    """
    versions_dir = Path(versions_dir)
    if not versions_dir.is_dir():
        return None

    revisions = set()
    parents = set()
    for path in sorted(versions_dir.glob("*.py")):
        source = path.read_text(encoding="utf-8")
        revision_match = _REVISION_RE.search(source)
        if not revision_match:
            continue
        revisions.add(revision_match.group(1))
        down_match = _DOWN_REVISION_RE.search(source)
        if down_match:
            parents.update(_QUOTED_RE.findall(down_match.group(1)))

    heads = sorted(revisions - parents)
    if len(heads) > 1:
        logger.warning(f"Multiple migration heads in {versions_dir}: {', '.join(heads)}")
        return None
    return heads[0] if heads else None


def write_translation_model(
    model_name: str,
    fields: List[str],
    directory: Optional[Path] = None,
    base_table: Optional[str] = None,
) -> Path:
    """Write <directory>/<snake_model>_translation.py and return its path."""
    directory = Path(directory or settings.translation_models_path)
    directory.mkdir(parents=True, exist_ok=True)

    init_file = directory / "__init__.py"
    if not init_file.exists():
        init_file.write_text('"""\nGenerated translation models.\n"""\n', encoding="utf-8")

    path = directory / f"{to_snake_case(model_name)}_translation.py"
    path.write_text(render_translation_model(model_name, fields, base_table), encoding="utf-8")
    logger.info(f"Translation model written to {path}")
    return path


def write_translation_migration(
    model_name: str,
    fields: List[str],
    directory: Optional[Path] = None,
    base_table: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write <directory>/<timestamp>_create_<table>_table.py, chained onto the current head."""
    directory = Path(directory or settings.migrations_path)
    directory.mkdir(parents=True, exist_ok=True)

    now = now or datetime.now()
    table_name = translation_table_name(model_name)
    revision = f"{now.strftime('%Y_%m_%d_%H%M%S')}_create_{table_name}"
    down_revision = find_head_revision(directory)

    path = directory / f"{revision}_table.py"
    path.write_text(
        render_translation_migration(
            model_name,
            fields,
            revision=revision,
            down_revision=down_revision,
            base_table=base_table,
            create_date=now,
        ),
        encoding="utf-8",
    )
    logger.info(f"Translation migration written to {path}")
    return path

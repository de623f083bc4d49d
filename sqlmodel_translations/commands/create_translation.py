#!/usr/bin/env python3
"""
Scaffold a translation model and Alembic migration for an existing model.

Usage:
    create-translation Post
    create-translation Post --fields title,body
    create-translation BlogCategory --table categories --auto

It will:
1. Make sure the languages table exists (and seed the default languages)
2. Read the columns of the model's table (e.g. Post -> posts)
3. Ask which columns should be translatable
4. Write app/models/translations/post_translation.py
5. Write alembic/versions/<timestamp>_create_post_translations_table.py
"""
import argparse
import logging
import sys
from typing import Callable, List, Optional

from sqlmodel import Session, create_engine

from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.database import normalize_database_url
from sqlmodel_translations.core.exceptions import ValidationError
from sqlmodel_translations.services import codegen_service
from sqlmodel_translations.services.language_service import ensure_languages_table

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-translation",
        description="Create translation model and migration for a given model",
    )
    parser.add_argument("model", help="The name of the model to create translations for")
    parser.add_argument(
        "--table",
        default=None,
        help="Base table name (default: snake_case plural of the model name)",
    )
    parser.add_argument(
        "--fields",
        default=None,
        help="Comma-separated column names to make translatable (skips the prompt)",
    )
    parser.add_argument(
        "--auto",
        action="store_true",
        help="Select the commonly translatable columns automatically",
    )
    parser.add_argument(
        "--models-path",
        default=settings.translation_models_path,
        help=f"Directory for the translation model (default: {settings.translation_models_path})",
    )
    parser.add_argument(
        "--migrations-path",
        default=settings.migrations_path,
        help=f"Alembic versions directory (default: {settings.migrations_path})",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Database to read the table schema from (default: TRANSLATIONS_DATABASE_URL)",
    )
    return parser


def select_translatable_fields(
    fields: List[str],
    args: argparse.Namespace,
    input_func: Callable[[str], str] = input,
) -> List[str]:
    """Pick fields from --fields, --auto, or an interactive prompt."""
    if args.fields is not None:
        requested = [name.strip() for name in args.fields.split(",") if name.strip()]
        unknown = [name for name in requested if name not in fields]
        if unknown:
            print(f"⚠️  Ignoring unknown or non-translatable fields: {', '.join(unknown)}")
        return [name for name in requested if name in fields]

    common = codegen_service.common_translatable_fields(fields)

    if args.auto:
        if not settings.auto_detect_translatable_fields:
            print("⚠️  Auto-detection is disabled (TRANSLATIONS_AUTO_DETECT_TRANSLATABLE_FIELDS)")
            return []
        return common

    print("🔍 Available fields for translation:")
    for index, field in enumerate(fields):
        marker = " 🌟 (commonly translatable)" if field in common else ""
        print(f"  [{index}] {field}{marker}")

    selection = input_func("🎯 Enter field indices to make translatable (comma-separated, e.g., 0,1,2): ")
    return codegen_service.parse_selection(selection, fields)


def run(args: argparse.Namespace, input_func: Callable[[str], str] = input) -> int:
    model_name = args.model
    try:
        codegen_service.validate_model_name(model_name)
    except ValidationError as e:
        print(f"❌ {e}")
        return 1

    print(f"🚀 Creating translations for model: {model_name}")

    database_url = normalize_database_url(args.database_url or settings.database_url)
    engine = create_engine(database_url)
    try:
        with Session(engine) as session:
            if ensure_languages_table(session):
                print("📋 Created languages table")
            fields = codegen_service.get_model_fields(session, model_name, args.table)
    finally:
        engine.dispose()

    if fields is None:
        print(f"❌ Could not find table for model: {model_name}")
        return 1
    if not fields:
        print(f"⚠️  No translatable columns found for model: {model_name}")
        return 0

    translatable_fields = select_translatable_fields(fields, args, input_func)
    if not translatable_fields:
        print("⚠️  No translatable fields selected. Exiting...")
        return 0

    model_path = codegen_service.write_translation_model(
        model_name, translatable_fields, args.models_path, base_table=args.table
    )
    print(f"📝 Translation model created: {model_path}")

    migration_path = codegen_service.write_translation_migration(
        model_name, translatable_fields, args.migrations_path, base_table=args.table
    )
    print(f"🗄️  Translation migration created: {migration_path}")

    print("✅ Translation files created successfully!")
    print("📋 Next steps:")
    print("   1️⃣  Run: alembic upgrade head")
    print(f"   2️⃣  Add TranslatableMixin to your {model_name} model and list its __translatable__ fields")
    print("   3️⃣  Use TranslationModal to edit translations in your views")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())

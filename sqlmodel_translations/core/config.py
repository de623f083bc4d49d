from pydantic_settings import BaseSettings
from typing import Dict, List, Optional
from pathlib import Path
import logging

from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

# Load .env from the current working directory (the host project root)
_env_path = Path(".env")
if _env_path.exists():
    load_dotenv(_env_path, override=False)
    _logger.info(f"Loaded .env file from: {_env_path.absolute()}")


class Settings(BaseSettings):
    """Plugin settings loaded from TRANSLATIONS_* environment variables."""

    # Database
    database_url: str = "sqlite:///./translations.db"

    # Default language used when no language code is given
    default_language: str = "en"

    # Languages table
    languages_table: str = "languages"

    # Translation models
    translation_suffix: str = "_translations"
    translation_model_namespace: str = "app.models.translations"

    # Where the code generator writes its files (relative to the project root)
    translation_models_path: str = "app/models/translations"
    migrations_path: str = "alembic/versions"

    # Auto-detection
    auto_detect_translatable_fields: bool = True
    common_translatable_fields: List[str] = [
        "name",
        "title",
        "description",
        "content",
        "summary",
        "excerpt",
        "meta_title",
        "meta_description",
        "slug",
    ]

    # UI (Tailwind CSS classes)
    ui_modal_size: str = "max-w-4xl"
    ui_modal_backdrop: bool = True
    ui_modal_keyboard: bool = True
    ui_colors: Dict[str, str] = {
        "primary": "blue",
        "success": "green",
        "danger": "red",
        "warning": "yellow",
        "info": "sky",
    }

    # API
    api_prefix: str = "/api/translations"
    api_rate_limit: str = "60,1"  # 60 requests per 1 minute
    api_manage_token: Optional[str] = None

    # CORS
    cors_origins: List[str] = ["*"]

    # Security
    validate_language_codes: bool = True
    max_translation_length: int = 65535

    class Config:
        env_prefix = "TRANSLATIONS_"
        case_sensitive = False


# Create settings instance
settings = Settings()

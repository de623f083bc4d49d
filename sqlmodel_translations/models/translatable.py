"""
Translatable mixin for base entities.

A base entity opts in by mixing in ``TranslatableMixin`` and listing its
translatable attributes::

    class Post(TranslatableMixin, SQLModel, table=True):
        __tablename__ = "posts"
        __translatable__ = ("title", "body")

Translated values live in a ``<Model>Translation`` table (see
``create-translation``), one row per (entity, language) pair. The instance
must be attached to a session; queries go through ``object_session(self)``.
"""
import importlib
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import object_session
from sqlmodel import Session, select

from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.exceptions import (
    ConfigurationError,
    ConflictError,
    TranslationsException,
    ValidationError,
)
from sqlmodel_translations.utils.text_utils import is_valid_language_code, to_snake_case

logger = logging.getLogger(__name__)

# Resolved translation model classes, keyed by dotted path
_translation_model_cache: Dict[str, type] = {}


class TranslatedView:
    """Read-only attribute overlay of a base entity for one language."""

    def __init__(self, entity: "TranslatableMixin", language_code: str):
        self._entity = entity
        self._language_code = language_code
        self._values = entity.get_translated_attributes(language_code)

    @property
    def language_code(self) -> str:
        return self._language_code

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        return getattr(self._entity, name)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)


class TranslatableMixin:
    """Adds per-language translations to a SQLModel table class."""

    __translatable__ = ()
    __translation_model__ = None
    __translation_foreign_key__ = None

    @classmethod
    def get_translatable_attributes(cls) -> List[str]:
        return list(cls.__translatable__ or ())

    @classmethod
    def get_translation_model_name(cls) -> str:
        """Dotted path of the translation model, e.g. 'app.models.translations.post_translation.PostTranslation'."""
        module_name = f"{to_snake_case(cls.__name__)}_translation"
        return f"{settings.translation_model_namespace}.{module_name}.{cls.__name__}Translation"

    @classmethod
    def translation_model(cls) -> type:
        """
        Resolve the translation model class.

        An explicit ``__translation_model__`` wins; otherwise the class is imported
        from the configured namespace.

        Raises:
            ConfigurationError: If the translation model cannot be imported
        """
        if cls.__translation_model__ is not None:
            return cls.__translation_model__

        dotted_path = cls.get_translation_model_name()
        if dotted_path in _translation_model_cache:
            return _translation_model_cache[dotted_path]

        module_path, class_name = dotted_path.rsplit(".", 1)
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise ConfigurationError(
                f"Translation model module '{module_path}' for {cls.__name__} could not be imported"
            ) from e

        model = getattr(module, class_name, None)
        if model is None:
            raise ConfigurationError(f"Translation model '{dotted_path}' not found")

        _translation_model_cache[dotted_path] = model
        return model

    @classmethod
    def translation_foreign_key(cls) -> str:
        return cls.__translation_foreign_key__ or f"{to_snake_case(cls.__name__)}_id"

    @classmethod
    def translation_fillable(cls) -> List[str]:
        """Fields the translation model accepts on write (mass-assignment allow-list)."""
        model = cls.translation_model()
        fillable = getattr(model, "__fillable__", None)
        if fillable is None:
            return cls.get_translatable_attributes() + ["language_code"]
        return list(fillable)

    @classmethod
    def with_translation(cls, language_code: str):
        """Select statement for base rows that have a translation in the given language."""
        model = cls.translation_model()
        foreign_key = getattr(model, cls.translation_foreign_key())
        return (
            select(cls)
            .join(model, foreign_key == cls.id)  # type: ignore[attr-defined]
            .where(model.language_code == language_code)
        )

    def _get_session(self) -> Session:
        session = object_session(self)
        if session is None:
            raise TranslationsException(
                f"{type(self).__name__} instance is not attached to a session"
            )
        return session  # type: ignore[return-value]

    def _translations_query(self):
        model = self.translation_model()
        foreign_key = getattr(model, self.translation_foreign_key())
        return select(model).where(foreign_key == self.id)  # type: ignore[attr-defined]

    def translations(self) -> List[Any]:
        """All translation rows of this entity."""
        return list(self._get_session().exec(self._translations_query()).all())

    def translation(self, language_code: Optional[str] = None) -> Optional[Any]:
        """Translation row for a language (default language when None)."""
        language_code = language_code or settings.default_language
        model = self.translation_model()
        statement = self._translations_query().where(model.language_code == language_code)
        return self._get_session().exec(statement).first()

    def translations_for(self, language_codes: Iterable[str]) -> Dict[str, Any]:
        """
        Fetch translation rows for several languages with a single query.

        Returns:
            Dict mapping language_code -> translation row (missing languages are absent)
        """
        codes = list(language_codes)
        if not codes:
            return {}
        model = self.translation_model()
        statement = self._translations_query().where(model.language_code.in_(codes))
        rows = self._get_session().exec(statement).all()
        return {row.language_code: row for row in rows}

    def get_original(self, attribute: str) -> Any:
        return getattr(self, attribute, None)

    def get_translated_attribute(self, attribute: str, language_code: Optional[str] = None) -> Any:
        """Translated value if present, else the entity's own value."""
        translation = self.translation(language_code)
        value = getattr(translation, attribute, None) if translation is not None else None
        return value if value is not None else self.get_original(attribute)

    def get_translated_attributes(self, language_code: Optional[str] = None) -> Dict[str, Any]:
        translation = self.translation(language_code)
        resolved = {}
        for attribute in self.get_translatable_attributes():
            value = getattr(translation, attribute, None) if translation is not None else None
            resolved[attribute] = value if value is not None else self.get_original(attribute)
        return resolved

    def in_language(self, language_code: Optional[str] = None) -> TranslatedView:
        return TranslatedView(self, language_code or settings.default_language)

    def save_translation(self, data: Dict[str, Any], language_code: str) -> Optional[Any]:
        """
        Create or update the translation row for a language.

        Only keys in the translation model's allow-list are kept. Blank strings are
        stored as NULL and fields missing from data are left untouched. When data
        has no allowed keys, or the updated row would hold no value at all, the
        existing row (if any) is deleted and None is returned.

        Args:
            data: Field values keyed by attribute name
            language_code: Target language

        Returns:
            The saved translation row, or None when the translation was removed

        Raises:
            ValidationError: Bad language code or value longer than max_translation_length
            ConflictError: Unique constraint violation on (entity, language)
        """
        if not is_valid_language_code(language_code):
            raise ValidationError(f"Invalid language code format: {language_code!r}")

        allowed_fields = set(self.translation_fillable())
        allowed_fields.discard("language_code")

        safe_data = {}
        for field, value in data.items():
            if field not in allowed_fields:
                continue
            if isinstance(value, str):
                value = value if value.strip() else None
            if isinstance(value, str) and len(value) > settings.max_translation_length:
                raise ValidationError(
                    f"Translation for '{field}' exceeds {settings.max_translation_length} characters"
                )
            safe_data[field] = value

        if not safe_data:
            self.delete_translation(language_code)
            return None

        session = self._get_session()
        translation = self.translation(language_code)

        if translation is not None:
            # Fields not in data keep their stored values
            merged = {field: getattr(translation, field, None) for field in allowed_fields}
            merged.update(safe_data)
            if all(value is None for value in merged.values()):
                self.delete_translation(language_code)
                return None

            for field, value in safe_data.items():
                setattr(translation, field, value)
            translation.updated_at = datetime.utcnow()
        elif all(value is None for value in safe_data.values()):
            return None
        else:
            model = self.translation_model()
            translation = model(
                **safe_data,
                language_code=language_code,
                **{self.translation_foreign_key(): self.id},  # type: ignore[attr-defined]
            )

        try:
            session.add(translation)
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.error("Database integrity error saving translation: %s", str(e))
            raise ConflictError(
                f"A {language_code} translation already exists for this {type(self).__name__}"
            ) from e

        session.refresh(translation)
        logger.info(f"Saved {language_code} translation for {type(self).__name__} {self.id}")  # type: ignore[attr-defined]
        return translation

    def delete_translation(self, language_code: str) -> bool:
        translation = self.translation(language_code)
        if translation is None:
            return False

        session = self._get_session()
        session.delete(translation)
        session.commit()
        logger.info(f"Deleted {language_code} translation for {type(self).__name__} {self.id}")  # type: ignore[attr-defined]
        return True

    def get_available_languages(self) -> List[str]:
        """Distinct language codes this entity has translations for."""
        model = self.translation_model()
        foreign_key = getattr(model, self.translation_foreign_key())
        statement = (
            select(model.language_code)
            .where(foreign_key == self.id)  # type: ignore[attr-defined]
            .distinct()
        )
        return list(self._get_session().exec(statement).all())

    def has_translation(self, language_code: str) -> bool:
        return self.translation(language_code) is not None

"""
Translation modal - server-side view model for editing an entity's translations.

States: closed -> open (a language tab selected) -> saving -> open.
The host view calls the action methods (open_modal, switch_language,
save_translation, ...) and re-renders with ``render()``.
"""
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import object_session
from sqlmodel import Session

from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.exceptions import TranslationsException
from sqlmodel_translations.models.translatable import TranslatableMixin
from sqlmodel_translations.services import language_service
from sqlmodel_translations.templating import render

logger = logging.getLogger(__name__)

TRANSLATION_SAVED = "translation-saved"
TRANSLATION_DELETED = "translation-deleted"


class ModalState(str, Enum):
    """View states of the translation modal."""
    CLOSED = "closed"
    OPEN = "open"
    SAVING = "saving"


class TranslationModal:
    """Edit the translations of one TranslatableMixin instance, one language tab at a time."""

    template_name = "translation_modal.html.j2"

    def __init__(self, session: Session):
        self.session = session
        self.model: Optional[TranslatableMixin] = None
        self.model_class: Optional[type] = None
        self.model_id: Any = None

        self.state = ModalState.CLOSED
        self.current_language = settings.default_language
        self.translations: Dict[str, Dict[str, str]] = {}
        self.available_languages: List[Dict[str, Any]] = []
        self.translatable_fields: List[str] = []

        self.flash: Dict[str, str] = {}
        self.errors: Dict[str, str] = {}
        self.dispatched: List[Tuple[str, Dict[str, Any]]] = []
        self._listeners: Dict[str, List[Callable[[Dict[str, Any]], None]]] = {}

    @property
    def show_modal(self) -> bool:
        return self.state != ModalState.CLOSED

    def mount(self, model=None, model_class: Optional[type] = None, model_id: Any = None) -> "TranslationModal":
        """Bind to an instance, or load one by class and primary key."""
        if model is not None:
            self.model = model
            self.model_class = type(model)
            self.model_id = model.id
        elif model_class is not None and model_id is not None:
            self.model_class = model_class
            self.model_id = model_id
            self.model = self.session.get(model_class, model_id)

        self._load_data()
        return self

    def on(self, event: str, listener: Callable[[Dict[str, Any]], None]):
        self._listeners.setdefault(event, []).append(listener)

    def dispatch(self, event: str, payload: Dict[str, Any]):
        self.dispatched.append((event, payload))
        for listener in self._listeners.get(event, []):
            listener(payload)

    def open_modal(self, language_code: Optional[str] = None):
        self.current_language = language_code or settings.default_language
        self.state = ModalState.OPEN
        self._load_data()

    def close_modal(self):
        self.state = ModalState.CLOSED
        self.errors = {}

    def switch_language(self, language_code: str):
        self.current_language = language_code

    def set_field(self, field: str, value: str, language_code: Optional[str] = None):
        """Update a form value bound to a textarea."""
        language_code = language_code or self.current_language
        self.translations.setdefault(language_code, {})[field] = value

    def save_translation(self):
        """
        Persist the current language tab.

        Trimmed values are saved when at least one is non-empty; otherwise the
        language's translation row is removed.
        """
        if self.model is None:
            return

        self.flash = {}
        self.errors = self._validate(self.current_language)
        if self.errors:
            return

        language_code = self.current_language
        values = {
            field: (value or "").strip()
            for field, value in self.translations.get(language_code, {}).items()
            if field in self.translatable_fields
        }

        self.state = ModalState.SAVING
        try:
            if any(values.values()):
                self.model.save_translation(
                    {field: value or None for field, value in values.items()},
                    language_code,
                )
                self.dispatch(TRANSLATION_SAVED, {'language': language_code, 'model_id': self.model_id})
                self.flash['message'] = "✅ Translation saved successfully!"
            else:
                self.model.delete_translation(language_code)
                self.flash['message'] = "🗑️ Translation deleted successfully!"

            self._load_translations()
        except (TranslationsException, SQLAlchemyError) as e:
            self._rollback()
            logger.error(f"Error saving {language_code} translation for {self.model_class.__name__} {self.model_id}: {e}")
            self.flash['error'] = f"❌ Error saving translation: {e}"
        finally:
            self.state = ModalState.OPEN

    def delete_translation(self, language_code: Optional[str] = None):
        if self.model is None:
            return

        language_code = language_code or self.current_language
        self.flash = {}
        try:
            self.model.delete_translation(language_code)
            self._load_translations()
            self.flash['message'] = "🗑️ Translation deleted successfully!"
            self.dispatch(TRANSLATION_DELETED, {'language': language_code, 'model_id': self.model_id})
        except (TranslationsException, SQLAlchemyError) as e:
            self._rollback()
            logger.error(f"Error deleting {language_code} translation for {self.model_class.__name__} {self.model_id}: {e}")
            self.flash['error'] = f"❌ Error deleting translation: {e}"

    @property
    def translation_status(self) -> Dict[str, bool]:
        """language_code -> whether a translation row exists, from a single query."""
        if self.model is None:
            return {}
        existing = set(self.model.get_available_languages())
        return {
            language['language_code']: language['language_code'] in existing
            for language in self.available_languages
        }

    def render(self) -> str:
        return render(
            self.template_name,
            modal=self,
            model=self.model,
            show_modal=self.show_modal,
            saving=self.state == ModalState.SAVING,
            current_language=self.current_language,
            available_languages=self.available_languages,
            translatable_fields=self.translatable_fields,
            translations=self.translations,
            translation_status=self.translation_status,
            flash=self.flash,
            errors=self.errors,
            modal_size=settings.ui_modal_size,
            backdrop=settings.ui_modal_backdrop,
            keyboard=settings.ui_modal_keyboard,
            colors=settings.ui_colors,
        )

    def _rollback(self):
        # The model writes through its own session, which may not be self.session
        session = object_session(self.model) or self.session
        session.rollback()

    def _validate(self, language_code: str) -> Dict[str, str]:
        errors = {}
        for field, value in self.translations.get(language_code, {}).items():
            if value is not None and not isinstance(value, str):
                errors[field] = f"The {field} field must be a string."
            elif value and len(value) > settings.max_translation_length:
                errors[field] = f"The {field} field must not exceed {settings.max_translation_length} characters."
        return errors

    def _load_data(self):
        if self.model is None:
            return

        self.available_languages = [
            {
                'language_code': language.language_code,
                'name': language.name,
                'native_name': language.native_name,
                'display_name': language.display_name,
            }
            for language in language_service.get_active_languages(self.session)
        ]
        self.translatable_fields = self.model.get_translatable_attributes()
        self._load_translations()

    def _load_translations(self):
        """Fill the form for every active language from one batched query."""
        self.translations = {}
        codes = [language['language_code'] for language in self.available_languages]
        existing = self.model.translations_for(codes)

        for code in codes:
            translation = existing.get(code)
            self.translations[code] = {
                field: (getattr(translation, field, None) or '') if translation is not None else ''
                for field in self.translatable_fields
            }

"""
Per-row translations for SQLModel tables: a languages registry, a translatable
mixin, a code generator for translation tables and an inline editing modal.
"""
from sqlmodel_translations.models import Language, TranslatableMixin, TranslatedView
from sqlmodel_translations.components.translation_modal import TranslationModal

__all__ = [
    'Language',
    'TranslatableMixin',
    'TranslatedView',
    'TranslationModal',
]

__version__ = "1.0.0"

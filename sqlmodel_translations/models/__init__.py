"""
Models package - the languages table and the translatable mixin for base entities.
"""
from sqlmodel_translations.models.language import Language
from sqlmodel_translations.models.translatable import TranslatableMixin, TranslatedView

__all__ = [
    'Language',
    'TranslatableMixin',
    'TranslatedView',
]

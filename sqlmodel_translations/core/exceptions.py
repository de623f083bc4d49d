"""
Custom exceptions for the translations plugin.
"""


class TranslationsException(Exception):
    """Base exception for all translations plugin exceptions."""
    pass


class ValidationError(TranslationsException):
    """Raised when validation fails (bad language code, bad model name, too long value)."""
    pass


class NotFoundError(TranslationsException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(TranslationsException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class ConfigurationError(TranslationsException):
    """Raised when the plugin is misconfigured (e.g., unresolvable translation model)."""
    pass

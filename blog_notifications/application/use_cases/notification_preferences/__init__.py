"""Use cases for reading and changing notification preferences."""

from .get_preferences import get_preferences, is_subtype_enabled, is_type_enabled
from .update_preferences import update_preferences
from .validators import PreferenceValidationError, validate_preference

__all__ = [
    "PreferenceValidationError",
    "get_preferences",
    "is_subtype_enabled",
    "is_type_enabled",
    "update_preferences",
    "validate_preference",
]

"""
Field validation rules.

Provides validators for required fields, type checks, length bounds and
pattern (regex, email) checks.
"""

from .base_validator import BaseValidator, ValidationError
from .length_validator import LengthValidator
from .regex_validator import EmailValidator, RegexValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "TypeValidator",
    "LengthValidator",
    "RegexValidator",
    "EmailValidator",
]

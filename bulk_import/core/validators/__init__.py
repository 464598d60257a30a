"""
Validation rule implementations.

Provides validators for required fields, regex formats, enumerated values
and role-conditioned required fields.
"""

from .allowed_values_validator import AllowedValuesValidator
from .base_validator import BaseValidator, ValidationError
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator
from .required_when_validator import RequiredWhenValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "RegexValidator",
    "AllowedValuesValidator",
    "RequiredWhenValidator",
]

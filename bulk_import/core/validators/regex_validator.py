"""
RegexValidator - validates field values against a regular expression pattern.
"""

import re
from re import Pattern
from typing import Any

from bulk_import.core.models.raw_record import is_blank

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates that a whole field value matches a regular expression pattern.

    The pattern must cover the entire value, so a trailing newline cannot
    slip past a `$` anchor.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - flags: Optional regex flags (e.g., re.IGNORECASE)
    - message: Optional message template
    """

    default_message = "Formato inválido en {field}: {value}"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        flags = self.parameters.get("flags", 0)

        try:
            if isinstance(pattern, str):
                self.pattern: Pattern = re.compile(pattern, flags)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate that the value matches the regex pattern.

        Args:
            value: The field value to validate
            record: The entire record

        Raises:
            ValidationError: If value doesn't match the pattern
        """
        # Absent values are the required_field rule's concern
        if is_blank(value):
            return

        value_str = value if isinstance(value, str) else str(value)

        if not self.pattern.fullmatch(value_str):
            raise self.fail(value_str, pattern=self.pattern.pattern)

    @property
    def rule_type(self) -> str:
        return "regex"

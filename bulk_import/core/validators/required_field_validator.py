"""
RequiredFieldValidator - ensures a field is present and not null/empty.
"""

from typing import Any, Dict

from bulk_import.core.models.raw_record import is_blank

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is present and not null/empty.

    Fails if:
    - Field is missing from the record
    - Field value is None
    - Field value is an empty or whitespace-only string
    - Field value is an empty list
    """

    default_message = "Campo obligatorio faltante: {field}"

    def validate(self, value: Any, record: Dict[str, Any]) -> None:
        """
        Validate that the field is present and not null/empty.

        Args:
            value: The field value to validate
            record: The entire record

        Raises:
            ValidationError: If field is missing, None, or empty
        """
        if self.field_name not in record or is_blank(value):
            raise self.fail(value)

    @property
    def rule_type(self) -> str:
        return "required_field"

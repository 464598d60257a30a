"""
RequiredWhenValidator - requires a field only for some discriminant values.
"""

from typing import Any

from bulk_import.core.models.raw_record import is_blank

from .base_validator import BaseValidator


class RequiredWhenValidator(BaseValidator):
    """
    Validates that a field is filled in when another field selects a role.

    Used for role-conditioned completeness checks, e.g. an ORIENTADOR user
    should reference a center. These rules are normally configured with
    severity "warning".

    Parameters:
    - field: The discriminant field to inspect
    - values: Discriminant values for which this field is required
    - message: Optional message template; ``{when_value}`` is the
      discriminant value of the record
    """

    default_message = "{when_value} requiere el campo {field}"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.discriminant = self.parameters.get("field")
        if not self.discriminant:
            raise ValueError("RequiredWhenValidator requires 'field' parameter")

        values = self.parameters.get("values")
        if not values:
            raise ValueError("RequiredWhenValidator requires non-empty 'values' parameter")
        self.when_values: tuple[Any, ...] = tuple(values)

    def applies_to(self, record: dict[str, Any]) -> bool:
        when_value = record.get(self.discriminant)
        return isinstance(when_value, str) and when_value in self.when_values

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not self.applies_to(record):
            return

        if is_blank(value):
            raise self.fail(value, when_value=record[self.discriminant])

    @property
    def rule_type(self) -> str:
        return "required_when"

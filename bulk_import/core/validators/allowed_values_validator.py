"""
AllowedValuesValidator - restricts a field to a fixed set of values.
"""

from typing import Any

from bulk_import.core.models.raw_record import is_blank

from .base_validator import BaseValidator


class AllowedValuesValidator(BaseValidator):
    """
    Validates that a present field value is one of an enumerated set.

    Parameters:
    - values: The accepted values
    - message: Optional message template
    """

    default_message = "Valor inválido para {field}: {value}"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        values = self.parameters.get("values")
        if not values:
            raise ValueError("AllowedValuesValidator requires non-empty 'values' parameter")
        self.allowed_values: tuple[Any, ...] = tuple(values)

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if is_blank(value):
            return

        if value not in self.allowed_values:
            raise self.fail(value)

    @property
    def rule_type(self) -> str:
        return "allowed_values"

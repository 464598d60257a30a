"""
Base validator interface for all validation rules.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """Raised when a validation rule fails."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements a specific validation rule type
    (required_field, regex, allowed_values, required_when).

    The user-facing text of a violation comes from the optional ``message``
    parameter, a template that may reference ``{field}`` and ``{value}``
    plus any validator-specific placeholders.
    """

    default_message = "Valor inválido en {field}"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Rule-specific parameters (e.g., pattern for regex)
        """
        self.field_name = field_name
        self.parameters = parameters or {}
        self.message_template: str = self.parameters.get("message", self.default_message)

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The field value to validate
            record: The entire record (for context-dependent validation)

        Raises:
            ValidationError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def fail(self, value: Any, **context: Any) -> ValidationError:
        """Build the ValidationError for a violation of this rule."""
        try:
            message = self.message_template.format(field=self.field_name, value=value, **context)
        except (KeyError, IndexError):
            # Template references a placeholder this rule does not provide
            message = self.message_template
        return ValidationError(
            rule_name=self.rule_type,
            field_name=self.field_name,
            message=message,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"

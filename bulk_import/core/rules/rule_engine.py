"""
Rule engine for classifying parsed rows.

The rule engine builds validators from rule configurations, applies every
one of them to each row, and sorts the rows into valid, valid-with-warnings
and invalid outcomes.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from bulk_import.core.models import (
    FieldSchema,
    ValidationOutcome,
    ValidationReport,
    ValidationRule,
)
from bulk_import.core.validators import (
    AllowedValuesValidator,
    BaseValidator,
    RegexValidator,
    RequiredFieldValidator,
    RequiredWhenValidator,
    ValidationError,
)
from bulk_import.observability import metrics
from bulk_import.observability.logger import get_logger

logger = get_logger(__name__)

MALFORMED_ROW_MESSAGE = "Fila con formato inválido"


class RuleEngine:
    """
    Orchestrates validation rules on raw records.

    Required-field rules are derived from the schema and run first, followed
    by the configured rules in declaration order. Every rule is evaluated on
    every row, so a row may collect several errors and warnings in one pass.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "regex": RegexValidator,
        "allowed_values": AllowedValuesValidator,
        "required_when": RequiredWhenValidator,
    }

    def __init__(
        self,
        rules: Iterable[dict[str, Any] | ValidationRule],
        schema: FieldSchema | None = None,
    ):
        """
        Initialize the rule engine with validation rules.

        Args:
            rules: Rule configurations (dicts or ValidationRule models), each containing:
                   - rule_name: str
                   - rule_type: str (required_field, regex, allowed_values, required_when)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - severity: str (error or warning)
                   - enabled: bool (default True)
            schema: Field schema; its required fields become error rules
        """
        self.schema = schema
        self.entity = schema.entity if schema else "unknown"
        self.rules = [self._coerce_rule(rule) for rule in rules]
        self.validators: list[tuple[str, str, BaseValidator]] = []
        self._build_validators()

    @staticmethod
    def _coerce_rule(rule: dict[str, Any] | ValidationRule) -> ValidationRule:
        if isinstance(rule, ValidationRule):
            return rule
        try:
            return ValidationRule.model_validate(rule)
        except ValueError as e:
            raise ValueError(f"Invalid rule configuration {rule.get('rule_name', rule)!r}: {e}")

    def _build_validators(self) -> None:
        """Build validator instances from the schema and rule configurations."""
        if self.schema:
            for field_name in self.schema.required_fields:
                self.validators.append(
                    (f"{field_name}_required", "error", RequiredFieldValidator(field_name))
                )

        for rule in self.rules:
            if not rule.enabled:
                continue

            validator_class = self.VALIDATOR_REGISTRY.get(rule.rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule.rule_type}")

            try:
                validator = validator_class(rule.field_name, rule.parameters)
            except ValueError as e:
                raise ValueError(f"Failed to create validator for rule '{rule.rule_name}': {e}")

            self.validators.append((rule.rule_name, rule.severity, validator))

    def validate_record(self, record: Mapping[str, Any], row_number: int) -> ValidationOutcome:
        """
        Validate a raw record against all rules.

        Args:
            record: The parsed row
            row_number: 1-based position of the row in the parsed output

        Returns:
            ValidationOutcome carrying the row and its error/warning messages
        """
        if not isinstance(record, Mapping):
            return ValidationOutcome(
                row_number=row_number,
                record={},
                errors=[MALFORMED_ROW_MESSAGE],
            )

        errors: list[str] = []
        warnings: list[str] = []

        for rule_name, severity, validator in self.validators:
            value = record.get(validator.field_name)

            try:
                validator.validate(value, record)
            except ValidationError as e:
                if severity == "error":
                    errors.append(e.message)
                    metrics.validation_failures_total.labels(
                        entity=self.entity,
                        rule_type=validator.rule_type,
                        field_name=validator.field_name,
                    ).inc()
                else:
                    warnings.append(e.message)
                    metrics.validation_warnings_total.labels(
                        entity=self.entity,
                        rule_type=validator.rule_type,
                        field_name=validator.field_name,
                    ).inc()

        return ValidationOutcome(
            row_number=row_number,
            record=dict(record),
            errors=errors,
            warnings=warnings,
        )

    def validate_batch(self, records: Iterable[Mapping[str, Any]]) -> ValidationReport:
        """
        Validate a batch of records.

        Args:
            records: Parsed rows, in file order

        Returns:
            ValidationReport partitioning the rows by outcome

        Raises:
            TypeError: If records is None
        """
        if records is None:
            raise TypeError("records must be an iterable of raw records, not None")

        valid: list[ValidationOutcome] = []
        warned: list[ValidationOutcome] = []
        rejected: list[ValidationOutcome] = []
        buckets = {"valid": valid, "valid_with_warnings": warned, "invalid": rejected}

        for row_number, record in enumerate(records, start=1):
            outcome = self.validate_record(record, row_number)
            buckets[outcome.status].append(outcome)
            metrics.validation_outcomes_total.labels(
                entity=self.entity, status=outcome.status
            ).inc()

        report = ValidationReport(valid=valid, warnings=warned, errors=rejected)
        logger.info(
            "Validation finished",
            extra={"entity": self.entity, **report.summary()},
        )
        return report

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts and types
        """
        return {
            "total_rules": len(self.validators),
            "rules_by_type": self._count_by_type(),
            "rules_by_severity": self._count_by_severity(),
        }

    def _count_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for _, _, validator in self.validators:
            rule_type = validator.rule_type
            counts[rule_type] = counts.get(rule_type, 0) + 1
        return counts

    def _count_by_severity(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for _, severity, _ in self.validators:
            counts[severity] = counts.get(severity, 0) + 1
        return counts


def validate_records(
    rows: Iterable[Mapping[str, Any]],
    schema: FieldSchema,
    rules: Iterable[dict[str, Any] | ValidationRule],
) -> ValidationReport:
    """Classify parsed rows against a schema and rule set."""
    return RuleEngine(rules, schema=schema).validate_batch(rows)

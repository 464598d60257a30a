"""
Validation outcome models: per-row classification and the batch report.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

OutcomeStatus = Literal["valid", "valid_with_warnings", "invalid"]


class ValidationOutcome(BaseModel):
    """
    Result of validating one parsed row (ephemeral, never persisted).

    The status is derived from the collected messages: any error makes the
    row invalid; otherwise any warning makes it valid_with_warnings.

    Attributes:
        row_number: 1-based position of the row in the parsed output
        record: The original raw record
        errors: Hard rule violations (row is excluded from import)
        warnings: Soft rule violations (row is still imported)
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "row_number": 3,
                "record": {"email": "orientador@colegio.es", "user_type": "ORIENTADOR"},
                "errors": [],
                "warnings": ["ORIENTADOR debe tener un centro asignado"],
            }
        },
    )

    row_number: int = Field(..., ge=1)
    record: dict[str, Any]
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def status(self) -> OutcomeStatus:
        if self.errors:
            return "invalid"
        if self.warnings:
            return "valid_with_warnings"
        return "valid"

    @property
    def is_eligible(self) -> bool:
        """Whether the row may be passed to the create operation."""
        return not self.errors


class ValidationReport(BaseModel):
    """
    Partition of a parsed batch into valid, warned and rejected rows.

    Every parsed row appears in exactly one of the three lists.
    """

    model_config = ConfigDict(frozen=True)

    valid: list[ValidationOutcome] = Field(default_factory=list)
    warnings: list[ValidationOutcome] = Field(default_factory=list)
    errors: list[ValidationOutcome] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_partition(self) -> "ValidationReport":
        """Each list must only hold outcomes of its own status."""
        for expected, outcomes in (
            ("valid", self.valid),
            ("valid_with_warnings", self.warnings),
            ("invalid", self.errors),
        ):
            for outcome in outcomes:
                if outcome.status != expected:
                    raise ValueError(
                        f"Row {outcome.row_number} has status '{outcome.status}' "
                        f"but was filed as '{expected}'"
                    )
        return self

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.warnings) + len(self.errors)

    @property
    def eligible_outcomes(self) -> list[ValidationOutcome]:
        """Valid and warned outcomes, in original row order."""
        return sorted(self.valid + self.warnings, key=lambda o: o.row_number)

    @property
    def eligible(self) -> list[dict[str, Any]]:
        """Records eligible for import, in original row order."""
        return [outcome.record for outcome in self.eligible_outcomes]

    @property
    def has_eligible(self) -> bool:
        return bool(self.valid or self.warnings)

    def summary(self) -> dict[str, int]:
        return {
            "total": self.total,
            "valid": len(self.valid),
            "warnings": len(self.warnings),
            "errors": len(self.errors),
            "eligible": len(self.valid) + len(self.warnings),
        }

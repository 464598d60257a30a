"""
Unit tests for core data models.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from bulk_import.core.models import (
    STAGE_ORDER,
    Complete,
    FieldSchema,
    Idle,
    Importing,
    ImportFailure,
    ImportResult,
    PipelineState,
    ReviewingResults,
    ValidationOutcome,
    ValidationReport,
    ValidationRule,
    is_blank,
)


pytestmark = pytest.mark.unit


def _outcome(row_number, errors=(), warnings=()):
    return ValidationOutcome(
        row_number=row_number,
        record={"email": f"row{row_number}@colegio.es"},
        errors=list(errors),
        warnings=list(warnings),
    )


class TestIsBlank:
    """Tests for blank value detection"""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n", [], ()])
    def test_blank_values(self, value):
        assert is_blank(value) is True

    @pytest.mark.parametrize("value", ["x", " 0 ", ["A"], 0, False])
    def test_present_values(self, value):
        assert is_blank(value) is False


class TestFieldSchema:
    """Tests for FieldSchema model"""

    def test_headers_list_required_then_optional(self):
        schema = FieldSchema(
            entity="usuarios",
            required_fields=["email", "user_type"],
            optional_fields=["full_name"],
        )

        assert schema.headers == ["email", "user_type", "full_name"]
        assert schema.is_known_field("full_name") is True
        assert schema.is_known_field("dni") is False

    def test_duplicate_field_rejected(self):
        with pytest.raises(ValidationError, match="declared more than once"):
            FieldSchema(
                entity="usuarios",
                required_fields=["email"],
                optional_fields=["email"],
            )

    def test_entity_required(self):
        with pytest.raises(ValidationError):
            FieldSchema(entity="")

    def test_schema_is_immutable(self, users_schema):
        with pytest.raises(ValidationError):
            users_schema.entity = "otros"


class TestValidationOutcome:
    """Tests for ValidationOutcome model"""

    def test_status_valid(self):
        outcome = _outcome(1)
        assert outcome.status == "valid"
        assert outcome.is_eligible is True

    def test_status_valid_with_warnings(self):
        outcome = _outcome(1, warnings=["ORIENTADOR debe tener un centro asignado"])
        assert outcome.status == "valid_with_warnings"
        assert outcome.is_eligible is True

    def test_errors_take_precedence_over_warnings(self):
        outcome = _outcome(1, errors=["Email con formato inválido"], warnings=["aviso"])
        assert outcome.status == "invalid"
        assert outcome.is_eligible is False

    def test_row_number_is_one_based(self):
        with pytest.raises(ValidationError):
            _outcome(0)


class TestValidationReport:
    """Tests for ValidationReport model"""

    def test_summary_and_eligible_order(self):
        report = ValidationReport(
            valid=[_outcome(1), _outcome(4)],
            warnings=[_outcome(2, warnings=["aviso"])],
            errors=[_outcome(3, errors=["error"])],
        )

        assert report.total == 4
        assert report.summary() == {
            "total": 4,
            "valid": 2,
            "warnings": 1,
            "errors": 1,
            "eligible": 3,
        }
        assert [o.row_number for o in report.eligible_outcomes] == [1, 2, 4]
        assert report.eligible == [
            {"email": "row1@colegio.es"},
            {"email": "row2@colegio.es"},
            {"email": "row4@colegio.es"},
        ]
        assert report.has_eligible is True

    def test_only_errors_has_nothing_eligible(self):
        report = ValidationReport(errors=[_outcome(1, errors=["error"])])
        assert report.has_eligible is False
        assert report.eligible == []

    def test_misfiled_outcome_rejected(self):
        with pytest.raises(ValidationError, match="filed as 'valid'"):
            ValidationReport(valid=[_outcome(1, errors=["error"])])


class TestImportResult:
    """Tests for ImportResult model"""

    def test_valid_tally(self):
        result = ImportResult(
            total=5,
            succeeded=3,
            failed=2,
            failures=[
                ImportFailure(row_number=2, error="409: duplicado"),
                ImportFailure(row_number=4, error="500: error interno"),
            ],
        )
        assert result.succeeded + result.failed == result.total

    def test_tally_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="!= total"):
            ImportResult(total=5, succeeded=3, failed=1)

    def test_failures_must_match_failed_count(self):
        with pytest.raises(ValidationError, match="every failed record"):
            ImportResult(
                total=2,
                succeeded=0,
                failed=2,
                failures=[ImportFailure(row_number=1, error="boom")],
            )


class TestValidationRule:
    """Tests for ValidationRule model"""

    def test_defaults(self):
        rule = ValidationRule(rule_name="email_regex", rule_type="regex", field_name="email")
        assert rule.severity == "error"
        assert rule.enabled is True
        assert rule.parameters == {}

    def test_unknown_rule_type_rejected(self):
        with pytest.raises(ValidationError):
            ValidationRule(rule_name="amount_range", rule_type="range", field_name="amount")

    def test_unknown_severity_rejected(self):
        with pytest.raises(ValidationError):
            ValidationRule(
                rule_name="email_regex",
                rule_type="regex",
                field_name="email",
                severity="info",
            )


class TestPipelineState:
    """Tests for the pipeline state models"""

    def test_importing_requires_eligible_rows(self):
        report = ValidationReport(errors=[_outcome(1, errors=["error"])])

        with pytest.raises(ValidationError, match="eligible"):
            Importing(records=[{"email": ""}], report=report)

    def test_reviewing_can_import(self):
        report = ValidationReport(valid=[_outcome(1)])
        state = ReviewingResults(records=[{"email": "row1@colegio.es"}], report=report)
        assert state.can_import is True

    def test_discriminated_union_parses_by_stage(self):
        adapter = TypeAdapter(PipelineState)

        assert isinstance(adapter.validate_python({"stage": "idle"}), Idle)

        complete = adapter.validate_python({
            "stage": "complete",
            "records": [],
            "report": {},
            "result": {"total": 1, "succeeded": 1, "failed": 0},
        })
        assert isinstance(complete, Complete)
        assert complete.result.succeeded == 1

    def test_stage_order(self):
        assert STAGE_ORDER[0] == Idle().stage
        assert STAGE_ORDER[-1] == "complete"
        assert len(STAGE_ORDER) == 6

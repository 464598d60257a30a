"""
Core data models for the bulk import pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .field_schema import FieldSchema
from .import_result import ImportFailure, ImportResult
from .pipeline_state import (
    STAGE_ORDER,
    Complete,
    Idle,
    Importing,
    PipelineState,
    ReviewingResults,
    Uploading,
    Validating,
)
from .raw_record import FieldValue, RawRecord, is_blank
from .validation_outcome import OutcomeStatus, ValidationOutcome, ValidationReport
from .validation_rule import RuleType, ValidationRule

__all__ = [
    "FieldSchema",
    "FieldValue",
    "RawRecord",
    "is_blank",
    "RuleType",
    "ValidationRule",
    "OutcomeStatus",
    "ValidationOutcome",
    "ValidationReport",
    "ImportFailure",
    "ImportResult",
    "PipelineState",
    "STAGE_ORDER",
    "Idle",
    "Uploading",
    "Validating",
    "ReviewingResults",
    "Importing",
    "Complete",
]

"""
Pipeline state models.

Each stage of an import run is its own frozen model carrying exactly the
artifacts available at that stage, so a state such as "importing with no
eligible rows" cannot be constructed.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .import_result import ImportResult
from .validation_outcome import ValidationReport


class _StageModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Idle(_StageModel):
    """Waiting for a file. Carries the message of the run that aborted, if any."""

    stage: Literal["idle"] = "idle"
    error: str | None = None


class Uploading(_StageModel):
    stage: Literal["uploading"] = "uploading"
    file_name: str | None = None


class Validating(_StageModel):
    stage: Literal["validating"] = "validating"
    file_name: str | None = None
    records: list[dict[str, Any]]


class ReviewingResults(_StageModel):
    """Validation finished; the operator decides whether to import."""

    stage: Literal["reviewing_results"] = "reviewing_results"
    file_name: str | None = None
    records: list[dict[str, Any]]
    report: ValidationReport

    @property
    def can_import(self) -> bool:
        return self.report.has_eligible


class Importing(_StageModel):
    stage: Literal["importing"] = "importing"
    file_name: str | None = None
    records: list[dict[str, Any]]
    report: ValidationReport

    @model_validator(mode="after")
    def check_has_eligible(self) -> "Importing":
        if not self.report.has_eligible:
            raise ValueError("Importing requires at least one eligible record")
        return self


class Complete(_StageModel):
    stage: Literal["complete"] = "complete"
    file_name: str | None = None
    records: list[dict[str, Any]]
    report: ValidationReport
    result: ImportResult


PipelineState = Annotated[
    Union[Idle, Uploading, Validating, ReviewingResults, Importing, Complete],
    Field(discriminator="stage"),
]

STAGE_ORDER = (
    "idle",
    "uploading",
    "validating",
    "reviewing_results",
    "importing",
    "complete",
)

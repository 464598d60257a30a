"""
ImportResult model: the final tally of a bulk create run.
"""

from pydantic import BaseModel, Field, model_validator


class ImportFailure(BaseModel):
    """A record the create operation rejected."""

    row_number: int = Field(..., ge=1)
    error: str


class ImportResult(BaseModel):
    """
    Outcome of one import run.

    Attributes:
        total: Number of records submitted to the importer
        succeeded: Records created
        failed: Records whose create call raised
        failures: Per-record detail for the failed records
    """

    total: int = Field(..., ge=0)
    succeeded: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    failures: list[ImportFailure] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_tally(self) -> "ImportResult":
        """Validate that succeeded + failed == total."""
        if self.succeeded + self.failed != self.total:
            raise ValueError(
                f"succeeded ({self.succeeded}) + failed ({self.failed}) "
                f"!= total ({self.total})"
            )
        if self.failures and len(self.failures) != self.failed:
            raise ValueError("failures must list every failed record")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "total": 5,
                "succeeded": 3,
                "failed": 2,
                "failures": [
                    {"row_number": 2, "error": "409 Conflict: email already registered"},
                    {"row_number": 4, "error": "422 Unprocessable Entity"},
                ],
            }
        }

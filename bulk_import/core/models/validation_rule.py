"""
ValidationRule model representing a configurable constraint applied to imported rows.
"""

from typing import Any, Dict, Literal

from pydantic import BaseModel, Field

RuleType = Literal["required_field", "regex", "allowed_values", "required_when"]


class ValidationRule(BaseModel):
    """
    A configurable constraint applied to imported rows.

    Attributes:
        rule_name: Human-readable name ("email_regex")
        rule_type: Type: "required_field", "regex", "allowed_values", "required_when"
        field_name: Which field this rule applies to
        parameters: Rule-specific params (e.g., {"pattern": "..."} or {"values": [...]})
        enabled: Whether rule is active
        severity: "error" (row rejected) or "warning" (row imported, issue reported)
    """

    rule_name: str = Field(..., min_length=1)
    rule_type: RuleType
    field_name: str = Field(..., min_length=1)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True
    severity: Literal["error", "warning"] = "error"

    class Config:
        json_schema_extra = {
            "example": {
                "rule_name": "center_id_required_when",
                "rule_type": "required_when",
                "field_name": "center_id",
                "parameters": {
                    "field": "user_type",
                    "values": ["ORIENTADOR"],
                    "message": "ORIENTADOR debe tener un centro asignado",
                },
                "enabled": True,
                "severity": "warning"
            }
        }

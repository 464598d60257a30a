"""
FieldSchema model describing the expected columns of an import file.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldSchema(BaseModel):
    """
    Expected fields for one importable entity.

    Attributes:
        entity: Entity name, used in template file names and log context
        required_fields: Fields that must be present and non-empty in every row
        optional_fields: Recognized but not mandatory fields
        example: Example value per field, written to the template data row
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "entity": "usuarios",
                "required_fields": ["email", "user_type"],
                "optional_fields": ["full_name", "center_id"],
                "example": {
                    "email": "usuario@ejemplo.com",
                    "user_type": "ORIENTADOR",
                },
            }
        },
    )

    entity: str = Field(..., min_length=1)
    required_fields: list[str] = Field(default_factory=list)
    optional_fields: list[str] = Field(default_factory=list)
    example: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_no_duplicate_fields(self) -> "FieldSchema":
        """A field may be declared only once across required and optional."""
        seen: set[str] = set()
        for name in self.required_fields + self.optional_fields:
            if name in seen:
                raise ValueError(f"Field '{name}' is declared more than once")
            seen.add(name)
        return self

    @property
    def headers(self) -> list[str]:
        """Required fields followed by optional fields, in declaration order."""
        return [*self.required_fields, *self.optional_fields]

    def is_known_field(self, name: str) -> bool:
        return name in self.required_fields or name in self.optional_fields

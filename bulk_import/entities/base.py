"""
EntityDefinition: everything the pipeline needs to import one entity type.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from bulk_import.core.models import FieldSchema
from bulk_import.core.rules import RuleConfigLoader


class EntityDefinition(BaseModel):
    """
    Attributes:
        field_schema: Expected fields and template example
        rules: Rule configurations applied after the required-field rules
        resource: REST collection path the create operation posts to
        record_model: Optional model converting raw records into create payloads
    """

    model_config = ConfigDict(frozen=True)

    field_schema: FieldSchema
    rules: list[dict[str, Any]]
    resource: str
    record_model: type[BaseModel] | None = None

    @property
    def name(self) -> str:
        return self.field_schema.entity

    @classmethod
    def from_yaml(cls, config_path: str | Path, resource: str | None = None) -> "EntityDefinition":
        """
        Build a definition from a rule file with a 'schema' section.

        Args:
            config_path: YAML rule file
            resource: REST collection path; defaults to "/<entity>"

        Raises:
            ValueError: If the file has no schema section
        """
        loader = RuleConfigLoader(config_path)
        schema = loader.load_schema()
        if schema is None:
            raise ValueError(f"Rule file {config_path} has no 'schema' section")
        return cls(
            field_schema=schema,
            rules=loader.load_rules(),
            resource=resource or f"/{schema.entity}",
        )

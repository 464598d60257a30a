"""
Rule configuration management.

Loads validation rules (and optionally the field schema they apply to)
from YAML files and provides a builder for programmatic rule sets.
"""

from pathlib import Path
from typing import Any

import yaml

from bulk_import.core.models import FieldSchema


class RuleConfigLoader:
    """
    Loads validation rules from YAML configuration files.

    Expected YAML format:
    ```yaml
    schema:
      entity: usuarios
      required: [email, user_type]
      optional: [full_name, center_id]
      example:
        email: usuario@ejemplo.com

    rules:
      email:
        - type: regex
          message: "Email con formato inválido"
          params:
            pattern: "^[^\\s@]+@[^\\s@]+\\.[^\\s@]+$"

      center_id:
        - type: required_when
          severity: warning
          message: "ORIENTADOR debe tener un centro asignado"
          params:
            field: user_type
            values: [ORIENTADOR]
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")
        self._config: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._config is None:
            with open(self.config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
            if not isinstance(config, dict):
                raise ValueError("Configuration file must be a mapping")
            self._config = config
        return self._config

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse validation rules from YAML file.

        Returns:
            List of rule dictionaries suitable for RuleEngine

        Raises:
            ValueError: If YAML is invalid or missing required fields
        """
        config = self._load()

        if "rules" not in config:
            raise ValueError("Configuration file must contain 'rules' section")

        rules = []
        field_rules = config["rules"] or {}

        for field_name, field_rule_list in field_rules.items():
            if not isinstance(field_rule_list, list):
                raise ValueError(f"Rules for field '{field_name}' must be a list")

            for idx, rule_def in enumerate(field_rule_list):
                rules.append(self._parse_rule(field_name, rule_def, idx))

        return rules

    def load_schema(self) -> FieldSchema | None:
        """
        Load the optional 'schema' section.

        Returns:
            FieldSchema, or None when the file only defines rules
        """
        section = self._load().get("schema")
        if section is None:
            return None

        if "entity" not in section:
            raise ValueError("Schema section is missing 'entity'")

        example = {
            name: "" if value is None else str(value)
            for name, value in (section.get("example") or {}).items()
        }
        return FieldSchema(
            entity=section["entity"],
            required_fields=list(section.get("required") or []),
            optional_fields=list(section.get("optional") or []),
            example=example,
        )

    def _parse_rule(self, field_name: str, rule_def: dict[str, Any], idx: int) -> dict[str, Any]:
        """
        Parse a single rule definition.

        Args:
            field_name: The field this rule applies to
            rule_def: The rule definition from YAML
            idx: Index of this rule for the field (for naming)

        Returns:
            Parsed rule dictionary

        Raises:
            ValueError: If rule definition is invalid
        """
        if "type" not in rule_def:
            raise ValueError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = rule_def["type"]
        rule_name = rule_def.get("name", f"{field_name}_{rule_type}_{idx}")
        parameters = dict(rule_def.get("params", rule_def.get("parameters")) or {})

        if "message" in rule_def:
            parameters["message"] = rule_def["message"]

        severity = rule_def.get("severity", "error")
        if severity not in ("error", "warning"):
            raise ValueError(f"Invalid severity '{severity}' for rule '{rule_name}'. Must be 'error' or 'warning'")

        enabled = rule_def.get("enabled", True)

        return {
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": enabled,
        }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (for entity definitions or tests).
    """

    def __init__(self):
        self.rules: list[dict[str, Any]] = []

    def _add(
        self,
        rule_type: str,
        field_name: str,
        parameters: dict[str, Any],
        severity: str,
        message: str | None,
    ) -> "RuleConfigBuilder":
        if message is not None:
            parameters["message"] = message
        self.rules.append({
            "rule_name": f"{field_name}_{rule_type}_{len(self.rules)}",
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": True,
        })
        return self

    def add_required_field(self, field_name: str, message: str | None = None) -> "RuleConfigBuilder":
        """Add a required field rule."""
        return self._add("required_field", field_name, {}, "error", message)

    def add_regex(
        self,
        field_name: str,
        pattern: str,
        message: str | None = None,
        severity: str = "error",
    ) -> "RuleConfigBuilder":
        """Add a regex format rule."""
        return self._add("regex", field_name, {"pattern": pattern}, severity, message)

    def add_allowed_values(
        self,
        field_name: str,
        values: list[str],
        message: str | None = None,
        severity: str = "error",
    ) -> "RuleConfigBuilder":
        """Add an enumerated-values rule."""
        return self._add("allowed_values", field_name, {"values": list(values)}, severity, message)

    def add_required_when(
        self,
        field_name: str,
        when_field: str,
        when_values: list[str],
        message: str | None = None,
        severity: str = "warning",
    ) -> "RuleConfigBuilder":
        """Add a role-conditioned required rule (a warning by default)."""
        return self._add(
            "required_when",
            field_name,
            {"field": when_field, "values": list(when_values)},
            severity,
            message,
        )

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules

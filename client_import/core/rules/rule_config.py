"""
Rule configuration management.

Loads field rules from YAML files, or builds them in code for the default
client schema and for tests.
"""

from pathlib import Path
from typing import Any

import yaml


class RuleConfigLoader:
    """
    Loads validation rules from YAML configuration files.

    Expected YAML format:
    ```yaml
    rules:
      company_name:
        - type: required_field
          message: Company name is required
        - type: length
          params:
            max: 255
          message: Company name cannot exceed 255 characters
      email:
        - type: required_field
        - type: email
          message: Email must be a valid email address
    ```
    """

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse validation rules from the YAML file.

        Returns:
            List of rule dictionaries suitable for RuleEngine

        Raises:
            ValueError: If YAML is invalid or missing required fields
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "rules" not in config:
            raise ValueError("Configuration file must contain 'rules' section")

        rules = []
        for field_name, field_rule_list in config["rules"].items():
            if not isinstance(field_rule_list, list):
                raise ValueError(f"Rules for field '{field_name}' must be a list")

            for idx, rule_def in enumerate(field_rule_list):
                rules.append(self._parse_rule(field_name, rule_def, idx))

        return rules

    def _parse_rule(self, field_name: str, rule_def: dict[str, Any], idx: int) -> dict[str, Any]:
        if "type" not in rule_def:
            raise ValueError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = rule_def["type"]
        rule_name = rule_def.get("name", f"{field_name}_{rule_type}_{idx}")
        parameters = dict(rule_def.get("params", rule_def.get("parameters", {})) or {})

        # message may sit beside params for readability
        if "message" in rule_def:
            parameters["message"] = rule_def["message"]

        return {
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "enabled": rule_def.get("enabled", True),
        }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations.
    """

    def __init__(self):
        self.rules: list[dict[str, Any]] = []

    def _add(self, field_name: str, rule_type: str, parameters: dict[str, Any], message: str | None) -> "RuleConfigBuilder":
        if message:
            parameters["message"] = message
        self.rules.append({
            "rule_name": f"{field_name}_{rule_type}",
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "enabled": True,
        })
        return self

    def add_required_field(self, field_name: str, message: str | None = None) -> "RuleConfigBuilder":
        return self._add(field_name, "required_field", {}, message)

    def add_type_check(self, field_name: str, expected_type: str = "string", message: str | None = None) -> "RuleConfigBuilder":
        return self._add(field_name, "type_check", {"expected_type": expected_type}, message)

    def add_max_length(self, field_name: str, max_length: int, message: str | None = None) -> "RuleConfigBuilder":
        return self._add(field_name, "length", {"max": max_length}, message)

    def add_regex(self, field_name: str, pattern: str, message: str | None = None) -> "RuleConfigBuilder":
        return self._add(field_name, "regex", {"pattern": pattern}, message)

    def add_email(self, field_name: str, message: str | None = None) -> "RuleConfigBuilder":
        return self._add(field_name, "email", {}, message)

    def build(self) -> list[dict[str, Any]]:
        return self.rules


def default_client_rules(max_length: int = 255) -> list[dict[str, Any]]:
    """Rules for company_name, email and phone_number with the standard messages."""
    builder = RuleConfigBuilder()

    (builder
        .add_required_field("company_name", "Company name is required")
        .add_type_check("company_name", message="Company name must be a valid text")
        .add_max_length("company_name", max_length, f"Company name cannot exceed {max_length} characters"))

    (builder
        .add_required_field("email", "Email address is required")
        .add_email("email", "Email must be a valid email address")
        .add_max_length("email", max_length, f"Email cannot exceed {max_length} characters"))

    (builder
        .add_required_field("phone_number", "Phone number is required")
        .add_type_check("phone_number", message="Phone number must be a valid text")
        .add_max_length("phone_number", max_length, f"Phone number cannot exceed {max_length} characters"))

    return builder.build()

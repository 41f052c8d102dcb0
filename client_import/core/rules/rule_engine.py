"""
Rule engine applying field rules to rows.

RowValidator is the entry point used by the import pipeline and by record
edits; RuleEngine does the per-rule work.
"""

from pathlib import Path
from typing import Any

from client_import.core.models import ValidationResult
from client_import.core.validators import (
    BaseValidator,
    EmailValidator,
    LengthValidator,
    RegexValidator,
    RequiredFieldValidator,
    TypeValidator,
    ValidationError,
)

from .rule_config import RuleConfigLoader, default_client_rules


class RuleEngine:
    """
    Applies validation rules to a row in configuration order.

    Every violated rule contributes one message. When a field fails its
    required_field rule, the remaining rules for that field are skipped.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "type_check": TypeValidator,
        "length": LengthValidator,
        "max_length": LengthValidator,
        "regex": RegexValidator,
        "email": EmailValidator,
    }

    def __init__(self, rules: list[dict[str, Any]]):
        """
        Args:
            rules: Rule configurations with rule_name, rule_type, field_name,
                   parameters (optional) and enabled (default True)
        """
        self.rules = rules
        self.validators: list[tuple[str, BaseValidator]] = []
        self._build_validators()

    def _build_validators(self) -> None:
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(rule["field_name"], rule.get("parameters", {}))
            except ValueError as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}") from e
            self.validators.append((rule_name, validator))

    @property
    def field_names(self) -> list[str]:
        return list(dict.fromkeys(v.field_name for _, v in self.validators))

    def validate(self, row: dict[str, Any], fields: set[str] | None = None) -> ValidationResult:
        """
        Validate a row.

        Args:
            row: Field name to value mapping
            fields: Restrict validation to these fields (all rule fields if None)

        Returns:
            ValidationResult with messages grouped by field
        """
        errors: dict[str, list[str]] = {}
        bailed: set[str] = set()

        for _, validator in self.validators:
            field_name = validator.field_name
            if fields is not None and field_name not in fields:
                continue
            if field_name in bailed:
                continue

            try:
                validator.validate(row.get(field_name), row)
            except ValidationError as e:
                errors.setdefault(field_name, []).append(e.message)
                if validator.rule_type == "required_field":
                    bailed.add(field_name)

        return ValidationResult.from_errors(errors)

    def get_rule_summary(self) -> dict[str, Any]:
        counts: dict[str, int] = {}
        for _, validator in self.validators:
            counts[validator.rule_type] = counts.get(validator.rule_type, 0) + 1
        return {"total_rules": len(self.validators), "rules_by_type": counts}


class RowValidator:
    """
    Validates client rows: company_name, email and phone_number.

    Pure: never touches persisted state.
    """

    def __init__(self, rules: list[dict[str, Any]] | None = None):
        self.engine = RuleEngine(rules if rules is not None else default_client_rules())

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "RowValidator":
        return cls(RuleConfigLoader(config_path).load_rules())

    def validate(self, row: dict[str, Any]) -> ValidationResult:
        """Validate every configured field of an import row."""
        return self.engine.validate(row)

    def validate_partial(self, changes: dict[str, Any]) -> ValidationResult:
        """Validate only the fields present in changes (used for record edits)."""
        return self.engine.validate(changes, fields=set(changes))

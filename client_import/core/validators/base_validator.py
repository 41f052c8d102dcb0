"""
Base validator interface for field rules.

All validators inherit from BaseValidator and implement validate(). A rule
may carry a human-readable "message" parameter that replaces its default
failure text in error reports.
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """Raised when a validation rule fails."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator checks one constraint (required, type_check, max_length,
    regex, email) on one field.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Rule-specific parameters (e.g. max for max_length)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The field value to validate
            record: The entire row (for context-dependent validation)

        Raises:
            ValidationError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def fail(self, default_message: str) -> None:
        """Raise a ValidationError using the configured message if there is one."""
        raise ValidationError(
            rule_name=self.rule_type,
            field_name=self.field_name,
            message=self.parameters.get("message", default_message),
        )

    @staticmethod
    def is_blank(value: Any) -> bool:
        return value is None or (isinstance(value, str) and value.strip() == "")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"

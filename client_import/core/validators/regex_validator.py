"""
RegexValidator and EmailValidator - syntax checks on text values.
"""

import re
from re import Pattern
from typing import Any

from email_validator import EmailNotValidError, validate_email

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates that a field value matches a regular expression pattern.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - flags: Optional regex flags (e.g., re.IGNORECASE)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.pattern = self._compile(self.parameters.get("pattern"), self.parameters.get("flags", 0))

    @staticmethod
    def _compile(pattern: Any, flags: int) -> Pattern:
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")
        if isinstance(pattern, Pattern):
            return pattern
        if not isinstance(pattern, str):
            raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}") from e

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.is_blank(value):
            return

        value_str = value if isinstance(value, str) else str(value)

        if not self.pattern.fullmatch(value_str):
            self.fail(f"Value '{value_str}' does not match pattern '{self.pattern.pattern}'")

    @property
    def rule_type(self) -> str:
        return "regex"


class EmailValidator(BaseValidator):
    """
    Validates email address syntax with email-validator.

    Internationalized addresses are accepted. No deliverability or DNS
    checks, and single-label domains such as localhost pass.
    """

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.is_blank(value):
            return

        value_str = value if isinstance(value, str) else str(value)

        try:
            validate_email(value_str, check_deliverability=False, globally_deliverable=False)
        except EmailNotValidError as e:
            self.fail(f"Value '{value_str}' is not a valid email address: {e}")

    @property
    def rule_type(self) -> str:
        return "email"

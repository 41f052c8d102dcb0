"""
TypeValidator - checks the Python type of a field value.
"""

from typing import Any

from .base_validator import BaseValidator


class TypeValidator(BaseValidator):
    """
    Validates that a field holds a value of the expected type.

    Blank values are left to RequiredFieldValidator.

    Parameters:
    - expected_type: "string" (default), "integer", "float" or "boolean"
    """

    TYPE_MAPPING = {
        "string": str,
        "str": str,
        "integer": int,
        "int": int,
        "float": float,
        "boolean": bool,
        "bool": bool,
    }

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        expected_type = self.parameters.get("expected_type", "string")
        self.expected_type = self.TYPE_MAPPING.get(str(expected_type).lower())
        if not self.expected_type:
            raise ValueError(f"Unsupported type: {expected_type}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.is_blank(value):
            return

        if not isinstance(value, self.expected_type):
            self.fail(f"Expected {self.expected_type.__name__}, got {type(value).__name__}")

    @property
    def rule_type(self) -> str:
        return "type_check"

"""
RequiredFieldValidator - ensures a field is present and not null/blank.
"""

from typing import Any

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is present and not null/empty.

    Fails if:
    - Field is missing from the record
    - Field value is None
    - Field value is an empty or whitespace-only string
    """

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.field_name not in record:
            self.fail("Field is missing from record")

        if value is None:
            self.fail("Field value is null")

        if isinstance(value, str) and value.strip() == "":
            self.fail("Field value is empty string")

    @property
    def rule_type(self) -> str:
        return "required_field"

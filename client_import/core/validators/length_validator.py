"""
LengthValidator - bounds the length of a text value.
"""

from typing import Any

from .base_validator import BaseValidator


class LengthValidator(BaseValidator):
    """
    Validates that len(str(value)) lies within [min, max].

    Parameters:
    - max: Maximum number of characters (inclusive)
    - min: Minimum number of characters (inclusive, optional)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_length = self.parameters.get("min")
        self.max_length = self.parameters.get("max")

        if self.min_length is None and self.max_length is None:
            raise ValueError("LengthValidator requires at least one of 'min' or 'max' parameters")

        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError(f"min ({self.min_length}) cannot be greater than max ({self.max_length})")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.is_blank(value):
            return

        length = len(str(value))

        if self.max_length is not None and length > self.max_length:
            self.fail(f"Length {length} exceeds maximum {self.max_length}")

        if self.min_length is not None and length < self.min_length:
            self.fail(f"Length {length} is below minimum {self.min_length}")

    @property
    def rule_type(self) -> str:
        return "length"

"""
ValidationResult model representing the outcome of validating one row (ephemeral).
"""

from pydantic import BaseModel, Field, field_validator


class ValidationResult(BaseModel):
    """
    Outcome of validating a row (ephemeral, never persisted).

    Attributes:
        valid: Overall status
        errors: Messages keyed by field name, in rule order
        messages: All messages flattened, field by field
    """

    valid: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)
    messages: list[str] = Field(default_factory=list)

    @field_validator('messages')
    @classmethod
    def check_valid_consistency(cls, v, info):
        """valid=True implies there are no messages."""
        if info.data.get('valid') and len(v) > 0:
            raise ValueError("valid=True but messages is not empty")
        return v

    @classmethod
    def from_errors(cls, errors: dict[str, list[str]]) -> "ValidationResult":
        errors = {field: msgs for field, msgs in errors.items() if msgs}
        messages = [msg for msgs in errors.values() for msg in msgs]
        return cls(valid=not messages, errors=errors, messages=messages)

"""
Duplicate detection results and duplicate group views.
"""

from pydantic import BaseModel, model_validator

from .client_record import ClientRecord


class DuplicateCheck(BaseModel):
    """Result of checking one candidate row against stored records."""

    is_duplicate: bool
    group_id: str | None = None

    @model_validator(mode="after")
    def check_group_consistency(self):
        if self.is_duplicate and not self.group_id:
            raise ValueError("is_duplicate=True requires a group_id")
        if not self.is_duplicate and self.group_id:
            raise ValueError("is_duplicate=False must not carry a group_id")
        return self


class DuplicateGroupSummary(BaseModel):
    """
    One duplicate group with representative values.

    Representative values are the minimum of each field across the group,
    which for exact-match groups is simply the shared value.
    """

    group_id: str
    count: int
    representative_company: str
    representative_email: str
    representative_phone: str
    clients: list[ClientRecord] | None = None


class ClientWithDuplicates(BaseModel):
    client: ClientRecord
    related_duplicates: list[ClientRecord]

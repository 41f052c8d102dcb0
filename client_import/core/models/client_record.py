"""
ClientRecord model representing one persisted company contact entry.
"""

from datetime import datetime, timezone
from typing import NamedTuple

from pydantic import BaseModel, Field


class ClientTriple(NamedTuple):
    """The (company_name, email, phone_number) key used for exact-match duplicate detection."""

    company_name: str
    email: str
    phone_number: str

    @classmethod
    def from_row(cls, row: dict) -> "ClientTriple":
        return cls(row["company_name"], row["email"], row["phone_number"])


class ImportMetadata(BaseModel):
    """
    Provenance written onto every imported record. Never used for matching.

    Attributes:
        batch_id: Identifier of the import run that wrote the record
        row_number: 1-based line number in the source file (header is line 1)
        imported_at: When the row was persisted
    """

    batch_id: str
    row_number: int = Field(..., ge=2)
    imported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NewClient(BaseModel):
    """A client about to be inserted; id and timestamps are assigned by the store."""

    company_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    phone_number: str = Field(..., min_length=1, max_length=255)
    is_duplicate: bool = False
    duplicate_group_id: str | None = None
    import_metadata: ImportMetadata | None = None

    @property
    def triple(self) -> ClientTriple:
        return ClientTriple(self.company_name, self.email, self.phone_number)


class ClientRecord(NewClient):
    """
    A persisted client.

    Attributes:
        id: System-assigned sequential identifier (immutable)
        company_name: Company name
        email: Contact email address
        phone_number: Contact phone number
        is_duplicate: Whether the record matched an earlier record at import time
        duplicate_group_id: Group shared with identical records (UUID string)
        import_metadata: Batch id, row number and timestamp of the import
        created_at: Insert time
        updated_at: Last edit time
    """

    id: int
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": 42,
                "company_name": "Acme",
                "email": "a@acme.com",
                "phone_number": "+1-555-0001",
                "is_duplicate": True,
                "duplicate_group_id": "0f8c4f3e-0d4b-4b0e-9a53-3a8f3c1f2a11",
                "import_metadata": {
                    "batch_id": "5b1f6c2a-8d7e-4c39-b1a0-0c9e2f4d6a77",
                    "row_number": 3,
                    "imported_at": "2025-10-20T07:25:24Z"
                },
                "created_at": "2025-10-20T07:25:24Z"
            }
        }

"""
Aggregate views over persisted clients.
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ImportStats(BaseModel):
    """
    Counts computed from the clients table at query time.

    Attributes:
        total_clients: All records
        unique_clients: Records with is_duplicate = false
        duplicate_clients: Records with is_duplicate = true
        duplicate_groups: Distinct non-null group ids among duplicate records
        last_import: Most recent import_metadata.imported_at, if any
        import_count: Distinct batch ids seen in import_metadata
    """

    total_clients: int = Field(0, ge=0)
    unique_clients: int = Field(0, ge=0)
    duplicate_clients: int = Field(0, ge=0)
    duplicate_groups: int = Field(0, ge=0)
    last_import: datetime | None = None
    import_count: int = Field(0, ge=0)


class Page(BaseModel, Generic[T]):
    """One page of a paginated query."""

    items: list[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, -(-self.total // self.per_page))

"""
Storage ports for clients.

The pipeline and the duplicate detector depend only on these interfaces.
PostgresClientRepository (client_import.warehouse.client_store) is the
production adapter; tests use an in-memory implementation.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Any

from pydantic import BaseModel, model_validator

from client_import.core.models import (
    ClientRecord,
    ClientTriple,
    ClientWithDuplicates,
    DuplicateGroupSummary,
    ImportStats,
    NewClient,
    Page,
)

EDITABLE_FIELDS = ("company_name", "email", "phone_number")


class ClientFilter(BaseModel):
    """
    Selection used by listing and export.

    search is a case-insensitive substring match over company_name, email and phone_number.
    """

    duplicates_only: bool = False
    unique_only: bool = False
    duplicate_group_id: str | None = None
    search: str | None = None

    @model_validator(mode="after")
    def check_exclusive(self):
        if self.duplicates_only and self.unique_only:
            raise ValueError("duplicates_only and unique_only are mutually exclusive")
        return self


class DuplicateLookup(ABC):
    """Exact-match lookups used by DuplicateDetector."""

    @abstractmethod
    def find_group_for(self, triple: ClientTriple) -> str | None:
        """Smallest non-null duplicate_group_id among records matching triple exactly."""

    @abstractmethod
    def find_any_match(self, triple: ClientTriple) -> int | None:
        """Id of any record matching triple exactly, grouped or not."""


class ClientUnitOfWork(DuplicateLookup):
    """
    Lookups and inserts bound to one open transaction.

    Records added through a unit of work are visible to its own lookups
    before commit.
    """

    @abstractmethod
    def add(self, client: NewClient) -> int:
        """Insert a client and return its id."""


class ClientRepository(ABC):
    """Persistence of client records and the query surface over them."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[ClientUnitOfWork]:
        """
        Open an atomic transaction.

        Commits when the block exits normally, rolls back and re-raises if
        it raises.
        """

    @abstractmethod
    def get_stats(self) -> ImportStats:
        """Counts over committed records."""

    @abstractmethod
    def list_clients(self, client_filter: ClientFilter, page: int = 1, per_page: int = 15) -> Page[ClientRecord]:
        """Filtered clients, newest first."""

    @abstractmethod
    def iter_clients(self, client_filter: ClientFilter) -> Iterator[ClientRecord]:
        """All clients matching the filter, newest first."""

    @abstractmethod
    def get_client(self, client_id: int) -> ClientRecord:
        """Raises ClientNotFoundError if absent."""

    @abstractmethod
    def get_group_members(self, group_id: str, exclude_id: int | None = None) -> list[ClientRecord]:
        """Clients carrying group_id, newest first."""

    def get_client_with_duplicates(self, client_id: int) -> ClientWithDuplicates:
        """A client plus the other members of its group when it is a flagged duplicate."""
        client = self.get_client(client_id)
        related = []
        if client.is_duplicate and client.duplicate_group_id:
            related = self.get_group_members(client.duplicate_group_id, exclude_id=client.id)
        return ClientWithDuplicates(client=client, related_duplicates=related)

    @abstractmethod
    def list_duplicate_groups(
        self, page: int = 1, per_page: int = 10, include_clients: bool = False
    ) -> Page[DuplicateGroupSummary]:
        """Groups of duplicate-flagged records, largest first."""

    @abstractmethod
    def create_client(self, client: NewClient) -> ClientRecord:
        """Insert one client outside of an import run."""

    @abstractmethod
    def update_client(self, client_id: int, changes: dict[str, Any]) -> ClientRecord:
        """Apply changes to the editable fields. Raises ClientNotFoundError if absent."""

    @abstractmethod
    def delete_client(self, client_id: int) -> None:
        """Raises ClientNotFoundError if absent."""

    @abstractmethod
    def delete_all(self) -> int:
        """Remove every client; returns the number removed."""

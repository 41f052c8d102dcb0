"""
In-memory ClientRepository for unit tests.

Transactions snapshot the stored rows and restore them if the block raises,
so chunk rollback behaves like PostgreSQL.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from client_import.core.errors import ClientNotFoundError
from client_import.core.models import (
    ClientRecord,
    ClientTriple,
    DuplicateGroupSummary,
    ImportStats,
    NewClient,
    Page,
)
from client_import.core.repository import (
    EDITABLE_FIELDS,
    ClientFilter,
    ClientRepository,
    ClientUnitOfWork,
)


class InMemoryUnitOfWork(ClientUnitOfWork):
    def __init__(self, repository: "InMemoryClientRepository"):
        self.repository = repository

    def find_group_for(self, triple: ClientTriple) -> str | None:
        groups = [
            client.duplicate_group_id
            for client in self.repository.rows
            if client.triple == triple and client.duplicate_group_id is not None
        ]
        return min(groups) if groups else None

    def find_any_match(self, triple: ClientTriple) -> int | None:
        for client in self.repository.rows:
            if client.triple == triple:
                return client.id
        return None

    def add(self, client: NewClient) -> int:
        return self.repository.insert(client).id


class InMemoryClientRepository(ClientRepository):
    """
    Stores clients in a list.

    fail_when(predicate) makes inserts of matching clients raise, which
    rolls back the surrounding transaction.
    """

    def __init__(self):
        self.rows: list[ClientRecord] = []
        self.next_id = 1
        self.transactions_opened = 0
        self.transactions_committed = 0
        self._fail_predicate: Callable[[NewClient], bool] | None = None

    def fail_when(self, predicate: Callable[[NewClient], bool]) -> None:
        self._fail_predicate = predicate

    def insert(self, client: NewClient) -> ClientRecord:
        if self._fail_predicate is not None and self._fail_predicate(client):
            raise RuntimeError(f"insert rejected for {client.company_name}")

        record = ClientRecord(
            **client.model_dump(),
            id=self.next_id,
            created_at=datetime.now(timezone.utc),
        )
        self.next_id += 1
        self.rows.append(record)
        return record

    @contextmanager
    def transaction(self) -> Iterator[InMemoryUnitOfWork]:
        snapshot = (list(self.rows), self.next_id)
        self.transactions_opened += 1
        try:
            yield InMemoryUnitOfWork(self)
        except BaseException:
            self.rows, self.next_id = snapshot
            raise
        self.transactions_committed += 1

    def _newest_first(self, clients: list[ClientRecord]) -> list[ClientRecord]:
        return sorted(clients, key=lambda c: (c.created_at, c.id), reverse=True)

    def _matching(self, client_filter: ClientFilter) -> list[ClientRecord]:
        def matches(client: ClientRecord) -> bool:
            if client_filter.duplicates_only and not client.is_duplicate:
                return False
            if client_filter.unique_only and client.is_duplicate:
                return False
            if client_filter.duplicate_group_id and client.duplicate_group_id != client_filter.duplicate_group_id:
                return False
            if client_filter.search:
                needle = client_filter.search.lower()
                return any(needle in value.lower() for value in client.triple)
            return True

        return self._newest_first([c for c in self.rows if matches(c)])

    def get_stats(self) -> ImportStats:
        duplicates = [c for c in self.rows if c.is_duplicate]
        metadata = [c.import_metadata for c in self.rows if c.import_metadata]
        return ImportStats(
            total_clients=len(self.rows),
            unique_clients=len(self.rows) - len(duplicates),
            duplicate_clients=len(duplicates),
            duplicate_groups=len({c.duplicate_group_id for c in duplicates if c.duplicate_group_id}),
            last_import=max((m.imported_at for m in metadata), default=None),
            import_count=len({m.batch_id for m in metadata}),
        )

    def list_clients(self, client_filter: ClientFilter, page: int = 1, per_page: int = 15) -> Page[ClientRecord]:
        matching = self._matching(client_filter)
        start = (page - 1) * per_page
        return Page[ClientRecord](
            items=matching[start:start + per_page],
            total=len(matching),
            page=page,
            per_page=per_page,
        )

    def iter_clients(self, client_filter: ClientFilter) -> Iterator[ClientRecord]:
        yield from self._matching(client_filter)

    def get_client(self, client_id: int) -> ClientRecord:
        for client in self.rows:
            if client.id == client_id:
                return client
        raise ClientNotFoundError(client_id)

    def get_group_members(self, group_id: str, exclude_id: int | None = None) -> list[ClientRecord]:
        return self._newest_first([
            c for c in self.rows
            if c.duplicate_group_id == group_id and c.id != exclude_id
        ])

    def list_duplicate_groups(
        self, page: int = 1, per_page: int = 10, include_clients: bool = False
    ) -> Page[DuplicateGroupSummary]:
        members: dict[str, list[ClientRecord]] = {}
        for client in self.rows:
            if client.is_duplicate and client.duplicate_group_id:
                members.setdefault(client.duplicate_group_id, []).append(client)

        groups = [
            DuplicateGroupSummary(
                group_id=group_id,
                count=len(clients),
                representative_company=min(c.company_name for c in clients),
                representative_email=min(c.email for c in clients),
                representative_phone=min(c.phone_number for c in clients),
                clients=self.get_group_members(group_id) if include_clients else None,
            )
            for group_id, clients in members.items()
        ]
        groups.sort(key=lambda g: (-g.count, g.group_id))

        start = (page - 1) * per_page
        return Page[DuplicateGroupSummary](
            items=groups[start:start + per_page],
            total=len(groups),
            page=page,
            per_page=per_page,
        )

    def create_client(self, client: NewClient) -> ClientRecord:
        with self.transaction():
            return self.insert(client)

    def update_client(self, client_id: int, changes: dict[str, Any]) -> ClientRecord:
        current = self.get_client(client_id)
        update = {name: changes[name] for name in EDITABLE_FIELDS if name in changes}
        if not update:
            return current

        updated = current.model_copy(update={**update, "updated_at": datetime.now(timezone.utc)})
        self.rows[self.rows.index(current)] = updated
        return updated

    def delete_client(self, client_id: int) -> None:
        self.rows.remove(self.get_client(client_id))

    def delete_all(self) -> int:
        count = len(self.rows)
        self.rows = []
        self.next_id = 1
        return count


def client_rows(count: int, prefix: str = "Company") -> list[list[str]]:
    """count distinct valid upload rows."""
    return [
        [f"{prefix} {i}", f"contact{i}@{prefix.lower()}.example.com", f"+1-555-{i:04d}"]
        for i in range(count)
    ]

"""
PostgreSQL storage for clients.

Implements the ClientRepository port. All SQL touching the clients table
lives here.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.types.json import Jsonb

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
from client_import.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

CLIENT_COLUMNS = """
    id, company_name, email, phone_number, is_duplicate, duplicate_group_id,
    import_metadata, created_at, updated_at
"""

INSERT_CLIENT = f"""
    INSERT INTO clients (
        company_name, email, phone_number, is_duplicate, duplicate_group_id, import_metadata
    )
    VALUES (%s, %s, %s, %s, %s, %s)
    RETURNING {CLIENT_COLUMNS}
"""

TRIPLE_MATCH = "company_name = %s AND email = %s AND phone_number = %s"


def _insert_params(client: NewClient) -> tuple:
    metadata = client.import_metadata.model_dump(mode="json") if client.import_metadata else None
    return (
        client.company_name,
        client.email,
        client.phone_number,
        client.is_duplicate,
        client.duplicate_group_id,
        Jsonb(metadata) if metadata is not None else None,
    )


def _where(client_filter: ClientFilter) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    if client_filter.duplicates_only:
        clauses.append("is_duplicate = TRUE")
    if client_filter.unique_only:
        clauses.append("is_duplicate = FALSE")
    if client_filter.duplicate_group_id:
        clauses.append("duplicate_group_id = %s")
        params.append(client_filter.duplicate_group_id)
    if client_filter.search:
        clauses.append(
            "(strpos(lower(company_name), lower(%s)) > 0"
            " OR strpos(lower(email), lower(%s)) > 0"
            " OR strpos(lower(phone_number), lower(%s)) > 0)"
        )
        params.extend([client_filter.search] * 3)

    sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return sql, params


class PostgresUnitOfWork(ClientUnitOfWork):
    """Lookups and inserts on a connection inside an open transaction."""

    def __init__(self, conn: psycopg.Connection):
        self.conn = conn

    def find_group_for(self, triple: ClientTriple) -> str | None:
        row = self.conn.execute(
            f"""
            SELECT MIN(duplicate_group_id) AS group_id
            FROM clients
            WHERE {TRIPLE_MATCH} AND duplicate_group_id IS NOT NULL
            """,
            tuple(triple),
        ).fetchone()
        return row["group_id"] if row else None

    def find_any_match(self, triple: ClientTriple) -> int | None:
        row = self.conn.execute(
            f"SELECT id FROM clients WHERE {TRIPLE_MATCH} LIMIT 1",
            tuple(triple),
        ).fetchone()
        return row["id"] if row else None

    def add(self, client: NewClient) -> int:
        row = self.conn.execute(INSERT_CLIENT, _insert_params(client)).fetchone()
        return row["id"]


class PostgresClientRepository(ClientRepository):
    """
    ClientRepository backed by the clients table.

    Inside rollback_session() every operation shares one connection whose
    outer transaction is always rolled back; chunk transactions then become
    savepoints, so a dry run sees its own earlier chunks exactly as a real
    run would.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool
        self._pinned: psycopg.Connection | None = None

    @contextmanager
    def rollback_session(self) -> Iterator["PostgresClientRepository"]:
        with self.pool.get_connection() as conn:
            with conn.transaction(force_rollback=True):
                self._pinned = conn
                try:
                    yield self
                finally:
                    self._pinned = None

    @contextmanager
    def _connection(self) -> Iterator[psycopg.Connection]:
        if self._pinned is not None:
            yield self._pinned
        else:
            with self.pool.get_connection() as conn:
                yield conn

    @contextmanager
    def transaction(self) -> Iterator[PostgresUnitOfWork]:
        with self._connection() as conn:
            with conn.transaction():
                yield PostgresUnitOfWork(conn)

    def _fetch_all(self, query: str, params: list | tuple = ()) -> list[dict]:
        with self._connection() as conn:
            return conn.execute(query, params).fetchall()

    def _fetch_one(self, query: str, params: list | tuple = ()) -> dict | None:
        with self._connection() as conn:
            return conn.execute(query, params).fetchone()

    def get_stats(self) -> ImportStats:
        row = self._fetch_one(
            """
            SELECT
                COUNT(*) AS total_clients,
                COUNT(*) FILTER (WHERE is_duplicate = FALSE) AS unique_clients,
                COUNT(*) FILTER (WHERE is_duplicate = TRUE) AS duplicate_clients,
                COUNT(DISTINCT duplicate_group_id) FILTER (WHERE is_duplicate = TRUE) AS duplicate_groups,
                MAX((import_metadata ->> 'imported_at')::timestamptz) AS last_import,
                COUNT(DISTINCT import_metadata ->> 'batch_id') AS import_count
            FROM clients
            """
        )
        return ImportStats(**row)

    def list_clients(self, client_filter: ClientFilter, page: int = 1, per_page: int = 15) -> Page[ClientRecord]:
        where, params = _where(client_filter)
        total = self._fetch_one(f"SELECT COUNT(*) AS total FROM clients {where}", params)["total"]
        rows = self._fetch_all(
            f"""
            SELECT {CLIENT_COLUMNS} FROM clients {where}
            ORDER BY created_at DESC, id DESC
            LIMIT %s OFFSET %s
            """,
            params + [per_page, (page - 1) * per_page],
        )
        return Page[ClientRecord](
            items=[ClientRecord(**row) for row in rows],
            total=total,
            page=page,
            per_page=per_page,
        )

    def iter_clients(self, client_filter: ClientFilter) -> Iterator[ClientRecord]:
        where, params = _where(client_filter)
        with self._connection() as conn:
            # server-side cursor keeps large exports out of memory
            with conn.cursor(name="clients_export") as cur:
                cur.execute(
                    f"SELECT {CLIENT_COLUMNS} FROM clients {where} ORDER BY created_at DESC, id DESC",
                    params,
                )
                for row in cur:
                    yield ClientRecord(**row)

    def get_client(self, client_id: int) -> ClientRecord:
        row = self._fetch_one(f"SELECT {CLIENT_COLUMNS} FROM clients WHERE id = %s", (client_id,))
        if row is None:
            raise ClientNotFoundError(client_id)
        return ClientRecord(**row)

    def get_group_members(self, group_id: str, exclude_id: int | None = None) -> list[ClientRecord]:
        query = f"SELECT {CLIENT_COLUMNS} FROM clients WHERE duplicate_group_id = %s"
        params: list[Any] = [group_id]
        if exclude_id is not None:
            query += " AND id <> %s"
            params.append(exclude_id)
        query += " ORDER BY created_at DESC, id DESC"
        return [ClientRecord(**row) for row in self._fetch_all(query, params)]

    def list_duplicate_groups(
        self, page: int = 1, per_page: int = 10, include_clients: bool = False
    ) -> Page[DuplicateGroupSummary]:
        total = self._fetch_one(
            """
            SELECT COUNT(DISTINCT duplicate_group_id) AS total
            FROM clients
            WHERE is_duplicate = TRUE AND duplicate_group_id IS NOT NULL
            """
        )["total"]
        rows = self._fetch_all(
            """
            SELECT
                duplicate_group_id AS group_id,
                COUNT(*) AS count,
                MIN(company_name) AS representative_company,
                MIN(email) AS representative_email,
                MIN(phone_number) AS representative_phone
            FROM clients
            WHERE is_duplicate = TRUE AND duplicate_group_id IS NOT NULL
            GROUP BY duplicate_group_id
            ORDER BY count DESC, group_id
            LIMIT %s OFFSET %s
            """,
            (per_page, (page - 1) * per_page),
        )

        groups = []
        for row in rows:
            summary = DuplicateGroupSummary(**row)
            if include_clients:
                summary.clients = self.get_group_members(summary.group_id)
            groups.append(summary)

        return Page[DuplicateGroupSummary](items=groups, total=total, page=page, per_page=per_page)

    def create_client(self, client: NewClient) -> ClientRecord:
        with self.transaction() as uow:
            row = uow.conn.execute(INSERT_CLIENT, _insert_params(client)).fetchone()
        return ClientRecord(**row)

    def update_client(self, client_id: int, changes: dict[str, Any]) -> ClientRecord:
        fields = [name for name in EDITABLE_FIELDS if name in changes]
        if not fields:
            return self.get_client(client_id)

        assignments = ", ".join(f"{name} = %s" for name in fields)
        params = [changes[name] for name in fields] + [client_id]

        with self.transaction() as uow:
            row = uow.conn.execute(
                f"""
                UPDATE clients SET {assignments}, updated_at = NOW()
                WHERE id = %s
                RETURNING {CLIENT_COLUMNS}
                """,
                params,
            ).fetchone()

        if row is None:
            raise ClientNotFoundError(client_id)
        return ClientRecord(**row)

    def delete_client(self, client_id: int) -> None:
        with self.transaction() as uow:
            deleted = uow.conn.execute("DELETE FROM clients WHERE id = %s", (client_id,)).rowcount
        if not deleted:
            raise ClientNotFoundError(client_id)

    def delete_all(self) -> int:
        with self.transaction() as uow:
            count = uow.conn.execute("SELECT COUNT(*) AS total FROM clients").fetchone()["total"]
            uow.conn.execute("TRUNCATE TABLE clients RESTART IDENTITY")
        logger.warning(f"Deleted all {count} clients")
        return count

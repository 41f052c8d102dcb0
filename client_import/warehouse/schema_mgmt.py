"""
DDL for the clients table.
"""

from client_import.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

CREATE_CLIENTS_TABLE = """
    CREATE TABLE IF NOT EXISTS clients (
        id BIGSERIAL PRIMARY KEY,
        company_name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL,
        phone_number VARCHAR(255) NOT NULL,
        is_duplicate BOOLEAN NOT NULL DEFAULT FALSE,
        duplicate_group_id VARCHAR(255),
        import_metadata JSONB,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ
    )
"""

CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS clients_triple_idx ON clients (company_name, email, phone_number)",
    "CREATE INDEX IF NOT EXISTS clients_duplicate_group_id_idx ON clients (duplicate_group_id)",
    "CREATE INDEX IF NOT EXISTS clients_is_duplicate_idx ON clients (is_duplicate)",
]


class SchemaManager:
    """
    Creates and drops the clients table and its indexes.

    The triple index serves duplicate lookups; the group and flag indexes
    serve stats and group listings.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def create_schema(self) -> None:
        """Create the table and indexes if they do not exist."""
        with self.pool.transaction() as conn:
            conn.execute(CREATE_CLIENTS_TABLE)
            for statement in CREATE_INDEXES:
                conn.execute(statement)
        logger.info("Clients schema ready")

    def drop_schema(self) -> None:
        with self.pool.transaction() as conn:
            conn.execute("DROP TABLE IF EXISTS clients")
        logger.info("Clients schema dropped")

    def table_exists(self) -> bool:
        result = self.pool.execute_query("SELECT to_regclass('public.clients') IS NOT NULL AS present")
        return bool(result[0]["present"])

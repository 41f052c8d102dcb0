"""
Arguments and helpers shared by the command-line tools.
"""

import argparse
from datetime import datetime

from client_import.warehouse.connection import DatabaseConnectionPool


def add_database_arguments(parser: argparse.ArgumentParser) -> None:
    """Database connection flags; unset flags fall back to DB_* environment variables."""
    parser.add_argument(
        "--db-host",
        help="Database host (default: $DB_HOST or localhost)"
    )
    parser.add_argument(
        "--db-port",
        type=int,
        help="Database port (default: $DB_PORT or 5432)"
    )
    parser.add_argument(
        "--db-name",
        help="Database name (default: $DB_NAME or clients)"
    )
    parser.add_argument(
        "--db-user",
        help="Database user (default: $DB_USER or client_import)"
    )
    parser.add_argument(
        "--db-password",
        help="Database password (default: $DB_PASSWORD)"
    )


def create_pool(args: argparse.Namespace) -> DatabaseConnectionPool:
    return DatabaseConnectionPool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password,
    )


def format_timestamp(ts: datetime | None) -> str:
    """Format timestamp for display."""
    return ts.strftime("%Y-%m-%d %H:%M:%S") if ts else "N/A"

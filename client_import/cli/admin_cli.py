"""
Admin CLI for managing imported clients.

Usage:
    client-admin init-db
    client-admin stats
    client-admin config [--chunk-size N] [--max-errors N]
    client-admin list [--duplicates-only | --unique-only] [--group-id <id>] [--search <text>] [--page N]
    client-admin show --id <client_id>
    client-admin groups [--page N] [--include-clients]
    client-admin create --company-name <name> --email <email> --phone-number <phone>
    client-admin update --id <client_id> [--company-name ...] [--email ...] [--phone-number ...]
    client-admin delete --id <client_id>
    client-admin delete-all --yes
    client-admin export [--output <path>] [filters]
"""

import argparse
import json
import sys

from client_import.batch.pipeline import BatchImportPipeline
from client_import.batch.stats import StatsReporter
from client_import.batch.writers import CSVExportWriter
from client_import.core.client_service import ClientService
from client_import.core.errors import ClientNotFoundError, InvalidClientError
from client_import.core.models import ClientRecord, ImportSettings
from client_import.core.repository import ClientFilter
from client_import.observability.logger import get_logger
from client_import.utils.validation import (
    InputValidationError,
    validate_client_id,
    validate_group_id,
    validate_pagination,
)
from client_import.warehouse.client_store import PostgresClientRepository
from client_import.warehouse.schema_mgmt import SchemaManager

from .common import add_database_arguments, create_pool, format_timestamp

logger = get_logger(__name__)


def print_client(client: ClientRecord, indent: str = "") -> None:
    flag = "duplicate" if client.is_duplicate else "unique"
    print(f"{indent}#{client.id:<8} {client.company_name:<30} {client.email:<30} {client.phone_number:<18} {flag}")


def client_filter_from_args(args) -> ClientFilter:
    group_id = validate_group_id(args.group_id) if args.group_id else None
    return ClientFilter(
        duplicates_only=args.duplicates_only,
        unique_only=args.unique_only,
        duplicate_group_id=group_id,
        search=args.search,
    )


def init_db_command(args, repository, pool):
    """Create the clients table and its indexes."""
    SchemaManager(pool).create_schema()
    print("Clients schema ready")


def stats_command(args, repository, pool):
    """
    Display client statistics.

    Args:
        args: Command line arguments
    """
    stats = StatsReporter(repository).get_stats()

    if args.json:
        print(json.dumps(stats.model_dump(mode="json"), indent=2))
        return

    print(f"\n{'=' * 60}")
    print("CLIENT STATISTICS")
    print(f"{'=' * 60}\n")
    print(f"  Total clients:     {stats.total_clients:>8}")
    print(f"  Unique clients:    {stats.unique_clients:>8}")
    print(f"  Duplicate clients: {stats.duplicate_clients:>8}")
    print(f"  Duplicate groups:  {stats.duplicate_groups:>8}")
    print(f"  Imports:           {stats.import_count:>8}")
    print(f"  Last import:       {format_timestamp(stats.last_import)}")
    print(f"\n{'=' * 60}\n")


def config_command(args, repository, pool):
    """Show the effective batch configuration for the given settings."""
    settings = ImportSettings.from_env()
    if args.chunk_size is not None:
        settings = ImportSettings(chunk_size=args.chunk_size, max_errors=settings.max_errors)
    if args.max_errors is not None:
        settings = ImportSettings(chunk_size=settings.chunk_size, max_errors=args.max_errors)

    config = BatchImportPipeline(repository, settings=settings).get_batch_config()
    print(json.dumps(config.model_dump(), indent=2))


def list_command(args, repository, pool):
    page, per_page = validate_pagination(args.page, args.per_page)
    result = repository.list_clients(client_filter_from_args(args), page=page, per_page=per_page)

    if args.json:
        print(result.model_dump_json(indent=2))
        return

    print(f"\nClients {result.total} total, page {result.page}/{result.last_page}\n")
    for client in result.items:
        print_client(client)
    print()


def show_command(args, repository, pool):
    client_id = validate_client_id(args.id)
    view = repository.get_client_with_duplicates(client_id)

    if args.json:
        print(view.model_dump_json(indent=2))
        return

    client = view.client
    print(f"\nClient #{client.id}")
    print(f"  Company:      {client.company_name}")
    print(f"  Email:        {client.email}")
    print(f"  Phone:        {client.phone_number}")
    print(f"  Duplicate:    {'Yes' if client.is_duplicate else 'No'}")
    print(f"  Group:        {client.duplicate_group_id or '-'}")
    print(f"  Created:      {format_timestamp(client.created_at)}")
    if client.import_metadata:
        print(f"  Batch:        {client.import_metadata.batch_id} (row {client.import_metadata.row_number})")

    if view.related_duplicates:
        print(f"\nRelated duplicates ({len(view.related_duplicates)}):")
        for related in view.related_duplicates:
            print_client(related, indent="  ")
    print()


def groups_command(args, repository, pool):
    page, per_page = validate_pagination(args.page, args.per_page)
    result = repository.list_duplicate_groups(page=page, per_page=per_page, include_clients=args.include_clients)

    if args.json:
        print(result.model_dump_json(indent=2))
        return

    print(f"\nDuplicate groups {result.total} total, page {result.page}/{result.last_page}\n")
    print(f"{'Group':<38} {'Count':>6}  Representative")
    print(f"{'-' * 80}")
    for group in result.items:
        print(f"{group.group_id:<38} {group.count:>6}  {group.representative_company} <{group.representative_email}>")
        for client in group.clients or []:
            print_client(client, indent="    ")
    print()


def create_command(args, repository, pool):
    record = ClientService(repository).create_client({
        "company_name": args.company_name,
        "email": args.email,
        "phone_number": args.phone_number,
    })
    print(f"Created client #{record.id}")


def update_command(args, repository, pool):
    client_id = validate_client_id(args.id)
    changes = {
        name: value
        for name, value in (
            ("company_name", args.company_name),
            ("email", args.email),
            ("phone_number", args.phone_number),
        )
        if value is not None
    }
    if not changes:
        raise InputValidationError("Nothing to update: pass --company-name, --email or --phone-number")

    record = ClientService(repository).update_client(client_id, changes)
    print(f"Updated client #{record.id}")


def delete_command(args, repository, pool):
    client_id = validate_client_id(args.id)
    ClientService(repository).delete_client(client_id)
    print(f"Deleted client #{client_id}")


def delete_all_command(args, repository, pool):
    if not args.yes:
        raise InputValidationError("Refusing to delete all clients without --yes")
    count = repository.delete_all()
    print(f"Deleted {count} clients")


def export_command(args, repository, pool):
    """
    Export clients as CSV.

    Args:
        args: Command line arguments
    """
    client_filter = client_filter_from_args(args)
    writer = CSVExportWriter(repository)

    if args.output == "-":
        count = writer.write(sys.stdout, client_filter)
    else:
        output = args.output or CSVExportWriter.default_filename()
        with open(output, "w", newline="", encoding="utf-8") as stream:
            count = writer.write(stream, client_filter)
        print(f"Exported {count} clients to {output}")

    logger.info(f"Exported {count} clients")


COMMANDS = {
    "init-db": init_db_command,
    "stats": stats_command,
    "config": config_command,
    "list": list_command,
    "show": show_command,
    "groups": groups_command,
    "create": create_command,
    "update": update_command,
    "delete": delete_command,
    "delete-all": delete_all_command,
    "export": export_command,
}


def run_command(args) -> None:
    """Open the pool, run a database-backed command, and map errors to exit codes."""
    pool = create_pool(args)

    try:
        pool.open()
        repository = PostgresClientRepository(pool)
        COMMANDS[args.command](args, repository, pool)

    except (InputValidationError, InvalidClientError, ClientNotFoundError) as e:
        logger.warning(f"{args.command} rejected: {e}")
        print(f"\nError: {e}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Error running {args.command}: {e}", exc_info=True)
        print(f"\nError: {e}")
        sys.exit(1)

    finally:
        pool.close()


def add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "--duplicates-only",
        action="store_true",
        help="Only clients flagged as duplicates"
    )
    selection.add_argument(
        "--unique-only",
        action="store_true",
        help="Only clients not flagged as duplicates"
    )
    parser.add_argument(
        "--group-id",
        help="Only clients in this duplicate group"
    )
    parser.add_argument(
        "--search",
        help="Case-insensitive text matched against company name, email and phone"
    )


def main():
    """Main entry point for admin CLI."""
    parser = argparse.ArgumentParser(
        description="Admin CLI for imported clients",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Global database connection options
    add_database_arguments(parser)

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create the clients table")

    stats_parser = subparsers.add_parser("stats", help="Show client statistics")
    stats_parser.add_argument("--json", action="store_true", help="Print as JSON")

    config_parser = subparsers.add_parser("config", help="Show effective batch configuration")
    config_parser.add_argument("--chunk-size", type=int, help="Requested chunk size")
    config_parser.add_argument("--max-errors", type=int, help="Requested error budget")

    list_parser = subparsers.add_parser("list", help="List clients, newest first")
    add_filter_arguments(list_parser)
    list_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    list_parser.add_argument("--per-page", type=int, default=15, help="Clients per page (default: 15)")
    list_parser.add_argument("--json", action="store_true", help="Print as JSON")

    show_parser = subparsers.add_parser("show", help="Show one client and its related duplicates")
    show_parser.add_argument("--id", type=int, required=True, help="Client ID")
    show_parser.add_argument("--json", action="store_true", help="Print as JSON")

    groups_parser = subparsers.add_parser("groups", help="List duplicate groups, largest first")
    groups_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    groups_parser.add_argument("--per-page", type=int, default=10, help="Groups per page (default: 10)")
    groups_parser.add_argument("--include-clients", action="store_true", help="List each group's clients")
    groups_parser.add_argument("--json", action="store_true", help="Print as JSON")

    create_parser = subparsers.add_parser("create", help="Add one client")
    create_parser.add_argument("--company-name", required=True)
    create_parser.add_argument("--email", required=True)
    create_parser.add_argument("--phone-number", required=True)

    update_parser = subparsers.add_parser("update", help="Edit a client's contact fields")
    update_parser.add_argument("--id", type=int, required=True, help="Client ID")
    update_parser.add_argument("--company-name")
    update_parser.add_argument("--email")
    update_parser.add_argument("--phone-number")

    delete_parser = subparsers.add_parser("delete", help="Delete one client")
    delete_parser.add_argument("--id", type=int, required=True, help="Client ID")

    delete_all_parser = subparsers.add_parser("delete-all", help="Delete every client")
    delete_all_parser.add_argument("--yes", action="store_true", help="Confirm deletion")

    export_parser = subparsers.add_parser("export", help="Export clients as CSV")
    add_filter_arguments(export_parser)
    export_parser.add_argument(
        "--output",
        help="Output path, '-' for stdout (default: clients_export_<timestamp>.csv)"
    )

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Route to command handler
    try:
        if args.command in COMMANDS:
            run_command(args)
        else:
            parser.print_help()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()

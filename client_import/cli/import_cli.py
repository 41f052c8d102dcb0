"""
Command-line interface for client imports.

Usage:
    client-import import --input <file_path> [options]
"""

import argparse
import json
import sys
import time
from pathlib import Path

from client_import.batch.pipeline import BatchImportPipeline
from client_import.core.models import ImportOutcome, ImportSettings
from client_import.core.rules import RowValidator
from client_import.observability.logger import get_logger
from client_import.observability.metrics import push_metrics, record_import_outcome
from client_import.warehouse.client_store import PostgresClientRepository

from .common import add_database_arguments, create_pool

logger = get_logger(__name__)


def build_settings(args) -> ImportSettings:
    """Environment defaults overridden by command-line flags; both are clamped."""
    settings = ImportSettings.from_env()
    return ImportSettings(
        chunk_size=args.chunk_size if args.chunk_size is not None else settings.chunk_size,
        max_errors=args.max_errors if args.max_errors is not None else settings.max_errors,
    )


def print_summary(outcome: ImportOutcome, dry_run: bool) -> None:
    print(f"\n{'=' * 60}")
    print("IMPORT COMPLETE" if outcome.success else "IMPORT FAILED")
    print(f"{'=' * 60}\n")
    print(f"Batch: {outcome.batch_id}")
    print(f"Result: {outcome.message}")

    if outcome.data is not None:
        data = outcome.data
        print(f"\n  Total rows:       {data.total_rows:>8}")
        print(f"  Processed rows:   {data.processed_rows:>8}")
        print(f"  Imported:         {data.imported:>8}")
        print(f"  Duplicates:       {data.duplicates:>8}")
        print(f"  Errors:           {data.errors:>8}")
        print(f"  Duplicate groups: {len(data.duplicate_groups):>8}")

        if data.errors_details:
            print("\nFirst errors:")
            for detail in data.errors_details[:10]:
                reason = detail.error or "; ".join(detail.error_messages or [])
                print(f"  Row {detail.row}: {reason}")

    if dry_run:
        print("\nDRY RUN: no data was written to the database")
    print(f"\n{'=' * 60}\n")


def import_command(args):
    """
    Execute an import.

    Args:
        args: Command-line arguments
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)

    logger.info(f"Starting import of {input_path}")

    pool = create_pool(args)

    try:
        pool.open()
        repository = PostgresClientRepository(pool)

        validator = RowValidator.from_yaml(args.validation_rules) if args.validation_rules else RowValidator()
        pipeline = BatchImportPipeline(repository, settings=build_settings(args), validator=validator)

        started = time.monotonic()
        if args.dry_run:
            logger.info("DRY RUN MODE: all changes will be rolled back")
            with repository.rollback_session():
                outcome = pipeline.import_file(input_path, file_format=args.format)
        else:
            outcome = pipeline.import_file(input_path, file_format=args.format)
        duration = time.monotonic() - started

        record_import_outcome(outcome, duration, pipeline.max_errors)
        if args.pushgateway:
            push_metrics(args.pushgateway)

        if args.json:
            print(json.dumps(outcome.to_dict(), indent=2))
        else:
            print_summary(outcome, args.dry_run)

    except Exception as e:
        logger.error(f"Error during import: {e}", exc_info=True)
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        pool.close()

    if not outcome.success:
        sys.exit(1)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Bulk client import",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import a CSV file
  client-import import --input data/clients.csv

  # Smaller chunks, stricter error budget
  client-import import --input data/clients.csv --chunk-size 200 --max-errors 20

  # Dry run (full import, rolled back at the end)
  client-import import --input data/clients.csv --dry-run --json
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    import_parser = subparsers.add_parser("import", help="Import a client file")
    import_parser.add_argument(
        "--input",
        required=True,
        help="Path to input file"
    )
    import_parser.add_argument(
        "--format",
        default="csv",
        choices=["csv", "tsv"],
        help="Input file format (default: csv)"
    )
    import_parser.add_argument(
        "--chunk-size",
        type=int,
        help="Rows per transaction, clamped to 100-5000 (default: $IMPORT_CHUNK_SIZE or 1000)"
    )
    import_parser.add_argument(
        "--max-errors",
        type=int,
        help="Errors before processing stops, clamped to 10-1000 (default: $IMPORT_MAX_ERRORS or 100)"
    )
    import_parser.add_argument(
        "--validation-rules",
        help="Path to validation rules YAML file (default: built-in client rules)"
    )
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the import and roll everything back"
    )
    import_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the outcome as JSON"
    )
    import_parser.add_argument(
        "--pushgateway",
        help="Push import metrics to this Prometheus Pushgateway (host:port)"
    )
    add_database_arguments(import_parser)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "import":
        import_command(args)


if __name__ == "__main__":
    main()

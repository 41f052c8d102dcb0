"""
Batch import pipeline.

Coordinates the flow: read → check headers → chunk → (validate → detect
duplicates → persist) per row, one transaction per chunk → aggregate.
"""

import uuid
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from client_import.core.duplicates import DuplicateDetector, new_group_id
from client_import.core.errors import (
    ChunkPersistenceError,
    ErrorBudgetExceeded,
    InvalidHeaderError,
    MalformedInputError,
    RowValidationError,
)
from client_import.core.models import (
    BatchConfig,
    ClientTriple,
    ImportMetadata,
    ImportOutcome,
    ImportSettings,
    NewClient,
)
from client_import.core.models.batch_config import clamp_chunk_size, clamp_max_errors
from client_import.core.repository import ClientRepository, ClientUnitOfWork
from client_import.core.rules import RowValidator
from client_import.core.schema import check_headers
from client_import.observability.logger import bind_batch, get_logger, log_operation

from .readers import FileReader, Row
from .result import ImportResultAggregator
from .state import Chunk, ChunkOutcome, ImportState

logger = get_logger(__name__)

# file line of the first data row: line 1 is the header
FIRST_DATA_LINE = 2


class BatchImportPipeline:
    """
    Imports one uploaded file of clients.

    Each instance is one import run with its own batch id. Chunks are
    processed strictly in order because duplicate detection for a chunk
    depends on what earlier chunks committed.

    Flow:
    1. Open the file and check the header row
    2. Read all rows and split them into chunks of chunk_size
    3. For each chunk, inside one transaction: validate each row, detect
       duplicates, insert the record with its import metadata
    4. A failing chunk is rolled back and reported; the run continues
    5. Once max_errors is reached, remaining rows are skipped
    """

    def __init__(
        self,
        repository: ClientRepository,
        settings: ImportSettings | None = None,
        validator: RowValidator | None = None,
        reader: FileReader | None = None,
        group_id_factory: Callable[[], str] = new_group_id,
    ):
        """
        Args:
            repository: Client storage
            settings: Chunk size and error budget (clamped)
            validator: Row validator (default client rules if None)
            reader: Delimited file reader
            group_id_factory: Generates new duplicate group ids
        """
        settings = settings or ImportSettings()

        self.repository = repository
        self.validator = validator or RowValidator()
        self.reader = reader or FileReader()
        self.group_id_factory = group_id_factory

        self.batch_id = str(uuid.uuid4())
        self.chunk_size = settings.chunk_size
        self.max_errors = settings.max_errors

        self.log = bind_batch(logger, self.batch_id)

    def set_chunk_size(self, size: int) -> None:
        self.chunk_size = clamp_chunk_size(size)

    def set_max_errors(self, max_errors: int) -> None:
        self.max_errors = clamp_max_errors(max_errors)

    def get_batch_config(self) -> BatchConfig:
        return BatchConfig(
            batch_size=self.chunk_size,
            max_errors=self.max_errors,
            batch_id=self.batch_id,
        )

    def import_file(self, source: str | Path | BinaryIO, file_format: str = "csv") -> ImportOutcome:
        """
        Run a complete import.

        Args:
            source: File path or binary stream
            file_format: csv or tsv

        Returns:
            ImportOutcome; success is False only when the file could not be
            read or its header is invalid, in which case nothing was written
        """
        try:
            rows = self._read_rows(source, file_format)
        except InvalidHeaderError as e:
            self.log.warning(f"Rejected upload: {e}", extra={"missing_headers": e.missing})
            return ImportResultAggregator.failure(self.batch_id, str(e))
        except (MalformedInputError, OSError, ValueError) as e:
            self.log.error(f"Unreadable upload: {e}")
            return ImportResultAggregator.failure(self.batch_id, f"Import failed: {e}")

        with log_operation(
            "Importing clients",
            logger=self.log,
            total_rows=len(rows),
            chunk_size=self.chunk_size,
            max_errors=self.max_errors,
        ):
            state = self.run(rows)

        if state.stopped:
            self.log.warning(
                f"Processing stopped after {state.errors} errors (max: {self.max_errors})",
                extra={"processed_rows": state.processed_rows, "total_rows": state.total_rows},
            )

        return ImportResultAggregator.build(self.batch_id, state, self.max_errors)

    def _read_rows(self, source: str | Path | BinaryIO, file_format: str) -> list[Row]:
        with self.reader.open(source, file_format=file_format) as csv_source:
            check_headers(csv_source.header)
            return list(csv_source)

    def run(self, rows: list[Row]) -> ImportState:
        """Fold process_chunk over the chunks of rows."""
        state = ImportState(total_rows=len(rows))
        for chunk in self.partition(rows):
            state = self.process_chunk(state, chunk)
        return state

    def partition(self, rows: list[Row]) -> Iterator[Chunk]:
        for index, start in enumerate(range(0, len(rows), self.chunk_size)):
            yield Chunk(
                index=index,
                rows=rows[start:start + self.chunk_size],
                first_row_number=start + FIRST_DATA_LINE,
            )

    def process_chunk(self, state: ImportState, chunk: Chunk) -> ImportState:
        """
        Process one chunk in its own transaction.

        Returns the state with the chunk applied if it committed, or with a
        single batch_error if it was rolled back.
        """
        self.log.info(
            f"Processing chunk {chunk.number}",
            extra={"chunk_index": chunk.index, "chunk_rows": len(chunk.rows)},
        )
        outcome = ChunkOutcome()

        try:
            with self.repository.transaction() as uow:
                self._process_rows(uow, state, chunk, outcome)
        except Exception as e:
            error = ChunkPersistenceError(chunk.number, e)
            self.log.error(
                f"Chunk {chunk.number} rolled back: {e}",
                extra={"chunk_index": chunk.index},
                exc_info=True,
            )
            processed = outcome.processed_rows if outcome.stopped else len(chunk.rows)
            return state.fail_chunk(error, processed_rows=processed, stopped=outcome.stopped)

        return state.apply(outcome)

    def _process_rows(
        self,
        uow: ClientUnitOfWork,
        state: ImportState,
        chunk: Chunk,
        outcome: ChunkOutcome,
    ) -> None:
        detector = DuplicateDetector(uow, self.group_id_factory)

        for offset, row in enumerate(chunk.rows):
            row_number = chunk.first_row_number + offset
            outcome.processed_rows += 1

            # Ends this chunk only; each later chunk records its own stop row
            if state.errors + outcome.errors >= self.max_errors:
                outcome.errors_details.append(ErrorBudgetExceeded(row_number, self.max_errors).to_detail())
                outcome.stopped = True
                return

            result = self.validator.validate(row)
            if not result.valid:
                error = RowValidationError(row_number, dict(row), result.errors, result.messages)
                outcome.errors += 1
                outcome.errors_details.append(error.to_detail())
                continue

            triple = ClientTriple.from_row(row)
            check = detector.check(triple)

            uow.add(NewClient(
                company_name=triple.company_name,
                email=triple.email,
                phone_number=triple.phone_number,
                is_duplicate=check.is_duplicate,
                duplicate_group_id=check.group_id,
                import_metadata=ImportMetadata(
                    batch_id=self.batch_id,
                    row_number=row_number,
                    imported_at=datetime.now(timezone.utc),
                ),
            ))

            if check.is_duplicate:
                outcome.duplicates += 1
                outcome.duplicate_groups.setdefault(check.group_id, []).append(dict(row))
            else:
                outcome.imported += 1

"""
Accumulator threaded through the chunk fold of an import run.
"""

from typing import Any, NamedTuple

from pydantic import BaseModel, Field

from client_import.core.errors import ChunkPersistenceError
from client_import.core.models import ErrorDetail, ImportData

from .readers import Row


class Chunk(NamedTuple):
    """A contiguous slice of the upload, processed in one transaction."""

    index: int
    rows: list[Row]
    first_row_number: int

    @property
    def number(self) -> int:
        """1-based chunk number used in error reports."""
        return self.index + 1


class ChunkOutcome(BaseModel):
    """What one chunk contributed; merged into ImportState only once the chunk commits."""

    imported: int = 0
    duplicates: int = 0
    errors: int = 0
    processed_rows: int = 0
    duplicate_groups: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    errors_details: list[ErrorDetail] = Field(default_factory=list)
    stopped: bool = False


class ImportState(ImportData):
    """
    Running totals of an import run.

    stopped is set once the error budget is reached; from then on every
    chunk records a stop row for its first row and examines nothing else.
    """

    stopped: bool = False

    def apply(self, outcome: ChunkOutcome) -> "ImportState":
        """Return a new state with a committed chunk's outcome folded in."""
        groups = dict(self.duplicate_groups)
        for group_id, rows in outcome.duplicate_groups.items():
            groups[group_id] = groups.get(group_id, []) + rows

        return self.model_copy(update={
            "imported": self.imported + outcome.imported,
            "duplicates": self.duplicates + outcome.duplicates,
            "errors": self.errors + outcome.errors,
            "processed_rows": self.processed_rows + outcome.processed_rows,
            "duplicate_groups": groups,
            "errors_details": self.errors_details + outcome.errors_details,
            "stopped": self.stopped or outcome.stopped,
        })

    def fail_chunk(self, error: ChunkPersistenceError, processed_rows: int, stopped: bool = False) -> "ImportState":
        """
        Return a new state for a chunk that was rolled back.

        Everything the chunk counted is discarded except its processed rows;
        one batch_error is recorded instead.
        """
        return self.model_copy(update={
            "errors": self.errors + 1,
            "processed_rows": self.processed_rows + processed_rows,
            "errors_details": self.errors_details + [error.to_detail()],
            "stopped": self.stopped or stopped,
        })

    def to_data(self) -> ImportData:
        return ImportData(**self.model_dump(exclude={"stopped"}))

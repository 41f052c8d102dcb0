"""
Exception hierarchy for the client import pipeline.

Fatal kinds (MalformedInputError, InvalidHeaderError) abort an import before
any row is processed. Recoverable kinds (RowValidationError,
ChunkPersistenceError, ErrorBudgetExceeded) are turned into ErrorDetail
entries through to_detail() and the import carries on.
"""

from typing import Any

from client_import.core.models import ErrorDetail


class ClientImportError(Exception):
    """Base class for all pipeline errors."""


class MalformedInputError(ClientImportError):
    """Raised when the uploaded bytes cannot be read as delimited text."""


class InvalidHeaderError(ClientImportError):
    """Raised when the header row lacks one or more required columns."""

    def __init__(self, missing: list[str], expected: list[str]):
        self.missing = missing
        self.expected = expected
        super().__init__(
            f"Invalid CSV headers. Expected: {', '.join(expected)}"
        )


class RowValidationError(ClientImportError):
    """A single row failed field validation."""

    def __init__(
        self,
        row_number: int,
        data: dict[str, Any],
        validation_errors: dict[str, list[str]],
        messages: list[str],
    ):
        self.row_number = row_number
        self.data = data
        self.validation_errors = validation_errors
        self.messages = messages
        super().__init__(f"Row {row_number}: {'; '.join(messages)}")

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            row=self.row_number,
            type="validation_error",
            data=self.data,
            validation_errors=self.validation_errors,
            error_messages=self.messages,
        )


class ChunkPersistenceError(ClientImportError):
    """A chunk transaction failed and was rolled back."""

    def __init__(self, chunk_number: int, cause: BaseException):
        self.chunk_number = chunk_number
        self.cause = cause
        super().__init__(f"Batch processing error: {cause}")

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            row=f"Batch {self.chunk_number}",
            type="batch_error",
            error=str(self),
        )


class ErrorBudgetExceeded(ClientImportError):
    """
    The configured error budget was reached.

    Not raised by the pipeline: the stop is a normal termination path and is
    recorded as a processing_limit detail for the first skipped row.
    """

    def __init__(self, row_number: int, max_errors: int):
        self.row_number = row_number
        self.max_errors = max_errors
        super().__init__(
            f"Processing stopped due to too many errors (max: {max_errors})"
        )

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            row=self.row_number,
            type="processing_limit",
            error=str(self),
        )


class ClientNotFoundError(ClientImportError):
    """Raised by the query surface when a client id does not exist."""

    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")


class InvalidClientError(ClientImportError):
    """Raised when a manual create or edit fails field validation."""

    def __init__(self, validation_errors: dict[str, list[str]], messages: list[str]):
        self.validation_errors = validation_errors
        self.messages = messages
        super().__init__("; ".join(messages))

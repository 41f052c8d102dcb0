"""
Outcome models returned by an import run.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """
    One entry of an import's error report.

    row is the 1-based file line for row-level problems and "Batch <n>"
    for chunk-level failures.
    """

    row: int | str
    type: Literal["validation_error", "processing_limit", "batch_error"]
    error: str | None = None
    error_messages: list[str] | None = None
    validation_errors: dict[str, list[str]] | None = None
    data: dict[str, Any] | None = None


class ImportData(BaseModel):
    """Counters and reports of a completed run."""

    imported: int = 0
    duplicates: int = 0
    errors: int = 0
    duplicate_groups: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    errors_details: list[ErrorDetail] = Field(default_factory=list)
    total_rows: int = 0
    processed_rows: int = 0


class ImportOutcome(BaseModel):
    """
    Structured result of BatchImportPipeline.import_file().

    data is None when the import failed before any row was processed
    (unreadable input or invalid header).
    """

    success: bool
    message: str
    batch_id: str
    data: ImportData | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {
            "success": self.success,
            "message": self.message,
            "batch_id": self.batch_id,
            "data": {},
        }
        if self.data is not None:
            payload["data"] = self.data.model_dump(mode="json")
            payload["data"]["errors_details"] = [
                detail.model_dump(mode="json", exclude_none=True)
                for detail in self.data.errors_details
            ]
        return payload

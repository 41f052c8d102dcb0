"""
Core data models for the client import pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .batch_config import BatchConfig, ImportSettings
from .client_record import ClientRecord, ClientTriple, ImportMetadata, NewClient
from .duplicate_group import ClientWithDuplicates, DuplicateCheck, DuplicateGroupSummary
from .import_result import ErrorDetail, ImportData, ImportOutcome
from .stats import ImportStats, Page
from .validation_result import ValidationResult

__all__ = [
    "BatchConfig",
    "ImportSettings",
    "ClientRecord",
    "ClientTriple",
    "ImportMetadata",
    "NewClient",
    "ClientWithDuplicates",
    "DuplicateCheck",
    "DuplicateGroupSummary",
    "ErrorDetail",
    "ImportData",
    "ImportOutcome",
    "ImportStats",
    "Page",
    "ValidationResult",
]

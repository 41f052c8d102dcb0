"""
Batch import of client uploads.
"""

from .pipeline import BatchImportPipeline
from .readers import CSVReader, FileReader
from .result import ImportResultAggregator
from .stats import StatsReporter
from .writers import CSVExportWriter

__all__ = [
    "BatchImportPipeline",
    "CSVReader",
    "FileReader",
    "ImportResultAggregator",
    "StatsReporter",
    "CSVExportWriter",
]

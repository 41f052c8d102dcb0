"""
Writers producing files from stored clients.
"""

from .csv_export_writer import EXPORT_COLUMNS, CSVExportWriter

__all__ = [
    "CSVExportWriter",
    "EXPORT_COLUMNS",
]

"""
Readers for delimited uploads.
"""

from .csv_reader import CSVReader, CSVSource, Row
from .file_reader import FileReader

__all__ = [
    "CSVReader",
    "CSVSource",
    "FileReader",
    "Row",
]

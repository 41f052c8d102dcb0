"""
Format dispatch for delimited uploads.
"""

from pathlib import Path
from typing import BinaryIO

from .csv_reader import CSVReader, CSVSource


class FileReader:
    """
    Opens csv or tsv uploads, or any delimiter given explicitly.
    """

    DELIMITERS = {
        "csv": ",",
        "tsv": "\t",
    }

    def __init__(self, encoding: str = "utf-8-sig"):
        self.encoding = encoding

    def open(
        self,
        source: str | Path | BinaryIO,
        file_format: str = "csv",
        delimiter: str | None = None,
    ) -> CSVSource:
        """
        Open a delimited source.

        Raises:
            ValueError: If file format is unsupported
            MalformedInputError: If the input cannot be parsed
        """
        if delimiter is None:
            delimiter = self.DELIMITERS.get(file_format.lower())
            if delimiter is None:
                raise ValueError(f"Unsupported file format: {file_format}")

        return CSVReader(delimiter=delimiter, encoding=self.encoding).open(source)

    @classmethod
    def detect_format(cls, path: str | Path) -> str:
        """Guess the format from a file extension, defaulting to csv."""
        suffix = Path(path).suffix.lower().lstrip(".")
        return suffix if suffix in cls.DELIMITERS else "csv"

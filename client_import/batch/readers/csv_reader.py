"""
CSV reader for client uploads.

Parses a delimited byte stream into a header and a lazy sequence of rows.
"""

import csv
import io
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from client_import.core.errors import MalformedInputError

Row = dict[str, str | None]


class CSVSource:
    """
    An opened delimited file.

    header is read eagerly; rows are produced lazily while iterating. The
    underlying stream is consumed, so iterating again requires opening the
    file again.
    """

    def __init__(self, text: io.TextIOBase, delimiter: str, name: str, owns_stream: bool):
        self.name = name
        self._text = text
        self._owns_stream = owns_stream
        self._closed = False
        self._reader = csv.reader(text, delimiter=delimiter, strict=True)
        self._consumed = False
        self.header = self._read_header()

    def _read_header(self) -> list[str]:
        try:
            for fields in self._reader:
                if any(field.strip() for field in fields):
                    header = list(fields)
                    break
            else:
                raise MalformedInputError(f"{self.name}: file is empty or has no header row")
        except (csv.Error, UnicodeDecodeError) as e:
            raise MalformedInputError(f"{self.name}: cannot parse header: {e}") from e

        duplicates = sorted({name for name in header if header.count(name) > 1})
        if duplicates:
            raise MalformedInputError(f"{self.name}: duplicate header columns: {', '.join(duplicates)}")
        return header

    def __iter__(self) -> Iterator[Row]:
        if self._consumed:
            raise RuntimeError(f"{self.name}: rows already read; open the source again")
        self._consumed = True

        width = len(self.header)
        try:
            for fields in self._reader:
                if not fields:
                    continue
                # short rows are padded with None, extra fields dropped
                padded = list(fields[:width]) + [None] * (width - len(fields))
                yield dict(zip(self.header, padded))
        except (csv.Error, UnicodeDecodeError) as e:
            raise MalformedInputError(
                f"{self.name}: cannot parse line {self._reader.line_num}: {e}"
            ) from e
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_stream:
            self._text.close()
        else:
            # leave the caller's stream open
            self._text.detach()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class CSVReader:
    """
    Opens delimited files from a path or a binary stream.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig"):
        """
        Args:
            delimiter: Field delimiter
            encoding: Text encoding; the default strips a UTF-8 BOM
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def open(self, source: str | Path | BinaryIO) -> CSVSource:
        """
        Open a source and read its header.

        Args:
            source: File path or binary stream

        Returns:
            CSVSource exposing header and rows

        Raises:
            MalformedInputError: If the input cannot be parsed as delimited text
        """
        if isinstance(source, (str, Path)):
            name = str(source)
            try:
                text = open(source, newline="", encoding=self.encoding)
            except OSError as e:
                raise MalformedInputError(f"{name}: cannot open file: {e}") from e
            owns_stream = True
        else:
            name = getattr(source, "name", "<stream>")
            text = io.TextIOWrapper(source, encoding=self.encoding, newline="")
            owns_stream = False

        try:
            return CSVSource(text, self.delimiter, str(name), owns_stream)
        except MalformedInputError:
            if owns_stream:
                text.close()
            else:
                text.detach()
            raise

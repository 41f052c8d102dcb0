"""
Header contract for client uploads.
"""

from collections.abc import Iterable

from client_import.core.errors import InvalidHeaderError

REQUIRED_HEADERS = ["company_name", "email", "phone_number"]


def missing_headers(header: Iterable[str], required: list[str] = REQUIRED_HEADERS) -> list[str]:
    """Return required columns absent from header, in required order."""
    present = set(header)
    return [name for name in required if name not in present]


def check_headers(header: Iterable[str], required: list[str] = REQUIRED_HEADERS) -> None:
    """
    Check that header contains every required column.

    Matching is exact and case-sensitive; order and extra columns do not matter.

    Raises:
        InvalidHeaderError: If any required column is missing
    """
    missing = missing_headers(header, required)
    if missing:
        raise InvalidHeaderError(missing=missing, expected=list(required))

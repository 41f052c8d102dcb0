"""
Column contract of client uploads.
"""

from .headers import REQUIRED_HEADERS, check_headers, missing_headers

__all__ = [
    "REQUIRED_HEADERS",
    "check_headers",
    "missing_headers",
]

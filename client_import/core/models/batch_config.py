"""
Import tuning: chunk size and error budget.
"""

import os

from pydantic import BaseModel, field_validator

DEFAULT_CHUNK_SIZE = 1000
MIN_CHUNK_SIZE = 100
MAX_CHUNK_SIZE = 5000

DEFAULT_MAX_ERRORS = 100
MIN_MAX_ERRORS = 10
MAX_MAX_ERRORS = 1000


def clamp_chunk_size(size: int) -> int:
    return max(MIN_CHUNK_SIZE, min(MAX_CHUNK_SIZE, int(size)))


def clamp_max_errors(max_errors: int) -> int:
    return max(MIN_MAX_ERRORS, min(MAX_MAX_ERRORS, int(max_errors)))


class ImportSettings(BaseModel):
    """
    User-supplied import configuration.

    Out-of-range values are clamped rather than rejected:
    chunk_size to [100, 5000], max_errors to [10, 1000].
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_errors: int = DEFAULT_MAX_ERRORS

    @field_validator("chunk_size")
    @classmethod
    def clamp_chunk(cls, v: int) -> int:
        return clamp_chunk_size(v)

    @field_validator("max_errors")
    @classmethod
    def clamp_errors(cls, v: int) -> int:
        return clamp_max_errors(v)

    @classmethod
    def from_env(cls) -> "ImportSettings":
        """Read IMPORT_CHUNK_SIZE and IMPORT_MAX_ERRORS, falling back to defaults."""
        return cls(
            chunk_size=int(os.getenv("IMPORT_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))),
            max_errors=int(os.getenv("IMPORT_MAX_ERRORS", str(DEFAULT_MAX_ERRORS))),
        )


class BatchConfig(BaseModel):
    """Effective configuration of one pipeline instance."""

    batch_size: int
    max_errors: int
    batch_id: str

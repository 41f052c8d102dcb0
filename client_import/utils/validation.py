"""
Input validation for the admin command line.

Checks identifiers and pagination arguments before they reach the
repository.
"""

import uuid


class InputValidationError(ValueError):
    """Raised when admin input validation fails."""
    pass


def validate_client_id(client_id: int, field_name: str = "client_id") -> int:
    """
    Validate a client ID.

    Client IDs are positive integers assigned by the database.

    Args:
        client_id: The client ID to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated client ID

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> validate_client_id(42)
        42
        >>> validate_client_id(0)  # doctest: +SKIP
        InputValidationError: client_id must be a positive integer, got 0
    """
    if isinstance(client_id, bool) or not isinstance(client_id, int):
        raise InputValidationError(f"{field_name} must be an integer, got {type(client_id).__name__}")

    if client_id <= 0:
        raise InputValidationError(f"{field_name} must be a positive integer, got {client_id}")

    return client_id


def validate_group_id(group_id: str, field_name: str = "group_id") -> str:
    """
    Validate a duplicate group ID.

    Group IDs are UUID strings minted by the import pipeline.

    Args:
        group_id: The group ID to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated group ID (stripped of whitespace)

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> validate_group_id(" 0f8c4f3e-0d4b-4b0e-9a53-3a8f3c1f2a11 ")
        '0f8c4f3e-0d4b-4b0e-9a53-3a8f3c1f2a11'
    """
    if not group_id or not isinstance(group_id, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    group_id = group_id.strip()

    try:
        uuid.UUID(group_id)
    except ValueError:
        raise InputValidationError(f"{field_name} must be a UUID, got {group_id!r}") from None

    return group_id


def validate_pagination(
    page: int,
    per_page: int,
    max_per_page: int = 100,
) -> tuple[int, int]:
    """
    Validate page and page size for listing queries.

    Args:
        page: 1-based page number
        per_page: Items per page
        max_per_page: Largest allowed page size

    Returns:
        (page, per_page)

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> validate_pagination(2, 15)
        (2, 15)
        >>> validate_pagination(1, 500)  # doctest: +SKIP
        InputValidationError: per_page exceeds maximum of 100
    """
    for name, value in (("page", page), ("per_page", per_page)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InputValidationError(f"{name} must be an integer, got {type(value).__name__}")
        if value <= 0:
            raise InputValidationError(f"{name} must be a positive integer, got {value}")

    if per_page > max_per_page:
        raise InputValidationError(f"per_page exceeds maximum of {max_per_page}")

    return page, per_page

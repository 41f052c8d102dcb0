"""
Manual maintenance of client records.

Edits go through the same field rules as imports, but only for the fields
being changed. Flags and group ids are left untouched by edits.
"""

from typing import Any

from client_import.core.errors import InvalidClientError
from client_import.core.models import ClientRecord, NewClient
from client_import.core.repository import EDITABLE_FIELDS, ClientRepository
from client_import.core.rules import RowValidator
from client_import.observability.logger import get_logger

logger = get_logger(__name__)


class ClientService:
    def __init__(self, repository: ClientRepository, validator: RowValidator | None = None):
        self.repository = repository
        self.validator = validator or RowValidator()

    def create_client(self, data: dict[str, Any]) -> ClientRecord:
        """
        Validate all three fields and insert a non-duplicate record.

        Raises:
            InvalidClientError: If any field fails validation
        """
        result = self.validator.validate(data)
        if not result.valid:
            raise InvalidClientError(result.errors, result.messages)

        record = self.repository.create_client(NewClient(
            company_name=data["company_name"],
            email=data["email"],
            phone_number=data["phone_number"],
        ))
        logger.info(f"Created client {record.id}")
        return record

    def update_client(self, client_id: int, changes: dict[str, Any]) -> ClientRecord:
        """
        Validate and apply changes to the editable fields.

        Keys other than company_name, email and phone_number are ignored.

        Raises:
            InvalidClientError: If a changed field fails validation
            ClientNotFoundError: If the client does not exist
        """
        editable = {name: value for name, value in changes.items() if name in EDITABLE_FIELDS}

        result = self.validator.validate_partial(editable)
        if not result.valid:
            raise InvalidClientError(result.errors, result.messages)

        record = self.repository.update_client(client_id, editable)
        logger.info(f"Updated client {client_id}", extra={"fields": sorted(editable)})
        return record

    def delete_client(self, client_id: int) -> None:
        self.repository.delete_client(client_id)
        logger.info(f"Deleted client {client_id}")

"""
CSV export of stored clients.
"""

import csv
from datetime import datetime
from typing import TextIO

from client_import.core.models import ClientRecord
from client_import.core.repository import ClientFilter, ClientRepository

EXPORT_COLUMNS = [
    "company_name",
    "email",
    "phone_number",
    "is_duplicate",
    "duplicate_group_id",
    "created_at",
]


class CSVExportWriter:
    """
    Writes clients matching a filter as CSV, newest first.
    """

    def __init__(self, repository: ClientRepository):
        self.repository = repository

    def write(self, stream: TextIO, client_filter: ClientFilter | None = None) -> int:
        """
        Write the header and one line per matching client.

        Args:
            stream: Text stream opened with newline=""
            client_filter: Selection (all clients if None)

        Returns:
            Number of client rows written
        """
        writer = csv.writer(stream)
        writer.writerow(EXPORT_COLUMNS)

        count = 0
        for client in self.repository.iter_clients(client_filter or ClientFilter()):
            writer.writerow(self.to_row(client))
            count += 1
        return count

    @staticmethod
    def to_row(client: ClientRecord) -> list[str]:
        return [
            client.company_name,
            client.email,
            client.phone_number,
            "Yes" if client.is_duplicate else "No",
            client.duplicate_group_id or "",
            client.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        ]

    @staticmethod
    def default_filename(now: datetime | None = None) -> str:
        now = now or datetime.now()
        return f"clients_export_{now.strftime('%Y-%m-%d_%H-%M-%S')}.csv"

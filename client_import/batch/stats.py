"""
Aggregate statistics over persisted clients.
"""

from client_import.core.models import ImportStats
from client_import.core.repository import ClientRepository


class StatsReporter:
    """
    Reports counts from committed state. Independent of any import run and
    uncached: each call queries the store.
    """

    def __init__(self, repository: ClientRepository):
        self.repository = repository

    def get_stats(self) -> ImportStats:
        return self.repository.get_stats()

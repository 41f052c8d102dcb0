"""
Exact-match duplicate detection.
"""

import uuid
from collections.abc import Callable

from client_import.core.models import ClientTriple, DuplicateCheck
from client_import.core.repository import DuplicateLookup


def new_group_id() -> str:
    return str(uuid.uuid4())


class DuplicateDetector:
    """
    Decides whether a validated row duplicates stored records.

    Resolution order:
    1. A matching record already carries a group id: the candidate joins
       that group (smallest id if several).
    2. A matching record exists without a group: the candidate gets a new
       group id. The matched record is not updated, so it stays ungrouped.
    3. No match: not a duplicate.

    The lookup must be bound to the caller's open transaction so rows
    inserted earlier in the same chunk are seen.
    """

    def __init__(self, lookup: DuplicateLookup, id_factory: Callable[[], str] = new_group_id):
        self.lookup = lookup
        self.id_factory = id_factory

    def check(self, triple: ClientTriple) -> DuplicateCheck:
        group_id = self.lookup.find_group_for(triple)
        if group_id is not None:
            return DuplicateCheck(is_duplicate=True, group_id=group_id)

        if self.lookup.find_any_match(triple) is not None:
            return DuplicateCheck(is_duplicate=True, group_id=self.id_factory())

        return DuplicateCheck(is_duplicate=False)

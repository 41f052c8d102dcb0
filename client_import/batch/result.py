"""
Assembly of the outcome returned to import callers.
"""

from client_import.core.models import ImportOutcome

from .state import ImportState


class ImportResultAggregator:
    """Wraps a finished run's state into an ImportOutcome."""

    SUCCESS_MESSAGE = "Import completed successfully"

    @classmethod
    def build(cls, batch_id: str, state: ImportState, max_errors: int) -> ImportOutcome:
        return ImportOutcome(
            success=True,
            message=cls.summarize(state, max_errors),
            batch_id=batch_id,
            data=state.to_data(),
        )

    @classmethod
    def failure(cls, batch_id: str, message: str) -> ImportOutcome:
        return ImportOutcome(success=False, message=message, batch_id=batch_id)

    @staticmethod
    def budget_reached(errors: int, max_errors: int) -> bool:
        """True when a run used up its error budget, even on its last row."""
        return errors >= max_errors

    @classmethod
    def summarize(cls, state: ImportState, max_errors: int) -> str:
        message = cls.SUCCESS_MESSAGE
        if state.errors > 0:
            message += f" with {state.errors} errors"
        if cls.budget_reached(state.errors, max_errors):
            message += ". Processing was stopped due to too many errors."
        return message

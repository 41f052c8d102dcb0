"""
Unit tests for the import state fold and outcome aggregation.
"""
import pytest

from client_import.batch.result import ImportResultAggregator
from client_import.batch.state import Chunk, ChunkOutcome, ImportState
from client_import.core.errors import ChunkPersistenceError, ErrorBudgetExceeded, RowValidationError


def validation_detail(row):
    return RowValidationError(row, {}, {"email": ["bad"]}, ["bad"]).to_detail()


@pytest.mark.unit
class TestImportState:
    """apply() and fail_chunk() return new states"""

    def test_apply_accumulates(self):
        state = ImportState(total_rows=10)
        first = ChunkOutcome(imported=3, duplicates=1, errors=1, processed_rows=5,
                             duplicate_groups={"g": [{"company_name": "A"}]},
                             errors_details=[validation_detail(4)])
        second = ChunkOutcome(imported=2, duplicates=1, processed_rows=3,
                              duplicate_groups={"g": [{"company_name": "B"}]})

        result = state.apply(first).apply(second)

        assert (result.imported, result.duplicates, result.errors, result.processed_rows) == (5, 2, 1, 8)
        assert result.duplicate_groups == {"g": [{"company_name": "A"}, {"company_name": "B"}]}
        assert [d.row for d in result.errors_details] == [4]
        assert result.stopped is False

    def test_apply_does_not_mutate_previous_state(self):
        state = ImportState(total_rows=2)
        state.apply(ChunkOutcome(imported=2, processed_rows=2, duplicate_groups={"g": [{}]}))

        assert state.imported == 0
        assert state.duplicate_groups == {}

    def test_apply_carries_stop_flag(self):
        state = ImportState().apply(ChunkOutcome(stopped=True))
        assert state.stopped is True

    def test_fail_chunk_keeps_only_processed_rows(self):
        state = ImportState(total_rows=200, imported=100, processed_rows=100)
        error = ChunkPersistenceError(2, RuntimeError("deadlock detected"))

        result = state.fail_chunk(error, processed_rows=100)

        assert result.imported == 100
        assert result.errors == 1
        assert result.processed_rows == 200
        assert result.errors_details[0].model_dump(exclude_none=True) == {
            "row": "Batch 2",
            "type": "batch_error",
            "error": "Batch processing error: deadlock detected",
        }

    def test_to_data_drops_stop_flag(self):
        data = ImportState(stopped=True, total_rows=3).to_data()
        assert not hasattr(data, "stopped")
        assert data.total_rows == 3

    def test_chunk_number_is_one_based(self):
        assert Chunk(index=0, rows=[], first_row_number=2).number == 1


@pytest.mark.unit
class TestImportResultAggregator:
    """Outcome messages"""

    def test_clean_run(self):
        outcome = ImportResultAggregator.build("b", ImportState(total_rows=1, processed_rows=1, imported=1), 100)

        assert outcome.success is True
        assert outcome.message == "Import completed successfully"
        assert outcome.data.imported == 1

    def test_run_with_errors(self):
        outcome = ImportResultAggregator.build("b", ImportState(errors=3), 100)
        assert outcome.message == "Import completed successfully with 3 errors"

    def test_run_stopped_by_budget(self):
        outcome = ImportResultAggregator.build("b", ImportState(errors=10), 10)
        assert outcome.message == (
            "Import completed successfully with 10 errors. Processing was stopped due to too many errors."
        )

    def test_failure(self):
        outcome = ImportResultAggregator.failure("b", "Import failed: boom")

        assert outcome.success is False
        assert outcome.data is None
        assert outcome.batch_id == "b"


@pytest.mark.unit
class TestErrorDetails:
    def test_processing_limit_detail(self):
        detail = ErrorBudgetExceeded(row_number=12, max_errors=10).to_detail()

        assert detail.model_dump(exclude_none=True) == {
            "row": 12,
            "type": "processing_limit",
            "error": "Processing stopped due to too many errors (max: 10)",
        }

    def test_validation_detail(self):
        error = RowValidationError(
            2,
            {"company_name": "", "email": "a@acme.com", "phone_number": "555"},
            {"company_name": ["Company name is required"]},
            ["Company name is required"],
        )

        assert error.to_detail().model_dump(exclude_none=True) == {
            "row": 2,
            "type": "validation_error",
            "data": {"company_name": "", "email": "a@acme.com", "phone_number": "555"},
            "validation_errors": {"company_name": ["Company name is required"]},
            "error_messages": ["Company name is required"],
        }
        assert str(error) == "Row 2: Company name is required"

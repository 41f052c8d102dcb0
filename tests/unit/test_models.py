"""
Unit tests for Pydantic data models.

Tests model validation, serialization, and business logic.
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from client_import.core.models import (
    BatchConfig,
    ClientRecord,
    ClientTriple,
    DuplicateCheck,
    ErrorDetail,
    ImportData,
    ImportMetadata,
    ImportOutcome,
    ImportSettings,
    NewClient,
    Page,
    ValidationResult,
)
from client_import.core.models.batch_config import clamp_chunk_size, clamp_max_errors
from client_import.core.repository import ClientFilter


@pytest.mark.unit
class TestImportSettings:
    """Clamping of user-supplied configuration"""

    def test_defaults(self):
        settings = ImportSettings()
        assert settings.chunk_size == 1000
        assert settings.max_errors == 100

    @pytest.mark.parametrize("requested,effective", [(1, 100), (99, 100), (100, 100), (2500, 2500), (5000, 5000), (10**6, 5000)])
    def test_chunk_size_clamped(self, requested, effective):
        assert ImportSettings(chunk_size=requested).chunk_size == effective
        assert clamp_chunk_size(requested) == effective

    @pytest.mark.parametrize("requested,effective", [(0, 10), (9, 10), (10, 10), (500, 500), (1000, 1000), (1001, 1000)])
    def test_max_errors_clamped(self, requested, effective):
        assert ImportSettings(max_errors=requested).max_errors == effective
        assert clamp_max_errors(requested) == effective

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("IMPORT_CHUNK_SIZE", "50")
        monkeypatch.setenv("IMPORT_MAX_ERRORS", "250")

        settings = ImportSettings.from_env()

        assert settings.chunk_size == 100
        assert settings.max_errors == 250

    def test_batch_config_fields(self):
        config = BatchConfig(batch_size=1000, max_errors=100, batch_id="b-1")
        assert config.model_dump() == {"batch_size": 1000, "max_errors": 100, "batch_id": "b-1"}


@pytest.mark.unit
class TestClientModels:
    """Tests for NewClient and ClientRecord"""

    def test_new_client_defaults(self):
        client = NewClient(company_name="Acme", email="a@acme.com", phone_number="555")

        assert client.is_duplicate is False
        assert client.duplicate_group_id is None
        assert client.triple == ClientTriple("Acme", "a@acme.com", "555")

    def test_field_length_bounds(self):
        with pytest.raises(ValidationError):
            NewClient(company_name="x" * 256, email="a@acme.com", phone_number="555")
        with pytest.raises(ValidationError):
            NewClient(company_name="", email="a@acme.com", phone_number="555")

    def test_import_metadata_row_number_starts_after_header(self):
        with pytest.raises(ValidationError):
            ImportMetadata(batch_id="b", row_number=1)

        metadata = ImportMetadata(batch_id="b", row_number=2)
        assert metadata.imported_at.tzinfo is not None

    def test_client_record_round_trips_metadata(self):
        record = ClientRecord(
            id=1,
            company_name="Acme",
            email="a@acme.com",
            phone_number="555",
            import_metadata={"batch_id": "b", "row_number": 3, "imported_at": "2025-10-20T07:25:24Z"},
            created_at=datetime(2025, 10, 20, tzinfo=timezone.utc),
        )

        assert record.import_metadata.row_number == 3
        assert record.model_dump(mode="json")["import_metadata"]["batch_id"] == "b"

    def test_triple_from_row(self):
        row = {"company_name": "Acme", "email": "a@acme.com", "phone_number": "555", "extra": "x"}
        assert ClientTriple.from_row(row) == ("Acme", "a@acme.com", "555")


@pytest.mark.unit
class TestDuplicateCheck:
    def test_duplicate_requires_group(self):
        with pytest.raises(ValidationError):
            DuplicateCheck(is_duplicate=True)

    def test_unique_must_not_carry_group(self):
        with pytest.raises(ValidationError):
            DuplicateCheck(is_duplicate=False, group_id="g")


@pytest.mark.unit
class TestValidationResult:
    def test_from_errors_flattens_messages(self):
        result = ValidationResult.from_errors({"email": ["bad"], "phone_number": [], "company_name": ["missing"]})

        assert not result.valid
        assert result.errors == {"email": ["bad"], "company_name": ["missing"]}
        assert result.messages == ["bad", "missing"]

    def test_valid_result_cannot_carry_messages(self):
        with pytest.raises(ValidationError):
            ValidationResult(valid=True, messages=["oops"])


@pytest.mark.unit
class TestImportOutcome:
    """Serialized outcome shape"""

    def test_failure_has_empty_data(self):
        outcome = ImportOutcome(success=False, message="Import failed: boom", batch_id="b")
        assert outcome.to_dict() == {
            "success": False,
            "message": "Import failed: boom",
            "batch_id": "b",
            "data": {},
        }

    def test_success_payload_omits_unset_detail_fields(self):
        data = ImportData(
            imported=1,
            errors=1,
            total_rows=2,
            processed_rows=2,
            errors_details=[ErrorDetail(row="Batch 2", type="batch_error", error="Batch processing error: x")],
        )
        payload = ImportOutcome(success=True, message="ok", batch_id="b", data=data).to_dict()

        assert payload["data"]["errors_details"] == [
            {"row": "Batch 2", "type": "batch_error", "error": "Batch processing error: x"}
        ]
        assert set(payload["data"]) == {
            "imported", "duplicates", "errors", "duplicate_groups",
            "errors_details", "total_rows", "processed_rows",
        }


@pytest.mark.unit
class TestQueryModels:
    def test_filter_flags_are_exclusive(self):
        with pytest.raises(ValidationError):
            ClientFilter(duplicates_only=True, unique_only=True)

    @pytest.mark.parametrize("total,last_page", [(0, 1), (1, 1), (15, 1), (16, 2), (45, 3)])
    def test_last_page(self, total, last_page):
        page = Page[int](items=[], total=total, page=1, per_page=15)
        assert page.last_page == last_page

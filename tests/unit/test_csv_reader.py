"""
Unit tests for delimited file reading.
"""
import io

import pytest

from client_import.batch.readers import CSVReader, FileReader
from client_import.core.errors import InvalidHeaderError, MalformedInputError
from client_import.core.schema import check_headers, missing_headers


@pytest.mark.unit
class TestCSVReader:
    """Tests for CSVReader"""

    def test_reads_header_and_rows(self, write_csv):
        path = write_csv([["Acme", "a@acme.com", "555"], ["Beta", "b@beta.io", "556"]])

        with CSVReader().open(path) as source:
            assert source.header == ["company_name", "email", "phone_number"]
            rows = list(source)

        assert rows == [
            {"company_name": "Acme", "email": "a@acme.com", "phone_number": "555"},
            {"company_name": "Beta", "email": "b@beta.io", "phone_number": "556"},
        ]

    def test_short_rows_padded_with_none(self, write_csv):
        path = write_csv([["Acme"]])

        with CSVReader().open(path) as source:
            rows = list(source)

        assert rows == [{"company_name": "Acme", "email": None, "phone_number": None}]

    def test_extra_fields_dropped(self, write_csv):
        path = write_csv([["Acme", "a@acme.com", "555", "surplus"]])

        with CSVReader().open(path) as source:
            assert list(source) == [{"company_name": "Acme", "email": "a@acme.com", "phone_number": "555"}]

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "gaps.csv"
        path.write_text("\ncompany_name,email,phone_number\n\nAcme,a@acme.com,555\n\n", encoding="utf-8")

        with CSVReader().open(path) as source:
            assert len(list(source)) == 1

    def test_bom_removed_from_first_header(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffcompany_name,email,phone_number\nAcme,a@acme.com,555\n".encode("utf-8"))

        with CSVReader().open(path) as source:
            assert source.header == ["company_name", "email", "phone_number"]

    def test_header_names_kept_verbatim(self, tmp_path):
        path = tmp_path / "padded.csv"
        path.write_text("company_name, email,phone_number \nAcme,a@acme.com,555\n", encoding="utf-8")

        with CSVReader().open(path) as source:
            assert source.header == ["company_name", " email", "phone_number "]
            with pytest.raises(InvalidHeaderError) as exc_info:
                check_headers(source.header)

        assert exc_info.value.missing == ["email", "phone_number"]

    def test_quoted_fields_keep_commas_and_whitespace(self, tmp_path):
        path = tmp_path / "quoted.csv"
        path.write_text('company_name,email,phone_number\n"Acme, Inc. ",a@acme.com,555\n', encoding="utf-8")

        with CSVReader().open(path) as source:
            assert list(source)[0]["company_name"] == "Acme, Inc. "

    def test_rows_can_only_be_read_once(self, write_csv):
        source = CSVReader().open(write_csv([["Acme", "a@acme.com", "555"]]))
        list(source)

        with pytest.raises(RuntimeError, match="already read"):
            list(source)

    def test_empty_file_is_malformed(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        with pytest.raises(MalformedInputError, match="no header"):
            CSVReader().open(path)

    def test_duplicate_columns_are_malformed(self, write_csv):
        path = write_csv([], header=["company_name", "email", "email"])

        with pytest.raises(MalformedInputError, match="duplicate header"):
            CSVReader().open(path)

    def test_invalid_encoding_is_malformed(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"company_name,email,phone_number\nCaf\xe9,a@acme.com,555\n")

        with pytest.raises(MalformedInputError):
            with CSVReader().open(path) as source:
                list(source)

    def test_unterminated_quote_is_malformed(self, tmp_path):
        path = tmp_path / "broken.csv"
        path.write_text('company_name,email,phone_number\n"Acme,a@acme.com,555\n', encoding="utf-8")

        with pytest.raises(MalformedInputError):
            with CSVReader().open(path) as source:
                list(source)

    def test_missing_file_is_malformed(self, tmp_path):
        with pytest.raises(MalformedInputError, match="cannot open"):
            CSVReader().open(tmp_path / "absent.csv")

    def test_binary_stream_left_open(self):
        stream = io.BytesIO(b"company_name,email,phone_number\nAcme,a@acme.com,555\n")

        with CSVReader().open(stream) as source:
            rows = list(source)

        assert len(rows) == 1
        assert not stream.closed


@pytest.mark.unit
class TestFileReader:
    """Tests for FileReader format dispatch"""

    def test_tsv(self, write_csv):
        path = write_csv([["Acme", "a@acme.com", "555"]], name="clients.tsv", delimiter="\t")

        with FileReader().open(path, file_format="tsv") as source:
            assert list(source)[0]["email"] == "a@acme.com"

    def test_explicit_delimiter(self, write_csv):
        path = write_csv([["Acme", "a@acme.com", "555"]], delimiter=";")

        with FileReader().open(path, delimiter=";") as source:
            assert source.header == ["company_name", "email", "phone_number"]

    def test_unsupported_format(self, write_csv):
        with pytest.raises(ValueError, match="Unsupported file format"):
            FileReader().open(write_csv([]), file_format="parquet")

    @pytest.mark.parametrize("name,expected", [("a.csv", "csv"), ("a.TSV", "tsv"), ("a.txt", "csv"), ("a", "csv")])
    def test_detect_format(self, name, expected):
        assert FileReader.detect_format(name) == expected


@pytest.mark.unit
class TestHeaders:
    """Tests for the header contract"""

    def test_order_and_extra_columns_ignored(self):
        check_headers(["phone_number", "notes", "email", "company_name"])  # Should not raise

    def test_missing_columns_listed_in_required_order(self):
        assert missing_headers(["email"]) == ["company_name", "phone_number"]

    def test_invalid_header_message(self):
        with pytest.raises(InvalidHeaderError) as exc_info:
            check_headers(["name", "email", "phone"])

        assert str(exc_info.value) == "Invalid CSV headers. Expected: company_name, email, phone_number"
        assert exc_info.value.missing == ["company_name", "phone_number"]

    def test_matching_is_case_sensitive(self):
        with pytest.raises(InvalidHeaderError):
            check_headers(["Company_Name", "email", "phone_number"])

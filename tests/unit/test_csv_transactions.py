"""
Unit tests for the CSV transaction source.
"""

from datetime import date
from io import StringIO

import pandas as pd
import pytest

from src.core.exceptions.tracker import (
    ConfigurationError,
    DataError,
    DataSourceError,
    ValidationError,
)
from src.infrastructure.data import CSVTransactionSource
from src.infrastructure.data.csv_transactions import LEDGER_COLUMNS, parse_ledger_date

LEDGER_CSV = """Date,Scheme Code,Units
05-03-2024,120503,10.5
06/03/2024,118834,"1,200.25"
2024-03-07,120503,2
"""


class TestParseLedgerDate:
    """Tests for ledger date parsing."""

    @pytest.mark.parametrize("value", ["05-03-2024", "05/03/2024", "2024-03-05", " 05-03-2024 "])
    def test_should_accept_day_first_and_iso_dates(self, value: str) -> None:
        """Test the accepted formats."""
        assert parse_ledger_date(value) == date(2024, 3, 5)

    def test_should_reject_unknown_format(self) -> None:
        """Test unparseable dates."""
        with pytest.raises(ValidationError, match="Unrecognized ledger date"):
            parse_ledger_date("March 5th")


class TestCSVTransactionSource:
    """Tests for CSVTransactionSource."""

    def test_should_parse_rows_in_ledger_order(self) -> None:
        """Test a well-formed ledger."""
        transactions = CSVTransactionSource(StringIO(LEDGER_CSV)).fetch_transactions()

        assert [(t.date, t.instrument_id, t.units) for t in transactions] == [
            (date(2024, 3, 5), "120503", 10.5),
            (date(2024, 3, 6), "118834", 1200.25),
            (date(2024, 3, 7), "120503", 2.0),
        ]

    def test_should_skip_incomplete_and_invalid_rows(self) -> None:
        """Test that bad rows are dropped without failing the feed."""
        csv = """Date,Scheme Code,Units
05-03-2024,120503,10.5
05-03-2024,,3
not a date,120503,1
05-03-2024,120503,-4
05-03-2024,120503,abc
"""
        transactions = CSVTransactionSource(StringIO(csv)).fetch_transactions()

        assert len(transactions) == 1
        assert transactions[0].units == 10.5

    def test_should_return_empty_list_for_header_only(self) -> None:
        """Test an empty ledger."""
        assert CSVTransactionSource(StringIO("Date,Scheme Code,Units\n")).fetch_transactions() == []
        assert CSVTransactionSource(StringIO("")).fetch_transactions() == []

    def test_should_read_from_file(self, tmp_path) -> None:
        """Test a local file path."""
        path = tmp_path / "ledger.csv"
        path.write_text(LEDGER_CSV)

        assert len(CSVTransactionSource(path).fetch_transactions()) == 3

    def test_should_raise_data_source_error_for_missing_file(self, tmp_path) -> None:
        """Test unreadable sources."""
        with pytest.raises(DataSourceError):
            CSVTransactionSource(tmp_path / "missing.csv").fetch_transactions()

    def test_should_require_configured_source(self) -> None:
        """Test that an empty URL is a configuration error."""
        with pytest.raises(ConfigurationError):
            CSVTransactionSource("  ")

    def test_should_enforce_row_limit(self, monkeypatch) -> None:
        """Test the per-refresh row limit."""
        monkeypatch.setattr(
            "src.infrastructure.data.csv_transactions.MAX_TRANSACTIONS_PER_REFRESH", 1
        )
        frame = pd.DataFrame(
            [["05-03-2024", "1", "1"], ["05-03-2024", "2", "1"]], columns=LEDGER_COLUMNS
        )

        with pytest.raises(DataError, match="limit 1"):
            CSVTransactionSource.parse_frame(frame)

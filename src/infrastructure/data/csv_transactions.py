"""
CSV transaction feed.

Reads the purchase ledger exported as CSV (a published spreadsheet URL or
a local file). The first row is a header; every following row carries
``date, instrument id, units`` in its first three columns.
"""

from datetime import date, datetime
from pathlib import Path
from typing import IO

import pandas as pd
from loguru import logger

from src.core.constants import LEDGER_DATE_FORMATS, MAX_TRANSACTIONS_PER_REFRESH
from src.core.exceptions.tracker import (
    ConfigurationError,
    DataError,
    DataSourceError,
    ValidationError,
)
from src.core.interfaces.data import ITransactionSource
from src.core.models.transaction import RawTransaction
from src.core.types.financial import to_float

LEDGER_COLUMNS = ["date", "instrument_id", "units"]


def parse_ledger_date(value: str) -> date:
    """Parse a ledger date.

    Sheets export day-first dates with either separator (``05-03-2024`` or
    ``05/03/2024``); ISO dates are accepted as well.

    Raises:
        ValidationError: If no accepted format matches
    """
    text = value.strip()
    for fmt in LEDGER_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"Unrecognized ledger date: {value!r}")


class CSVTransactionSource(ITransactionSource):
    """Transaction source backed by a CSV export."""

    def __init__(self, source: str | Path | IO[str]):
        """Initialize with a URL, file path, or open text stream."""
        if isinstance(source, str) and not source.strip():
            raise ConfigurationError("Transaction CSV source is not configured")
        self.source = source

    def fetch_transactions(self) -> list[RawTransaction]:
        """Load and parse every valid purchase row, in ledger order."""
        frame = self._read_frame()
        transactions = self.parse_frame(frame)
        logger.info(f"Loaded {len(transactions)} transactions from {self._source_label}")
        return transactions

    def _read_frame(self) -> pd.DataFrame:
        try:
            return pd.read_csv(
                self.source,
                header=None,
                skiprows=1,
                names=LEDGER_COLUMNS,
                index_col=False,
                dtype=str,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame(columns=LEDGER_COLUMNS)
        except OSError as e:
            logger.error(f"Failed to read transactions from {self._source_label}: {e}")
            raise DataSourceError(self._source_label, str(e)) from e
        except (pd.errors.ParserError, ValueError) as e:
            logger.error(f"CSV parsing error ({type(e).__name__}) in {self._source_label}: {e}")
            raise DataSourceError(self._source_label, f"malformed CSV: {e}") from e

    @staticmethod
    def parse_frame(frame: pd.DataFrame) -> list[RawTransaction]:
        """Convert raw ledger rows to transactions.

        Rows missing any of the three fields, or carrying values that do not
        parse, are dropped with a warning.

        Raises:
            DataError: If the feed exceeds the per-refresh row limit
        """
        if len(frame) > MAX_TRANSACTIONS_PER_REFRESH:
            raise DataError(
                f"Transaction feed has {len(frame)} rows "
                f"(limit {MAX_TRANSACTIONS_PER_REFRESH})"
            )

        complete = frame.dropna(subset=LEDGER_COLUMNS)
        dropped = len(frame) - len(complete)
        if dropped:
            logger.warning(f"Dropped {dropped} incomplete ledger rows")

        transactions = []
        for index, row in complete.iterrows():
            try:
                transactions.append(
                    RawTransaction(
                        date=parse_ledger_date(row["date"]),
                        instrument_id=row["instrument_id"],
                        units=to_float(row["units"]),
                    )
                )
            except (ValidationError, ValueError) as e:
                # +2: one-based numbering plus the header row
                logger.warning(f"Skipping ledger row {index + 2}: {e}")
        return transactions

    @property
    def _source_label(self) -> str:
        if isinstance(self.source, str | Path):
            return str(self.source)
        return type(self.source).__name__

"""
Shared fixtures: in-memory collaborators for the portfolio service.
"""

import threading
from collections.abc import Callable
from datetime import date, datetime

import pytest

from src.core.exceptions.tracker import DataSourceError
from src.core.interfaces.data import IPriceSource, ITransactionLedger, ITransactionSource
from src.core.models.price_series import PriceHistory
from src.core.models.transaction import RawTransaction
from src.core.services.portfolio_service import PortfolioService

# 365.25 days after the purchases, so one-year figures are exact.
VALUATION_TIME = datetime(2024, 1, 2, 6)


class InMemoryTransactionSource(ITransactionSource):
    def __init__(self, transactions: list[RawTransaction]):
        self.transactions = transactions
        self.error: Exception | None = None

    def fetch_transactions(self) -> list[RawTransaction]:
        if self.error is not None:
            raise self.error
        return list(self.transactions)


class InMemoryPriceSource(IPriceSource):
    def __init__(self, histories: dict[str, PriceHistory]):
        self.histories = histories
        self.requests: list[str] = []

    def fetch_price_series(self, instrument_id: str) -> PriceHistory:
        self.requests.append(instrument_id)
        try:
            return self.histories[instrument_id]
        except KeyError:
            raise DataSourceError("price API", f"unknown scheme {instrument_id}") from None


class RecordingLedger(ITransactionLedger):
    def __init__(self, accept: bool = True):
        self.accept = accept
        self.submitted: list[RawTransaction] = []

    def submit_transaction(self, transaction: RawTransaction) -> bool:
        self.submitted.append(transaction)
        return self.accept


class BlockingLedger(ITransactionLedger):
    """Ledger whose writes block the calling thread until released."""

    def __init__(self):
        self.release = threading.Event()
        self.released_in_time: bool | None = None

    def submit_transaction(self, transaction: RawTransaction) -> bool:
        self.released_in_time = self.release.wait(timeout=2)
        return True


@pytest.fixture
def histories() -> dict[str, PriceHistory]:
    return {
        "120503": PriceHistory(
            instrument_id="120503",
            name="Axis Bluechip Fund",
            prices={date(2023, 1, 2): 10.0, date(2024, 1, 1): 12.0},
        ),
        "118834": PriceHistory(
            instrument_id="118834",
            name="Mirae Asset Large Cap",
            prices={date(2023, 1, 2): 20.0, date(2024, 1, 1): 19.0},
        ),
    }


@pytest.fixture
def transactions() -> list[RawTransaction]:
    """Two priced purchases and one on a date with no NAV."""
    return [
        RawTransaction(date=date(2023, 1, 2), instrument_id="120503", units=100.0),
        RawTransaction(date=date(2023, 1, 2), instrument_id="118834", units=100.0),
        RawTransaction(date=date(2023, 1, 3), instrument_id="120503", units=5.0),
    ]


@pytest.fixture
def transaction_source(transactions) -> InMemoryTransactionSource:
    return InMemoryTransactionSource(transactions)


@pytest.fixture
def price_source(histories) -> InMemoryPriceSource:
    return InMemoryPriceSource(histories)


@pytest.fixture
def ledger() -> RecordingLedger:
    return RecordingLedger()


@pytest.fixture
def blocking_ledger() -> BlockingLedger:
    return BlockingLedger()


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: VALUATION_TIME


@pytest.fixture
def service(transaction_source, price_source, ledger, clock) -> PortfolioService:
    return PortfolioService(
        transaction_source=transaction_source,
        price_source=price_source,
        ledger=ledger,
        clock=clock,
    )

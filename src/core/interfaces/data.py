"""
Data access interfaces.

Abstract collaborators the portfolio core consumes: a transaction feed,
a price source, and an append-only ledger.
"""

from abc import ABC, abstractmethod

from src.core.models.transaction import RawTransaction
from src.core.protocols import IPriceSeries


class ITransactionSource(ABC):
    """Abstract interface for reading the purchase ledger."""

    @abstractmethod
    def fetch_transactions(self) -> list[RawTransaction]:
        """Fetch every purchase row, in ledger order."""
        pass


class IPriceSource(ABC):
    """Abstract interface for instrument price histories."""

    @abstractmethod
    def fetch_price_series(self, instrument_id: str) -> IPriceSeries:
        """Fetch the full price history of one instrument."""
        pass


class ITransactionLedger(ABC):
    """Abstract interface for appending purchases to the ledger."""

    @abstractmethod
    def submit_transaction(self, transaction: RawTransaction) -> bool:
        """Append a purchase; True if the request was handed off."""
        pass

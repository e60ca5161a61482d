"""
Core type definitions and protocols.

This module defines shared types and protocols so that the aggregator can
consume price data without depending on where it came from.
"""

from collections.abc import Mapping
from datetime import date
from typing import Protocol


class IPriceSeries(Protocol):
    """Protocol defining the price history of one instrument.

    Any object with these members can back the aggregator: the mfapi
    price source, an in-memory fixture, or a cached snapshot.
    """

    instrument_id: str
    name: str

    def price_at(self, on_date: date) -> float | None:
        """Price per unit on exactly ``on_date``, or None if not published."""
        ...

    def latest_price(self) -> float | None:
        """Most recent known price per unit."""
        ...


# Type aliases for commonly used types
PriceLookup = Mapping[str, IPriceSeries]

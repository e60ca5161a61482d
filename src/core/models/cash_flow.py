"""
Cash flow domain model.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from src.core.exceptions.tracker import ValidationError


@dataclass(frozen=True)
class CashFlow:
    """A single dated, signed amount.

    Purchases are outflows (negative); valuations and redemptions are
    inflows (positive).
    """

    date: datetime
    amount: float

    def __post_init__(self) -> None:
        """Validate cash flow data after initialization."""
        if not math.isfinite(self.amount):
            raise ValidationError(f"Cash flow amount must be finite, got {self.amount}")

    @property
    def is_outflow(self) -> bool:
        """Check if the flow leaves the investor's pocket."""
        return self.amount < 0

    @property
    def is_inflow(self) -> bool:
        """Check if the flow returns to the investor."""
        return self.amount > 0

    def shifted(self, delta: timedelta) -> "CashFlow":
        """Return a copy moved in time by ``delta``."""
        return CashFlow(date=self.date + delta, amount=self.amount)

"""
Ledger transaction domain model.
"""

import math
from dataclasses import dataclass
from datetime import date

from src.core.constants import MAX_UNITS_PER_TRANSACTION
from src.core.exceptions.tracker import ValidationError
from src.core.types.financial import ZERO
from src.core.utils.validation import validate_instrument_id


@dataclass(frozen=True)
class RawTransaction:
    """A purchase row from the transaction ledger.

    Only purchases are recorded; the price paid is resolved later from the
    instrument's price history at ``date``.
    """

    date: date
    instrument_id: str
    units: float

    def __post_init__(self) -> None:
        """Validate and normalize transaction data after initialization."""
        object.__setattr__(self, "instrument_id", validate_instrument_id(self.instrument_id))
        if not math.isfinite(self.units) or self.units <= ZERO:
            raise ValidationError(f"Units must be positive, got {self.units}")
        if self.units > MAX_UNITS_PER_TRANSACTION:
            raise ValidationError(
                f"Units exceed maximum of {MAX_UNITS_PER_TRANSACTION:g}, got {self.units}"
            )

    def to_ledger_row(self) -> dict[str, str]:
        """Serialize to the payload accepted by the ledger endpoint."""
        return {
            "date": self.date.isoformat(),
            "id": self.instrument_id,
            "units": str(self.units),
        }

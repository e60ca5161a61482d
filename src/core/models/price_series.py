"""
Price history domain model.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType

from src.core.exceptions.tracker import ValidationError
from src.core.protocols import IPriceSeries
from src.core.utils.validation import validate_instrument_id, validate_positive


@dataclass(frozen=True)
class PriceHistory:
    """Immutable per-date price history of one instrument."""

    instrument_id: str
    name: str
    prices: Mapping[date, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate prices and freeze the mapping."""
        object.__setattr__(self, "instrument_id", validate_instrument_id(self.instrument_id))
        for on_date, price in self.prices.items():
            validate_positive(price, f"price on {on_date.isoformat()}")
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))

    @property
    def display_name(self) -> str:
        """Human label, falling back to the identifier."""
        return self.name or self.instrument_id

    @property
    def latest_date(self) -> date | None:
        """Date of the most recent price, if any."""
        return max(self.prices) if self.prices else None

    def price_at(self, on_date: date) -> float | None:
        return self.prices.get(on_date)

    def latest_price(self) -> float | None:
        latest = self.latest_date
        return self.prices[latest] if latest is not None else None


class PriceSnapshot(Mapping[str, IPriceSeries]):
    """Read-only instrument -> price series mapping fixed at fetch time.

    The aggregator only ever sees a complete snapshot; concurrent fetches
    are gathered first and then frozen here.
    """

    def __init__(self, series: Mapping[str, IPriceSeries] | None = None) -> None:
        self._series: Mapping[str, IPriceSeries] = MappingProxyType(dict(series or {}))

    @classmethod
    def from_series(cls, series: list[IPriceSeries]) -> "PriceSnapshot":
        """Build a snapshot keyed by each series' instrument id."""
        keyed: dict[str, IPriceSeries] = {}
        for item in series:
            if item.instrument_id in keyed:
                raise ValidationError(f"Duplicate price series for {item.instrument_id}")
            keyed[item.instrument_id] = item
        return cls(keyed)

    def __getitem__(self, instrument_id: str) -> IPriceSeries:
        return self._series[instrument_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._series)

    def __len__(self) -> int:
        return len(self._series)

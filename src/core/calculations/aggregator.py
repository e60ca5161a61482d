"""
Portfolio aggregation.

Turns ledger purchase rows plus a price snapshot into one Position per
instrument. Aggregation is a pure function of its inputs: positions are
accumulated on private builders and frozen before they are returned.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, time

from loguru import logger

from src.core.exceptions.tracker import MissingPriceDataError
from src.core.models.cash_flow import CashFlow
from src.core.models.portfolio import PortfolioTotals
from src.core.models.position import Position
from src.core.models.transaction import RawTransaction
from src.core.protocols import IPriceSeries, PriceLookup
from src.core.types.financial import ZERO, calculate_notional_value, safe_float_comparison
from src.core.utils.decorators import log_operation


@dataclass
class _PositionBuilder:
    """Mutable accumulator for one instrument, private to a single aggregation."""

    instrument_id: str
    display_name: str
    current_price: float
    units_held: float = ZERO
    invested_capital: float = ZERO
    cash_flows: list[CashFlow] = field(default_factory=list)

    def add_purchase(self, transaction: RawTransaction, price: float) -> None:
        invested = calculate_notional_value(transaction.units, price)
        self.units_held += transaction.units
        self.invested_capital += invested
        self.cash_flows.append(
            CashFlow(date=datetime.combine(transaction.date, time.min), amount=-invested)
        )

    def observe_latest_price(self, latest_price: float) -> None:
        # The first observation is canonical; disagreeing ones are reported only.
        if not safe_float_comparison(latest_price, self.current_price):
            logger.warning(
                f"Inconsistent latest price for {self.instrument_id}: "
                f"keeping {self.current_price}, ignoring {latest_price}"
            )

    def freeze(self) -> Position:
        return Position(
            instrument_id=self.instrument_id,
            display_name=self.display_name,
            units_held=self.units_held,
            invested_capital=self.invested_capital,
            current_price=self.current_price,
            cash_flows=tuple(self.cash_flows),
        )


@dataclass(frozen=True)
class SkippedTransaction:
    """A ledger row that contributed nothing, with the reason."""

    transaction: RawTransaction
    reason: str


@dataclass(frozen=True)
class AggregationReport:
    """Positions in first-seen instrument order, plus the skipped rows."""

    positions: tuple[Position, ...]
    skipped: tuple[SkippedTransaction, ...] = ()

    @property
    def totals(self) -> PortfolioTotals:
        return PortfolioTotals.from_positions(self.positions)

    @property
    def accepted_count(self) -> int:
        return sum(len(position.cash_flows) for position in self.positions)


class PortfolioAggregator:
    """Groups purchase transactions by instrument and prices them."""

    @log_operation
    def aggregate(
        self, transactions: Iterable[RawTransaction], price_lookup: PriceLookup
    ) -> AggregationReport:
        """Accumulate transactions into positions.

        A transaction is skipped (and reported) when its instrument has no
        price series, when no price was published on exactly the
        transaction date, or when the instrument has no latest price.

        Args:
            transactions: Purchase rows in processing order
            price_lookup: Complete, read-only instrument -> price series mapping

        Returns:
            AggregationReport with frozen positions
        """
        builders: dict[str, _PositionBuilder] = {}
        skipped: list[SkippedTransaction] = []

        for transaction in transactions:
            try:
                series = self._series_for(transaction, price_lookup)
                historical_price = self._historical_price(transaction, series)
                latest_price = self._latest_price(transaction, series)
            except MissingPriceDataError as e:
                logger.warning(f"Skipping transaction: {e}")
                skipped.append(SkippedTransaction(transaction=transaction, reason=str(e)))
                continue

            builder = builders.get(transaction.instrument_id)
            if builder is None:
                builder = _PositionBuilder(
                    instrument_id=transaction.instrument_id,
                    display_name=series.name or transaction.instrument_id,
                    current_price=latest_price,
                )
                builders[transaction.instrument_id] = builder
            else:
                builder.observe_latest_price(latest_price)

            builder.add_purchase(transaction, historical_price)
            logger.debug(
                f"Accumulated {transaction.units} units of {transaction.instrument_id} "
                f"at {historical_price} on {transaction.date.isoformat()}"
            )

        return AggregationReport(
            positions=tuple(builder.freeze() for builder in builders.values()),
            skipped=tuple(skipped),
        )

    @staticmethod
    def _series_for(transaction: RawTransaction, price_lookup: PriceLookup) -> IPriceSeries:
        series = price_lookup.get(transaction.instrument_id)
        if series is None:
            raise MissingPriceDataError(transaction.instrument_id, transaction.date)
        return series

    @staticmethod
    def _historical_price(transaction: RawTransaction, series: IPriceSeries) -> float:
        price = series.price_at(transaction.date)
        if price is None:
            raise MissingPriceDataError(transaction.instrument_id, transaction.date)
        return price

    @staticmethod
    def _latest_price(transaction: RawTransaction, series: IPriceSeries) -> float:
        price = series.latest_price()
        if price is None:
            raise MissingPriceDataError(transaction.instrument_id, transaction.date)
        return price


def aggregate(
    transactions: Iterable[RawTransaction], price_lookup: PriceLookup
) -> tuple[Position, ...]:
    """Aggregate transactions into positions, dropping unpriced rows."""
    return PortfolioAggregator().aggregate(transactions, price_lookup).positions

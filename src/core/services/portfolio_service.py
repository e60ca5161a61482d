"""
Portfolio refresh orchestration.

Sequences one full refresh: read the ledger, fetch every referenced
instrument's price history (concurrently), freeze the results into a
snapshot, aggregate, and compute returns. Aggregation never starts before
every fetch has finished, and a failed refresh leaves the previously
published view in place.
"""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from loguru import logger

from src.core.calculations.aggregator import AggregationReport, PortfolioAggregator
from src.core.calculations.sorting import sort_positions
from src.core.calculations.xirr import XirrSolver
from src.core.enums import SortKey
from src.core.exceptions.tracker import (
    ConfigurationError,
    DataError,
    PortfolioError,
    PositionNotFoundError,
)
from src.core.interfaces.data import IPriceSource, ITransactionLedger, ITransactionSource
from src.core.models.portfolio import PortfolioTotals
from src.core.models.position import Position
from src.core.models.price_series import PriceSnapshot
from src.core.models.transaction import RawTransaction
from src.core.models.xirr_result import XirrResult
from src.core.protocols import IPriceSeries
from src.core.utils.decorators import log_operation


@dataclass(frozen=True)
class PortfolioView:
    """Everything the presentation layer needs from one refresh."""

    as_of: datetime
    report: AggregationReport
    totals: PortfolioTotals
    position_returns: Mapping[str, XirrResult]
    total_return: XirrResult
    refreshed_at: datetime = field(default_factory=datetime.now)

    @property
    def positions(self) -> tuple[Position, ...]:
        return self.report.positions

    @classmethod
    def build(
        cls, report: AggregationReport, as_of: datetime, solver: XirrSolver
    ) -> "PortfolioView":
        """Value every position and the portfolio at ``as_of``."""
        returns = {
            position.instrument_id: position.annualized_return(as_of, solver)
            for position in report.positions
        }
        totals = report.totals
        return cls(
            as_of=as_of,
            report=report,
            totals=totals,
            position_returns=MappingProxyType(returns),
            total_return=totals.annualized_return(as_of, solver),
        )

    def position(self, instrument_id: str) -> Position:
        """Look up one position by instrument id."""
        for position in self.positions:
            if position.instrument_id == instrument_id:
                return position
        raise PositionNotFoundError(instrument_id)

    def return_for(self, instrument_id: str) -> XirrResult:
        """Annualized return of one position."""
        try:
            return self.position_returns[instrument_id]
        except KeyError:
            raise PositionNotFoundError(instrument_id) from None


class PortfolioService:
    """Owns the current portfolio view and how it is refreshed."""

    def __init__(
        self,
        transaction_source: ITransactionSource,
        price_source: IPriceSource,
        ledger: ITransactionLedger | None = None,
        aggregator: PortfolioAggregator | None = None,
        solver: XirrSolver | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.transaction_source = transaction_source
        self.price_source = price_source
        self.ledger = ledger
        self.aggregator = aggregator or PortfolioAggregator()
        self.solver = solver or XirrSolver()
        self._clock = clock
        self._view: PortfolioView | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def view(self) -> PortfolioView | None:
        """Most recently published view (possibly stale after a failed refresh)."""
        return self._view

    @log_operation
    async def refresh(self) -> PortfolioView:
        """Rebuild the portfolio from the data sources.

        Raises:
            DataError: If the ledger or a price lookup fails; the previous
                view is kept
        """
        async with self._refresh_lock:
            try:
                loop = asyncio.get_running_loop()
                transactions = await loop.run_in_executor(
                    None, self.transaction_source.fetch_transactions
                )
                snapshot = await self._fetch_snapshot(transactions)
            except DataError as e:
                logger.error(f"Portfolio refresh failed, keeping previous view: {e}")
                raise

            report = self.aggregator.aggregate(transactions, snapshot)
            view = PortfolioView.build(report, as_of=self._clock(), solver=self.solver)
            self._view = view

        logger.success(
            f"Portfolio refreshed: {len(view.positions)} positions, "
            f"{report.accepted_count} purchases, {len(report.skipped)} skipped"
        )
        return view

    async def current_view(self) -> PortfolioView:
        """Published view, refreshing first if there is none yet."""
        if self._view is None:
            return await self.refresh()
        return self._view

    def sorted_positions(self, key: SortKey) -> list[Position]:
        """Positions of the current view ordered by ``key``.

        Raises:
            PortfolioError: If no refresh has completed yet
        """
        if self._view is None:
            raise PortfolioError("Portfolio has not been refreshed yet")
        view = self._view
        return sort_positions(
            view.positions, key, view.as_of, self.solver, returns=view.position_returns
        )

    async def submit_transaction(self, transaction: RawTransaction) -> bool:
        """Append a purchase to the ledger.

        The ledger call runs on an executor thread. The current view is not
        updated; the row appears after the next refresh once the ledger has
        published it.

        Raises:
            ConfigurationError: If no ledger is configured
        """
        if self.ledger is None:
            raise ConfigurationError("No transaction ledger configured")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.ledger.submit_transaction, transaction)

    async def _fetch_snapshot(self, transactions: list[RawTransaction]) -> PriceSnapshot:
        instrument_ids = list(dict.fromkeys(tx.instrument_id for tx in transactions))
        logger.debug(f"Fetching price series for {len(instrument_ids)} instruments")
        loop = asyncio.get_running_loop()
        series: list[IPriceSeries] = await asyncio.gather(
            *(
                loop.run_in_executor(None, self.price_source.fetch_price_series, instrument_id)
                for instrument_id in instrument_ids
            )
        )
        return PriceSnapshot(dict(zip(instrument_ids, series, strict=True)))

"""
Portfolio totals.

Derived figures over a collection of positions. Nothing here is stored;
totals are recomputed from positions on every refresh.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from src.core.calculations.xirr import XirrSolver, solve, with_terminal_value
from src.core.models.cash_flow import CashFlow
from src.core.models.position import Position
from src.core.models.xirr_result import XirrResult
from src.core.types.financial import ZERO, calculate_return_pct


@dataclass(frozen=True)
class PortfolioTotals:
    """Whole-portfolio figures derived from positions."""

    invested_capital: float
    current_value: float
    all_flows: tuple[CashFlow, ...]
    position_count: int = 0

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> "PortfolioTotals":
        """Sum invested capital and value, and concatenate every position's flows.

        Args:
            positions: Positions to total

        Returns:
            PortfolioTotals for the collection (all zero if empty)
        """
        invested = ZERO
        value = ZERO
        flows: list[CashFlow] = []
        count = 0
        for position in positions:
            invested += position.invested_capital
            value += position.current_value
            flows.extend(position.cash_flows)
            count += 1
        return cls(
            invested_capital=invested,
            current_value=value,
            all_flows=tuple(flows),
            position_count=count,
        )

    @property
    def absolute_return(self) -> float:
        """Gain (positive) or loss (negative) across the portfolio."""
        return self.current_value - self.invested_capital

    @property
    def absolute_return_pct(self) -> float:
        """Absolute return as a percentage of total invested capital."""
        return calculate_return_pct(self.absolute_return, self.invested_capital)

    def valuation_flows(self, as_of: datetime | None = None) -> tuple[CashFlow, ...]:
        """All purchase flows followed by the portfolio value as a final inflow."""
        return with_terminal_value(self.all_flows, self.current_value, as_of)

    def annualized_return(
        self, as_of: datetime | None = None, solver: XirrSolver | None = None
    ) -> XirrResult:
        """XIRR of the whole portfolio valued at ``as_of``.

        Flows are concatenated position by position, so ``t = 0`` is the
        first purchase of the first position rather than the earliest
        purchase overall.
        """
        flows = self.valuation_flows(as_of)
        return solver.solve(flows) if solver is not None else solve(flows)


def portfolio_totals(positions: Iterable[Position]) -> PortfolioTotals:
    """Compute totals for a collection of positions."""
    return PortfolioTotals.from_positions(positions)

"""
Position domain model.

A Position is the accumulated holding of one instrument: every accepted
purchase adds its units, its cost at the historical price, and one
outflow to the position's cash-flow series.
"""

from dataclasses import dataclass, field
from datetime import datetime

from src.core.calculations.xirr import XirrSolver, solve, with_terminal_value
from src.core.models.cash_flow import CashFlow
from src.core.models.xirr_result import XirrResult
from src.core.types.financial import (
    ZERO,
    calculate_notional_value,
    calculate_return_pct,
)
from src.core.utils.validation import (
    validate_instrument_id,
    validate_non_negative,
)


@dataclass(frozen=True)
class Position:
    """Accumulated holding in one instrument.

    Instances are immutable snapshots produced by the aggregator; a refresh
    builds a new set rather than mutating existing ones.
    """

    instrument_id: str
    display_name: str
    units_held: float
    invested_capital: float
    current_price: float
    cash_flows: tuple[CashFlow, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate and normalize position data after initialization."""
        object.__setattr__(self, "instrument_id", validate_instrument_id(self.instrument_id))
        object.__setattr__(self, "cash_flows", tuple(self.cash_flows))
        validate_non_negative(self.units_held, "units_held")
        validate_non_negative(self.invested_capital, "invested_capital")
        validate_non_negative(self.current_price, "current_price")

    @property
    def current_value(self) -> float:
        """Market value of the holding at the current price."""
        return calculate_notional_value(self.units_held, self.current_price)

    @property
    def absolute_return(self) -> float:
        """Gain (positive) or loss (negative) against invested capital."""
        return self.current_value - self.invested_capital

    @property
    def absolute_return_pct(self) -> float:
        """Absolute return as a percentage of invested capital."""
        return calculate_return_pct(self.absolute_return, self.invested_capital)

    @property
    def average_cost(self) -> float:
        """Average price paid per unit."""
        if self.units_held == ZERO:
            return ZERO
        return self.invested_capital / self.units_held

    def valuation_flows(self, as_of: datetime | None = None) -> tuple[CashFlow, ...]:
        """Purchase outflows followed by the current value as a final inflow."""
        return with_terminal_value(self.cash_flows, self.current_value, as_of)

    def annualized_return(
        self, as_of: datetime | None = None, solver: XirrSolver | None = None
    ) -> XirrResult:
        """XIRR of this holding valued at ``as_of``.

        Args:
            as_of: Valuation time (default now)
            solver: Solver to use (default settings if omitted)

        Returns:
            XirrResult with the annualized return percentage
        """
        flows = self.valuation_flows(as_of)
        return solver.solve(flows) if solver is not None else solve(flows)

"""
Money-weighted return (XIRR) solver.

Finds the annualized rate ``r`` for which the net present value of a series
of irregularly dated cash flows is zero:

    NPV(r)  = sum(a_i / (1 + r) ** t_i)
    NPV'(r) = sum(-t_i * a_i / (1 + r) ** (t_i + 1))

using Newton-Raphson iteration. ``t_i`` is measured in years of 365.25 days
from the FIRST flow of the sequence as given. Flows are not re-sorted, so
callers must pass them in chronological order for ``t_0`` to be the
earliest date.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import datetime

import numpy as np
from loguru import logger

from src.core.constants import (
    DAYS_PER_YEAR,
    SECONDS_PER_DAY,
    XIRR_DERIVATIVE_EPSILON,
    XIRR_INITIAL_GUESS,
    XIRR_MAX_ITERATIONS,
    XIRR_MIN_FLOWS,
    XIRR_TOLERANCE,
)
from src.core.exceptions.tracker import ConfigurationError
from src.core.models.cash_flow import CashFlow
from src.core.models.xirr_result import XirrResult
from src.core.types.financial import HUNDRED, ONE, ZERO


class XirrSolver:
    """Newton-Raphson XIRR solver with explicit failure outcomes."""

    def __init__(
        self,
        initial_guess: float = XIRR_INITIAL_GUESS,
        tolerance: float = XIRR_TOLERANCE,
        max_iterations: int = XIRR_MAX_ITERATIONS,
        days_per_year: float = DAYS_PER_YEAR,
    ) -> None:
        if initial_guess <= -ONE:
            raise ConfigurationError(f"Initial guess must be above -100%, got {initial_guess}")
        if tolerance <= ZERO:
            raise ConfigurationError(f"Tolerance must be positive, got {tolerance}")
        if max_iterations < 1:
            raise ConfigurationError(f"Max iterations must be at least 1, got {max_iterations}")
        if days_per_year <= ZERO:
            raise ConfigurationError(f"Days per year must be positive, got {days_per_year}")

        self.initial_guess = initial_guess
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.days_per_year = days_per_year

    def solve(self, cash_flows: Sequence[CashFlow]) -> XirrResult:
        """Compute the annualized return of ``cash_flows``.

        Args:
            cash_flows: Flows in chronological order, outflows negative

        Returns:
            XirrResult; never raises for numeric problems
        """
        if len(cash_flows) < XIRR_MIN_FLOWS:
            return XirrResult.insufficient_data(len(cash_flows))

        amounts = np.array([flow.amount for flow in cash_flows], dtype=float)
        if not (amounts > ZERO).any() or not (amounts < ZERO).any():
            return XirrResult.degenerate("cash flows have no sign change")

        years = self.year_offsets(cash_flows)
        rate = self.initial_guess

        for iteration in range(1, self.max_iterations + 1):
            base = ONE + rate
            if base <= ZERO:
                logger.debug(f"XIRR diverged below -100% at iteration {iteration}: rate={rate}")
                return XirrResult.degenerate("rate fell to or below -100%", iteration)

            npv, derivative = self._npv_and_derivative(base, amounts, years)
            if not (math.isfinite(npv) and math.isfinite(derivative)):
                return XirrResult.degenerate("NPV is not finite", iteration)
            if abs(derivative) < XIRR_DERIVATIVE_EPSILON:
                return XirrResult.degenerate("NPV derivative vanished", iteration)

            new_rate = rate - npv / derivative
            if not math.isfinite(new_rate):
                return XirrResult.degenerate("Newton step is not finite", iteration)

            if abs(new_rate - rate) < self.tolerance:
                return XirrResult.converged(new_rate * HUNDRED, iteration)
            rate = new_rate

        logger.debug(f"XIRR did not converge in {self.max_iterations} iterations: rate={rate}")
        return XirrResult.reached_iteration_cap(rate * HUNDRED, self.max_iterations)

    def npv(self, rate: float, cash_flows: Sequence[CashFlow]) -> float:
        """Net present value of ``cash_flows`` at ``rate`` (a fraction)."""
        if not cash_flows:
            return ZERO
        amounts = np.array([flow.amount for flow in cash_flows], dtype=float)
        npv, _ = self._npv_and_derivative(ONE + rate, amounts, self.year_offsets(cash_flows))
        return npv

    def year_offsets(self, cash_flows: Sequence[CashFlow]) -> np.ndarray:
        """Years elapsed from the first flow for each flow."""
        origin = cash_flows[0].date
        seconds_per_year = self.days_per_year * SECONDS_PER_DAY
        return np.array(
            [(flow.date - origin).total_seconds() / seconds_per_year for flow in cash_flows],
            dtype=float,
        )

    @staticmethod
    def _npv_and_derivative(
        base: float, amounts: np.ndarray, years: np.ndarray
    ) -> tuple[float, float]:
        with np.errstate(all="ignore"):
            discount = np.power(base, years)
            npv = np.sum(amounts / discount)
            derivative = np.sum(-years * amounts / (discount * base))
        return float(npv), float(derivative)


_default_solver = XirrSolver()


def solve(cash_flows: Sequence[CashFlow]) -> XirrResult:
    """Solve XIRR with the default solver settings."""
    return _default_solver.solve(cash_flows)


def solve_percentage(cash_flows: Sequence[CashFlow]) -> float | None:
    """Annualized return as a plain percentage.

    Returns 0 for fewer than two flows and None when no rate exists.
    """
    return solve(cash_flows).value


def with_terminal_value(
    cash_flows: Iterable[CashFlow], value: float, as_of: datetime | None = None
) -> tuple[CashFlow, ...]:
    """Append the current market value as a final inflow.

    Args:
        cash_flows: Historical flows
        value: Market value at ``as_of``
        as_of: Valuation time (default now)

    Returns:
        New tuple of flows ending with the valuation
    """
    if as_of is None:
        as_of = datetime.now()
    return (*cash_flows, CashFlow(date=as_of, amount=value))

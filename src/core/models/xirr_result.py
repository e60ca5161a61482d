"""
Return solver result model.
"""

from dataclasses import dataclass

from src.core.enums import SolverStatus
from src.core.types.financial import ZERO


@dataclass(frozen=True)
class XirrResult:
    """Outcome of an XIRR solve.

    ``rate_pct`` is the annualized rate as a percentage (12.5 means 12.5%).
    It is set for CONVERGED and ITERATION_CAP outcomes only.
    """

    status: SolverStatus
    rate_pct: float | None = None
    iterations: int = 0
    reason: str | None = None

    @property
    def is_resolved(self) -> bool:
        """Check if the rate is a converged root of the NPV equation."""
        return self.status.is_converged

    @property
    def value(self) -> float | None:
        """Numeric rate for display.

        Insufficient data reports 0 (the historical fallback); degenerate
        inputs report None so they can never be mistaken for a 0% return.
        """
        if self.status.has_estimate:
            return self.rate_pct
        if self.status is SolverStatus.INSUFFICIENT_DATA:
            return ZERO
        return None

    @classmethod
    def converged(cls, rate_pct: float, iterations: int) -> "XirrResult":
        return cls(SolverStatus.CONVERGED, rate_pct, iterations)

    @classmethod
    def reached_iteration_cap(cls, last_rate_pct: float, iterations: int) -> "XirrResult":
        return cls(SolverStatus.ITERATION_CAP, last_rate_pct, iterations)

    @classmethod
    def degenerate(cls, reason: str, iterations: int = 0) -> "XirrResult":
        return cls(SolverStatus.DEGENERATE, None, iterations, reason)

    @classmethod
    def insufficient_data(cls, flow_count: int) -> "XirrResult":
        return cls(
            SolverStatus.INSUFFICIENT_DATA,
            None,
            0,
            f"at least 2 cash flows required, got {flow_count}",
        )

"""
Return solver outcome enumeration.

This module defines the possible outcomes of an XIRR solve.
"""

from enum import StrEnum


class SolverStatus(StrEnum):
    """
    Outcome of a Newton-Raphson XIRR solve.

    Distinguishes a converged rate from a best-effort estimate and from
    inputs for which no rate can be computed.
    """

    CONVERGED = "converged"
    ITERATION_CAP = "iteration_cap"
    DEGENERATE = "degenerate"
    INSUFFICIENT_DATA = "insufficient_data"

    @property
    def is_converged(self) -> bool:
        """Check if the solver found a root within tolerance."""
        return self is SolverStatus.CONVERGED

    @property
    def has_estimate(self) -> bool:
        """Check if the outcome carries a numeric rate estimate."""
        return self in (SolverStatus.CONVERGED, SolverStatus.ITERATION_CAP)

"""
Core enumerations for the portfolio tracker.

This module provides centralized enumerations for domain concepts
like solver outcomes, holding sort orders and display tones.
"""

from .return_tone import ReturnTone
from .solver_status import SolverStatus
from .sort_keys import SortKey

__all__ = ["ReturnTone", "SolverStatus", "SortKey"]

"""
Position ordering for presentation.

Each SortKey resolves once to a single key function and a direction taken
from the key itself; annualized returns are computed (or taken from a
precomputed mapping) once per position up front rather than inside
comparisons.
"""

import math
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from src.core.calculations.xirr import XirrSolver
from src.core.enums import SortKey
from src.core.models.position import Position
from src.core.models.xirr_result import XirrResult


def _by_name(position: Position) -> Any:
    return position.display_name.casefold()


def _by_invested(position: Position) -> Any:
    return position.invested_capital


def _by_absolute_return(position: Position) -> Any:
    return position.absolute_return


_KEY_FUNCTIONS: dict[SortKey, Callable[[Position], Any]] = {
    SortKey.NAME: _by_name,
    SortKey.INVESTED: _by_invested,
    SortKey.ABSOLUTE_RETURN: _by_absolute_return,
}


def _annualized_return_key(
    positions: list[Position],
    as_of: datetime,
    solver: XirrSolver | None,
    returns: Mapping[str, XirrResult] | None,
) -> Callable[[Position], Any]:
    if returns is None:
        solver = solver or XirrSolver()
        returns = {
            position.instrument_id: position.annualized_return(as_of, solver)
            for position in positions
        }
    rates = {
        position.instrument_id: returns[position.instrument_id].value for position in positions
    }

    def key(position: Position) -> Any:
        rate = rates[position.instrument_id]
        # Sorted descending: positions without a numeric return go after every numeric one.
        if rate is None or math.isnan(rate):
            return (False, 0.0)
        return (True, rate)

    return key


def sort_positions(
    positions: Iterable[Position],
    key: SortKey,
    as_of: datetime | None = None,
    solver: XirrSolver | None = None,
    returns: Mapping[str, XirrResult] | None = None,
) -> list[Position]:
    """Return positions ordered by ``key``.

    NAME is ascending (case-insensitive); the other keys put the largest
    value first. Ties keep their input order.

    Args:
        positions: Positions to order
        key: Sort variant
        as_of: Valuation time for ANNUALIZED_RETURN (default now)
        solver: Solver for ANNUALIZED_RETURN (default settings)
        returns: Already computed returns by instrument id; when given, no
            XIRR is solved

    Returns:
        New sorted list
    """
    items = list(positions)
    if key.requires_solver:
        key_function = _annualized_return_key(items, as_of or datetime.now(), solver, returns)
    else:
        key_function = _KEY_FUNCTIONS[key]
    return sorted(items, key=key_function, reverse=key.is_descending)

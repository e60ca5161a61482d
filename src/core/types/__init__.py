"""
Float helpers for amounts, NAVs, unit balances and return percentages.
"""

from .financial import (
    HUNDRED,
    ONE,
    ZERO,
    calculate_notional_value,
    calculate_return_pct,
    round_amount,
    round_percentage,
    round_price,
    round_units,
    safe_float_comparison,
    to_float,
)

__all__ = [
    "HUNDRED",
    "ONE",
    "ZERO",
    "calculate_notional_value",
    "calculate_return_pct",
    "round_amount",
    "round_percentage",
    "round_price",
    "round_units",
    "safe_float_comparison",
    "to_float",
]

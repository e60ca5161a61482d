"""
Financial data types for portfolio return calculations.

Amounts, prices and unit quantities are carried as float. NAV prices are
published with four decimals and unit balances with three, so float64
precision (~15-16 significant digits) is far beyond what the ledger records.
Round only at presentation boundaries using the helpers below; never round
intermediate values fed to the return solver.
"""

import math

# Presentation precision (decimal places)
FINANCIAL_DECIMALS = 8  # Currency amounts in API payloads
PERCENTAGE_DECIMALS = 4
PRICE_DECIMALS = 4  # NAVs are published with 4 decimals
UNITS_DECIMALS = 3  # Fund units are allotted with 3 decimals

ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0


def to_float(value: str | int | float) -> float:
    """Parse a ledger or API number.

    Strings may carry surrounding whitespace and thousands separators
    ("1,234.5") as exported by spreadsheets.

    Raises:
        ValueError: If the value is not a finite number

    Examples:
        >>> to_float(' 1,234.5 ')
        1234.5
        >>> to_float('52.1234')
        52.1234
    """
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    result = value if isinstance(value, float) else float(value)
    if not math.isfinite(result):
        raise ValueError(f"Expected a finite number, got {value!r}")
    return result


def round_price(price: float) -> float:
    """Round a NAV to published precision."""
    return round(price, PRICE_DECIMALS)


def round_amount(amount: float) -> float:
    """Round a currency amount for display."""
    return round(amount, FINANCIAL_DECIMALS)


def round_units(units: float) -> float:
    """Round a unit balance to allotment precision."""
    return round(units, UNITS_DECIMALS)


def round_percentage(percentage: float) -> float:
    """Round a return percentage for display."""
    return round(percentage, PERCENTAGE_DECIMALS)


def calculate_notional_value(units: float, price: float) -> float:
    """Value of ``units`` at ``price`` per unit.

    Used both for the cost of a purchase (historical NAV) and for the
    current value of a holding (latest NAV).
    """
    return units * price


def calculate_return_pct(gain: float, base: float) -> float:
    """Express ``gain`` as a percentage of ``base``.

    Returns ZERO when there is no base to compare against.
    """
    if base == ZERO:
        return ZERO
    return gain / base * HUNDRED


def safe_float_comparison(a: float, b: float, tolerance: float = 1e-9) -> bool:
    """Check whether two prices agree within ``tolerance``.

    Examples:
        >>> safe_float_comparison(52.1234, 52.1234 + 1e-12)
        True
        >>> safe_float_comparison(52.12, 52.13, 0.001)
        False
    """
    return abs(a - b) < tolerance

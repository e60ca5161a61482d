"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

import math
from typing import Any

from src.core.constants import MAX_INSTRUMENT_ID_LENGTH
from src.core.exceptions.tracker import ConfigurationError, ValidationError


def validate_instrument_id(instrument_id: Any, param_name: str = "instrument_id") -> str:
    """Validate and normalize an instrument identifier.

    Identifiers are opaque strings (scheme codes for mutual funds); numeric
    values coming out of a spreadsheet are accepted and stringified.

    Args:
        instrument_id: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The stripped identifier

    Raises:
        ValidationError: If the identifier is empty or too long
    """
    if isinstance(instrument_id, bool) or not isinstance(instrument_id, str | int):
        raise ValidationError(
            f"{param_name} must be a string, got {type(instrument_id).__name__}"
        )
    normalized = str(instrument_id).strip()
    if not normalized:
        raise ValidationError(f"{param_name} cannot be empty")
    if len(normalized) > MAX_INSTRUMENT_ID_LENGTH:
        raise ValidationError(
            f"{param_name} too long: maximum {MAX_INSTRUMENT_ID_LENGTH} characters"
        )
    return normalized


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive and finite.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, param_name: str) -> float:
    """Validate that a numeric value is zero or positive."""
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return value


def validate_band_thresholds(bands: tuple[tuple[str, float], ...]) -> tuple[tuple[str, float], ...]:
    """Validate an ordered set of return bands.

    Bands are (label, lower_bound) pairs ordered from the highest bound
    down. Bounds must be strictly descending and the last band must be
    unbounded below so that every finite return lands in exactly one band.

    Args:
        bands: Candidate bands

    Returns:
        The validated bands

    Raises:
        ConfigurationError: If the bands do not partition the real line
    """
    if not bands:
        raise ConfigurationError("At least one return band is required")

    labels = [label for label, _ in bands]
    if any(not label for label in labels):
        raise ConfigurationError("Return band labels cannot be empty")
    if len(set(labels)) != len(labels):
        raise ConfigurationError(f"Return band labels must be unique, got {labels}")

    bounds = [bound for _, bound in bands]
    for upper, lower in zip(bounds, bounds[1:]):
        if not lower < upper:
            raise ConfigurationError(
                f"Return band thresholds must be strictly descending, got {bounds}"
            )
    if bounds[-1] != float("-inf"):
        raise ConfigurationError("The last return band must be unbounded below")
    return bands

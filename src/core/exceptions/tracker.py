"""
Custom exception hierarchy for the portfolio tracker.

This module defines domain-specific exceptions for better error handling.
Numeric failures of the return solver are reported through result statuses,
not exceptions; the classes below cover invalid input, configuration and
data-source failures.
"""

from datetime import date


class TrackerException(Exception):
    """Base exception for all portfolio-tracker errors."""

    pass


class ValidationError(TrackerException):
    """Raised when input validation fails."""

    pass


class DataError(TrackerException):
    """Raised when data access or processing fails."""

    pass


class DataSourceError(DataError):
    """Raised when an external data source (sheet feed, price API) fails."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Data source '{source}' failed: {reason}")


class MissingPriceDataError(DataError):
    """Raised when no historical price exists for a transaction date."""

    def __init__(self, instrument_id: str, on_date: date):
        self.instrument_id = instrument_id
        self.on_date = on_date
        super().__init__(f"No price for instrument {instrument_id} on {on_date.isoformat()}")


class ConfigurationError(TrackerException):
    """Raised when configuration is invalid."""

    pass


class PortfolioError(TrackerException):
    """Raised when portfolio operations fail."""

    pass


class PositionNotFoundError(PortfolioError):
    """Raised when trying to operate on a non-existent position."""

    def __init__(self, instrument_id: str):
        self.instrument_id = instrument_id
        super().__init__(f"Position not found for instrument: {instrument_id}")

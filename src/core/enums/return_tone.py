"""
Gain/loss tone enumeration.
"""

from enum import StrEnum


class ReturnTone(StrEnum):
    """Two-state display treatment for signed amounts."""

    GAIN = "gain"
    LOSS = "loss"

    @classmethod
    def of(cls, value: float) -> "ReturnTone":
        """Get the tone for a signed value; zero counts as a gain."""
        return cls.GAIN if value >= 0 else cls.LOSS

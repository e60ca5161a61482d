"""
Position sort key enumeration.

This module defines the orderings offered for the holdings table.
"""

from enum import StrEnum


class SortKey(StrEnum):
    """
    Allowed position orderings.

    NAME sorts ascending; every other key sorts highest first.
    """

    NAME = "name"
    INVESTED = "invested"
    ABSOLUTE_RETURN = "absolute_return"
    ANNUALIZED_RETURN = "annualized_return"

    @property
    def is_descending(self) -> bool:
        """Check if this key orders largest values first."""
        return self is not SortKey.NAME

    @property
    def requires_solver(self) -> bool:
        """Check if ordering needs an XIRR per position."""
        return self is SortKey.ANNUALIZED_RETURN

    @classmethod
    def from_string(cls, value: str) -> "SortKey":
        """
        Convert string to SortKey enum, with case-insensitive matching.

        Accepts the short alias "returns" for the absolute-return ordering.

        Args:
            value: String representation of the sort key

        Returns:
            Corresponding SortKey enum value

        Raises:
            ValueError: If the key is not supported
        """
        normalized = value.strip().lower().replace("-", "_")
        if normalized == "returns":
            return cls.ABSOLUTE_RETURN
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unsupported sort key: {value}. "
                f"Supported keys: {', '.join([k.value for k in cls])}"
            ) from None

"""
Return classification.

Maps an annualized return percentage onto an ordered set of display
bands. Bands only select a display treatment; they never feed back into
any calculation.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from src.core.constants import DEFAULT_RETURN_BANDS
from src.core.enums import ReturnTone
from src.core.utils.validation import validate_band_thresholds


@dataclass(frozen=True)
class ReturnBand:
    """A display band covering returns ``>= lower_bound``."""

    label: str
    lower_bound: float

    def contains(self, return_pct: float) -> bool:
        return return_pct >= self.lower_bound


class ReturnClassifier:
    """Ordered, non-overlapping bands partitioning the real line.

    Bands are checked highest bound first and the first band whose bound
    the value reaches (``>=``) wins.
    """

    def __init__(self, bands: Iterable[tuple[str, float]] = DEFAULT_RETURN_BANDS) -> None:
        validated = validate_band_thresholds(tuple((label, float(bound)) for label, bound in bands))
        self.bands: tuple[ReturnBand, ...] = tuple(
            ReturnBand(label=label, lower_bound=bound) for label, bound in validated
        )

    def classify(self, return_pct: float | None) -> ReturnBand | None:
        """Band for ``return_pct``; None when there is no numeric return."""
        if return_pct is None or math.isnan(return_pct):
            return None
        for band in self.bands:
            if band.contains(return_pct):
                return band
        return None  # unreachable for validated bands

    @property
    def labels(self) -> list[str]:
        return [band.label for band in self.bands]


_default_classifier = ReturnClassifier()


def classify(
    return_pct: float | None, classifier: ReturnClassifier | None = None
) -> ReturnBand | None:
    """Classify an annualized return percentage into a display band."""
    return (classifier or _default_classifier).classify(return_pct)


def gain_or_loss(value: float) -> ReturnTone:
    """Two-state tone used for absolute return cells."""
    return ReturnTone.of(value)

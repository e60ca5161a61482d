"""
Application settings.

Loaded from environment variables prefixed with ``TRACKER_`` and an
optional ``.env`` file.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_PRICE_CACHE_SIZE,
    DEFAULT_PRICE_CACHE_TTL_SECONDS,
    DEFAULT_RETURN_BANDS,
)
from src.core.exceptions.tracker import ConfigurationError
from src.core.utils.validation import validate_band_thresholds


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRACKER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Published CSV export of the transaction sheet (date, scheme code, units).
    TRANSACTIONS_CSV_URL: str = ""
    # Endpoint that appends a row to the sheet.
    LEDGER_URL: str = ""
    PRICE_API_BASE_URL: str = "https://api.mfapi.in/mf"

    HTTP_TIMEOUT_SECONDS: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    PRICE_CACHE_SIZE: int = DEFAULT_PRICE_CACHE_SIZE
    PRICE_CACHE_TTL_SECONDS: int = DEFAULT_PRICE_CACHE_TTL_SECONDS

    # Lower bounds (percent) of the upper bands, highest first; the last
    # label is the unbounded band below the smallest threshold.
    RETURN_BAND_THRESHOLDS: list[float] = [bound for _, bound in DEFAULT_RETURN_BANDS[:-1]]
    RETURN_BAND_LABELS: list[str] = [label for label, _ in DEFAULT_RETURN_BANDS]

    LOG_LEVEL: str = "INFO"

    @field_validator("HTTP_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")
        return v

    @property
    def return_bands(self) -> tuple[tuple[str, float], ...]:
        """Bands as (label, lower_bound) pairs, validated."""
        labels = self.RETURN_BAND_LABELS
        thresholds = self.RETURN_BAND_THRESHOLDS
        if len(labels) != len(thresholds) + 1:
            raise ConfigurationError(
                f"Expected {len(thresholds) + 1} band labels for {len(thresholds)} "
                f"thresholds, got {len(labels)}"
            )
        bounds = [*thresholds, float("-inf")]
        return validate_band_thresholds(tuple(zip(labels, bounds, strict=True)))


@lru_cache
def get_settings() -> Settings:
    return Settings()

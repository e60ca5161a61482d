"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.core.config import Settings
from src.core.constants import DEFAULT_RETURN_BANDS
from src.core.exceptions.tracker import ConfigurationError


class TestSettings:
    """Tests for Settings."""

    def test_should_use_defaults(self, monkeypatch) -> None:
        """Test default values."""
        monkeypatch.delenv("TRACKER_LOG_LEVEL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.PRICE_API_BASE_URL == "https://api.mfapi.in/mf"
        assert settings.LOG_LEVEL == "INFO"
        assert settings.return_bands == DEFAULT_RETURN_BANDS

    def test_should_read_prefixed_environment(self, monkeypatch) -> None:
        """Test environment overrides."""
        monkeypatch.setenv("TRACKER_TRANSACTIONS_CSV_URL", "https://example.com/sheet.csv")
        monkeypatch.setenv("TRACKER_HTTP_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("TRACKER_RETURN_BAND_THRESHOLDS", "[10, 0]")
        monkeypatch.setenv("TRACKER_RETURN_BAND_LABELS", '["high", "low", "loss"]')

        settings = Settings(_env_file=None)

        assert settings.TRANSACTIONS_CSV_URL == "https://example.com/sheet.csv"
        assert settings.HTTP_TIMEOUT_SECONDS == 5.0
        assert settings.return_bands == (
            ("high", 10.0),
            ("low", 0.0),
            ("loss", float("-inf")),
        )

    def test_should_reject_non_positive_timeout(self) -> None:
        """Test timeout validation."""
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, HTTP_TIMEOUT_SECONDS=0)

    def test_should_reject_mismatched_band_labels(self) -> None:
        """Test that labels must cover every threshold plus the open band."""
        settings = Settings(
            _env_file=None, RETURN_BAND_THRESHOLDS=[10.0], RETURN_BAND_LABELS=["only"]
        )

        with pytest.raises(ConfigurationError, match="band labels"):
            _ = settings.return_bands

    def test_should_reject_unordered_thresholds(self) -> None:
        """Test threshold ordering."""
        settings = Settings(
            _env_file=None,
            RETURN_BAND_THRESHOLDS=[0.0, 10.0],
            RETURN_BAND_LABELS=["a", "b", "c"],
        )

        with pytest.raises(ConfigurationError, match="descending"):
            _ = settings.return_bands

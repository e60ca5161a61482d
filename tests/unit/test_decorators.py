"""
Unit tests for utility decorators.
Testing operation logging for sync and async callables.
"""

import asyncio

import pytest
from loguru import logger

from src.core.enums import SortKey
from src.core.utils.decorators import log_operation


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


class TestLogOperationDecorator:
    """Test suite for @log_operation decorator."""

    def test_should_return_result_and_log_completion(self, log_records) -> None:
        """Test that a successful call is logged with timing."""

        @log_operation
        def price(instrument_id: str, units: float) -> float:
            return units * 2

        assert price("120503", 5.0) == 10.0

        completed = [r for r in log_records if "Operation completed" in r["message"]]
        assert len(completed) == 1
        extra = completed[0]["extra"]
        assert extra["instrument_id"] == "120503"
        assert extra["units"] == 5.0
        assert extra["success"] is True
        assert "execution_time_ms" in extra
        assert len(extra["correlation_id"]) == 8

    def test_should_serialize_enum_context(self, log_records) -> None:
        """Test that enum arguments are logged by value."""

        @log_operation
        def order(key: SortKey) -> str:
            return key.value

        order(SortKey.INVESTED)

        assert log_records[0]["extra"]["key"] == "invested"

    def test_should_log_and_reraise_errors(self, log_records) -> None:
        """Test that exceptions propagate unchanged."""

        @log_operation
        def fail() -> None:
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            fail()

        failed = [r for r in log_records if "Operation failed" in r["message"]]
        assert failed[0]["extra"]["error_type"] == "ValueError"
        assert failed[0]["extra"]["success"] is False

    def test_should_preserve_function_metadata(self) -> None:
        """Test functools.wraps behaviour."""

        @log_operation
        def documented() -> None:
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."

    @pytest.mark.asyncio
    async def test_should_wrap_coroutines(self, log_records) -> None:
        """Test that async functions stay awaitable."""

        @log_operation
        async def fetch(instrument_id: str) -> str:
            await asyncio.sleep(0)
            return instrument_id

        assert asyncio.iscoroutinefunction(fetch)
        assert await fetch("120503") == "120503"
        assert any("Operation completed" in r["message"] for r in log_records)

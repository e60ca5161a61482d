"""
Utility decorators for operation logging.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from loguru import logger

# Arguments worth echoing into the log context. Collections (transaction
# lists, price snapshots) are never serialized: they may be generators.
_CONTEXT_PARAMS = ("instrument_id", "sort_key", "key", "as_of", "units")


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if isinstance(value, Enum):
        return str(value.value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _extract_operation_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Extract loggable context from function arguments."""
    context = {}
    for param_name, value in bound_args.arguments.items():
        if param_name in _CONTEXT_PARAMS and value is not None:
            context[param_name] = _serialize_parameter_value(value)
    return context


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> tuple[dict[str, Any], str]:
    """Setup logging context with a short correlation id."""
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()

    context = {
        "correlation_id": str(uuid.uuid4())[:8],
        **_extract_operation_context(bound_args),
    }
    return context, func.__qualname__


def _create_success_context(
    base_context: dict[str, Any], execution_time_ms: float, result: Any
) -> dict[str, Any]:
    """Create success logging context."""
    return {
        **base_context,
        "success": True,
        "execution_time_ms": round(execution_time_ms, 2),
        "result_type": type(result).__name__,
    }


def _create_error_context(
    base_context: dict[str, Any], execution_time_ms: float, error: Exception
) -> dict[str, Any]:
    """Create error logging context."""
    return {
        **base_context,
        "success": False,
        "execution_time_ms": round(execution_time_ms, 2),
        "error_type": type(error).__name__,
        "error_message": str(error),
    }


F = TypeVar("F", bound=Callable[..., Any])


def log_operation(func: F) -> F:
    """Decorator to log an operation's start, outcome and duration.

    Works for both plain and ``async`` functions. Exceptions are logged and
    re-raised unchanged.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            context, func_name = _setup_logging_context(func, args, kwargs)
            bound_logger = logger.bind(**context)
            bound_logger.debug(f"Operation started: {func_name}")
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.bind(**_create_error_context(context, elapsed_ms, e)).error(
                    f"Operation failed: {func_name}"
                )
                raise
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.bind(**_create_success_context(context, elapsed_ms, result)).debug(
                f"Operation completed: {func_name}"
            )
            return result

        return async_wrapper  # type: ignore

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context, func_name = _setup_logging_context(func, args, kwargs)
        bound_logger = logger.bind(**context)
        bound_logger.debug(f"Operation started: {func_name}")
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.bind(**_create_error_context(context, elapsed_ms, e)).error(
                f"Operation failed: {func_name}"
            )
            raise
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.bind(**_create_success_context(context, elapsed_ms, result)).debug(
            f"Operation completed: {func_name}"
        )
        return result

    return wrapper  # type: ignore

"""
Utility functions and decorators for the PULSE LIVENESS system.

This module provides the helpers shared across the pipeline: logging setup,
stage timing, identifier generation and timezone handling for timestamps.
"""

import logging
import sys
import time
import uuid
import functools
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar
import structlog

# Initialize structured logger
logger = structlog.get_logger(__name__)

# Type variable for generic decorators
F = TypeVar("F", bound=Callable[..., Any])


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """
    Configure structlog for the process.

    Parameters
    ----------
    level : str, default="INFO"
        Minimum log level name.
    fmt : str, default="console"
        "json" for machine-readable output, anything else for the
        human-readable console renderer.

    Examples
    --------
    >>> configure_logging("DEBUG", "json")
    """
    level_value = getattr(logging, level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def timer(func: F) -> F:
    """
    Decorator to measure and log function execution time.

    Parameters
    ----------
    func : Callable
        Function to be timed.

    Returns
    -------
    Callable
        Wrapped function with timing capability.

    Examples
    --------
    >>> @timer
    ... def extract():
    ...     return [0.5] * 10
    >>> features = extract()  # Logs execution time
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
            execution_time = (time.perf_counter() - start_time) * 1000

            logger.debug(
                "Function execution completed",
                function_name=func.__name__,
                module=func.__module__,
                execution_time_ms=execution_time,
                success=True,
            )

            return result

        except Exception as e:
            execution_time = (time.perf_counter() - start_time) * 1000

            logger.error(
                "Function execution failed",
                function_name=func.__name__,
                module=func.__module__,
                execution_time_ms=execution_time,
                error=str(e),
                error_type=type(e).__name__,
                success=False,
            )

            raise

    return wrapper


def generate_verification_id(prefix: str = "verify") -> str:
    """
    Generate a unique verification identifier.

    The ID includes a UTC timestamp component for chronological ordering.

    Parameters
    ----------
    prefix : str, default="verify"
        Prefix for the generated ID.

    Returns
    -------
    str
        Unique verification identifier.

    Examples
    --------
    >>> verification_id = generate_verification_id()
    >>> print(verification_id)  # e.g., "verify_20260101_123456_abc123de"
    """
    timestamp = time.strftime("%Y%m%d_%H%M%S", time.gmtime())
    unique_suffix = str(uuid.uuid4())[:8]
    return f"{prefix}_{timestamp}_{unique_suffix}"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a timestamp to timezone-aware UTC.

    Naive datetimes are taken to already be in UTC.

    Parameters
    ----------
    moment : Optional[datetime]
        Timestamp to normalize, or None.

    Returns
    -------
    Optional[datetime]
        The UTC timestamp, or None when no timestamp was given.
    """
    if moment is None:
        return None

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)

    return moment.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into a UTC datetime.

    A trailing "Z" is accepted as UTC.

    Raises
    ------
    ValueError
        If the string is not a valid ISO 8601 timestamp.
    """
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    return ensure_utc(datetime.fromisoformat(text))

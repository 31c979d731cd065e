"""
Utilities shared by the discovery pipeline.

Includes:
- structlog configuration on top of the standard logging handler
- Async retry decorator with exponential backoff
- Input validation helpers
- Timeout and timing helpers for driver calls
"""

import asyncio
import functools
import logging
import re
import time
from typing import TypeVar, Callable, Any, Optional, Union
from urllib.parse import urlparse

import structlog


LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.INFO) -> None:
    """
    Route structlog events through a standard library handler.

    Args:
        level: Minimum logging level (default: INFO)
    """
    root = logging.getLogger("ui_scout")

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(handler)

    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


T = TypeVar("T")


def retry_async(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple = (Exception,),
    on_retry: Optional[Callable[[Exception, int], None]] = None,
):
    """
    Decorator retrying an async function with exponential backoff.

    Args:
        max_retries: Maximum number of retries
        initial_delay: Delay before the first retry (seconds)
        backoff_factor: Multiplier applied to the delay after each retry
        exceptions: Exception types that trigger a retry
        on_retry: Optional callback invoked on every retry

    Example:
        @retry_async(max_retries=2, exceptions=(DriverTimeoutError,))
        async def navigate():
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        raise

                    if on_retry:
                        on_retry(e, attempt + 1)

                    await asyncio.sleep(delay)
                    delay *= backoff_factor

        return wrapper
    return decorator


class ValidationError(Exception):
    """Raised when user supplied input is invalid."""
    pass


def validate_url(url: str, require_https: bool = False) -> str:
    """
    Validate and normalize a URL.

    Args:
        url: URL to validate
        require_https: When True, only https URLs are accepted

    Returns:
        The normalized URL

    Raises:
        ValidationError: If the URL is invalid
    """
    if not url or not url.strip():
        raise ValidationError("URL must not be empty")

    url = url.strip()
    if url.startswith(("about:", "file:", "data:")):
        return url

    if not url.startswith(("http://", "https://")):
        url = f"http://{url}"

    parsed = urlparse(url)
    if not parsed.netloc:
        raise ValidationError(f"Invalid URL: {url}")

    if require_https and parsed.scheme != "https":
        raise ValidationError(f"URL must use HTTPS: {url}")

    return url


def validate_positive(value: Union[int, float], field_name: str) -> Union[int, float]:
    """
    Validate that a number is strictly positive.

    Raises:
        ValidationError: If the value is not a positive number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number, got {type(value).__name__}")

    if value <= 0:
        raise ValidationError(f"{field_name} must be positive, got {value}")

    return value


def validate_enum(value: Any, enum_class: type, field_name: str) -> Any:
    """
    Validate that a value is a member of an Enum.

    Returns:
        The Enum member

    Raises:
        ValidationError: If the value is not a valid member
    """
    if isinstance(value, enum_class):
        return value

    if isinstance(value, str):
        try:
            return enum_class(value)
        except ValueError:
            valid_values = [e.value for e in enum_class]
            raise ValidationError(
                f"{field_name} must be one of {valid_values}, got '{value}'"
            )

    raise ValidationError(
        f"{field_name} must be {enum_class.__name__}, got {type(value).__name__}"
    )


async def run_with_timeout(
    coro,
    timeout: Optional[float],
    timeout_message: str = "Operation timed out",
    error_class: type = TimeoutError,
) -> Any:
    """
    Await a coroutine, bounded by a timeout.

    Args:
        coro: Coroutine to await
        timeout: Timeout in seconds; None waits forever
        timeout_message: Message for the raised error
        error_class: Exception type raised on timeout

    Returns:
        The coroutine result

    Raises:
        error_class: If the timeout expires
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError:
        raise error_class(timeout_message)


class TimingContext:
    """Context manager measuring elapsed wall time."""

    def __init__(self, name: str = "operation", logger: Optional[Any] = None):
        self.name = name
        self.logger = logger
        self.start_time = None
        self.end_time = None
        self.duration = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        self.duration = self.end_time - self.start_time

        if self.logger:
            self.logger.debug("timing", operation=self.name, duration_ms=int(self.duration * 1000))

        return False

    @property
    def duration_ms(self) -> int:
        return int(self.duration * 1000)


class AsyncTimingContext(TimingContext):
    """Async flavour of TimingContext."""

    async def __aenter__(self):
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return self.__exit__(exc_type, exc_val, exc_tb)


def sanitize_filename(filename: str) -> str:
    """
    Replace characters that are not safe in file names.

    Args:
        filename: Raw file name

    Returns:
        Sanitized file name
    """
    return re.sub(r"[^A-Za-z0-9._-]+", "_", filename).strip("_") or "unnamed"


def truncate_string(s: Optional[str], max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate a string, appending a suffix when it was cut.

    Args:
        s: String to truncate (None is treated as empty)
        max_length: Maximum length including the suffix
        suffix: Suffix appended when truncating

    Returns:
        Truncated string
    """
    s = s or ""
    if len(s) <= max_length:
        return s
    return s[:max_length - len(suffix)] + suffix


def normalize_text(s: Optional[str]) -> str:
    """Collapse whitespace runs and strip."""
    return " ".join((s or "").split())

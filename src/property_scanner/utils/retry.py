"""Retry helpers with exponential backoff for blocking provider calls."""

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_retry(
    func: Callable[..., T],
    *args,
    max_retries: int = 2,
    backoff_factor: float = 2,
    base_delay: float = 0.5,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    **kwargs,
) -> T:
    """
    Call func, retrying on the given exceptions.

    The wait before retry N (0-based) is base_delay * backoff_factor ** N.
    The last exception is re-raised once retries are exhausted.
    """
    name = getattr(func, "__name__", repr(func))
    attempts = max(0, max_retries) + 1
    for attempt in range(attempts - 1):
        try:
            return func(*args, **kwargs)
        except exceptions as e:
            delay = base_delay * backoff_factor**attempt
            logger.warning(
                f"{name} failed (attempt {attempt + 1}/{attempts}): {e}. "
                f"Retrying in {delay:.1f}s..."
            )
            time.sleep(delay)

    try:
        return func(*args, **kwargs)
    except exceptions as e:
        logger.error(f"{name} failed after {attempts} attempt(s): {e}")
        raise

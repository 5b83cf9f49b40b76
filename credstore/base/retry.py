"""
Retry with exponential backoff for secret store calls.

Only the secret store client retries; credential operations run once
and surface the first error they see.
"""

from __future__ import annotations

import time
from functools import wraps
from typing import Callable, Any

from credstore.base.exceptions import TransientTransportError
from credstore.base.logger import cs_logger


def retry(
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    backoff_factor: float = 2.0,
    retryable_exceptions: tuple[type[BaseException], ...] = (TransientTransportError,),
) -> Callable:
    """Decorator: call again on transient failures, sleeping longer each time.

    Args:
        max_attempts: Total attempts, the first one included.
        base_delay: Seconds to wait before the second attempt.
        max_delay: Upper bound for any single wait.
        backoff_factor: Multiplier applied to the wait after each failure.
        retryable_exceptions: Exception types that trigger another attempt.

    Returns:
        Decorated function re-raising the last error once attempts run out.
    """

    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delays = (min(base_delay * backoff_factor ** n, max_delay) for n in range(max_attempts - 1))
            for attempt, delay in enumerate(delays, start=1):
                try:
                    return fn(*args, **kwargs)
                except retryable_exceptions as exc:
                    cs_logger.warning(
                        f"attempt {attempt}/{max_attempts} failed ({exc}), retrying in {delay:.1f}s",
                        operation=fn.__name__,
                    )
                    time.sleep(delay)
            # Final attempt propagates whatever it raises
            return fn(*args, **kwargs)

        return wrapper

    return decorator

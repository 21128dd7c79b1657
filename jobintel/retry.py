"""Exponential backoff for flaky transport calls, stdlib only."""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)


def call_with_retry(
    fn: Callable[..., Any],
    *args: Any,
    max_attempts: int = 1,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> Any:
    """Call ``fn`` up to ``max_attempts`` times; the last failure propagates.

    ``max_attempts=1`` is a plain call, which is what the tracker uses unless
    the operator opts in through ``LLM_MAX_ATTEMPTS``.
    """
    name = getattr(fn, "__qualname__", repr(fn))
    for attempt in range(1, max_attempts + 1):
        try:
            return fn(*args, **kwargs)
        except retryable as exc:
            if attempt >= max_attempts:
                if max_attempts > 1:
                    logger.error("%s failed after %d attempts: %s", name, max_attempts, exc)
                raise
            delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
            if jitter:
                delay *= 0.5 + random.random()
            logger.warning(
                "%s attempt %d/%d failed (%s), retrying in %.1fs",
                name, attempt, max_attempts, exc, delay,
            )
            sleep(delay)
    raise ValueError("max_attempts must be >= 1")

"""Process-wide throttle for outbound calls to external services."""

from __future__ import annotations

import functools
import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from ..config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """Bounded gate with a cool-down applied before each slot is handed back.

    With ``max_concurrent=1`` (the default) at most one protected call is in
    flight at any time and consecutive calls are spaced by at least
    ``cooldown_seconds``. Public geocoders such as Nominatim ask clients to stay
    at or under one request per second.
    """

    def __init__(
        self,
        max_concurrent: int = 1,
        cooldown_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1.")
        if cooldown_seconds < 0:
            raise ValueError("cooldown_seconds cannot be negative.")
        self.max_concurrent = max_concurrent
        self.cooldown_seconds = cooldown_seconds
        self._semaphore = threading.BoundedSemaphore(max_concurrent)
        self._sleep = sleep

    def acquire(self) -> None:
        """Block until the caller holds a slot."""
        self._semaphore.acquire()

    def release(self) -> None:
        """Wait out the cool-down, then free the slot."""
        try:
            if self.cooldown_seconds:
                self._sleep(self.cooldown_seconds)
        finally:
            self._semaphore.release()

    @contextmanager
    def throttle(self) -> Iterator[None]:
        self.acquire()
        try:
            yield
        finally:
            self.release()


@functools.lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    """Shared limiter used by every external client in the process."""
    logger.debug(
        f"Creating shared rate limiter (max_concurrent={settings.rate_limit_max_concurrent}, "
        f"cooldown={settings.rate_limit_cooldown_seconds}s)"
    )
    return RateLimiter(
        max_concurrent=settings.rate_limit_max_concurrent,
        cooldown_seconds=settings.rate_limit_cooldown_seconds,
    )

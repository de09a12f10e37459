"""Fixed-window rate gate for outbound document requests.

Admits at most `limit` permits per `window` seconds. A caller that finds the
window exhausted waits for a tenth of the window and checks again, so a burst
of up to `limit` requests may still pass right after a window rolls over.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Union

from crptapi.domain.errors import ConfigurationError, GateClosedError

logger = logging.getLogger(__name__)

# Fraction of the window a blocked caller sleeps before re-checking
POLL_DIVISOR = 10

Clock = Callable[[], float]


class RateGate:
    """Thread-safe fixed-window permit counter."""

    def __init__(self, limit: int, window: float, clock: Clock = time.monotonic):
        """Initializes the gate.

        Args:
            limit: Maximum number of permits per window. Must be positive.
            window: Window length in seconds. Must be positive.
            clock: Monotonic time source, replaceable in tests.

        Raises:
            ConfigurationError: If limit or window is not positive.
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ConfigurationError(f"Request limit must be a positive integer, got {limit!r}.")
        if isinstance(window, bool) or not isinstance(window, (int, float)) or window <= 0:
            raise ConfigurationError(f"Time window must be a positive number of seconds, got {window!r}.")

        self._limit = limit
        self._window = float(window)
        self._poll_interval = self._window / POLL_DIVISOR
        self._clock = clock

        # Guarded by _condition
        self._window_start = clock()
        self._count = 0
        self._closed = False
        self._condition = threading.Condition(threading.Lock())

        logger.info(f"RateGate initialized: {self._limit} requests / {self._window} seconds.")

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window(self) -> float:
        return self._window

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def _try_grant(self, now: float) -> bool:
        """Grants a permit if the current window has capacity. Caller holds the lock."""
        # A clock reading behind window_start counts as inside the window
        if now - self._window_start > self._window:
            self._window_start = now
            self._count = 0
        if self._count < self._limit:
            self._count += 1
            return True
        return False

    def try_acquire(self) -> bool:
        """Takes a permit without waiting.

        Returns:
            True if a permit was granted, False if the window is exhausted.

        Raises:
            GateClosedError: If the gate has been closed.
        """
        with self._condition:
            if self._closed:
                raise GateClosedError("Rate gate is closed.")
            return self._try_grant(self._clock())

    def acquire(self) -> float:
        """Blocks until a permit is granted.

        The lock is released while waiting so other callers can make progress.

        Returns:
            Seconds spent waiting for the permit (0.0 when granted at once).

        Raises:
            GateClosedError: If the gate is closed before a permit is granted.
        """
        started: Optional[float] = None
        with self._condition:
            while True:
                if self._closed:
                    raise GateClosedError("Rate gate closed while waiting for a permit.")
                now = self._clock()
                if self._try_grant(now):
                    if started is None:
                        return 0.0
                    waited = max(0.0, now - started)
                    logger.debug(f"Permit granted after waiting {waited:.3f}s ({self._count}/{self._limit}).")
                    return waited
                if started is None:
                    started = now
                    logger.debug(f"Rate limit reached ({self._limit}/{self._window}s). Re-checking every {self._poll_interval:.3f}s.")
                self._condition.wait(timeout=self._poll_interval)

    def close(self) -> None:
        """Wakes every waiting caller; pending and future acquires raise GateClosedError."""
        with self._condition:
            if self._closed:
                return
            self._closed = True
            self._condition.notify_all()
        logger.info("RateGate closed.")

    def snapshot(self) -> Dict[str, Union[int, float, bool]]:
        """Returns a consistent copy of the window state for diagnostics."""
        with self._condition:
            return {
                "limit": self._limit,
                "window": self._window,
                "window_start": self._window_start,
                "count": self._count,
                "closed": self._closed,
            }

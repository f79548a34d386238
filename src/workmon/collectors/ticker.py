"""
Fixed-period tick scheduling for the sampling loop.

The sampling loop is cooperative: it does one tick of work, then blocks in
`Ticker.wait()` until the next tick is due. The wait is the only intended
suspension point, so a tick never starts before the previous one finished.
"""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """
    Periodic tick source with an injectable clock.

    Args:
        interval: Seconds between the start of consecutive ticks.
        clock: Monotonic clock returning seconds.
        sleep: Blocking wait used between ticks.
    """

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], object]] = None,
    ):
        if interval < 0:
            raise ValueError(f"Tick interval must be >= 0, got {interval}")
        self.interval = interval
        self.clock = clock
        self._sleep = sleep or self._event_sleep
        self._tick_started = clock()
        self.ticks = 0

    @staticmethod
    def _event_sleep(seconds: float) -> None:
        # Event.wait is interruptible by signal handlers in the main thread.
        threading.Event().wait(seconds)

    def deadline_after(self, seconds: float) -> float:
        """Return the clock value `seconds` from now."""
        return self.clock() + seconds

    def expired(self, deadline: float) -> bool:
        return self.clock() >= deadline

    def start_tick(self) -> None:
        """Mark the beginning of a tick's work."""
        self._tick_started = self.clock()
        self.ticks += 1

    def wait(self) -> None:
        """Block until one interval has passed since the current tick started."""
        elapsed = self.clock() - self._tick_started
        remaining = self.interval - elapsed
        if remaining > 0:
            self._sleep(remaining)
        elif self.interval > 0:
            logger.warning(
                f"Sampling tick took {elapsed:.2f}s, longer than interval of {self.interval}s."
            )

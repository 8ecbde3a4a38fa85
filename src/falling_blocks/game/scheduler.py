from __future__ import annotations

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class DropScheduler:
    """Decides when an automatic one-row drop is due.

    The host loop calls `poll()` at whatever cadence it likes; a drop fires
    once `interval_ms` has elapsed since the last fire (or since `start()`),
    and the scheduler re-arms itself from that moment. A stopped or paused
    scheduler never fires.
    """

    def __init__(self, interval_ms: float = 1000, clock: Optional[Callable[[], float]] = None) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.interval_ms = float(interval_ms)
        self.clock = clock or monotonic_ms
        self._last_fire: Optional[float] = None
        self._paused_elapsed: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._last_fire is not None

    @property
    def paused(self) -> bool:
        return self._paused_elapsed is not None

    def _now(self, now_ms: Optional[float]) -> float:
        return self.clock() if now_ms is None else float(now_ms)

    def start(self, now_ms: Optional[float] = None) -> None:
        self._last_fire = self._now(now_ms)
        self._paused_elapsed = None
        logger.debug("Drop scheduler started (interval %.0f ms)", self.interval_ms)

    def stop(self) -> None:
        if self._last_fire is not None or self._paused_elapsed is not None:
            logger.debug("Drop scheduler stopped")
        self._last_fire = None
        self._paused_elapsed = None

    def pause(self, now_ms: Optional[float] = None) -> None:
        if self._last_fire is None:
            return
        self._paused_elapsed = self._now(now_ms) - self._last_fire
        self._last_fire = None

    def resume(self, now_ms: Optional[float] = None) -> None:
        if self._paused_elapsed is None:
            return
        self._last_fire = self._now(now_ms) - self._paused_elapsed
        self._paused_elapsed = None

    def poll(self, now_ms: Optional[float] = None) -> bool:
        """Return True if a drop step is due now, re-arming the timer."""
        if self._last_fire is None:
            return False
        now = self._now(now_ms)
        if now - self._last_fire >= self.interval_ms:
            self._last_fire = now
            return True
        return False

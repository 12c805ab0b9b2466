"""Single re-armable periodic timer backed by one daemon thread."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Fires a callback after a due time and then once per period.

    The callback runs on the timer thread, so consecutive firings never
    overlap. Periods missed while the callback was running are skipped.
    """

    def __init__(self, callback: Callable[[], None], name: str = "repeating-timer") -> None:
        self._callback = callback
        self._name = name
        self._cond = threading.Condition()
        self._due: float | None = None
        self._period: float | None = None
        self._cancelled = False
        self._generation = 0
        self._thread: threading.Thread | None = None

    @property
    def armed(self) -> bool:
        with self._cond:
            return self._due is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def change(self, due_ms: int, period_ms: int) -> None:
        """Arm (or re-arm) the timer.

        Args:
            due_ms: Delay before the first firing, measured from now.
            period_ms: Delay between subsequent firings. Must be positive.

        Raises:
            ValueError: If period_ms is not positive or due_ms is negative.
            RuntimeError: If the timer was cancelled.
        """
        if period_ms <= 0:
            raise ValueError(f"Timer period must be positive, got {period_ms}")
        if due_ms < 0:
            raise ValueError(f"Timer due time must be non-negative, got {due_ms}")

        with self._cond:
            if self._cancelled:
                raise RuntimeError("Timer has been cancelled")
            self._due = time.monotonic() + due_ms / 1000
            self._period = period_ms / 1000
            self._generation += 1
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
                self._thread.start()
            self._cond.notify_all()

    def disarm(self) -> None:
        """Stop future firings. A firing already in progress completes."""
        with self._cond:
            self._due = None
            self._period = None
            self._generation += 1
            self._cond.notify_all()

    def cancel(self) -> None:
        """Disarm permanently and let the timer thread exit."""
        with self._cond:
            self._cancelled = True
            self._due = None
            self._period = None
            self._generation += 1
            self._cond.notify_all()

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._cancelled:
                    if self._due is None:
                        self._cond.wait()
                        continue
                    remaining = self._due - time.monotonic()
                    if remaining <= 0:
                        break
                    self._cond.wait(remaining)
                if self._cancelled:
                    return
                # _due is set here, _period always accompanies it
                self._due += self._period
                generation = self._generation

            try:
                self._callback()
            except Exception:
                logger.exception("Timer %s callback raised", self._name)

            with self._cond:
                # change() during the callback keeps its own due time
                if generation == self._generation and self._due is not None and self._period:
                    now = time.monotonic()
                    while self._due <= now:
                        self._due += self._period

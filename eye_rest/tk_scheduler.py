"""Repeating reminder timer on top of a tkinter `after` loop."""
from __future__ import annotations
import datetime
import tkinter as tk
from typing import Any, Callable, Optional


class TkReminderScheduler:
    """
    ReminderScheduler driven by `widget.after()`.

    `host` is any object with tkinter's `after(ms, func)` / `after_cancel(id)`
    pair (normally the hidden Tk root). Must be used from the tk thread.
    """

    def __init__(self, host: Any,
                 now_provider: Callable[[], datetime.datetime] = datetime.datetime.now):
        self._host = host
        self._now = now_provider
        self._after_id: Optional[str] = None
        self._callback: Optional[Callable[[], None]] = None
        self._period: Optional[float] = None
        self._next_fire: Optional[datetime.datetime] = None

    @property
    def next_fire_date(self) -> Optional[datetime.datetime]:
        return self._next_fire

    @property
    def is_active(self) -> bool:
        return self._after_id is not None

    def start(self, period_seconds: float, on_fire: Callable[[], None]) -> None:
        self.stop()
        self._callback = on_fire
        self._period = max(0.001, float(period_seconds))
        self._arm()

    def stop(self) -> None:
        if self._after_id is not None:
            try:
                self._host.after_cancel(self._after_id)
            except tk.TclError:
                pass  # root already destroyed
        self._after_id = None
        self._callback = None
        self._period = None
        self._next_fire = None

    def _arm(self) -> None:
        self._next_fire = self._now() + datetime.timedelta(seconds=self._period)
        self._after_id = self._host.after(int(self._period * 1000), self._fire)

    def _fire(self) -> None:
        cb = self._callback
        if cb is None:
            return
        # Re-arm first so the callback can stop() us cleanly
        self._arm()
        cb()

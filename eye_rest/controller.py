"""
EyeRestController — decides whether the periodic reminder should be ticking.

The controller owns the current AlertSettings and the activation state. It
tells a ReminderScheduler to start or stop a repeating callback, and asks an
OverlayPresenter to show the cue whenever that callback fires.

All calls are expected on one thread (the tk main loop). Nothing here blocks.
"""
from __future__ import annotations
import datetime
import weakref
from typing import Callable, Optional, Protocol

from .settings import AlertSettings


# ─── Collaborators ────────────────────────────────────────────
class ReminderScheduler(Protocol):
    """Fires `on_fire` every `period_seconds` until stopped."""

    @property
    def next_fire_date(self) -> Optional[datetime.datetime]: ...

    def start(self, period_seconds: float, on_fire: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class OverlayPresenter(Protocol):
    def show_overlay(self, duration_seconds: float) -> None: ...


# ─── Reschedule decision ──────────────────────────────────────
def needs_reschedule(force: bool, should_schedule: bool, is_scheduler_active: bool,
                     active_period: Optional[float], interval_seconds: float) -> bool:
    """True when the live timer no longer matches what the settings ask for."""
    if force:
        return True
    if should_schedule != is_scheduler_active:
        return True
    return should_schedule and active_period != interval_seconds


def _make_fire_callback(controller: EyeRestController, generation: int) -> Callable[[], None]:
    # Only a weak reference: the scheduler must not keep the controller alive
    ref = weakref.ref(controller)

    def on_fire() -> None:
        c = ref()
        if c is None or c._generation != generation:
            return  # controller gone, or this registration was superseded
        c._overlay.show_overlay(c.settings.cue_duration)

    return on_fire


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class EyeRestController:

    def __init__(self, settings: AlertSettings, scheduler: ReminderScheduler,
                 overlay_presenter: OverlayPresenter,
                 now_provider: Callable[[], datetime.datetime] = datetime.datetime.now,
                 tz: Optional[datetime.tzinfo] = None):
        self._settings = settings.normalized()
        self._scheduler = scheduler
        self._overlay = overlay_presenter
        self._now = now_provider
        self._tz = tz

        self._running = False
        self._scheduler_active = False
        self._active_period: Optional[float] = None
        # Bumped on every stop/start of the scheduler; stale callbacks compare against it
        self._generation = 0

    # ━━━ State (read-only) ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    @property
    def settings(self) -> AlertSettings:
        return self._settings

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_scheduler_active(self) -> bool:
        return self._scheduler_active

    @property
    def active_period(self) -> Optional[float]:
        return self._active_period

    @property
    def next_fire_date(self) -> Optional[datetime.datetime]:
        """Scheduler's estimate of the next reminder. Display only."""
        if not self._scheduler_active:
            return None
        return self._scheduler.next_fire_date

    def next_office_hours_start(self) -> Optional[datetime.datetime]:
        return self._settings.next_office_hours_start(self._now(), self._tz)

    # ━━━ Operations ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def start(self) -> None:
        self._running = True
        self._reschedule(self._now(), force=True)

    def stop(self) -> None:
        self._running = False
        self._stop_scheduler()

    def apply(self, settings: AlertSettings) -> None:
        self._settings = settings.normalized()
        if not self._running:
            return
        self._reschedule(self._now(), force=True)

    def refresh_schedule(self, at: Optional[datetime.datetime] = None) -> None:
        """Re-check office hours; only touches the scheduler if the answer changed."""
        if not self._running:
            return
        self._reschedule(at if at is not None else self._now())

    def trigger_now(self) -> None:
        """Show the cue right away, whatever the enabled/running state."""
        self._overlay.show_overlay(self._settings.cue_duration)

    # ━━━ Scheduling ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _reschedule(self, now: datetime.datetime, force: bool = False) -> None:
        s = self._settings
        should_schedule = s.is_enabled and s.is_reminder_allowed(now, self._tz)
        if not needs_reschedule(force, should_schedule, self._scheduler_active,
                                self._active_period, s.interval_seconds):
            return

        self._stop_scheduler()
        if not should_schedule:
            return

        period = s.interval_seconds
        self._scheduler.start(period, _make_fire_callback(self, self._generation))
        self._scheduler_active = True
        self._active_period = period

    def _stop_scheduler(self) -> None:
        self._scheduler.stop()
        self._generation += 1
        self._scheduler_active = False
        self._active_period = None

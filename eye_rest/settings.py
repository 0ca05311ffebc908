"""
Alert settings — what to show, how often, and when it is allowed.

Every value is clamped on construction, so an AlertSettings instance is
always in range. Office hours are stored as minutes from midnight and may
wrap past midnight (22:00 -> 06:00).

NOTE: start == end is an ALWAYS-ON window, not an empty one.
"""
from __future__ import annotations
import dataclasses
import datetime
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

# ─── Limits ───────────────────────────────────────────────────
MIN_INTERVAL_MINUTES = 1.0
MAX_INTERVAL_MINUTES = 240.0
MIN_CUE_SECONDS = 1.0
MAX_CUE_SECONDS = 30.0
MIN_OFFICE_MINUTES = 0
MAX_OFFICE_MINUTES = 1439     # 23:59

MINUTES_PER_DAY = 24 * 60


class AccentColor(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PINK = "pink"

    @property
    def hex(self) -> str:
        return ACCENT_HEX[self]


ACCENT_HEX = {
    AccentColor.RED:    "#ef4444",
    AccentColor.ORANGE: "#f97316",
    AccentColor.YELLOW: "#facc15",
    AccentColor.GREEN:  "#22c55e",
    AccentColor.BLUE:   "#0ea5e9",
    AccentColor.PINK:   "#f43f5e",
}


def _clamp(value: float, lo: float, hi: float) -> float:
    value = float(value)
    if math.isnan(value):
        return lo
    return min(max(value, lo), hi)


def _clamp_minutes(value: float) -> int:
    # clamp before floor() so inf is safe; half-up: 538.5 -> 539 (round() gives 538)
    return int(math.floor(_clamp(value, MIN_OFFICE_MINUTES, MAX_OFFICE_MINUTES) + 0.5))


# ─── Time helpers ─────────────────────────────────────────────
def parse_hhmm(s: str) -> int:
    """Parse "HH:MM" into minutes from midnight. Raises ValueError if invalid."""
    h, m = str(s).strip().split(":")
    t = datetime.time(int(h), int(m))
    return t.hour * 60 + t.minute


def format_12h(minutes: int) -> str:
    """570 -> '9:30 AM', 1020 -> '5:00 PM'."""
    minutes = int(minutes) % MINUTES_PER_DAY
    h, m = divmod(minutes, 60)
    suffix = "AM" if h < 12 else "PM"
    h12 = h % 12
    if h12 == 0:
        h12 = 12
    return f"{h12}:{m:02d} {suffix}"


def _local(now: datetime.datetime, tz: Optional[datetime.tzinfo]) -> datetime.datetime:
    if tz is None:
        return now
    return now.astimezone(tz)


def minute_of_day(now: datetime.datetime, tz: Optional[datetime.tzinfo] = None) -> int:
    local = _local(now, tz)
    return local.hour * 60 + local.minute


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
@dataclass(frozen=True)
class AlertSettings:
    is_enabled: bool = True
    interval_minutes: float = 20.0
    cue_duration_seconds: float = 5.0
    accent_color: AccentColor = AccentColor.RED
    restrict_to_office_hours: bool = False
    office_hours_start_minutes: int = 9 * 60
    office_hours_end_minutes: int = 17 * 60

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        set_ = object.__setattr__
        set_(self, "is_enabled", bool(self.is_enabled))
        set_(self, "interval_minutes", float(_clamp(
            self.interval_minutes, MIN_INTERVAL_MINUTES, MAX_INTERVAL_MINUTES)))
        set_(self, "cue_duration_seconds", float(_clamp(
            self.cue_duration_seconds, MIN_CUE_SECONDS, MAX_CUE_SECONDS)))
        set_(self, "restrict_to_office_hours", bool(self.restrict_to_office_hours))
        set_(self, "office_hours_start_minutes", _clamp_minutes(self.office_hours_start_minutes))
        set_(self, "office_hours_end_minutes", _clamp_minutes(self.office_hours_end_minutes))

    # ━━━ Derived ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60

    @property
    def cue_duration(self) -> float:
        return self.cue_duration_seconds

    @property
    def has_office_window(self) -> bool:
        """True when reminders are actually limited to part of the day."""
        return (self.restrict_to_office_hours
                and self.office_hours_start_minutes != self.office_hours_end_minutes)

    def normalized(self) -> AlertSettings:
        return dataclasses.replace(self)

    def replace(self, **changes: Any) -> AlertSettings:
        """Return a copy with `changes` applied, normalised again."""
        return dataclasses.replace(self, **changes)

    # ━━━ Office hours ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def is_reminder_allowed(self, now: datetime.datetime,
                            tz: Optional[datetime.tzinfo] = None) -> bool:
        """Whether a reminder may fire at `now`, read as wall-clock time in `tz`."""
        if not self.restrict_to_office_hours:
            return True
        start, end = self.office_hours_start_minutes, self.office_hours_end_minutes
        if start == end:
            return True
        m = minute_of_day(now, tz)
        if start < end:
            return start <= m < end
        # Overnight window (22:00 -> 06:00)
        return m >= start or m < end

    def next_office_hours_start(self, after: datetime.datetime,
                                tz: Optional[datetime.tzinfo] = None
                                ) -> Optional[datetime.datetime]:
        """When the window next opens, or None if there is nothing to wait for."""
        if not self.has_office_window:
            return None
        if self.is_reminder_allowed(after, tz):
            return None
        local = _local(after, tz)
        h, m = divmod(self.office_hours_start_minutes, 60)
        today_start = datetime.datetime.combine(
            local.date(), datetime.time(h, m), tzinfo=local.tzinfo)
        if today_start > local:
            return today_start
        tomorrow = local.date() + datetime.timedelta(days=1)
        return datetime.datetime.combine(tomorrow, datetime.time(h, m), tzinfo=local.tzinfo)

    def describe_office_hours(self) -> str:
        if not self.restrict_to_office_hours:
            return "Any time"
        if not self.has_office_window:
            return "All day"
        return (f"{format_12h(self.office_hours_start_minutes)} – "
                f"{format_12h(self.office_hours_end_minutes)}")


DEFAULT_SETTINGS = AlertSettings()

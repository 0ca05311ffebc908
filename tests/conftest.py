import datetime

import pytest


def make_date(hour: int, minute: int, day: int = 15) -> datetime.datetime:
    return datetime.datetime(2026, 1, day, hour, minute)


class RecordingScheduler:
    def __init__(self):
        self.start_intervals = []
        self.stop_call_count = 0
        self.handler = None
        self.next_fire_date = None

    def start(self, period_seconds, on_fire):
        self.start_intervals.append(period_seconds)
        self.handler = on_fire
        self.next_fire_date = make_date(12, 0) + datetime.timedelta(seconds=period_seconds)

    def stop(self):
        self.stop_call_count += 1
        self.handler = None
        self.next_fire_date = None

    def fire(self):
        if self.handler:
            self.handler()


class RecordingOverlay:
    def __init__(self):
        self.durations = []

    def show_overlay(self, duration_seconds):
        self.durations.append(duration_seconds)


class FakeAfterHost:
    """Stands in for a Tk root: records after() calls and runs them on demand."""

    def __init__(self):
        self.pending = {}
        self.delays = []
        self.cancelled = []
        self._next = 0

    def after(self, ms, func):
        self._next += 1
        after_id = f"after#{self._next}"
        self.pending[after_id] = func
        self.delays.append(ms)
        return after_id

    def after_cancel(self, after_id):
        self.cancelled.append(after_id)
        self.pending.pop(after_id, None)

    def run_pending(self):
        due = list(self.pending.items())
        self.pending.clear()
        for _, func in due:
            func()


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def overlay():
    return RecordingOverlay()

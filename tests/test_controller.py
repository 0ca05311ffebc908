import gc

import pytest

from eye_rest.controller import EyeRestController, needs_reschedule
from eye_rest.settings import AlertSettings
from tests.conftest import make_date


def office_settings(**kw):
    return AlertSettings(is_enabled=True, interval_minutes=20, cue_duration_seconds=5,
                         restrict_to_office_hours=True,
                         office_hours_start_minutes=9 * 60, office_hours_end_minutes=17 * 60, **kw)


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


# ─── needs_reschedule ─────────────────────────────────────────
@pytest.mark.parametrize("force, should, active, period, interval, expected", [
    (True, False, False, None, 1200, True),      # forced, even with nothing to change
    (True, True, True, 1200, 1200, True),
    (False, False, False, None, 1200, False),    # idle and should stay idle
    (False, True, True, 1200, 1200, False),      # already right
    (False, True, False, None, 1200, True),      # needs to start
    (False, False, True, 1200, 1200, True),      # needs to stop
    (False, True, True, 1200, 900, True),        # wrong period
    (False, False, False, None, 900, False),
])
def test_needs_reschedule(force, should, active, period, interval, expected):
    assert needs_reschedule(force, should, active, period, interval) is expected


# ─── Start / stop ─────────────────────────────────────────────
def test_start_schedules_reminder_when_enabled(scheduler, overlay):
    settings = AlertSettings(is_enabled=True, interval_minutes=20, cue_duration_seconds=5)
    controller = EyeRestController(settings, scheduler, overlay)

    controller.start()

    assert scheduler.start_intervals == [1200]
    assert controller.is_running
    assert controller.is_scheduler_active
    assert controller.active_period == 1200


def test_start_does_not_schedule_when_disabled(scheduler, overlay):
    settings = AlertSettings(is_enabled=False, interval_minutes=20, cue_duration_seconds=5)
    controller = EyeRestController(settings, scheduler, overlay)

    controller.start()

    assert scheduler.start_intervals == []
    assert scheduler.stop_call_count == 1
    assert controller.is_running
    assert not controller.is_scheduler_active
    assert controller.active_period is None


def test_stop_cancels_and_goes_idle(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)
    controller.start()

    controller.stop()

    assert scheduler.stop_call_count == 2
    assert not controller.is_running
    assert not controller.is_scheduler_active
    assert controller.active_period is None
    assert controller.next_fire_date is None


def test_constructor_normalizes_settings(scheduler, overlay):
    controller = EyeRestController(AlertSettings(interval_minutes=0), scheduler, overlay)
    controller.start()

    assert scheduler.start_intervals == [60]


def test_nothing_happens_before_start(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)

    controller.apply(AlertSettings(interval_minutes=15))
    controller.refresh_schedule()

    assert scheduler.start_intervals == []
    assert scheduler.stop_call_count == 0
    assert controller.settings.interval_minutes == 15


def test_restart_is_forced(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)

    controller.start()
    controller.start()

    assert scheduler.start_intervals == [1200, 1200]
    assert scheduler.stop_call_count == 2


# ─── Firing ───────────────────────────────────────────────────
def test_timer_event_shows_overlay_with_configured_duration(scheduler, overlay):
    settings = AlertSettings(is_enabled=True, interval_minutes=20, cue_duration_seconds=7)
    controller = EyeRestController(settings, scheduler, overlay)

    controller.start()
    scheduler.fire()

    assert overlay.durations == [7]


def test_fire_reads_cue_duration_at_fire_time(scheduler, overlay):
    controller = EyeRestController(AlertSettings(cue_duration_seconds=7), scheduler, overlay)
    controller.start()

    controller.apply(AlertSettings(cue_duration_seconds=4))
    scheduler.fire()

    assert overlay.durations == [4]


def test_stale_callback_is_ignored_after_reschedule(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)
    controller.start()
    old_handler = scheduler.handler

    controller.apply(AlertSettings(interval_minutes=15))
    old_handler()

    assert overlay.durations == []
    scheduler.fire()
    assert overlay.durations == [5]


def test_stale_callback_is_ignored_after_stop(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)
    controller.start()
    old_handler = scheduler.handler

    controller.stop()
    old_handler()

    assert overlay.durations == []


def test_callback_does_not_keep_controller_alive(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)
    controller.start()
    handler = scheduler.handler

    del controller
    gc.collect()
    handler()

    assert overlay.durations == []


# ─── Apply ────────────────────────────────────────────────────
def test_apply_settings_reschedules_when_running(scheduler, overlay):
    settings = AlertSettings(is_enabled=True, interval_minutes=20, cue_duration_seconds=5)
    controller = EyeRestController(settings, scheduler, overlay)

    controller.start()
    controller.apply(AlertSettings(is_enabled=True, interval_minutes=15, cue_duration_seconds=4))

    assert scheduler.start_intervals == [1200, 900]
    assert scheduler.stop_call_count == 2


def test_apply_disabled_settings_stops_scheduler(scheduler, overlay):
    settings = AlertSettings(is_enabled=True, interval_minutes=20, cue_duration_seconds=5)
    controller = EyeRestController(settings, scheduler, overlay)

    controller.start()
    controller.apply(AlertSettings(is_enabled=False, interval_minutes=20, cue_duration_seconds=5))

    assert scheduler.start_intervals == [1200]
    assert scheduler.stop_call_count == 2
    assert not controller.is_scheduler_active


def test_apply_normalizes(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)
    controller.start()

    controller.apply(AlertSettings(interval_minutes=1000))

    assert controller.settings.interval_minutes == 240
    assert scheduler.start_intervals == [1200, 240 * 60]


# ─── Trigger ──────────────────────────────────────────────────
def test_trigger_now_shows_overlay_even_without_timer_event(scheduler, overlay):
    settings = AlertSettings(is_enabled=False, interval_minutes=20, cue_duration_seconds=6)
    controller = EyeRestController(settings, scheduler, overlay)

    controller.trigger_now()

    assert overlay.durations == [6]
    assert scheduler.start_intervals == []


def test_trigger_now_while_running(scheduler, overlay):
    controller = EyeRestController(AlertSettings(cue_duration_seconds=3), scheduler, overlay)
    controller.start()

    controller.trigger_now()

    assert overlay.durations == [3]
    assert scheduler.start_intervals == [1200]


# ─── Office hours ─────────────────────────────────────────────
def test_start_does_not_schedule_outside_office_hours_when_restricted(scheduler, overlay):
    controller = EyeRestController(office_settings(), scheduler, overlay,
                                   now_provider=Clock(make_date(8, 30)))

    controller.start()

    assert scheduler.start_intervals == []
    assert scheduler.stop_call_count == 1


def test_refresh_schedule_transitions_when_entering_and_leaving_office_hours(scheduler, overlay):
    clock = Clock(make_date(8, 45))
    controller = EyeRestController(office_settings(), scheduler, overlay, now_provider=clock)

    controller.start()
    assert scheduler.start_intervals == []
    assert scheduler.stop_call_count == 1

    clock.now = make_date(9, 0)
    controller.refresh_schedule()
    assert scheduler.start_intervals == [1200]
    assert scheduler.stop_call_count == 2

    clock.now = make_date(9, 5)
    controller.refresh_schedule()
    assert scheduler.start_intervals == [1200]
    assert scheduler.stop_call_count == 2

    clock.now = make_date(17, 0)
    controller.refresh_schedule()
    assert scheduler.start_intervals == [1200]
    assert scheduler.stop_call_count == 3


def test_refresh_schedule_with_explicit_instant(scheduler, overlay):
    controller = EyeRestController(office_settings(), scheduler, overlay,
                                   now_provider=Clock(make_date(8, 0)))
    controller.start()

    controller.refresh_schedule(make_date(10, 0))
    controller.refresh_schedule(make_date(10, 30))

    assert scheduler.start_intervals == [1200]
    assert scheduler.stop_call_count == 2


def test_refresh_outside_window_is_a_no_op(scheduler, overlay):
    clock = Clock(make_date(7, 0))
    controller = EyeRestController(office_settings(), scheduler, overlay, now_provider=clock)
    controller.start()

    clock.now = make_date(7, 30)
    controller.refresh_schedule()

    assert scheduler.start_intervals == []
    assert scheduler.stop_call_count == 1


def test_overnight_window_across_midnight(scheduler, overlay):
    settings = AlertSettings(restrict_to_office_hours=True,
                             office_hours_start_minutes=22 * 60, office_hours_end_minutes=6 * 60)
    clock = Clock(make_date(21, 50))
    controller = EyeRestController(settings, scheduler, overlay, now_provider=clock)
    controller.start()
    assert scheduler.start_intervals == []

    controller.refresh_schedule(make_date(22, 0))
    controller.refresh_schedule(make_date(2, 0, day=16))
    assert scheduler.start_intervals == [1200]

    controller.refresh_schedule(make_date(6, 0, day=16))
    assert scheduler.stop_call_count == 3
    assert not controller.is_scheduler_active


def test_next_office_hours_start_passthrough(scheduler, overlay):
    controller = EyeRestController(office_settings(), scheduler, overlay,
                                   now_provider=Clock(make_date(18, 0)))

    assert controller.next_office_hours_start() == make_date(9, 0, day=16)


def test_next_fire_date_reflects_scheduler_only_when_active(scheduler, overlay):
    controller = EyeRestController(AlertSettings(), scheduler, overlay)
    assert controller.next_fire_date is None

    controller.start()

    assert controller.next_fire_date == scheduler.next_fire_date
    assert controller.next_fire_date is not None

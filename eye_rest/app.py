"""
Eye Rest — tray app
━━━━━━━━━━━━━━━━━━━

Sits in the system tray and flashes a coloured border around your screens
every N minutes as a cue to look away (20-20-20 rule: every 20 min, look
20 feet away for 20 sec).

Usage:
    python -m eye_rest
    python -m eye_rest --test          (1-minute interval, nothing saved)
    python -m eye_rest --config PATH   (use another settings file)
"""
from __future__ import annotations
import argparse
import datetime
import sys
import threading
import tkinter as tk
from typing import Any, Optional

from .controller import EyeRestController
from .icon import create_eye_icon
from .overlay import ScreenBorderOverlay
from .settings import AccentColor, AlertSettings, format_12h, parse_hhmm
from .store import JsonSettingsStore
from .tk_scheduler import TkReminderScheduler

try:
    import pystray
    HAS_TRAY = True
except Exception:  # not installed, or no usable backend (e.g. no X display)
    HAS_TRAY = False

# ─── Named Constants ─────────────────────────────────────────
TICK = 10                            # office-hours / countdown refresh (seconds)
INTERVAL_PRESETS = (10, 20, 30, 45, 60)   # minutes
CUE_PRESETS = (5, 10, 20, 30)             # seconds
TEST_INTERVAL_MINUTES = 1
TEST_CUE_SECONDS = 3


def format_remaining(seconds: float) -> str:
    """Countdown text: '04:59', or '1:02:03' past an hour."""
    total = max(0, int(-(-seconds // 1)))  # ceil
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def status_text(controller: EyeRestController, now: Optional[datetime.datetime] = None) -> str:
    """One-line status for the tray menu and tooltip."""
    s = controller.settings
    if not s.is_enabled:
        return "Reminders disabled"
    if not controller.is_running:
        return "Stopped"
    nxt = controller.next_fire_date
    if nxt is not None:
        now = now or datetime.datetime.now(nxt.tzinfo)
        return f"Next break in {format_remaining((nxt - now).total_seconds())}"
    opens = controller.next_office_hours_start()
    if opens is not None:
        return f"Outside office hours until {format_12h(opens.hour * 60 + opens.minute)}"
    return "Next break pending"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class EyeRestApp:

    def __init__(self, store: JsonSettingsStore, test_mode: bool = False):
        self.root = tk.Tk()
        self.root.withdraw()

        self.store = store
        self.test_mode = test_mode
        settings = store.load()
        if test_mode:
            settings = settings.replace(interval_minutes=TEST_INTERVAL_MINUTES,
                                        cue_duration_seconds=TEST_CUE_SECONDS)
        self.settings = settings

        self.scheduler = TkReminderScheduler(self.root)
        self.overlay = ScreenBorderOverlay(self.root, lambda: self.settings.accent_color)
        self.controller = EyeRestController(settings, self.scheduler, self.overlay)
        self.tray: Optional[Any] = None
        self._tick_id: Optional[str] = None

    def run(self, trigger: bool = False) -> None:
        self.controller.start()
        self._print_schedule()
        if HAS_TRAY:
            threading.Thread(target=self._run_tray, daemon=True).start()
        if trigger:
            self.root.after(500, self.controller.trigger_now)
        self._tick()
        self.root.mainloop()

    # ━━━ Settings ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def apply_settings(self, settings: AlertSettings) -> None:
        self.settings = settings.normalized()
        if not self.test_mode:
            self.store.save(self.settings)
        self.controller.apply(self.settings)
        self._update_tray()

    def _toggle_enabled(self) -> None:
        self.apply_settings(self.settings.replace(is_enabled=not self.settings.is_enabled))

    def _toggle_office_hours(self) -> None:
        self.apply_settings(self.settings.replace(
            restrict_to_office_hours=not self.settings.restrict_to_office_hours))

    def _set_interval(self, minutes: float) -> None:
        self.apply_settings(self.settings.replace(interval_minutes=minutes))

    def _set_cue(self, seconds: float) -> None:
        self.apply_settings(self.settings.replace(cue_duration_seconds=seconds))

    def _set_color(self, color: AccentColor) -> None:
        self.apply_settings(self.settings.replace(accent_color=color))

    # ━━━ Clock tick ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _tick(self) -> None:
        # Catches office-hours boundaries and keeps the countdown fresh
        self.controller.refresh_schedule()
        self._update_tray()
        self._tick_id = self.root.after(TICK * 1000, self._tick)

    # ━━━ Console ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _print_schedule(self) -> None:
        s = self.settings
        state = "on" if s.is_enabled else "OFF"
        print()
        print("  +-----------------------------------------------+")
        print("  |          Eye Rest -- Schedule                 |")
        print("  +-----------------------------------------------+")
        print(f"  |  Reminders        {state:<28s}|")
        print(f"  |  Every            {s.interval_minutes:>4.0f} min{'':<19s}|")
        print(f"  |  Border shown     {s.cue_duration_seconds:>4.0f} sec{'':<19s}|")
        print(f"  |  Office hours     {s.describe_office_hours():<28s}|")
        print(f"  |  Colour           {s.accent_color.value:<28s}|")
        print("  +-----------------------------------------------+")
        if self.test_mode:
            print("\n  [!] TEST MODE: 1-minute interval, settings not saved")
        if not HAS_TRAY:
            print("\n  [!] No tray icon (pystray not available).")
            print("      pip install pystray pillow")
        print()

    # ━━━ System Tray ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _on_tk(self, fn, *args):
        """pystray callbacks run on the tray thread; hop back to tk."""
        return lambda icon, item: self.root.after(0, lambda: fn(*args))

    def _build_menu(self):
        s = lambda: self.settings
        intervals = pystray.Menu(*[
            pystray.MenuItem(f"{m} min", self._on_tk(self._set_interval, m),
                             checked=lambda item, m=m: s().interval_minutes == m, radio=True)
            for m in INTERVAL_PRESETS])
        cues = pystray.Menu(*[
            pystray.MenuItem(f"{sec} sec", self._on_tk(self._set_cue, sec),
                             checked=lambda item, sec=sec: s().cue_duration_seconds == sec, radio=True)
            for sec in CUE_PRESETS])
        colors = pystray.Menu(*[
            pystray.MenuItem(c.value.capitalize(), self._on_tk(self._set_color, c),
                             checked=lambda item, c=c: s().accent_color == c, radio=True)
            for c in AccentColor])
        hours_label = lambda item: f"Office hours only ({s().describe_office_hours()})" \
            if s().restrict_to_office_hours else "Office hours only"
        return pystray.Menu(
            pystray.MenuItem(lambda item: status_text(self.controller), None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Enable reminders", self._on_tk(self._toggle_enabled),
                             checked=lambda item: s().is_enabled),
            pystray.MenuItem("Rest eyes now", self._on_tk(self.controller.trigger_now), default=True),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Interval", intervals),
            pystray.MenuItem("Alert duration", cues),
            pystray.MenuItem("Colour", colors),
            pystray.MenuItem(hours_label, self._on_tk(self._toggle_office_hours),
                             checked=lambda item: s().restrict_to_office_hours),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit", self._quit),
        )

    def _run_tray(self) -> None:
        img = create_eye_icon(64, self.settings.accent_color.hex, self.settings.is_enabled)
        self.tray = pystray.Icon("eye_rest", img, "Eye Rest", self._build_menu())
        self.tray.run()

    def _update_tray(self) -> None:
        if not (HAS_TRAY and self.tray):
            return
        try:
            self.tray.icon = create_eye_icon(64, self.settings.accent_color.hex,
                                             self.settings.is_enabled)
            self.tray.title = f"Eye Rest - {status_text(self.controller)}"
            self.tray.update_menu()
        except Exception:
            pass  # some pystray backends don't support live updates

    def _quit(self, icon: Optional[Any] = None, item: Optional[Any] = None) -> None:
        if HAS_TRAY and self.tray:
            self.tray.stop()
        self.root.after(0, self._shutdown)

    def _shutdown(self) -> None:
        if self._tick_id is not None:
            self.root.after_cancel(self._tick_id)
        self.controller.stop()
        self.overlay.hide_overlay()
        self.root.quit()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="eye-rest", description="Eye Rest break reminder")
    p.add_argument("--test", action="store_true", help="Use a 1-minute interval; don't save settings")
    p.add_argument("--config", metavar="PATH", help="Settings file (default: ~/eye_rest_config.json)")
    p.add_argument("--trigger", action="store_true", help="Show the border once right after start")
    p.add_argument("--print-schedule", action="store_true", help="Print the current settings and exit")
    p.add_argument("--office-hours", metavar="HH:MM-HH:MM",
                   help="Only remind in this window (saved); 'off' to remind any time")
    return p


def parse_office_hours(value: str) -> tuple[int, int]:
    """'09:00-17:30' -> (540, 1050). Raises ValueError if invalid."""
    start, end = value.split("-")
    return parse_hhmm(start), parse_hhmm(end)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    store = JsonSettingsStore(args.config)

    if args.office_hours:
        s = store.load()
        if args.office_hours.strip().lower() == "off":
            s = s.replace(restrict_to_office_hours=False)
        else:
            try:
                start, end = parse_office_hours(args.office_hours)
            except ValueError:
                print(f"  [!] Bad --office-hours {args.office_hours!r}, expected e.g. 09:00-17:00")
                return 2
            s = s.replace(restrict_to_office_hours=True,
                          office_hours_start_minutes=start, office_hours_end_minutes=end)
        store.save(s)
        print(f"  Office hours: {s.describe_office_hours()}")

    if args.print_schedule:
        s = store.load()
        print(f"  Reminders: {'on' if s.is_enabled else 'off'}, every {s.interval_minutes:g} min, "
              f"{s.cue_duration_seconds:g} sec {s.accent_color.value} border")
        print(f"  Office hours: {s.describe_office_hours()}")
        return 0

    try:
        app = EyeRestApp(store, test_mode=args.test)
    except tk.TclError as e:
        print(f"  [!] Cannot open display: {e}")
        return 1
    app.run(trigger=args.trigger)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Screen border overlay — the visual cue.

Draws a coloured frame around every monitor with four thin, borderless,
topmost windows per screen, then hides it after the requested duration.
Clicks pass between the strips to whatever is underneath.
"""
from __future__ import annotations
import tkinter as tk
from typing import Callable, Optional

from .settings import AccentColor

DEFAULT_BORDER_WIDTH = 10
MIN_VISIBLE_SECONDS = 0.1

# ─── Multi-Monitor Support ───────────────────────────────────
try:
    from screeninfo import get_monitors
    HAS_SCREENINFO = True
except ImportError:
    HAS_SCREENINFO = False


def get_all_monitors() -> list:
    """Get list of all monitors as (x, y, width, height) tuples."""
    if HAS_SCREENINFO:
        try:
            return [(m.x, m.y, m.width, m.height) for m in get_monitors()]
        except Exception:
            pass  # screeninfo raises on headless / unsupported setups
    return [(0, 0, None, None)]  # Fallback: use tkinter's screen dimensions


def border_strips(x: int, y: int, w: int, h: int, width: int) -> list[tuple[int, int, int, int]]:
    """(x, y, w, h) of the top, bottom, left and right strips framing a screen."""
    width = max(1, min(int(width), w // 2, h // 2))
    return [
        (x, y, w, width),                        # top
        (x, y + h - width, w, width),            # bottom
        (x, y + width, width, h - 2 * width),    # left
        (x + w - width, y + width, width, h - 2 * width),  # right
    ]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class ScreenBorderOverlay:
    """OverlayPresenter drawing a border on every screen."""

    def __init__(self, root: tk.Misc, color: Callable[[], AccentColor],
                 border_width: int = DEFAULT_BORDER_WIDTH,
                 monitors: Callable[[], list] = get_all_monitors):
        self.root = root
        self._color = color
        self.border_width = border_width
        self._monitors = monitors
        self._windows: list[tk.Toplevel] = []
        self._hide_id: Optional[str] = None

    @property
    def is_visible(self) -> bool:
        return bool(self._windows)

    def show_overlay(self, duration_seconds: float) -> None:
        # Rebuild every time: monitors may have been plugged in or out
        self._destroy_windows()
        fill = self._color().hex
        for x, y, w, h in self._screens():
            for sx, sy, sw, sh in border_strips(x, y, w, h, self.border_width):
                self._windows.append(self._make_strip(sx, sy, sw, sh, fill))

        if self._hide_id is not None:
            self.root.after_cancel(self._hide_id)
        ms = int(max(MIN_VISIBLE_SECONDS, duration_seconds) * 1000)
        self._hide_id = self.root.after(ms, self.hide_overlay)

    def hide_overlay(self) -> None:
        self._hide_id = None
        self._destroy_windows()

    def _screens(self) -> list[tuple[int, int, int, int]]:
        out = []
        for mx, my, mw, mh in self._monitors():
            out.append((mx, my,
                        mw if mw else self.root.winfo_screenwidth(),
                        mh if mh else self.root.winfo_screenheight()))
        return out

    def _make_strip(self, x: int, y: int, w: int, h: int, fill: str) -> tk.Toplevel:
        win = tk.Toplevel(self.root)
        win.overrideredirect(True)
        win.attributes("-topmost", True)
        win.configure(bg=fill)
        win.geometry(f"{w}x{h}+{x}+{y}")
        try:
            win.attributes("-alpha", 0.92)
        except tk.TclError:
            pass
        win.lift()
        return win

    def _destroy_windows(self) -> None:
        for win in self._windows:
            try:
                win.destroy()
            except tk.TclError:
                pass
        self._windows = []

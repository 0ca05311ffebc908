"""Settings persistence: a JSON file in the home directory."""
from __future__ import annotations
import json
import os
from typing import Any, Optional, Protocol

from .settings import AccentColor, AlertSettings, DEFAULT_SETTINGS

CONFIG_FILE = os.path.join(os.path.expanduser("~"), "eye_rest_config.json")

# A file without this key was never saved by us; use the fallback wholesale
_MARKER_KEY = "interval_minutes"


class SettingsStore(Protocol):
    def load(self) -> AlertSettings: ...

    def save(self, settings: AlertSettings) -> None: ...


def settings_to_dict(s: AlertSettings) -> dict[str, Any]:
    return {
        "is_enabled": s.is_enabled,
        "interval_minutes": s.interval_minutes,
        "cue_duration_seconds": s.cue_duration_seconds,
        "accent_color": s.accent_color.value,
        "restrict_to_office_hours": s.restrict_to_office_hours,
        "office_hours_start_minutes": s.office_hours_start_minutes,
        "office_hours_end_minutes": s.office_hours_end_minutes,
    }


def settings_from_dict(data: dict[str, Any], fallback: AlertSettings = DEFAULT_SETTINGS) -> AlertSettings:
    """Build settings from stored values; anything missing or mistyped comes from `fallback`."""
    def num(key: str, default: float) -> float:
        v = data.get(key)
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return default
        return v

    def flag(key: str, default: bool) -> bool:
        v = data.get(key)
        return v if isinstance(v, bool) else default

    try:
        color = AccentColor(data.get("accent_color"))
    except ValueError:
        color = fallback.accent_color

    return AlertSettings(
        is_enabled=flag("is_enabled", fallback.is_enabled),
        interval_minutes=num("interval_minutes", fallback.interval_minutes),
        cue_duration_seconds=num("cue_duration_seconds", fallback.cue_duration_seconds),
        accent_color=color,
        restrict_to_office_hours=flag("restrict_to_office_hours", fallback.restrict_to_office_hours),
        office_hours_start_minutes=num("office_hours_start_minutes", fallback.office_hours_start_minutes),
        office_hours_end_minutes=num("office_hours_end_minutes", fallback.office_hours_end_minutes),
    )


class JsonSettingsStore:
    """Loads/saves AlertSettings as JSON. Errors are reported, never raised."""

    def __init__(self, path: Optional[str] = None, fallback: AlertSettings = DEFAULT_SETTINGS):
        self.path = path or CONFIG_FILE
        self.fallback = fallback

    def load(self) -> AlertSettings:
        if not os.path.exists(self.path):
            return self.fallback
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (ValueError, OSError) as e:  # JSONDecodeError, UnicodeDecodeError
            print(f"  [!] Config load error: {e}. Using defaults.")
            return self.fallback
        if not isinstance(data, dict) or _MARKER_KEY not in data:
            return self.fallback
        return settings_from_dict(data, self.fallback).normalized()

    def save(self, settings: AlertSettings) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(settings_to_dict(settings.normalized()), f, indent=2)
        except OSError as e:
            print(f"  [!] Config save error: {e}")

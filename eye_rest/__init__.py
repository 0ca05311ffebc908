"""Eye Rest — periodic eye-break reminder with an optional office-hours window."""
from .controller import EyeRestController, needs_reschedule
from .settings import AccentColor, AlertSettings

__version__ = "1.0.0"

__all__ = ["AccentColor", "AlertSettings", "EyeRestController", "needs_reschedule"]

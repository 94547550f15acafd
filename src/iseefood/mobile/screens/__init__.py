"""Screen modules for ISeeFood mobile UI."""

from .capture_screen import CaptureScreen
from .profile_screen import ProfileScreen

__all__ = ["CaptureScreen", "ProfileScreen"]

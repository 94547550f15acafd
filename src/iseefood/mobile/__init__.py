"""
ISeeFood Mobile - Cross-platform Kivy UI.

This module provides a Kivy-based user interface that works on:
- Desktop (Windows, macOS, Linux)
- Mobile (Android, iOS)

Features:
- Camera or photo library capture
- Background classification with a hotdog / not hotdog verdict
- Profile tab with local comments
"""

__all__ = ["ISeeFoodApp"]


def __getattr__(name):
    # Importing the app pulls in kivy.core.window, which opens a window
    if name == "ISeeFoodApp":
        from .app import ISeeFoodApp

        return ISeeFoodApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

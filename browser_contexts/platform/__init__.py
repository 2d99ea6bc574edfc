"""Platform abstraction for window enumeration.

Usage::

    from browser_contexts.platform import get_window_manager

    windows = get_window_manager().list_visible_windows()
"""

from __future__ import annotations

import sys
from functools import lru_cache

from browser_contexts.platform.base import WindowInfo, WindowManager

IS_WINDOWS = sys.platform == "win32"


@lru_cache(maxsize=1)
def get_window_manager() -> WindowManager:
    """Return the window manager for the current platform."""
    if IS_WINDOWS:
        from browser_contexts.platform.windows import Win32WindowManager

        return Win32WindowManager()

    from browser_contexts.platform.unsupported import NullWindowManager

    return NullWindowManager()


__all__ = ["IS_WINDOWS", "WindowInfo", "WindowManager", "get_window_manager"]

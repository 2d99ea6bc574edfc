"""Fallback for platforms without a window enumeration backend."""

from __future__ import annotations

from loguru import logger

from browser_contexts.platform.base import WindowInfo


class NullWindowManager:
    """Lists no windows and closes nothing.

    Editor liveness is therefore always "not found" on these platforms.
    """

    def list_visible_windows(self) -> list[WindowInfo]:
        return []

    def close_window(self, handle: int) -> bool:
        logger.debug("Window close not supported on this platform (handle={})", handle)
        return False

"""Windows window enumeration via user32 (ctypes)."""

from __future__ import annotations

import ctypes
from ctypes import wintypes

from loguru import logger

from browser_contexts.platform.base import WindowInfo

WM_CLOSE = 0x0010


class Win32WindowManager:
    """``WindowManager`` backed by ``EnumWindows`` / ``PostMessageW``."""

    def __init__(self) -> None:
        self._user32 = ctypes.windll.user32  # type: ignore[attr-defined]
        self._enum_proc = ctypes.WINFUNCTYPE(wintypes.BOOL, wintypes.HWND, wintypes.LPARAM)

    def list_visible_windows(self) -> list[WindowInfo]:
        user32 = self._user32
        windows: list[WindowInfo] = []

        def handler(hwnd: int, _: int) -> bool:
            if not user32.IsWindowVisible(hwnd):
                return True
            length = user32.GetWindowTextLengthW(hwnd)
            if length == 0:
                return True
            buffer = ctypes.create_unicode_buffer(length + 1)
            user32.GetWindowTextW(hwnd, buffer, length + 1)
            pid = wintypes.DWORD()
            user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
            windows.append(WindowInfo(handle=int(hwnd), title=buffer.value, pid=int(pid.value)))
            return True

        user32.EnumWindows(self._enum_proc(handler), 0)
        return windows

    def close_window(self, handle: int) -> bool:
        ok = bool(self._user32.PostMessageW(wintypes.HWND(handle), WM_CLOSE, 0, 0))
        if not ok:
            logger.warning("PostMessage(WM_CLOSE) to window {} failed", handle)
        return ok

"""Window enumeration interface.

The editor runs all of its windows in one process, so the only way to tell
which workspace a window shows is its title.  This is the single
OS-coupled capability of the tool; everything else goes through psutil or
the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class WindowInfo:
    """A visible top-level window."""

    handle: int
    title: str
    pid: int


@runtime_checkable
class WindowManager(Protocol):
    """Protocol for listing and closing top-level windows."""

    def list_visible_windows(self) -> list[WindowInfo]:
        """Return all visible top-level windows with a non-empty title."""
        ...

    def close_window(self, handle: int) -> bool:
        """Ask the window to close gracefully.  Returns ``True`` if the request was delivered."""
        ...

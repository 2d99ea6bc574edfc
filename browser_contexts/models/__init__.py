"""Data models for browser-contexts."""

from browser_contexts.models.context import DEFAULT_DATA_DIR, Config, Context
from browser_contexts.models.enums import BrowserKind, PathKind, ProcessKind, RepoStatus
from browser_contexts.models.runtime import CloseResult, OpenResult, RepoResult, RunningContext

__all__ = [
    "DEFAULT_DATA_DIR",
    "BrowserKind",
    "CloseResult",
    "Config",
    "Context",
    "OpenResult",
    "PathKind",
    "ProcessKind",
    "RepoResult",
    "RepoStatus",
    "RunningContext",
]

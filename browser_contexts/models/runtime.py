"""Derived, never-persisted records computed by probing OS state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from browser_contexts.models.enums import ProcessKind, RepoStatus


@dataclass
class RunningContext:
    """A context observed running at probe time."""

    name: str
    kind: ProcessKind
    pid: int | None = None
    window_handle: int | None = None
    started_at: datetime | None = None
    detail: str | None = None
    """Free-form description (browser kind, window title)."""


@dataclass
class RepoResult:
    """Outcome of restoring one repository."""

    repo: str
    path: str | None
    status: RepoStatus
    message: str | None = None
    pulled: bool = False


@dataclass
class OpenResult:
    """What ``SessionLauncher.open`` did."""

    urls: list[str] = field(default_factory=list)
    browser_started: bool = False
    already_running: bool = False
    editor_started: bool = False


@dataclass
class CloseResult:
    """What ``SessionLauncher.close`` did."""

    editor_closed: bool = False
    browser_processes: int = 0

    @property
    def had_effect(self) -> bool:
        return self.editor_closed or self.browser_processes > 0

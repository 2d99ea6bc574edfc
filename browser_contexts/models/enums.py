"""Shared enumerations used across browser-contexts."""

from __future__ import annotations

from enum import StrEnum

# -- Browser -----------------------------------------------------------------


class BrowserKind(StrEnum):
    """Browsers a context can be bound to."""

    CHROME = "chrome"
    EDGE = "edge"
    BRAVE = "brave"
    FIREFOX = "firefox"
    CHROMIUM = "chromium"

    @property
    def is_chromium_family(self) -> bool:
        return self is not BrowserKind.FIREFOX


# -- Paths -------------------------------------------------------------------


class PathKind(StrEnum):
    """How a workspace path string addresses its file."""

    LOCAL = "local"
    WSL_URI = "wsl_uri"
    WSL_UNC = "wsl_unc"


# -- Running state -----------------------------------------------------------


class ProcessKind(StrEnum):
    BROWSER = "browser"
    EDITOR = "editor"


# -- Sync --------------------------------------------------------------------


class RepoStatus(StrEnum):
    """Outcome of restoring one repository during a pull."""

    CLONED = "cloned"
    CLONE_FAILED = "clone_failed"
    DECLINED = "declined"
    NOT_A_REPO = "not_a_repo"
    REMOTE_OK = "remote_ok"
    REMOTE_ADDED = "remote_added"
    REMOTE_UPDATED = "remote_updated"
    REMOTE_FAILED = "remote_failed"
    PULL_FAILED = "pull_failed"
    FOLDER_UNKNOWN = "folder_unknown"

    @property
    def is_failure(self) -> bool:
        return self in {
            RepoStatus.CLONE_FAILED,
            RepoStatus.REMOTE_FAILED,
            RepoStatus.PULL_FAILED,
            RepoStatus.FOLDER_UNKNOWN,
        }

"""Liveness probing for contexts.

Answers "is this context running right now?" by looking at OS state.
Nothing is cached -- every call probes again.

Browser liveness starts from the lock files a browser keeps inside its
profile directory.  A lock without a live process referencing the profile
is stale (left behind by a crash) and is removed as part of the probe.

Editor liveness is found by window title, because one editor process owns
every window and exposes no per-window "opened workspace" property.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import psutil
from loguru import logger

from browser_contexts.models.context import Config
from browser_contexts.models.enums import BrowserKind, ProcessKind
from browser_contexts.models.runtime import RunningContext
from browser_contexts.paths import profile_dir as resolve_profile_dir
from browser_contexts.platform import WindowInfo, WindowManager, get_window_manager
from browser_contexts.settings import BrowserContextsSettings
from browser_contexts.workspace import workspace_title_stem

CHROMIUM_LOCK_FILES = ("lockfile", "Singleton", "SingletonLock")
FIREFOX_LOCK_FILES = ("parent.lock",)

_PROCESS_ATTRS = ["pid", "ppid", "name", "cmdline", "create_time"]
_USER_DATA_DIR_FLAG = "--user-data-dir="
_PROFILE_FLAGS = ("--user-data-dir", "-profile", "--profile")


def lock_files(browser: BrowserKind) -> tuple[str, ...]:
    return FIREFOX_LOCK_FILES if browser is BrowserKind.FIREFOX else CHROMIUM_LOCK_FILES


def match_workspace_title(title: str, stem: str) -> bool:
    """Whether an editor window title shows the workspace named *stem*.

    Accepted shapes::

        acme (Workspace)
        main.py - acme (Workspace)
        main.py - acme (Workspace) [WSL: Ubuntu] - Visual Studio Code
    """
    pattern = rf"^(?:.+ - )?{re.escape(stem)} \(Workspace\)(?: \[WSL: [^\]]+\])?(?: - .+)?$"
    return re.match(pattern, title) is not None


def _normalize(path: str) -> str:
    # normcase folds case only where the filesystem does (Windows).
    return os.path.normcase(os.path.normpath(path.strip().strip('"')))


def _profile_arguments(cmdline: list[str]) -> Iterator[str]:
    """Values passed to a profile-selecting flag, in command-line order."""
    for index, arg in enumerate(cmdline):
        if arg.startswith(_USER_DATA_DIR_FLAG):
            yield arg[len(_USER_DATA_DIR_FLAG) :]
        elif arg in _PROFILE_FLAGS and index + 1 < len(cmdline):
            yield cmdline[index + 1]


def references_profile(cmdline: Iterable[str] | None, profile_dir: str | Path) -> bool:
    """Whether a process command line points a browser at *profile_dir*.

    Only profile-selecting arguments count: ``--user-data-dir=<dir>`` or
    ``--user-data-dir <dir>`` (Chromium) and ``-profile <dir>`` (Firefox).
    A path merely mentioned elsewhere on the command line does not.
    """
    if not cmdline:
        return False
    needle = _normalize(str(profile_dir))
    return any(_normalize(value) == needle for value in _profile_arguments(list(cmdline)) if value.strip())


class LivenessProber:
    """Probe browser profiles and editor windows."""

    def __init__(
        self,
        settings: BrowserContextsSettings,
        *,
        window_manager: WindowManager | None = None,
        process_iter: Callable[..., Iterable[Any]] = psutil.process_iter,
    ) -> None:
        self._settings = settings
        self._window_manager = window_manager
        self._process_iter = process_iter

    @property
    def window_manager(self) -> WindowManager:
        if self._window_manager is None:
            self._window_manager = get_window_manager()
        return self._window_manager

    # -- Processes -------------------------------------------------------------

    def processes(self) -> list[Any]:
        """Snapshot of running processes with ``info`` populated."""
        return list(self._process_iter(_PROCESS_ATTRS))

    def browser_processes(self, profile_dir: str | Path, processes: list[Any] | None = None) -> list[Any]:
        """All live processes whose command line references *profile_dir*."""
        if processes is None:
            processes = self.processes()
        return [p for p in processes if references_profile(p.info.get("cmdline"), profile_dir)]

    @staticmethod
    def root_process(processes: list[Any]) -> Any | None:
        """The process of *processes* whose parent is not itself in the list."""
        pids = {p.info.get("pid") for p in processes}
        for p in processes:
            if p.info.get("ppid") not in pids:
                return p
        return processes[0] if processes else None

    # -- Browser ---------------------------------------------------------------

    def is_running(self, browser: BrowserKind, profile_dir: str | Path) -> bool:
        """Whether a browser currently holds *profile_dir*.

        Stale locks (no process references the profile) are deleted.  If a
        stale-looking lock cannot be deleted, the OS still holds it and the
        profile is reported as running.
        """
        profile = Path(profile_dir)
        # lexists: Chromium's SingletonLock is a symlink to a host-pid string.
        locks = [profile / name for name in lock_files(browser) if os.path.lexists(profile / name)]
        if not locks:
            return False

        if self.browser_processes(profile):
            return True

        for lock in locks:
            try:
                lock.unlink()
            except OSError as exc:
                logger.warning("Lock {} looks stale but cannot be removed: {}", lock, exc)
                return True
        logger.info("Removed stale {} lock(s) in {}", browser, profile)
        return False

    # -- Editor ----------------------------------------------------------------

    def editor_pids(self, processes: list[Any] | None = None) -> set[int]:
        if processes is None:
            processes = list(self._process_iter(["pid", "name"]))
        names = {n.casefold() for n in self._settings.editor_process_names}
        return {p.info["pid"] for p in processes if (p.info.get("name") or "").casefold() in names}

    def find_running_by_workspace(self, workspace: str, processes: list[Any] | None = None) -> WindowInfo | None:
        """Find the editor window showing *workspace*, or ``None``."""
        stem = workspace_title_stem(workspace)
        pids = self.editor_pids(processes)
        if not pids:
            return None
        for window in self.window_manager.list_visible_windows():
            if window.pid in pids and match_workspace_title(window.title, stem):
                return window
        return None

    # -- Aggregate -------------------------------------------------------------

    def running_contexts(self, config: Config) -> list[RunningContext]:
        """Everything currently running, one entry per context and process kind."""
        processes = self.processes()
        running: list[RunningContext] = []

        for name, ctx in config.contexts.items():
            if ctx.browser is not None:
                procs = self.browser_processes(resolve_profile_dir(config.data_dir, name), processes)
                root = self.root_process(procs)
                if root is not None:
                    created = root.info.get("create_time")
                    running.append(
                        RunningContext(
                            name=name,
                            kind=ProcessKind.BROWSER,
                            pid=root.info.get("pid"),
                            started_at=datetime.fromtimestamp(created) if created else None,
                            detail=str(ctx.browser),
                        )
                    )

            if ctx.workspace:
                window = self.find_running_by_workspace(ctx.workspace, processes)
                if window is not None:
                    running.append(
                        RunningContext(
                            name=name,
                            kind=ProcessKind.EDITOR,
                            pid=window.pid,
                            window_handle=window.handle,
                            started_at=_started_at(processes, window.pid),
                            detail=window.title,
                        )
                    )

        logger.debug("Probe found {} running context process(es)", len(running))
        return running


def _started_at(processes: list[Any], pid: int) -> datetime | None:
    for p in processes:
        if p.info.get("pid") == pid and p.info.get("create_time"):
            return datetime.fromtimestamp(p.info["create_time"])
    return None


def terminate_processes(processes: list[Any], timeout: float) -> int:
    """Terminate *processes*, kill whatever survives *timeout*.  Returns how many were signalled."""
    signalled: list[Any] = []
    for p in processes:
        try:
            p.terminate()
            signalled.append(p)
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied as exc:
            logger.warning("Cannot terminate process {}: {}", p.pid, exc)

    _, alive = psutil.wait_procs(signalled, timeout=timeout)
    for p in alive:
        try:
            p.kill()
        except psutil.NoSuchProcess:
            continue
    return len(signalled)

"""Session launcher/closer.

Each context is either Stopped or Running.  ``open`` is idempotent for the
browser: relaunching a browser with ``--user-data-dir`` pointed at a profile
it already holds breaks the browser's own locking, so a running context is
only reported, never relaunched.  Editor launches are not deduplicated;
reopening an already-open workspace is harmless.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from browser_contexts.errors import ContextValidationError, ExecutableNotFoundError, LaunchError
from browser_contexts.execution.browsers import browser_command, find_browser
from browser_contexts.execution.prober import LivenessProber, terminate_processes
from browser_contexts.managers.contexts import get_context, resolve_urls
from browser_contexts.models.context import Config
from browser_contexts.models.runtime import CloseResult, OpenResult
from browser_contexts.paths import classify, profile_dir, to_filesystem_path
from browser_contexts.settings import BrowserContextsSettings


def spawn_detached(argv: list[str]) -> int:
    """Start *argv* detached from this process.  Returns the child pid."""
    kwargs: dict = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "close_fds": True,
    }
    if sys.platform == "win32":
        kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
    else:
        kwargs["start_new_session"] = True

    try:
        proc = subprocess.Popen(argv, **kwargs)  # noqa: S603
    except OSError as exc:
        msg = f"Failed to start {argv[0]}: {exc}"
        raise LaunchError(msg) from exc
    logger.debug("Spawned pid {}: {}", proc.pid, argv)
    return proc.pid


class SessionLauncher:
    """Open and close contexts."""

    def __init__(
        self,
        settings: BrowserContextsSettings,
        prober: LivenessProber,
        *,
        spawn: Callable[[list[str]], int] = spawn_detached,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self._settings = settings
        self._prober = prober
        self._spawn = spawn
        self._which = which

    # -- Open ------------------------------------------------------------------

    def open(self, config: Config, name: str, extra: list[str] | None = None) -> OpenResult:
        """Open context *name*, appending *extra* (bookmark names or URLs)."""
        ctx = get_context(config, name)
        result = OpenResult()

        if ctx.is_workspace_only and not extra:
            if not ctx.workspace:
                msg = f"Context '{name}' has nothing to open"
                raise ContextValidationError(msg)
            self.open_workspace(ctx.workspace)
            result.editor_started = True
            return result

        if ctx.browser is None:
            msg = f"Context '{name}' has URLs but no browser"
            raise ContextValidationError(msg)

        result.urls = [*ctx.urls, *resolve_urls(ctx, extra or [])]
        profile = profile_dir(config.data_dir, name)

        if self._prober.is_running(ctx.browser, profile):
            logger.info("Context {} already running, not relaunching", name)
            result.already_running = True
        else:
            executable = find_browser(ctx.browser, self._settings.browser_paths)
            profile.mkdir(parents=True, exist_ok=True)
            self._spawn(browser_command(executable, ctx.browser, profile, result.urls))
            result.browser_started = True

        if ctx.workspace:
            self.open_workspace(ctx.workspace)
            result.editor_started = True
        return result

    def editor_command(self, workspace: str) -> list[str]:
        editor = self._which(self._settings.editor_command)
        if editor is None:
            raise ExecutableNotFoundError(self._settings.editor_command)

        classified = classify(workspace)
        if classified.is_wsl:
            return [editor, "--file-uri", classified.remote_uri()]
        return [editor, to_filesystem_path(workspace)]

    def open_workspace(self, workspace: str) -> None:
        self._spawn(self.editor_command(workspace))

    # -- Close -----------------------------------------------------------------

    def close(self, config: Config, name: str) -> CloseResult:
        """Close the editor window first, then the browser holding the profile."""
        ctx = get_context(config, name)
        result = CloseResult()

        if ctx.workspace:
            window = self._prober.find_running_by_workspace(ctx.workspace)
            if window is not None:
                result.editor_closed = self._prober.window_manager.close_window(window.handle)

        if ctx.browser is not None:
            profile: Path = profile_dir(config.data_dir, name)
            procs = self._prober.browser_processes(profile)
            if procs:
                result.browser_processes = terminate_processes(procs, self._settings.close_timeout)

        logger.debug("Close {}: {}", name, result)
        return result

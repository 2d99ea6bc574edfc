"""Thin wrapper around the ``git`` CLI.

Only the handful of commands the sync needs.  Every call blocks until git
exits; a non-zero exit raises ``GitCommandError`` with the captured output.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from loguru import logger

from browser_contexts.errors import ExecutableNotFoundError, GitCommandError


class GitClient:
    def __init__(self, git_command: str = "git") -> None:
        self._git = git_command

    def run(self, args: list[str], *, cwd: str | Path | None = None) -> str:
        """Run ``git <args>`` and return stripped stdout."""
        logger.debug("git {} (cwd={})", " ".join(args), cwd)
        try:
            result = subprocess.run(  # noqa: S603
                [self._git, *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ExecutableNotFoundError(self._git) from exc
        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr or result.stdout)
        return result.stdout.strip()

    # -- Remotes ---------------------------------------------------------------

    def remotes(self, repo: str | Path) -> list[str]:
        out = self.run(["remote"], cwd=repo)
        return [line.strip() for line in out.splitlines() if line.strip()]

    def remote_url(self, repo: str | Path, name: str) -> str | None:
        """URL of remote *name*, or ``None`` if no such remote exists."""
        if name not in self.remotes(repo):
            return None
        return self.run(["remote", "get-url", name], cwd=repo)

    def first_remote_url(self, repo: str | Path) -> str | None:
        remotes = self.remotes(repo)
        if not remotes:
            return None
        return self.run(["remote", "get-url", remotes[0]], cwd=repo)

    def add_remote(self, repo: str | Path, name: str, url: str) -> None:
        self.run(["remote", "add", name, url], cwd=repo)

    def set_remote_url(self, repo: str | Path, name: str, url: str) -> None:
        self.run(["remote", "set-url", name, url], cwd=repo)

    # -- Transfer --------------------------------------------------------------

    def clone(self, url: str, dest: str | Path) -> None:
        Path(dest).parent.mkdir(parents=True, exist_ok=True)
        self.run(["clone", url, str(dest)])

    def fetch(self, repo: str | Path, remote: str = "origin") -> None:
        self.run(["fetch", remote], cwd=repo)

    def pull_ff_only(self, repo: str | Path) -> None:
        self.run(["pull", "--ff-only"], cwd=repo)

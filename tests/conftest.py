"""Shared test fixtures: settings, config store, and fakes for OS collaborators.

Nothing here touches real browsers, editor windows or git: process
enumeration, window listing, process spawning and git are all replaced by
in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from loguru import logger

from browser_contexts.errors import GitCommandError
from browser_contexts.execution.launcher import SessionLauncher
from browser_contexts.execution.prober import LivenessProber
from browser_contexts.platform.base import WindowInfo
from browser_contexts.settings import BrowserContextsSettings
from browser_contexts.store.config import ConfigStore
from browser_contexts.sync.git import GitClient

CHROME_EXE = "/opt/browsers/chrome"
FIREFOX_EXE = "/opt/browsers/firefox"
EDITOR_EXE = "/usr/bin/code"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeProcess:
    """Stand-in for ``psutil.Process`` as yielded by ``process_iter(attrs)``."""

    def __init__(self, pid: int, name: str, cmdline: list[str], *, ppid: int = 1, create_time: float = 1_700_000_000):
        self.pid = pid
        self.info: dict[str, Any] = {
            "pid": pid,
            "ppid": ppid,
            "name": name,
            "cmdline": cmdline,
            "create_time": create_time,
        }
        self.terminated = False
        self.killed = False

    def terminate(self) -> None:
        self.terminated = True

    def kill(self) -> None:
        self.killed = True


class FakeProcessTable:
    """Callable replacing ``psutil.process_iter``."""

    def __init__(self) -> None:
        self.processes: list[FakeProcess] = []

    def add(self, *args: Any, **kwargs: Any) -> FakeProcess:
        proc = FakeProcess(*args, **kwargs)
        self.processes.append(proc)
        return proc

    def __call__(self, attrs: list[str] | None = None) -> Iterator[FakeProcess]:
        return iter(list(self.processes))


class FakeWindowManager:
    def __init__(self) -> None:
        self.windows: list[WindowInfo] = []
        self.closed: list[int] = []

    def list_visible_windows(self) -> list[WindowInfo]:
        return list(self.windows)

    def close_window(self, handle: int) -> bool:
        self.closed.append(handle)
        self.windows = [w for w in self.windows if w.handle != handle]
        return True


class FakeSpawner:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def __call__(self, argv: list[str]) -> int:
        self.calls.append(list(argv))
        return 4000 + len(self.calls)


class FakeGit(GitClient):
    """In-memory git: repositories are directories with a ``.git`` folder and a remote table."""

    def __init__(self) -> None:
        super().__init__("git")
        self.repos: dict[str, dict[str, str]] = {}
        self.clones: list[tuple[str, str]] = []
        self.fetched: list[str] = []
        self.pulled: list[str] = []
        self.failing_urls: set[str] = set()
        self.failing_pulls: set[str] = set()

    def make_repo(self, path: Path, remotes: dict[str, str] | None = None) -> Path:
        (path / ".git").mkdir(parents=True, exist_ok=True)
        self.repos[str(path)] = dict(remotes or {})
        return path

    def _repo(self, repo: str | Path) -> dict[str, str]:
        key = str(Path(repo))
        if key not in self.repos:
            raise GitCommandError(["remote"], 128, f"fatal: not a git repository: {key}")
        return self.repos[key]

    def remotes(self, repo: str | Path) -> list[str]:
        return list(self._repo(repo))

    def remote_url(self, repo: str | Path, name: str) -> str | None:
        return self._repo(repo).get(name)

    def first_remote_url(self, repo: str | Path) -> str | None:
        remotes = self._repo(repo)
        return next(iter(remotes.values()), None)

    def add_remote(self, repo: str | Path, name: str, url: str) -> None:
        self._repo(repo)[name] = url

    def set_remote_url(self, repo: str | Path, name: str, url: str) -> None:
        self._repo(repo)[name] = url

    def clone(self, url: str, dest: str | Path) -> None:
        if url in self.failing_urls:
            raise GitCommandError(["clone", url, str(dest)], 128, "fatal: repository not found")
        self.clones.append((url, str(dest)))
        self.make_repo(Path(dest), {"origin": url})

    def fetch(self, repo: str | Path, remote: str = "origin") -> None:
        self._repo(repo)
        self.fetched.append(str(Path(repo)))

    def pull_ff_only(self, repo: str | Path) -> None:
        if str(Path(repo)) in self.failing_pulls:
            raise GitCommandError(["pull", "--ff-only"], 128, "fatal: Not possible to fast-forward, aborting.")
        self.pulled.append(str(Path(repo)))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_loguru() -> Iterator[None]:
    """Keep sinks added by ``setup_logging`` from outliving the test."""
    yield
    logger.remove()


@pytest.fixture
def settings(tmp_path: Path) -> BrowserContextsSettings:
    return BrowserContextsSettings(
        config_path=tmp_path / "config.json",
        default_data_dir=str(tmp_path / "profiles"),
        browser_paths={"chrome": CHROME_EXE, "firefox": FIREFOX_EXE},
        editor_process_names=["Code.exe", "code"],
        close_timeout=0.1,
    )


@pytest.fixture
def store(settings: BrowserContextsSettings) -> ConfigStore:
    return ConfigStore(settings.config_path, settings.default_data_dir)


@pytest.fixture
def process_table() -> FakeProcessTable:
    return FakeProcessTable()


@pytest.fixture
def window_manager() -> FakeWindowManager:
    return FakeWindowManager()


@pytest.fixture
def spawner() -> FakeSpawner:
    return FakeSpawner()


@pytest.fixture
def prober(
    settings: BrowserContextsSettings,
    process_table: FakeProcessTable,
    window_manager: FakeWindowManager,
) -> LivenessProber:
    return LivenessProber(settings, window_manager=window_manager, process_iter=process_table)


@pytest.fixture
def launcher(settings: BrowserContextsSettings, prober: LivenessProber, spawner: FakeSpawner) -> SessionLauncher:
    return SessionLauncher(settings, prober, spawn=spawner, which=lambda name: EDITOR_EXE)


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()

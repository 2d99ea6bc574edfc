"""Workspace path classification and portability.

A workspace path in the config takes one of three forms:

- ``C:\\Projects\\x.code-workspace`` or ``/home/u/x.code-workspace`` -> local
- ``wsl://Ubuntu/home/u/x.code-workspace``                          -> WSL URI
- ``\\\\wsl$\\Ubuntu\\home\\u\\x.code-workspace`` (or ``wsl.localhost``) -> WSL UNC

Local paths under the home directory are stored in portable form
(``~/work/x.code-workspace``, forward slashes) so that a config synced to
another machine with a different home layout still resolves.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from browser_contexts.models.enums import PathKind

WORKSPACE_SUFFIX = ".code-workspace"

_WSL_URI_RE = re.compile(r"^wsl://(?P<distro>[^/\\]+)(?P<path>.*)$", re.IGNORECASE)
_WSL_UNC_RE = re.compile(r"^[\\/]{2}(?:wsl\$|wsl\.localhost)[\\/](?P<distro>[^\\/]+)(?P<path>.*)$", re.IGNORECASE)
_WIN_ENV_RE = re.compile(r"%(?P<name>[A-Za-z_][A-Za-z0-9_]*)%")


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkspacePath:
    """A classified workspace path.

    For WSL kinds ``path`` is the POSIX path inside the distro; for local
    paths it is the original string.
    """

    kind: PathKind
    path: str
    distro: str | None = None

    @property
    def is_wsl(self) -> bool:
        return self.kind is not PathKind.LOCAL

    def unc(self) -> str:
        """``\\\\wsl$\\<distro>\\...`` form of a WSL path."""
        if not self.is_wsl:
            raise ValueError("Not a WSL path")
        return "\\\\wsl$\\" + self.distro + self.path.replace("/", "\\")

    def remote_uri(self) -> str:
        """``vscode-remote://wsl+<distro>/...`` form of a WSL path."""
        if not self.is_wsl:
            raise ValueError("Not a WSL path")
        return f"vscode-remote://wsl+{self.distro}{self.path}"


def classify(path: str) -> WorkspacePath:
    """Classify *path* by prefix.  Anything not WSL-shaped is local."""
    if m := _WSL_URI_RE.match(path):
        return WorkspacePath(PathKind.WSL_URI, _posix_inner(m.group("path")), m.group("distro"))
    if m := _WSL_UNC_RE.match(path):
        return WorkspacePath(PathKind.WSL_UNC, _posix_inner(m.group("path")), m.group("distro"))
    return WorkspacePath(PathKind.LOCAL, path)


def is_wsl(path: str) -> bool:
    return classify(path).is_wsl


def _posix_inner(raw: str) -> str:
    inner = raw.replace("\\", "/")
    if not inner.startswith("/"):
        inner = "/" + inner
    return inner


# ---------------------------------------------------------------------------
# Portability
# ---------------------------------------------------------------------------


def to_portable(path: str, home_dir: str | os.PathLike[str] | None = None) -> str:
    """Replace a leading *home_dir* with ``~`` and use ``/`` separators.

    The home prefix match is case-insensitive and only applies at a path
    segment boundary (``/home/alice2`` is not under ``/home/alice``).  WSL
    paths are returned unchanged.
    """
    if is_wsl(path):
        return path

    home = str(home_dir if home_dir is not None else Path.home()).replace("\\", "/").rstrip("/")
    normalized = path.replace("\\", "/")
    if home and normalized.lower().startswith(home.lower()):
        rest = normalized[len(home) :]
        if not rest or rest.startswith("/"):
            return "~" + rest
    return normalized


def expand(path: str, home_dir: str | os.PathLike[str] | None = None) -> str:
    """Expand ``~`` and environment references to an absolute local path.

    Handles ``$VAR``/``${VAR}`` and ``%VAR%``.  Undefined variables are left
    as-is.  WSL paths are returned unchanged.
    """
    if is_wsl(path):
        return path

    result = path
    if result == "~" or result.startswith(("~/", "~\\")):
        home = str(home_dir if home_dir is not None else Path.home()).rstrip("/\\")
        result = home + result[1:]

    result = _WIN_ENV_RE.sub(lambda m: os.environ.get(m.group("name"), m.group(0)), result)
    result = os.path.expandvars(result)

    if os.sep == "\\":
        result = result.replace("/", "\\")
    return result


def to_filesystem_path(path: str, *, windows: bool | None = None) -> str:
    """Return a path usable for file I/O on this machine.

    On Windows, WSL paths become ``\\\\wsl$`` UNC paths.  Elsewhere (e.g.
    inside the distro itself) they become their inner POSIX path.
    """
    if windows is None:
        windows = sys.platform == "win32"

    classified = classify(path)
    if classified.is_wsl:
        return classified.unc() if windows else classified.path
    return expand(path)


def resolve_in_distro(workspace: WorkspacePath, relative: str) -> WorkspacePath:
    """Resolve a folder entry of a WSL workspace file inside the same distro."""
    target = PurePosixPath(relative.replace("\\", "/"))
    if not target.is_absolute():
        target = PurePosixPath(workspace.path).parent / target
    return WorkspacePath(workspace.kind, _normalize_posix(target), workspace.distro)


def _normalize_posix(path: PurePosixPath) -> str:
    parts: list[str] = []
    for part in path.parts[1:]:
        if part == "..":
            if parts:
                parts.pop()
        elif part != ".":
            parts.append(part)
    return "/" + "/".join(parts)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def is_workspace_file(path: str) -> bool:
    return path.lower().endswith(WORKSPACE_SUFFIX)


def workspace_exists(path: str) -> bool:
    """Whether the workspace file is reachable from this machine."""
    return Path(to_filesystem_path(path)).is_file()


def profile_dir(data_dir: str, name: str) -> Path:
    """Per-context browser profile directory: ``{expand(data_dir)}/{name}``."""
    return Path(expand(data_dir)) / name

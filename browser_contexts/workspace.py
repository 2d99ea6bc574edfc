"""Editor ``.code-workspace`` file parsing.

Workspace files are JSON-with-comments: ``//`` line comments, ``/* */``
block comments and trailing commas are all legal.  They are stripped by a
small scanner that leaves string literals untouched, then the result is
handed to ``json.loads``.

Folder entries look like::

    {"folders": [
        {"path": "../api"},
        {"path": "C:/src/web", "name": "Web"},
        {"uri": "vscode-remote://wsl+Ubuntu/home/u/tools"}
    ]}

Relative paths are resolved against the directory of the workspace file.
"""

from __future__ import annotations

import json
import ntpath
import os
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

from browser_contexts.errors import WorkspaceParseError
from browser_contexts.models.enums import PathKind
from browser_contexts.paths import (
    WORKSPACE_SUFFIX,
    WorkspacePath,
    classify,
    expand,
    resolve_in_distro,
    to_filesystem_path,
)

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_REMOTE_WSL_RE = re.compile(r"^vscode-remote://wsl\+(?P<distro>[^/]+)(?P<path>/.*)?$", re.IGNORECASE)


@dataclass(frozen=True)
class WorkspaceFolder:
    """A folder referenced by a workspace, resolved for this machine."""

    name: str
    path: str
    """Filesystem path usable from this machine."""


# ---------------------------------------------------------------------------
# JSON with comments
# ---------------------------------------------------------------------------


def strip_jsonc(text: str) -> str:
    """Remove comments and trailing commas outside of string literals."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return _strip_trailing_commas("".join(out))


def _strip_trailing_commas(text: str) -> str:
    # Comments are gone; commas inside strings must still be kept, so split on
    # string literals and only rewrite the segments between them.
    parts = re.split(r'("(?:\\.|[^"\\])*")', text)
    for idx in range(0, len(parts), 2):
        parts[idx] = _TRAILING_COMMA_RE.sub(r"\1", parts[idx])
    return "".join(parts)


def parse_jsonc(text: str) -> object:
    return json.loads(strip_jsonc(text))


def load_workspace(path: str) -> dict:
    """Read and parse a workspace file.  Raises ``WorkspaceParseError``."""
    fs_path = to_filesystem_path(path)
    try:
        text = Path(fs_path).read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise WorkspaceParseError(path, exc.strerror or str(exc)) from exc
    try:
        data = parse_jsonc(text)
    except json.JSONDecodeError as exc:
        raise WorkspaceParseError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise WorkspaceParseError(path, "top-level value is not an object")
    return data


# ---------------------------------------------------------------------------
# Folder resolution
# ---------------------------------------------------------------------------


def workspace_folders(path: str) -> list[WorkspaceFolder]:
    """Resolve every ``folders`` entry of the workspace at *path*."""
    data = load_workspace(path)
    folders = data.get("folders") or []
    if not isinstance(folders, list):
        raise WorkspaceParseError(path, "'folders' is not a list")

    workspace = classify(path)
    resolved: list[WorkspaceFolder] = []
    for entry in folders:
        if not isinstance(entry, dict):
            continue
        target = _resolve_entry(workspace, path, entry)
        if target is not None:
            resolved.append(WorkspaceFolder(name=_basename(target), path=target))
    return resolved


def _resolve_entry(workspace: WorkspacePath, workspace_path: str, entry: dict) -> str | None:
    if isinstance(entry.get("path"), str):
        folder = entry["path"]
        if workspace.is_wsl:
            return to_filesystem_path(_wsl_string(resolve_in_distro(workspace, folder)))
        return _resolve_local(workspace_path, folder)

    uri = entry.get("uri")
    if isinstance(uri, str):
        if m := _REMOTE_WSL_RE.match(uri):
            inner = unquote(m.group("path") or "/")
            return to_filesystem_path(f"wsl://{m.group('distro')}{inner}")
        parsed = urlparse(uri)
        if parsed.scheme == "file":
            local = unquote(parsed.path)
            # file:///C:/src -> /C:/src
            if re.match(r"^/[A-Za-z]:", local):
                local = local[1:]
            return local
    return None


def _resolve_local(workspace_path: str, folder: str) -> str:
    folder = expand(folder)
    if _is_absolute(folder):
        return os.path.normpath(folder)
    base = os.path.dirname(expand(workspace_path))
    return os.path.normpath(os.path.join(base, folder))


def _is_absolute(path: str) -> bool:
    return os.path.isabs(path) or ntpath.isabs(path)


def _wsl_string(path: WorkspacePath) -> str:
    return f"wsl://{path.distro}{path.path}"


def _basename(path: str) -> str:
    return re.split(r"[\\/]", path.rstrip("\\/"))[-1]


def workspace_title_stem(path: str) -> str:
    """Base name without ``.code-workspace``, as shown in editor window titles."""
    classified = classify(path)
    name = _basename(classified.path if classified.kind is not PathKind.LOCAL else path)
    if name.lower().endswith(WORKSPACE_SUFFIX):
        name = name[: -len(WORKSPACE_SUFFIX)]
    return name

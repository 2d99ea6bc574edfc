"""Export/import of context definitions and meta-repo push/pull.

The meta-repo is any directory the user keeps under version control.  A
push writes::

    <dir>/<file>.json                      contexts (+ gitRemotes)
    <dir>/workspaces/<name>.code-workspace  copy of each workspace file

A pull reads the same layout back: contexts are merged into the local
config, workspace files are copied to where each context expects them, and
every referenced repository is restored.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from browser_contexts.errors import ContextValidationError
from browser_contexts.models.context import Config, Context
from browser_contexts.models.runtime import RepoResult
from browser_contexts.paths import to_filesystem_path, to_portable
from browser_contexts.store.config import read_json_file, write_json_file
from browser_contexts.sync.git import GitClient
from browser_contexts.sync.reconciler import export_with_remotes, restore

WORKSPACES_DIR = "workspaces"


@dataclass
class ImportReport:
    imported: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class PullReport:
    imported: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    copied: list[str] = field(default_factory=list)
    repos: dict[str, list[RepoResult]] = field(default_factory=dict)


def meta_workspace_file(file: str | Path, name: str) -> Path:
    return Path(file).parent / WORKSPACES_DIR / f"{name}.code-workspace"


# ---------------------------------------------------------------------------
# Plain export / import
# ---------------------------------------------------------------------------


def _portable_contexts(config: Config, home_dir: str | os.PathLike[str] | None, *, with_remotes: bool) -> dict:
    contexts: dict[str, dict] = {}
    for name, ctx in config.contexts.items():
        doc_ctx = ctx.model_copy(deep=True)
        if doc_ctx.workspace:
            doc_ctx.workspace = to_portable(doc_ctx.workspace, home_dir)
        if not with_remotes:
            doc_ctx.git_remotes = {}
        contexts[name] = doc_ctx.to_document()
    return contexts


def export_contexts(config: Config, file: str | Path, home_dir: str | os.PathLike[str] | None = None) -> int:
    """Write all contexts (portable paths, no remotes) to *file*.  Returns the count."""
    write_json_file(file, {"contexts": _portable_contexts(config, home_dir, with_remotes=False)})
    logger.info("Exported {} context(s) to {}", len(config.contexts), file)
    return len(config.contexts)


def read_contexts(file: str | Path) -> dict[str, Context]:
    """Read the ``contexts`` mapping of an exported file."""
    try:
        data = read_json_file(file)
    except (OSError, ValueError) as exc:
        msg = f"Cannot read {file}: {exc}"
        raise ContextValidationError(msg) from exc

    raw = data.get("contexts") or {}
    if not isinstance(raw, dict):
        msg = f"{file}: 'contexts' is not an object"
        raise ContextValidationError(msg)
    try:
        return {name: Context.model_validate(value) for name, value in raw.items()}
    except ValidationError as exc:
        msg = f"{file}: invalid context definition: {exc}"
        raise ContextValidationError(msg) from exc


def merge_contexts(config: Config, incoming: dict[str, Context], *, force: bool = False) -> ImportReport:
    """Merge *incoming* into *config*.

    Existing names are kept unless *force*; their ``gitRemotes`` are still
    refreshed from the incoming definition, since those describe the shared
    repositories rather than local preferences.
    """
    report = ImportReport()
    for name, ctx in incoming.items():
        existing = config.contexts.get(name)
        if existing is None or force:
            config.contexts[name] = ctx
            report.imported.append(name)
        else:
            if ctx.git_remotes:
                existing.git_remotes = dict(ctx.git_remotes)
            report.skipped.append(name)
    return report


def import_contexts(config: Config, file: str | Path, *, force: bool = False) -> ImportReport:
    return merge_contexts(config, read_contexts(file), force=force)


# ---------------------------------------------------------------------------
# Meta-repo push / pull
# ---------------------------------------------------------------------------


def push(
    config: Config,
    file: str | Path,
    git: GitClient,
    home_dir: str | os.PathLike[str] | None = None,
) -> list[str]:
    """Export contexts with remotes to *file* and copy workspace files beside it.

    Returns the names whose workspace file was copied.
    """
    exported = export_with_remotes(config, git, home_dir)
    write_json_file(file, {"contexts": {name: ctx.to_document() for name, ctx in exported.contexts.items()}})

    copied: list[str] = []
    for name, ctx in config.contexts.items():
        if not ctx.workspace:
            continue
        source = Path(to_filesystem_path(ctx.workspace))
        if not source.is_file():
            logger.warning("Workspace of {} not found at {}, not copied", name, source)
            continue
        target = meta_workspace_file(file, name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as exc:
            logger.warning("Cannot copy workspace of {} to {}: {}", name, target, exc)
            continue
        copied.append(name)
    logger.info("Pushed {} context(s), {} workspace file(s) to {}", len(exported.contexts), len(copied), file)
    return copied


def pull(
    config: Config,
    file: str | Path,
    git: GitClient,
    *,
    auto: bool = False,
    force: bool = False,
    confirm: Callable[[str], bool] | None = None,
) -> PullReport:
    """Import contexts from *file*, place workspace files, restore repositories."""
    incoming = read_contexts(file)
    merged = merge_contexts(config, incoming, force=force)
    report = PullReport(imported=merged.imported, skipped=merged.skipped)

    for name in incoming:
        ctx = config.contexts[name]
        if not ctx.workspace:
            continue
        source = meta_workspace_file(file, name)
        if not source.is_file():
            continue
        target = Path(to_filesystem_path(ctx.workspace))
        if target.exists() and not force:
            continue
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as exc:
            logger.warning("Cannot place workspace of {} at {}: {}", name, target, exc)
            continue
        report.copied.append(name)

    for name in incoming:
        ctx = config.contexts[name]
        if ctx.git_remotes:
            report.repos[name] = restore(name, ctx, git, auto_clone=auto, confirm=confirm)
    return report

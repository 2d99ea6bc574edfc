"""Cross-machine reconciliation of workspace repositories.

Export walks every context's workspace, records the first remote of each
git folder under the folder's base name, and stores the mapping on that
context.  Remote sets are per context: two contexts may both have an
``api`` folder pointing at different remotes.

Restore is the reverse on the target machine.  It is best-effort: every
repository gets its own ``RepoResult`` and a failure never stops the
remaining repositories.  Local history is never overwritten -- updates are
``pull --ff-only`` and only when ``auto_clone`` is set.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from browser_contexts.errors import GitCommandError, WorkspaceParseError
from browser_contexts.models.context import Config, Context
from browser_contexts.models.enums import RepoStatus
from browser_contexts.models.runtime import RepoResult
from browser_contexts.paths import to_portable
from browser_contexts.sync.git import GitClient
from browser_contexts.workspace import workspace_folders

ORIGIN = "origin"


def _is_git_repo(path: str | Path) -> bool:
    return (Path(path) / ".git").exists()


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def collect_remotes(workspace: str, git: GitClient) -> dict[str, str]:
    """Map folder base name -> first remote URL for every git folder of *workspace*."""
    remotes: dict[str, str] = {}
    for folder in workspace_folders(workspace):
        if not _is_git_repo(folder.path):
            continue
        try:
            url = git.first_remote_url(folder.path)
        except (GitCommandError, OSError) as exc:
            logger.warning("Cannot read remotes of {}: {}", folder.path, exc)
            continue
        if url:
            remotes[folder.name] = url
        else:
            logger.info("Repository {} has no remote, skipping", folder.path)
    return remotes


def export_with_remotes(
    config: Config,
    git: GitClient,
    home_dir: str | os.PathLike[str] | None = None,
) -> Config:
    """Deep copy of *config* with remotes captured and paths made portable."""
    exported = config.model_copy(deep=True)
    for name, ctx in exported.contexts.items():
        if not ctx.workspace:
            continue
        try:
            ctx.git_remotes = collect_remotes(ctx.workspace, git)
        except WorkspaceParseError as exc:
            logger.warning("Context {}: {}", name, exc)
        ctx.workspace = to_portable(ctx.workspace, home_dir)
    exported.data_dir = to_portable(exported.data_dir, home_dir)
    return exported


# ---------------------------------------------------------------------------
# Restore
# ---------------------------------------------------------------------------


def restore(
    name: str,
    ctx: Context,
    git: GitClient,
    *,
    auto_clone: bool = False,
    confirm: Callable[[str], bool] | None = None,
) -> list[RepoResult]:
    """Bring every repository in ``ctx.git_remotes`` into place on this machine.

    Missing folders are cloned (unconditionally with *auto_clone*, else when
    *confirm* agrees).  Existing repositories get their ``origin`` reconciled
    and, with *auto_clone*, are fetched and fast-forwarded.
    """
    if not ctx.git_remotes:
        return []
    if not ctx.workspace:
        logger.warning("Context {} has git remotes but no workspace", name)
        return [
            RepoResult(repo, None, RepoStatus.FOLDER_UNKNOWN, "context has no workspace")
            for repo in ctx.git_remotes
        ]

    try:
        folders = {f.name: f.path for f in workspace_folders(ctx.workspace)}
    except WorkspaceParseError as exc:
        logger.warning("Context {}: {}", name, exc)
        return [RepoResult(repo, None, RepoStatus.FOLDER_UNKNOWN, str(exc)) for repo in ctx.git_remotes]

    results: list[RepoResult] = []
    for repo, url in ctx.git_remotes.items():
        path = folders.get(repo)
        if path is None:
            results.append(RepoResult(repo, None, RepoStatus.FOLDER_UNKNOWN, "not listed in workspace folders"))
            continue
        results.append(_restore_repo(repo, url, path, git, auto_clone=auto_clone, confirm=confirm))
    return results


def _restore_repo(
    repo: str,
    url: str,
    path: str,
    git: GitClient,
    *,
    auto_clone: bool,
    confirm: Callable[[str], bool] | None,
) -> RepoResult:
    target = Path(path)

    if not target.exists():
        if not auto_clone and not (confirm is not None and confirm(f"Clone {url} into {path}?")):
            return RepoResult(repo, path, RepoStatus.DECLINED)
        try:
            git.clone(url, target)
        except (GitCommandError, OSError) as exc:
            logger.warning("Clone of {} failed: {}", url, exc)
            return RepoResult(repo, path, RepoStatus.CLONE_FAILED, str(exc))
        return RepoResult(repo, path, RepoStatus.CLONED)

    if not _is_git_repo(target):
        logger.warning("{} exists but is not a git repository, leaving it alone", path)
        return RepoResult(repo, path, RepoStatus.NOT_A_REPO)

    try:
        current = git.remote_url(target, ORIGIN)
        if current is None:
            git.add_remote(target, ORIGIN, url)
            result = RepoResult(repo, path, RepoStatus.REMOTE_ADDED)
        elif current != url:
            git.set_remote_url(target, ORIGIN, url)
            result = RepoResult(repo, path, RepoStatus.REMOTE_UPDATED, f"was {current}")
        else:
            result = RepoResult(repo, path, RepoStatus.REMOTE_OK)
    except (GitCommandError, OSError) as exc:
        logger.warning("Remote setup of {} failed: {}", path, exc)
        return RepoResult(repo, path, RepoStatus.REMOTE_FAILED, str(exc))

    if auto_clone:
        try:
            git.fetch(target, ORIGIN)
            git.pull_ff_only(target)
            result.pulled = True
        except (GitCommandError, OSError) as exc:
            logger.warning("Update of {} failed: {}", path, exc)
            result.status = RepoStatus.PULL_FAILED
            result.message = str(exc)
    return result

from __future__ import annotations

import json
import os
import shutil
from pathlib import Path
from typing import Any

import click

from browser_contexts.deps import AppContext, pass_app
from browser_contexts.errors import BrowserContextsError, ContextValidationError
from browser_contexts.log import setup_logging
from browser_contexts.managers import contexts as ops
from browser_contexts.models.enums import BrowserKind, RepoStatus
from browser_contexts.models.runtime import RepoResult
from browser_contexts.paths import expand, is_wsl, profile_dir, workspace_exists
from browser_contexts.settings import get_settings
from browser_contexts.sync import transfer

_STATUS_LABELS = {
    RepoStatus.CLONED: "cloned",
    RepoStatus.CLONE_FAILED: "clone FAILED",
    RepoStatus.DECLINED: "skipped (not cloned)",
    RepoStatus.NOT_A_REPO: "skipped (folder is not a git repo)",
    RepoStatus.REMOTE_OK: "remote OK",
    RepoStatus.REMOTE_ADDED: "remote added",
    RepoStatus.REMOTE_UPDATED: "remote updated",
    RepoStatus.REMOTE_FAILED: "remote FAILED",
    RepoStatus.PULL_FAILED: "pull FAILED",
    RepoStatus.FOLDER_UNKNOWN: "folder unknown",
}


class ContextGroup(click.Group):
    """Command group that treats an unknown command word as a context name.

    ``browser-contexts acme gh`` is the same as ``browser-contexts open acme gh``.
    Domain and filesystem errors are reported on stderr and do not change the
    exit code.
    """

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            return "open", self.get_command(ctx, "open"), args
        return super().resolve_command(ctx, args)

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except (BrowserContextsError, OSError) as exc:
            click.secho(f"Error: {exc}", err=True, fg="red")
            return None


@click.group(cls=ContextGroup)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: from BROWSER_CONTEXTS_CONFIG_PATH or ~/.browser-contexts.json).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """browser-contexts - isolated browser profiles with URLs, bookmarks and editor workspaces."""
    if ctx.obj is None:
        settings = get_settings()
        if config_path is not None:
            settings = settings.model_copy(update={"config_path": config_path})
        ctx.obj = AppContext(settings)
    setup_logging("DEBUG" if verbose else ctx.obj.settings.log_level, ctx.obj.settings.log_file)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _checked_workspace(app: AppContext, workspace: str) -> str | None:
    """Validate and normalise a workspace argument.  ``None`` if the user declined."""
    ops.validate_workspace_path(workspace)
    if is_wsl(workspace):
        if app.settings.validate_wsl_paths and not workspace_exists(workspace):
            if not click.confirm(f"Workspace {workspace} is not reachable. Use it anyway?", default=False):
                return None
        return workspace

    workspace = os.path.abspath(expand(workspace))
    if not workspace_exists(workspace) and not click.confirm(
        f"Workspace {workspace} does not exist. Use it anyway?", default=False
    ):
        return None
    return workspace


def _echo_repo_results(results: list[RepoResult]) -> None:
    for r in results:
        line = f"  {r.repo:<24} {_STATUS_LABELS[r.status]}"
        if r.pulled:
            line += ", pulled"
        if r.message:
            line += f" ({r.message})"
        click.secho(line, fg="red" if r.status.is_failure else None)


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


@main.command("list")
@pass_app
def list_(app: AppContext) -> None:
    """List all contexts (* = running)."""
    config = app.store.load()
    if not config.contexts:
        click.echo("No contexts configured. Add one with: browser-contexts add <name> -b chrome")
        return
    running = {r.name for r in app.prober.running_contexts(config)}
    for name, ctx in config.contexts.items():
        marker = "*" if name in running else " "
        browser = str(ctx.browser) if ctx.browser else "-"
        detail = f"{len(ctx.urls)} url(s), {len(ctx.bookmarks)} bookmark(s)"
        workspace = f"  [{ctx.workspace}]" if ctx.workspace else ""
        click.echo(f"{marker} {name:<20} {browser:<9} {detail}{workspace}")


@main.command()
@click.argument("name")
@pass_app
def show(app: AppContext, name: str) -> None:
    """Show one context."""
    config = app.store.load()
    ctx = ops.get_context(config, name)
    click.secho(name, bold=True)
    click.echo(f"  browser:   {ctx.browser or '-'}")
    if ctx.browser:
        profile = profile_dir(config.data_dir, name)
        state = "running" if app.prober.is_running(ctx.browser, profile) else "stopped"
        click.echo(f"  profile:   {profile} ({state})")
    click.echo(f"  workspace: {ctx.workspace or '-'}")
    if ctx.urls:
        click.echo("  urls:")
        for url in ctx.urls:
            click.echo(f"    {url}")
    if ctx.bookmarks:
        click.echo("  bookmarks:")
        for bm, url in ctx.bookmarks.items():
            click.echo(f"    {bm:<16} {url}")
    if ctx.git_remotes:
        click.echo("  git remotes:")
        for repo, url in ctx.git_remotes.items():
            click.echo(f"    {repo:<16} {url}")


@main.command()
@pass_app
def ps(app: AppContext) -> None:
    """Show running contexts."""
    config = app.store.load()
    running = app.prober.running_contexts(config)
    if not running:
        click.echo("No contexts running.")
        return
    click.echo(f"{'NAME':<20} {'KIND':<8} {'PID':>7}  {'STARTED':<19}  DETAIL")
    for r in running:
        started = r.started_at.strftime("%Y-%m-%d %H:%M:%S") if r.started_at else "-"
        click.echo(f"{r.name:<20} {r.kind:<8} {r.pid or '-':>7}  {started:<19}  {r.detail or ''}")


# ---------------------------------------------------------------------------
# Open / close
# ---------------------------------------------------------------------------


@main.command("open")
@click.argument("name")
@click.argument("urls", nargs=-1)
@pass_app
def open_(app: AppContext, name: str, urls: tuple[str, ...]) -> None:
    """Open a context, optionally with extra bookmarks or URLs."""
    config = app.store.load()
    result = app.launcher.open(config, name, list(urls))
    if result.already_running:
        click.echo(f"{name} is already running.")
    elif result.browser_started:
        click.echo(f"Opened {name} with {len(result.urls)} URL(s).")
    if result.editor_started:
        click.echo(f"Opened workspace of {name}.")


@main.command()
@click.argument("name")
@pass_app
def close(app: AppContext, name: str) -> None:
    """Close a context's editor window and browser."""
    config = app.store.load()
    result = app.launcher.close(config, name)
    if not result.had_effect:
        click.echo(f"{name} is not running.")
        return
    parts = []
    if result.editor_closed:
        parts.append("editor window")
    if result.browser_processes:
        parts.append(f"{result.browser_processes} browser process(es)")
    click.echo(f"Closed {name}: {', '.join(parts)}.")


# ---------------------------------------------------------------------------
# Context maintenance
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name")
@click.option("-b", "--browser", type=click.Choice([b.value for b in BrowserKind]), default=None)
@click.option("-u", "--url", "urls", multiple=True, help="URL opened on launch (repeatable).")
@click.option("-w", "--workspace", default=None, help=".code-workspace file (local, wsl://, or \\\\wsl$\\ path).")
@pass_app
def add(app: AppContext, name: str, browser: str | None, urls: tuple[str, ...], workspace: str | None) -> None:
    """Add a context."""
    config = app.store.load()
    if workspace:
        workspace = _checked_workspace(app, workspace)
        if workspace is None:
            click.echo("Aborted.")
            return
    ops.add_context(config, name, browser=browser, urls=list(urls), workspace=workspace)
    app.store.save(config)
    click.echo(f"Added context {name}.")


@main.command()
@click.argument("name")
@click.option("--delete-data", is_flag=True, default=False, help="Also delete the browser profile directory.")
@pass_app
def remove(app: AppContext, name: str, delete_data: bool) -> None:
    """Remove a context."""
    config = app.store.load()
    ctx = ops.get_context(config, name)
    profile = profile_dir(config.data_dir, name)
    if delete_data and ctx.browser and app.prober.is_running(ctx.browser, profile):
        msg = f"Context '{name}' is running; close it before deleting its data"
        raise ContextValidationError(msg)

    ops.remove_context(config, name)
    app.store.save(config)
    click.echo(f"Removed context {name}.")
    if delete_data and profile.exists():
        shutil.rmtree(profile)
        click.echo(f"Deleted {profile}.")


@main.command()
@click.argument("old")
@click.argument("new")
@click.option("--force", is_flag=True, default=False, help="Rename even while the browser is running.")
@pass_app
def rename(app: AppContext, old: str, new: str, force: bool) -> None:
    """Rename a context and its profile directory."""
    config = app.store.load()
    # Name checks first; nothing on disk is touched until they pass.
    ctx = ops.rename_context(config, old, new)
    old_profile = profile_dir(config.data_dir, old)
    new_profile = profile_dir(config.data_dir, new)
    if ctx.browser and not force and app.prober.is_running(ctx.browser, old_profile):
        msg = f"Context '{old}' is running; close it first or use --force"
        raise ContextValidationError(msg)
    if old_profile != new_profile and old_profile.exists() and new_profile.exists():
        msg = f"Profile directory {new_profile} already exists"
        raise ContextValidationError(msg)

    if old_profile != new_profile and old_profile.exists():
        shutil.move(str(old_profile), str(new_profile))
    app.store.save(config)
    click.echo(f"Renamed {old} -> {new}.")


@main.command()
@click.argument("name")
@pass_app
def urls(app: AppContext, name: str) -> None:
    """List the URLs opened on launch."""
    ctx = ops.get_context(app.store.load(), name)
    for url in ctx.urls:
        click.echo(url)


@main.command("add-url")
@click.argument("name")
@click.argument("urls", nargs=-1, required=True)
@pass_app
def add_url(app: AppContext, name: str, urls: tuple[str, ...]) -> None:
    """Append URLs opened on launch."""
    config = app.store.load()
    added = ops.add_urls(config, name, list(urls))
    app.store.save(config)
    click.echo(f"Added {len(added)} URL(s) to {name}.")


@main.command("remove-url")
@click.argument("name")
@click.argument("urls", nargs=-1, required=True)
@pass_app
def remove_url(app: AppContext, name: str, urls: tuple[str, ...]) -> None:
    """Remove URLs opened on launch."""
    config = app.store.load()
    removed = ops.remove_urls(config, name, list(urls))
    app.store.save(config)
    click.echo(f"Removed {len(removed)} URL(s) from {name}.")


@main.command("bm")
@click.argument("name")
@click.argument("action", required=False, type=click.Choice(["add", "remove"]))
@click.argument("args", nargs=-1)
@pass_app
def bookmarks(app: AppContext, name: str, action: str | None, args: tuple[str, ...]) -> None:
    """List bookmarks, or: bm NAME add BOOKMARK URL | bm NAME remove BOOKMARK."""
    config = app.store.load()
    if action is None:
        for bm, url in ops.get_context(config, name).bookmarks.items():
            click.echo(f"{bm:<16} {url}")
        return

    if action == "add":
        if len(args) != 2:
            raise click.UsageError("bm NAME add BOOKMARK URL")
        ops.set_bookmark(config, name, args[0], args[1])
        click.echo(f"Bookmark {args[0]} -> {args[1]}.")
    else:
        if len(args) != 1:
            raise click.UsageError("bm NAME remove BOOKMARK")
        ops.remove_bookmark(config, name, args[0])
        click.echo(f"Removed bookmark {args[0]}.")
    app.store.save(config)


@main.command()
@click.argument("name")
@click.argument("path", required=False)
@pass_app
def workspace(app: AppContext, name: str, path: str | None) -> None:
    """Show or set the context's workspace file."""
    config = app.store.load()
    if path is None:
        click.echo(ops.get_context(config, name).workspace or "-")
        return
    ops.get_context(config, name)
    checked = _checked_workspace(app, path)
    if checked is None:
        click.echo("Aborted.")
        return
    ops.set_workspace(config, name, checked)
    app.store.save(config)
    click.echo(f"Workspace of {name} set to {checked}.")


@main.command("remove-workspace")
@click.argument("name")
@pass_app
def remove_workspace(app: AppContext, name: str) -> None:
    """Detach the workspace from a context."""
    config = app.store.load()
    ops.remove_workspace(config, name)
    app.store.save(config)
    click.echo(f"Removed workspace from {name}.")


# ---------------------------------------------------------------------------
# Export / sync
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@pass_app
def export_(app: AppContext, file: Path) -> None:
    """Export all contexts to FILE."""
    count = transfer.export_contexts(app.store.load(), file)
    click.echo(f"Exported {count} context(s) to {file}.")


@main.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--force", is_flag=True, default=False, help="Overwrite existing contexts.")
@pass_app
def import_(app: AppContext, file: Path, force: bool) -> None:
    """Import contexts from FILE."""
    config = app.store.load()
    report = transfer.import_contexts(config, file, force=force)
    app.store.save(config)
    click.echo(f"Imported {len(report.imported)} context(s).")
    if report.skipped:
        click.echo(f"Skipped existing: {', '.join(report.skipped)} (use --force to overwrite).")


@main.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@pass_app
def push(app: AppContext, file: Path) -> None:
    """Export contexts with git remotes and workspace files to a meta-repo."""
    config = app.store.load()
    copied = transfer.push(config, file, app.git)
    click.echo(f"Pushed {len(config.contexts)} context(s) and {len(copied)} workspace file(s) to {file}.")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--auto", is_flag=True, default=False, help="Clone and fast-forward without asking.")
@click.option("--force", is_flag=True, default=False, help="Overwrite existing contexts and workspace files.")
@pass_app
def pull(app: AppContext, file: Path, auto: bool, force: bool) -> None:
    """Import contexts from a meta-repo and restore their repositories."""
    config = app.store.load()
    report = transfer.pull(
        config,
        file,
        app.git,
        auto=auto,
        force=force,
        confirm=lambda message: click.confirm(message, default=True),
    )
    app.store.save(config)

    click.echo(f"Imported {len(report.imported)} context(s), placed {len(report.copied)} workspace file(s).")
    if report.skipped:
        click.echo(f"Kept existing: {', '.join(report.skipped)}")
    failures = 0
    for name, results in report.repos.items():
        click.secho(name, bold=True)
        _echo_repo_results(results)
        failures += sum(1 for r in results if r.status.is_failure)
    if report.repos:
        total = sum(len(r) for r in report.repos.values())
        click.echo(f"Done: {total} repo(s), {failures} failure(s).")


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------


@main.command("config")
@click.option("--edit", is_flag=True, default=False, help="Open the config file in $EDITOR.")
@pass_app
def config_(app: AppContext, edit: bool) -> None:
    """Show the config file location and contents."""
    config = app.store.load()
    if edit:
        click.edit(filename=str(app.store.path))
        return
    click.echo(f"# {app.store.path}")
    click.echo(json.dumps(config.to_document(), indent=2, ensure_ascii=False))


@main.command("help")
@click.pass_context
def help_(ctx: click.Context) -> None:
    """Show this message."""
    click.echo(ctx.parent.get_help())


if __name__ == "__main__":
    main()

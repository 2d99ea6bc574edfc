"""Context CRUD operations.

Pure functions over an in-memory ``Config``: add, get, remove, rename, URL
and bookmark maintenance, workspace assignment.  Persisting the result is
the caller's job (read -> mutate -> ``ConfigStore.save``).
"""

from __future__ import annotations

from browser_contexts.errors import (
    BookmarkNotFoundError,
    ContextNotFoundError,
    ContextValidationError,
    DuplicateContextError,
)
from browser_contexts.models.context import Config, Context
from browser_contexts.models.enums import BrowserKind
from browser_contexts.paths import is_workspace_file


def get_context(config: Config, name: str) -> Context:
    """Get a context by name.  Raises ``ContextNotFoundError`` if missing."""
    ctx = config.contexts.get(name)
    if ctx is None:
        raise ContextNotFoundError(name)
    return ctx


def validate_workspace_path(workspace: str) -> None:
    """Reject workspace paths that cannot name a ``.code-workspace`` file."""
    if not workspace.strip():
        msg = "Workspace path is empty"
        raise ContextValidationError(msg)
    if not is_workspace_file(workspace):
        msg = f"Workspace must be a .code-workspace file: {workspace}"
        raise ContextValidationError(msg)


def add_context(
    config: Config,
    name: str,
    *,
    browser: BrowserKind | str | None = None,
    urls: list[str] | None = None,
    workspace: str | None = None,
) -> Context:
    """Create a new context.

    Raises ``DuplicateContextError`` if the name exists and
    ``ContextValidationError`` if neither browser nor workspace is given.
    """
    if not name or not name.strip():
        msg = "Context name is empty"
        raise ContextValidationError(msg)
    if name in config.contexts:
        raise DuplicateContextError(name)
    if browser is None and not workspace:
        msg = f"Context '{name}' needs a browser or a workspace"
        raise ContextValidationError(msg)
    if urls and browser is None:
        msg = f"Context '{name}' has URLs but no browser"
        raise ContextValidationError(msg)
    if workspace:
        validate_workspace_path(workspace)
    if browser is not None:
        try:
            browser = BrowserKind(browser)
        except ValueError:
            msg = f"Unknown browser '{browser}' (expected one of: {', '.join(BrowserKind)})"
            raise ContextValidationError(msg) from None

    ctx = Context(
        browser=browser,
        urls=list(urls or []),
        workspace=workspace,
    )
    config.contexts[name] = ctx
    return ctx


def remove_context(config: Config, name: str) -> Context:
    """Remove a context.  Raises ``ContextNotFoundError`` if missing."""
    get_context(config, name)
    return config.contexts.pop(name)


def rename_context(config: Config, old: str, new: str) -> Context:
    """Rename a context, keeping its position in the document."""
    get_context(config, old)
    if old == new:
        return config.contexts[old]
    if new in config.contexts:
        raise DuplicateContextError(new)
    if not new.strip():
        msg = "Context name is empty"
        raise ContextValidationError(msg)

    config.contexts = {(new if key == old else key): value for key, value in config.contexts.items()}
    return config.contexts[new]


# -- URLs ---------------------------------------------------------------------


def add_urls(config: Config, name: str, urls: list[str]) -> list[str]:
    """Append URLs not already present.  Returns the ones actually added."""
    ctx = get_context(config, name)
    if ctx.browser is None:
        msg = f"Context '{name}' has no browser"
        raise ContextValidationError(msg)
    added = [url for url in dict.fromkeys(urls) if url not in ctx.urls]
    ctx.urls.extend(added)
    return added


def remove_urls(config: Config, name: str, urls: list[str]) -> list[str]:
    """Remove URLs.  Returns the ones actually removed."""
    ctx = get_context(config, name)
    removed = [url for url in ctx.urls if url in urls]
    ctx.urls = [url for url in ctx.urls if url not in urls]
    return removed


# -- Bookmarks ----------------------------------------------------------------


def set_bookmark(config: Config, name: str, bookmark: str, url: str) -> None:
    ctx = get_context(config, name)
    if ctx.browser is None:
        msg = f"Context '{name}' has no browser"
        raise ContextValidationError(msg)
    ctx.bookmarks[bookmark] = url


def remove_bookmark(config: Config, name: str, bookmark: str) -> None:
    ctx = get_context(config, name)
    if bookmark not in ctx.bookmarks:
        raise BookmarkNotFoundError(name, bookmark)
    del ctx.bookmarks[bookmark]


def resolve_urls(ctx: Context, entries: list[str]) -> list[str]:
    """Map bookmark names to their URLs; anything else passes through as a URL."""
    return [ctx.bookmarks.get(entry, entry) for entry in entries]


# -- Workspace ----------------------------------------------------------------


def set_workspace(config: Config, name: str, workspace: str) -> None:
    ctx = get_context(config, name)
    validate_workspace_path(workspace)
    ctx.workspace = workspace


def remove_workspace(config: Config, name: str) -> None:
    ctx = get_context(config, name)
    if ctx.workspace is None:
        return
    if ctx.browser is None:
        msg = f"Context '{name}' has no browser; removing its workspace would leave it empty"
        raise ContextValidationError(msg)
    ctx.workspace = None

"""Unit tests for context CRUD operations."""

from __future__ import annotations

import pytest

from browser_contexts.errors import (
    BookmarkNotFoundError,
    ContextNotFoundError,
    ContextValidationError,
    DuplicateContextError,
)
from browser_contexts.managers import contexts as ops
from browser_contexts.models.context import Config, Context
from browser_contexts.models.enums import BrowserKind
from browser_contexts.store.config import ConfigStore


@pytest.fixture
def config() -> Config:
    return Config(
        data_dir="/data",
        contexts={
            "acme": Context(
                browser=BrowserKind.CHROME,
                urls=["https://a.example"],
                bookmarks={"jira": "https://jira.example"},
            ),
            "notes": Context(workspace="/home/u/notes.code-workspace"),
        },
    )


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


def test_add_browser_context(config: Config) -> None:
    ctx = ops.add_context(config, "new", browser="firefox", urls=["https://x.example"])

    assert config.contexts["new"] is ctx
    assert ctx.browser == BrowserKind.FIREFOX
    assert ctx.urls == ["https://x.example"]


def test_add_workspace_only_context(config: Config) -> None:
    ctx = ops.add_context(config, "ws", workspace="wsl://Ubuntu/home/u/a.code-workspace")
    assert ctx.browser is None
    assert ctx.is_workspace_only


def test_add_without_browser_or_workspace_is_rejected(config: Config, store: ConfigStore) -> None:
    store.save(config)

    with pytest.raises(ContextValidationError):
        ops.add_context(config, "x")

    assert "x" not in config.contexts
    assert "x" not in store.load().contexts


def test_add_duplicate(config: Config) -> None:
    with pytest.raises(DuplicateContextError):
        ops.add_context(config, "acme", browser="edge")


def test_add_unknown_browser(config: Config) -> None:
    with pytest.raises(ContextValidationError, match="Unknown browser"):
        ops.add_context(config, "x", browser="netscape")


def test_add_urls_without_browser(config: Config) -> None:
    with pytest.raises(ContextValidationError):
        ops.add_context(config, "x", urls=["https://a"], workspace="/a.code-workspace")


def test_add_rejects_non_workspace_file(config: Config) -> None:
    with pytest.raises(ContextValidationError, match=".code-workspace"):
        ops.add_context(config, "x", workspace="/home/u/project")


# ---------------------------------------------------------------------------
# get / remove / rename
# ---------------------------------------------------------------------------


def test_get_missing(config: Config) -> None:
    with pytest.raises(ContextNotFoundError, match="nope"):
        ops.get_context(config, "nope")


def test_remove(config: Config) -> None:
    removed = ops.remove_context(config, "acme")
    assert removed.browser == BrowserKind.CHROME
    assert "acme" not in config.contexts

    with pytest.raises(ContextNotFoundError):
        ops.remove_context(config, "acme")


def test_rename_keeps_order(config: Config) -> None:
    ops.rename_context(config, "acme", "acme2")
    assert list(config.contexts) == ["acme2", "notes"]
    assert config.contexts["acme2"].urls == ["https://a.example"]


def test_rename_onto_existing(config: Config) -> None:
    with pytest.raises(DuplicateContextError):
        ops.rename_context(config, "acme", "notes")


def test_rename_missing(config: Config) -> None:
    with pytest.raises(ContextNotFoundError):
        ops.rename_context(config, "ghost", "x")


# ---------------------------------------------------------------------------
# URLs and bookmarks
# ---------------------------------------------------------------------------


def test_add_urls_skips_duplicates(config: Config) -> None:
    added = ops.add_urls(config, "acme", ["https://a.example", "https://b.example", "https://b.example"])
    assert added == ["https://b.example"]
    assert config.contexts["acme"].urls == ["https://a.example", "https://b.example"]


def test_add_urls_needs_browser(config: Config) -> None:
    with pytest.raises(ContextValidationError):
        ops.add_urls(config, "notes", ["https://a"])


def test_remove_urls(config: Config) -> None:
    removed = ops.remove_urls(config, "acme", ["https://a.example", "https://missing"])
    assert removed == ["https://a.example"]
    assert config.contexts["acme"].urls == []


def test_bookmarks(config: Config) -> None:
    ops.set_bookmark(config, "acme", "wiki", "https://wiki.example")
    assert config.contexts["acme"].bookmarks["wiki"] == "https://wiki.example"

    ops.remove_bookmark(config, "acme", "jira")
    assert "jira" not in config.contexts["acme"].bookmarks

    with pytest.raises(BookmarkNotFoundError):
        ops.remove_bookmark(config, "acme", "jira")


def test_resolve_urls_maps_bookmarks_and_passes_literals(config: Config) -> None:
    ctx = config.contexts["acme"]
    assert ops.resolve_urls(ctx, ["jira", "https://other.example"]) == [
        "https://jira.example",
        "https://other.example",
    ]


# ---------------------------------------------------------------------------
# workspace
# ---------------------------------------------------------------------------


def test_set_and_remove_workspace(config: Config) -> None:
    ops.set_workspace(config, "acme", "/home/u/acme.code-workspace")
    assert config.contexts["acme"].workspace == "/home/u/acme.code-workspace"

    ops.remove_workspace(config, "acme")
    assert config.contexts["acme"].workspace is None


def test_remove_workspace_of_workspace_only_context(config: Config) -> None:
    with pytest.raises(ContextValidationError):
        ops.remove_workspace(config, "notes")
    assert config.contexts["notes"].workspace is not None

"""Unit tests for .code-workspace parsing and folder resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from browser_contexts.errors import WorkspaceParseError
from browser_contexts.workspace import (
    load_workspace,
    parse_jsonc,
    strip_jsonc,
    workspace_folders,
    workspace_title_stem,
)

WORKSPACE_JSONC = """
// Acme services
{
    "folders": [
        { "path": "../api" },   // backend
        /* the frontend */
        { "path": "web", "name": "Web UI", },
    ],
    "settings": {
        "url": "https://example.com/a//b",
        "glob": "**/*.js, /* not a comment */",
    },
}
"""


def test_strip_jsonc_keeps_string_contents() -> None:
    data = parse_jsonc(WORKSPACE_JSONC)
    assert data["settings"]["url"] == "https://example.com/a//b"
    assert data["settings"]["glob"] == "**/*.js, /* not a comment */"
    assert len(data["folders"]) == 2


def test_strip_jsonc_trailing_commas() -> None:
    assert parse_jsonc('{"a": [1, 2,], "b": {"c": 1,},}') == {"a": [1, 2], "b": {"c": 1}}


def test_strip_jsonc_escaped_quotes() -> None:
    text = '{"a": "say \\"hi\\" // there", "b": 1 // gone\n}'
    assert parse_jsonc(text) == {"a": 'say "hi" // there', "b": 1}


def test_strip_jsonc_comma_inside_string_before_bracket() -> None:
    assert parse_jsonc('{"a": ",]"}') == {"a": ",]"}
    assert strip_jsonc('[1, /* x */ ]') == "[1  ]"


def test_workspace_folders_resolves_relative_paths(tmp_path: Path) -> None:
    ws_dir = tmp_path / "ws"
    ws_dir.mkdir()
    ws_file = ws_dir / "acme.code-workspace"
    ws_file.write_text(WORKSPACE_JSONC, encoding="utf-8")

    folders = workspace_folders(str(ws_file))

    assert [f.name for f in folders] == ["api", "web"]
    assert folders[0].path == str(tmp_path / "api")
    assert folders[1].path == str(ws_dir / "web")


def test_workspace_folders_absolute_and_uri(tmp_path: Path) -> None:
    ws_file = tmp_path / "x.code-workspace"
    ws_file.write_text(
        '{"folders": [{"path": "%s"}, {"uri": "file://%s"}, {"uri": "vscode-remote://wsl+Ubuntu/home/u/tools"}]}'
        % ((tmp_path / "abs").as_posix(), (tmp_path / "viauri").as_posix()),
        encoding="utf-8",
    )

    folders = workspace_folders(str(ws_file))

    assert folders[0].path == str(tmp_path / "abs")
    assert folders[1].path == (tmp_path / "viauri").as_posix()
    assert folders[2].name == "tools"


def test_workspace_folders_empty(tmp_path: Path) -> None:
    ws_file = tmp_path / "x.code-workspace"
    ws_file.write_text("{}", encoding="utf-8")
    assert workspace_folders(str(ws_file)) == []


def test_load_workspace_missing_file(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceParseError):
        load_workspace(str(tmp_path / "missing.code-workspace"))


def test_load_workspace_invalid(tmp_path: Path) -> None:
    ws_file = tmp_path / "x.code-workspace"
    ws_file.write_text('{"folders": [', encoding="utf-8")
    with pytest.raises(WorkspaceParseError):
        load_workspace(str(ws_file))


def test_folders_must_be_a_list(tmp_path: Path) -> None:
    ws_file = tmp_path / "x.code-workspace"
    ws_file.write_text('{"folders": {"path": "."}}', encoding="utf-8")
    with pytest.raises(WorkspaceParseError, match="folders"):
        workspace_folders(str(ws_file))


@pytest.mark.parametrize(
    ("path", "stem"),
    [
        ("/home/u/acme.code-workspace", "acme"),
        ("C:\\Projects\\Acme Services.code-workspace", "Acme Services"),
        ("wsl://Ubuntu/home/u/tools.code-workspace", "tools"),
        ("\\\\wsl$\\Ubuntu\\home\\u\\x.CODE-WORKSPACE", "x"),
    ],
)
def test_workspace_title_stem(path: str, stem: str) -> None:
    assert workspace_title_stem(path) == stem

"""Context and config document models.

The config document is a single JSON file::

    {
      "dataDir": "~/.browser-contexts",
      "contexts": {
        "<name>": {"browser": "chrome", "urls": [...], "bookmarks": {...},
                   "workspace": "...", "gitRemotes": {...}}
      }
    }

Both models allow extra keys so that fields written by a newer version of
the tool survive a read-modify-write cycle.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from browser_contexts.models.enums import BrowserKind

DEFAULT_DATA_DIR = "~/.browser-contexts"

# Known fields omitted from the written document when empty or unset.
# Unknown keys are written back as they were read, nulls included.
_OMIT_WHEN_EMPTY = ("urls", "bookmarks", "gitRemotes")
_OMIT_WHEN_NONE = ("browser", "workspace")


class Context(BaseModel):
    """A named browser profile plus its URLs, bookmarks and workspace.

    The name is the key in ``Config.contexts`` and is not stored here.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    browser: BrowserKind | None = None
    urls: list[str] = Field(default_factory=list)
    bookmarks: dict[str, str] = Field(default_factory=dict)
    workspace: str | None = None
    git_remotes: dict[str, str] = Field(default_factory=dict, alias="gitRemotes")

    @property
    def is_workspace_only(self) -> bool:
        """No browser and nothing to open in one."""
        return self.browser is None and not self.urls

    def to_document(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        for key in _OMIT_WHEN_NONE:
            if data.get(key) is None:
                data.pop(key, None)
        for key in _OMIT_WHEN_EMPTY:
            if key in data and not data[key]:
                del data[key]
        return data


class Config(BaseModel):
    """Root config document."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    data_dir: str = Field(default=DEFAULT_DATA_DIR, alias="dataDir")
    contexts: dict[str, Context] = Field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True, exclude={"contexts"})
        data["contexts"] = {name: ctx.to_document() for name, ctx in self.contexts.items()}
        return data

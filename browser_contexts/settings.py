"""Tool configuration loaded from BROWSER_CONTEXTS_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserContextsSettings(BaseSettings):
    """browser-contexts settings.

    All fields are read from environment variables with the
    ``BROWSER_CONTEXTS_`` prefix.  For example,
    ``BROWSER_CONTEXTS_LOG_LEVEL=DEBUG`` maps to ``log_level``.

    These settings describe the machine the tool runs on (where the config
    file lives, which executables to call).  The context definitions
    themselves live in the JSON document at ``config_path``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_CONTEXTS_",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"
    log_file: Path | None = None
    """Also append DEBUG-level diagnostics to this file (rotated at 1 MB)."""

    # -- Storage ---------------------------------------------------------------
    config_path: Path = Field(default_factory=lambda: Path.home() / ".browser-contexts.json")
    """JSON document holding ``dataDir`` and the context definitions."""

    default_data_dir: str = "~/.browser-contexts"
    """``dataDir`` written into a freshly created config document."""

    # -- External tools --------------------------------------------------------
    editor_command: str = "code"
    editor_process_names: list[str] = Field(default_factory=lambda: ["Code.exe", "code"])
    """Process names whose windows are searched for open workspaces."""

    git_command: str = "git"

    browser_paths: dict[str, str] = Field(default_factory=dict)
    """Explicit executable per browser kind, e.g. ``{"chrome": "/opt/chrome/chrome"}``.

    Takes precedence over the well-known install locations.
    """

    # -- Behaviour -------------------------------------------------------------
    validate_wsl_paths: bool = False
    """Check WSL workspace paths against the filesystem at add/set time.

    Off by default: the distro may not be running.
    """

    close_timeout: float = 5.0
    """Seconds to wait for browser processes to exit before killing them."""


@lru_cache(maxsize=1)
def get_settings() -> BrowserContextsSettings:
    """Return a cached settings instance.

    Reads from environment variables on first call, then returns the same
    object.  Call ``get_settings.cache_clear()`` in tests to force a re-read
    after overriding env vars.
    """
    return BrowserContextsSettings()

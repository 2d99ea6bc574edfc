"""JSON config store.

Loads and persists the whole config document::

    ~/.browser-contexts.json

A missing file is not an error: defaults are created and written.  A file
that fails to parse is reported and defaults are substituted for this run,
but the broken file is left untouched until an explicit ``save``.

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path.  Output is UTF-8 without a byte-order mark;
input tolerates one (PowerShell writes it by default).
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from browser_contexts.models.context import DEFAULT_DATA_DIR, Config


class ConfigStore:
    """Read-merge-write access to the config document at *path*."""

    def __init__(self, path: str | Path, default_data_dir: str = DEFAULT_DATA_DIR) -> None:
        self.path = Path(path)
        self._default_data_dir = default_data_dir

    def defaults(self) -> Config:
        return Config(data_dir=self._default_data_dir)

    # -- Read ------------------------------------------------------------------

    def load(self) -> Config:
        """Load the document, filling missing keys from defaults."""
        try:
            raw = self.path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            logger.info("Config {} not found, creating defaults", self.path)
            config = self.defaults()
            self.save(config)
            return config
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot read config {}: {}. Using defaults.", self.path, exc)
            return self.defaults()

        try:
            data = json.loads(raw) if raw.strip() else {}
            if not isinstance(data, dict):
                msg = f"expected a JSON object, got {type(data).__name__}"
                raise TypeError(msg)
            data.setdefault("dataDir", self._default_data_dir)
            data.setdefault("contexts", {})
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValidationError, TypeError) as exc:
            logger.error("Failed to parse config {}: {}. Using defaults.", self.path, exc)
            return self.defaults()

    # -- Write -----------------------------------------------------------------

    def save(self, config: Config) -> None:
        data = json.dumps(config.to_document(), indent=2, ensure_ascii=False) + "\n"
        _atomic_write(self.path, data)
        logger.debug("Config written to {}", self.path)


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + replace.

    The temp file is created in the same directory so the replace never
    crosses a filesystem boundary.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on any failure.
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def read_json_file(path: str | Path) -> dict:
    """Read a JSON object from *path* (BOM tolerated)."""
    data = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    if not isinstance(data, dict):
        msg = f"{path}: expected a JSON object"
        raise ValueError(msg)
    return data


def write_json_file(path: str | Path, data: dict) -> None:
    _atomic_write(Path(path), json.dumps(data, indent=2, ensure_ascii=False) + "\n")

"""Browser executables and profile-isolation arguments."""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

from browser_contexts.errors import ExecutableNotFoundError
from browser_contexts.models.enums import BrowserKind

# Well-known install locations, checked before PATH lookup.
_WINDOWS_PATHS: dict[BrowserKind, list[str]] = {
    BrowserKind.CHROME: [
        r"%ProgramFiles%\Google\Chrome\Application\chrome.exe",
        r"%ProgramFiles(x86)%\Google\Chrome\Application\chrome.exe",
        r"%LocalAppData%\Google\Chrome\Application\chrome.exe",
    ],
    BrowserKind.EDGE: [
        r"%ProgramFiles(x86)%\Microsoft\Edge\Application\msedge.exe",
        r"%ProgramFiles%\Microsoft\Edge\Application\msedge.exe",
    ],
    BrowserKind.BRAVE: [
        r"%ProgramFiles%\BraveSoftware\Brave-Browser\Application\brave.exe",
        r"%LocalAppData%\BraveSoftware\Brave-Browser\Application\brave.exe",
    ],
    BrowserKind.FIREFOX: [
        r"%ProgramFiles%\Mozilla Firefox\firefox.exe",
        r"%ProgramFiles(x86)%\Mozilla Firefox\firefox.exe",
    ],
    BrowserKind.CHROMIUM: [
        r"%LocalAppData%\Chromium\Application\chrome.exe",
    ],
}

_MACOS_PATHS: dict[BrowserKind, list[str]] = {
    BrowserKind.CHROME: ["/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"],
    BrowserKind.EDGE: ["/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge"],
    BrowserKind.BRAVE: ["/Applications/Brave Browser.app/Contents/MacOS/Brave Browser"],
    BrowserKind.FIREFOX: ["/Applications/Firefox.app/Contents/MacOS/firefox"],
    BrowserKind.CHROMIUM: ["/Applications/Chromium.app/Contents/MacOS/Chromium"],
}

# Names tried on PATH.
_COMMAND_NAMES: dict[BrowserKind, list[str]] = {
    BrowserKind.CHROME: ["google-chrome", "google-chrome-stable", "chrome"],
    BrowserKind.EDGE: ["microsoft-edge", "microsoft-edge-stable", "msedge"],
    BrowserKind.BRAVE: ["brave-browser", "brave"],
    BrowserKind.FIREFOX: ["firefox", "firefox-esr"],
    BrowserKind.CHROMIUM: ["chromium", "chromium-browser"],
}


def find_browser(browser: BrowserKind, overrides: dict[str, str] | None = None) -> str:
    """Locate the executable for *browser*.

    Order: explicit override, well-known install locations, ``PATH``.
    Raises ``ExecutableNotFoundError``.
    """
    if overrides and overrides.get(browser.value):
        return overrides[browser.value]

    if sys.platform == "win32":
        candidates = _WINDOWS_PATHS.get(browser, [])
    elif sys.platform == "darwin":
        candidates = _MACOS_PATHS.get(browser, [])
    else:
        candidates = []
    for candidate in candidates:
        path = os.path.expandvars(candidate)
        if Path(path).is_file():
            return path

    for name in _COMMAND_NAMES.get(browser, []):
        found = shutil.which(name)
        if found:
            return found

    raise ExecutableNotFoundError(str(browser))


def profile_args(browser: BrowserKind, profile_dir: str | Path) -> list[str]:
    """Arguments that pin *browser* to its own profile directory."""
    if browser is BrowserKind.FIREFOX:
        return ["-profile", str(profile_dir), "-no-remote"]
    return [f"--user-data-dir={profile_dir}"]


def browser_command(executable: str, browser: BrowserKind, profile_dir: str | Path, urls: list[str]) -> list[str]:
    """Full argv: executable, profile isolation, then URLs as trailing arguments."""
    return [executable, *profile_args(browser, profile_dir), *urls]

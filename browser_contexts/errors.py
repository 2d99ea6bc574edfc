"""Domain exceptions.

Managers and services raise these, never click exceptions -- translating
them into CLI output is the command layer's responsibility.
"""

from __future__ import annotations


class BrowserContextsError(Exception):
    """Base class for all reportable browser-contexts failures."""


# -- Not found ----------------------------------------------------------------


class ContextNotFoundError(BrowserContextsError, LookupError):
    """Referenced context does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Context '{name}' not found")


class BookmarkNotFoundError(BrowserContextsError, LookupError):
    """Referenced bookmark does not exist in the context."""

    def __init__(self, context: str, bookmark: str) -> None:
        super().__init__(f"Bookmark '{bookmark}' not found in context '{context}'")


# -- Validation ---------------------------------------------------------------


class ContextValidationError(BrowserContextsError, ValueError):
    """A context definition or argument is invalid."""


class DuplicateContextError(BrowserContextsError, ValueError):
    """A context with the given name already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Context '{name}' already exists")


class WorkspaceParseError(BrowserContextsError, ValueError):
    """A .code-workspace file could not be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot parse workspace '{path}': {reason}")


# -- External tools -----------------------------------------------------------


class ExecutableNotFoundError(BrowserContextsError, FileNotFoundError):
    """No executable could be located for a browser or tool."""

    def __init__(self, what: str) -> None:
        super().__init__(f"Executable for '{what}' not found")


class LaunchError(BrowserContextsError, OSError):
    """Spawning an external process failed."""


class GitCommandError(BrowserContextsError):
    """A git invocation exited non-zero."""

    def __init__(self, args: list[str], returncode: int, output: str) -> None:
        self.command = args
        self.returncode = returncode
        self.output = output
        detail = output.strip().splitlines()[-1] if output.strip() else "no output"
        super().__init__(f"git {' '.join(args)} failed ({returncode}): {detail}")

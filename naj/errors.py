"""
Error taxonomy.

Every error the tool raises on purpose derives from NajError, so the CLI
can print a single diagnostic line and pick the exit code without
knowing which component failed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class NajError(RuntimeError):
    """Base class for expected, user-facing failures."""

    exit_code: int = 1


class ConfigError(NajError):
    """The configuration file is missing required values or is malformed."""


class IoFailure(NajError):
    """Filesystem or path-resolution failure."""


class ProfileNotFound(NajError):
    def __init__(self, profile_id: str, path: Optional[Path] = None):
        self.profile_id = profile_id
        self.path = path
        where = f" at {path}" if path is not None else ""
        super().__init__(f"Profile '{profile_id}' not found{where}")


class ProfileExists(NajError):
    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Profile '{profile_id}' already exists")


class NotARepository(NajError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Not a git repository: {path}")


class ExternalToolFailure(NajError):
    """
    git (or the editor) returned a failure that is not a benign not-found.

    The exit code mirrors the tool's own status so that a failing
    `naj <id> commit ...` exits the same way plain git would.
    """

    def __init__(self, context: str, status: int, stderr: str = ""):
        self.context = context
        self.status = status
        self.stderr = stderr.strip()
        message = f"{context} failed with exit status {status}"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return self.status if self.status > 0 else 1


class BenignNotFound(NajError):
    """Internal signal: a section or key to remove was already absent."""

    def __init__(self, context: str):
        self.context = context
        super().__init__(f"{context}: nothing to remove")

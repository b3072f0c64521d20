"""
Shared utility helpers.

This module contains small, reusable helpers that do not belong
to strategy decisions, git invocation, or profile application.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import IoFailure


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def expand_path(path_str: str) -> Path:
    """
    Expand a leading `~`, `~/` or `~\\` to the home directory.

    Other forms (`~user`, environment variables) are left untouched.
    """

    if path_str.startswith("~"):
        try:
            home = Path.home()
        except RuntimeError as e:
            raise IoFailure(f"Could not find home directory: {e}") from e

        if path_str == "~":
            return home
        if path_str.startswith("~/") or path_str.startswith("~\\"):
            return home / path_str[2:]

    return Path(path_str)


def current_directory() -> Path:
    """Return the absolute working directory."""
    try:
        return Path.cwd()
    except OSError as e:
        raise IoFailure(f"Could not determine current directory: {e}") from e


def is_repository(path: Path) -> bool:
    """True if `path` holds a `.git` directory (or a worktree `.git` file)."""
    return (path / ".git").exists()


def ensure_dir(path: Path) -> None:
    """Create a directory and its parents if needed."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoFailure(f"Failed to create directory {path}: {e}") from e


# ---------------------------------------------------------------------------
# Repository-creation target inference
# ---------------------------------------------------------------------------

# Suffixes stripped from a clone source before taking its basename.
ARCHIVE_SUFFIXES = (".git", ".bundle")


def is_git_url(token: str) -> bool:
    """
    Heuristic: does `token` look like a clone source rather than a directory?

    Any token containing `:` or `@` counts as a URL, so a literal
    directory named e.g. `build@2` is misread as a source.
    """

    return (
        token.startswith("http://")
        or token.startswith("https://")
        or token.startswith("git@")
        or token.startswith("ssh://")
        or "@" in token
        or ":" in token
    )


def extract_basename(source: str) -> Path:
    """Directory name git derives from a clone source."""
    s = source.rstrip("/\\")
    for suffix in ARCHIVE_SUFFIXES:
        if s.endswith(suffix):
            s = s[: -len(suffix)]
            break
    s = s.rstrip("/\\")

    name = s.replace("\\", "/").replace(":", "/").split("/")[-1]
    return Path(name or "repo")


# clone/init options whose value may follow as a separate token.
VALUE_FLAGS = frozenset({
    "-b", "--branch",
    "-o", "--origin",
    "-c", "--config",
    "-u", "--upload-pack",
    "-j", "--jobs",
    "--depth",
    "--template",
    "--separate-git-dir",
    "--reference",
    "--reference-if-able",
    "--shallow-since",
    "--shallow-exclude",
    "--initial-branch",
    "--object-format",
})


def positional_tokens(args: Sequence[str]) -> List[str]:
    """
    Arguments after the verb that are neither flags nor flag values.

    Only the flags in VALUE_FLAGS are known to take a value; any other
    option followed by a separate value still leaks that value here.
    """

    tokens: List[str] = []
    skip = False
    for token in args[1:]:
        if skip:
            skip = False
            continue
        if token.startswith("-"):
            skip = token in VALUE_FLAGS
            continue
        tokens.append(token)
    return tokens


def infer_target_directory(args: Sequence[str]) -> Path:
    """
    Directory a successful `clone`/`init` leaves the new repository in.

    An explicit trailing directory wins; otherwise the name is derived
    from the clone source. `init` without a path initializes in place.
    """

    tokens = positional_tokens(args)
    if not tokens:
        return Path(".")

    last = tokens[-1]
    verb = args[0] if args else ""

    if verb == "init":
        return Path(last)

    if len(tokens) > 1 and not is_git_url(last):
        return Path(last)

    return extract_basename(last)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_command(cmd: Iterable[str]) -> str:
    """Shell-quoted rendering of an argument vector."""
    return shlex.join(list(cmd))

"""
Terminal output helpers.

Every user-visible line goes through one of these functions so that
colors, symbols and stream selection stay consistent across commands.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    DIM = "\033[2m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def colored(text: str, color: str, stream: Optional[TextIO] = None) -> str:
    """Return colored text, or plain text when the stream is not a terminal."""
    if not _isatty(stream if stream is not None else sys.stdout):
        return text
    return f"{color}{text}{Colors.RESET}"


def print_error(msg: str) -> None:
    """Print error message to stderr."""
    print(colored(f"✗ Error: {msg}", Colors.RED, sys.stderr), file=sys.stderr)


def print_success(msg: str) -> None:
    """Print success message."""
    print(colored(f"✓ {msg}", Colors.GREEN))


def print_warning(msg: str) -> None:
    """Print warning message."""
    print(colored(f"⚠ Warning: {msg}", Colors.YELLOW))


def print_info(msg: str) -> None:
    """Print info message."""
    print(colored(f"ℹ {msg}", Colors.CYAN))


def print_dry(msg: str) -> None:
    """Print a command that mocking mode skipped."""
    print(colored(f"[DRY-RUN] {msg}", Colors.YELLOW, sys.stderr), file=sys.stderr)


def print_debug(msg: str) -> None:
    """Print a debug trace line to stderr."""
    print(colored(f"[DEBUG] {msg}", Colors.DIM, sys.stderr), file=sys.stderr)

"""
git invocation.

This module is the only place that starts the git executable. Everything
else talks to a GitRunner, which makes it possible to substitute a
deterministic fake in tests.

This module does NOT:
- interpret exit codes beyond success/failure
- decide which commands to run
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence, Tuple

from .config import GIT_EXECUTABLE, RuntimeOptions
from .console import print_dry
from .errors import IoFailure
from .utils import format_command


@dataclass(frozen=True)
class GitResult:
    args: Tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRunner(Protocol):
    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        interactive: bool = False,
        mutating: bool = True,
    ) -> GitResult:
        """
        Run `git <args>` in `cwd`.

        interactive: inherit stdin/stdout/stderr instead of capturing
        mutating:    the command changes repository state
        """
        ...


class SubprocessGitRunner:
    """GitRunner backed by the real git executable."""

    def __init__(self, options: RuntimeOptions, executable: str = GIT_EXECUTABLE):
        self.options = options
        self.executable = executable

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        interactive: bool = False,
        mutating: bool = True,
    ) -> GitResult:
        cmd = [self.executable, *args]

        if mutating and self.options.mocking:
            print_dry(format_command(cmd))
            return GitResult(args=tuple(cmd), returncode=0)

        try:
            if interactive:
                proc = subprocess.run(cmd, cwd=cwd, check=False)
                return GitResult(args=tuple(cmd), returncode=proc.returncode)

            proc = subprocess.run(
                cmd,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise IoFailure(f"Failed to execute {self.executable}: {e}") from e

        return GitResult(
            args=tuple(cmd),
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

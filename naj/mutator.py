"""
Local repository config mutations.

This module performs the actual git config changes requested by the
applier. It is intentionally dumb about policy: it does not know which
strategy is active or why a key is being removed.

Every operation targets `--local` config of the mutator's directory and
is idempotent. Removing something that is already gone is a benign
no-op, never an error.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .config import PROFILE_SUFFIX, RuntimeOptions
from .console import print_debug
from .errors import BenignNotFound, ExternalToolFailure
from .git import GitResult, GitRunner
from .utils import expand_path

INCLUDE_KEY = "include.path"

# git config exit statuses meaning "nothing matched".
_NOT_FOUND_STATUSES = (1, 5)
_NOT_FOUND_MESSAGES = ("no such section",)


class ConfigMutator:
    def __init__(
        self,
        runner: GitRunner,
        cwd: Path,
        profile_dir: Path,
        options: Optional[RuntimeOptions] = None,
    ):
        self.runner = runner
        self.cwd = Path(cwd)
        self.profile_dir = Path(profile_dir)
        self.options = options or RuntimeOptions()

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_section(self, name: str) -> bool:
        """Remove a whole section. Returns False if it was not present."""
        return self._remove(
            f"remove-section {name}",
            ["config", "--local", "--remove-section", name],
        )

    def unset_key(self, key: str) -> bool:
        """Remove every value of a key. Returns False if it was not present."""
        return self._remove(
            f"unset {key}",
            ["config", "--local", "--unset-all", key],
        )

    # ------------------------------------------------------------------
    # Includes
    # ------------------------------------------------------------------

    def list_includes(self) -> List[str]:
        result = self.runner.run(
            ["config", "--local", "--get-all", INCLUDE_KEY],
            cwd=self.cwd,
            mutating=False,
        )
        if result.returncode == 1:
            return []
        if not result.ok:
            raise ExternalToolFailure(
                f"list {INCLUDE_KEY}", result.returncode, result.stderr
            )
        return [line for line in result.stdout.splitlines() if line.strip()]

    def is_stale_include(self, value: str) -> bool:
        """
        Does an include.path value point into the profile store?

        Matches by directory containment, or by the profile file suffix
        for values written before the store moved.
        """

        if value.endswith(PROFILE_SUFFIX):
            return True

        path = expand_path(value)
        if not path.is_absolute():
            # git resolves relative include paths against the config file
            path = self.cwd / ".git" / path

        store = Path(os.path.abspath(self.profile_dir))
        target = Path(os.path.abspath(path))
        return store == target.parent or store in target.parents

    def clean_stale_includes(self) -> List[str]:
        """Unset every include.path value belonging to the profile store."""
        removed: List[str] = []
        for value in self.list_includes():
            if not self.is_stale_include(value):
                self._debug(f"keeping foreign include {value}")
                continue
            if value in removed:
                continue
            if self._remove(
                f"unset {INCLUDE_KEY} {value}",
                ["config", "--local", "--fixed-value", "--unset-all", INCLUDE_KEY, value],
            ):
                removed.append(value)
        return removed

    def add_include(self, path: Path, *, replace_stale: bool = True) -> None:
        """
        Link a profile file into the local config.

        Stale includes are removed first so that repeated calls leave
        exactly one entry; pass replace_stale=False if the caller has
        just cleaned them.
        """

        if replace_stale:
            self.clean_stale_includes()
        self._write(
            f"add {INCLUDE_KEY}",
            ["config", "--local", "--add", INCLUDE_KEY, str(path)],
        )

    # ------------------------------------------------------------------
    # Direct writes
    # ------------------------------------------------------------------

    def set_key(self, key: str, value: str) -> None:
        """Overwrite every existing value of `key` with `value`."""
        self._write(
            f"set {key}",
            ["config", "--local", "--replace-all", key, value],
        )

    def add_value(self, key: str, value: str) -> None:
        self._write(
            f"add {key}",
            ["config", "--local", "--add", key, value],
        )

    def write_pairs(self, pairs: Iterable[Tuple[str, str]]) -> List[str]:
        """
        Write profile pairs in order.

        The first occurrence of a key replaces whatever the repository
        had; later occurrences in the same profile are appended so
        multi-valued keys survive.
        """

        seen: Set[str] = set()
        written: List[str] = []
        for key, value in pairs:
            if key in seen:
                self.add_value(key, value)
            else:
                self.set_key(key, value)
                seen.add(key)
                written.append(key)
        return written

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _remove(self, context: str, args: Sequence[str]) -> bool:
        result = self.runner.run(args, cwd=self.cwd)
        try:
            self._check_removal(context, result)
        except BenignNotFound as e:
            self._debug(str(e))
            return False
        self._debug(f"{context}: done")
        return True

    @staticmethod
    def _check_removal(context: str, result: GitResult) -> None:
        if result.ok:
            return
        stderr = result.stderr.lower()
        if result.returncode in _NOT_FOUND_STATUSES or any(
            msg in stderr for msg in _NOT_FOUND_MESSAGES
        ):
            raise BenignNotFound(context)
        raise ExternalToolFailure(context, result.returncode, result.stderr)

    def _write(self, context: str, args: Sequence[str]) -> None:
        result = self.runner.run(args, cwd=self.cwd)
        if not result.ok:
            raise ExternalToolFailure(context, result.returncode, result.stderr)
        self._debug(f"{context}: done")

    def _debug(self, msg: str) -> None:
        if self.options.debug:
            print_debug(msg)

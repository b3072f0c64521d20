"""
Profile store.

This module is responsible for:
- mapping a profile ID to its file inside the profile directory
- reading a profile as ordered key/value pairs (through git)
- creating, removing, editing and listing profile files

This module does NOT:
- touch any repository config
- decide how a profile is applied
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from .config import DEFAULT_EDITOR, PROFILE_SUFFIX
from .errors import ExternalToolFailure, IoFailure, ProfileExists, ProfileNotFound
from .git import GitRunner
from .utils import ensure_dir

PROFILE_TEMPLATE = "[user]\n    name = {name}\n    email = {email}\n    # signingkey = \n"


class ProfileStore:
    def __init__(self, profile_dir: Path, runner: Optional[GitRunner] = None):
        self.profile_dir = Path(profile_dir)
        self.runner = runner

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def path_for(self, profile_id: str) -> Path:
        return self.profile_dir / f"{profile_id}{PROFILE_SUFFIX}"

    def resolve(self, profile_id: str) -> Path:
        """Absolute path of an existing profile file."""
        path = self.path_for(profile_id)
        if not path.is_file():
            raise ProfileNotFound(profile_id, path)
        return Path(os.path.abspath(path))

    def read_pairs(self, profile_id: str) -> List[Tuple[str, str]]:
        """
        Flatten a profile into (key, value) pairs using git's own parser.

        Keys come back the way `git config --list` prints them: section
        and variable names lower-cased, subsection case preserved.
        """

        if self.runner is None:
            raise RuntimeError("ProfileStore.read_pairs requires a git runner")

        path = self.resolve(profile_id)
        result = self.runner.run(
            ["config", "-f", str(path), "--list", "-z"],
            cwd=path.parent,
            mutating=False,
        )
        if not result.ok:
            raise ExternalToolFailure(
                f"read profile '{profile_id}'", result.returncode, result.stderr
            )

        # -z: records end with NUL, key and value split on the first newline.
        # A key without a value is an implicit boolean true.
        pairs: List[Tuple[str, str]] = []
        for record in result.stdout.split("\0"):
            if not record:
                continue
            key, sep, value = record.partition("\n")
            pairs.append((key, value if sep else "true"))
        return pairs

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    def create(self, name: str, email: str, profile_id: str) -> Path:
        path = self.path_for(profile_id)
        if path.exists():
            raise ProfileExists(profile_id)

        ensure_dir(path.parent)
        try:
            path.write_text(PROFILE_TEMPLATE.format(name=name, email=email), encoding="utf-8")
        except OSError as e:
            raise IoFailure(f"Failed to create profile {profile_id}: {e}") from e
        return path

    def remove(self, profile_id: str) -> Path:
        path = self.resolve(profile_id)
        try:
            path.unlink()
        except OSError as e:
            raise IoFailure(f"Failed to remove profile {profile_id}: {e}") from e
        return path

    def edit(self, profile_id: str, editor: str = DEFAULT_EDITOR) -> None:
        path = self.resolve(profile_id)
        try:
            proc = subprocess.run([editor, str(path)], check=False)
        except OSError as e:
            raise IoFailure(f"Failed to launch editor '{editor}': {e}") from e
        if proc.returncode != 0:
            raise ExternalToolFailure(f"editor '{editor}'", proc.returncode)

    def list_ids(self) -> List[str]:
        if not self.profile_dir.is_dir():
            return []
        return sorted(
            p.name[: -len(PROFILE_SUFFIX)]
            for p in self.profile_dir.iterdir()
            if p.is_file() and p.name.endswith(PROFILE_SUFFIX)
        )

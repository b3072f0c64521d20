"""
Test fixtures for naj.

FakeGitRunner stands in for the git executable: it keeps a repository's
local config as an ordered list of (key, value) entries, answers the
`git config` commands the mutator issues, renders the entries to
`.git/config` so raw-file checks see them, and records every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from naj.applier import ProfileApplier
from naj.config_file import NajConfig, StrategyConfig
from naj.git import GitResult
from naj.strategy import Strategy


# ── Fake git ─────────────────────────────────────────────────────────────────


@dataclass
class FakeCall:
    args: List[str]
    cwd: Path
    interactive: bool
    mutating: bool


def _norm(key: str) -> str:
    # section and variable names are case-insensitive in git
    return key.lower()


def _section_of(key: str) -> str:
    return key.rsplit(".", 1)[0].lower()


def parse_profile_text(text: str) -> List[Tuple[str, Optional[str]]]:
    """Minimal reader for the profile files used in tests; None marks a valueless key."""
    pairs: List[Tuple[str, Optional[str]]] = []
    section = ""
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith(";"):
            continue
        if line.startswith("["):
            inner = line.strip("[]").strip()
            if " " in inner:
                name, sub = inner.split(" ", 1)
                section = f"{name.lower()}.{sub.strip().strip(chr(34))}"
            else:
                section = inner.lower()
            continue
        name, sep, value = line.partition("=")
        key = f"{section}.{name.strip().lower()}"
        pairs.append((key, value.strip() if sep else None))
    return pairs


def render_config(entries: Sequence[Tuple[str, str]]) -> str:
    lines: List[str] = []
    current: Optional[str] = None
    for key, value in entries:
        section, name = key.rsplit(".", 1)
        if section != current:
            if "." in section:
                head, sub = section.split(".", 1)
                lines.append(f'[{head} "{sub}"]')
            else:
                lines.append(f"[{section}]")
            current = section
        lines.append(f"\t{name} = {value}")
    return "\n".join(lines) + ("\n" if lines else "")


class FakeGitRunner:
    def __init__(self, entries: Optional[List[Tuple[str, str]]] = None):
        self.entries: List[Tuple[str, str]] = list(entries or [])
        self.calls: List[FakeCall] = []
        # exit status for anything that is not `git config`
        self.command_status = 0
        # called with (args, cwd) for anything that is not `git config`
        self.on_command: Optional[Callable[[List[str], Path], None]] = None
        # per-directory stores, for Setup tests that switch into a new repo
        self.stores: Dict[Path, List[Tuple[str, str]]] = {}

    # -- GitRunner protocol -------------------------------------------------

    def run(self, args, *, cwd, interactive=False, mutating=True) -> GitResult:
        args = list(args)
        cwd = Path(cwd)
        self.calls.append(FakeCall(args, cwd, interactive, mutating))

        if args[:1] == ["config"]:
            return self._config(args[1:], cwd)

        if self.on_command is not None:
            self.on_command(args, cwd)
        return GitResult(tuple(["git", *args]), self.command_status)

    # -- helpers for assertions ----------------------------------------------

    def values(self, key: str, cwd: Optional[Path] = None) -> List[str]:
        entries = self._entries(cwd) if cwd is not None else self.entries
        return [v for k, v in entries if _norm(k) == _norm(key)]

    def config_calls(self) -> List[List[str]]:
        return [c.args for c in self.calls if c.args[:1] == ["config"]]

    def seed_stores(self, cwd: Path, entries: List[Tuple[str, str]]) -> None:
        self.stores[Path(cwd)] = list(entries)

    # -- git config emulation ---------------------------------------------------

    def _entries(self, cwd: Path) -> List[Tuple[str, str]]:
        return self.stores.get(Path(cwd), self.entries)

    def _set_entries(self, cwd: Path, entries: List[Tuple[str, str]]) -> None:
        if Path(cwd) in self.stores:
            self.stores[Path(cwd)] = entries
        else:
            self.entries = entries
        git_dir = Path(cwd) / ".git"
        if git_dir.is_dir():
            (git_dir / "config").write_text(render_config(entries))

    def _config(self, args: List[str], cwd: Path) -> GitResult:
        cmd = tuple(["git", "config", *args])

        if args[:1] == ["-f"]:
            text = Path(args[1]).read_text()
            assert args[-1] == "-z"
            out = "".join(
                f"{k}\0" if v is None else f"{k}\n{v}\0" for k, v in parse_profile_text(text)
            )
            return GitResult(cmd, 0, stdout=out)

        if args[:1] == ["--local"]:
            args = args[1:]

        entries = list(self._entries(cwd))
        op = args[0]

        if op == "--remove-section":
            name = args[1].lower()
            kept = [(k, v) for k, v in entries if _section_of(k) != name]
            if len(kept) == len(entries):
                return GitResult(cmd, 128, stderr=f"fatal: no such section: {args[1]}\n")
            self._set_entries(cwd, kept)
            return GitResult(cmd, 0)

        if op == "--unset-all":
            key = _norm(args[1])
            kept = [(k, v) for k, v in entries if _norm(k) != key]
            if len(kept) == len(entries):
                return GitResult(cmd, 5)
            self._set_entries(cwd, kept)
            return GitResult(cmd, 0)

        if op == "--fixed-value":
            assert args[1] == "--unset-all"
            key, value = _norm(args[2]), args[3]
            kept = [(k, v) for k, v in entries if not (_norm(k) == key and v == value)]
            if len(kept) == len(entries):
                return GitResult(cmd, 5)
            self._set_entries(cwd, kept)
            return GitResult(cmd, 0)

        if op == "--get-all":
            found = [v for k, v in entries if _norm(k) == _norm(args[1])]
            if not found:
                return GitResult(cmd, 1)
            return GitResult(cmd, 0, stdout="".join(f"{v}\n" for v in found))

        if op == "--add":
            entries.append((args[1], args[2]))
            self._set_entries(cwd, entries)
            return GitResult(cmd, 0)

        if op == "--replace-all":
            key = _norm(args[1])
            entries = [(k, v) for k, v in entries if _norm(k) != key]
            entries.append((args[1], args[2]))
            self._set_entries(cwd, entries)
            return GitResult(cmd, 0)

        raise AssertionError(f"unexpected git config call: {args}")


# ── Fixtures ─────────────────────────────────────────────────────────────────

WORK_PROFILE = "[user]\n    name = Work User\n    email = work@x.com\n    # signingkey = \n"


@pytest.fixture
def profile_dir(tmp_path: Path) -> Path:
    d = tmp_path / "profiles"
    d.mkdir()
    (d / "work.gitconfig").write_text(WORK_PROFILE)
    (d / "home.gitconfig").write_text("[user]\n    name = Home User\n    email = me@home.org\n")
    return d


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    d = tmp_path / "repo"
    (d / ".git").mkdir(parents=True)
    return d


@pytest.fixture
def fake_git() -> FakeGitRunner:
    return FakeGitRunner()


@pytest.fixture
def make_applier(profile_dir: Path, repo: Path, fake_git: FakeGitRunner):
    """Factory: make_applier(switch='include', clone='INCLUDE', cwd=repo)."""

    def _make(switch: str = "include", clone: str = "INCLUDE", cwd: Optional[Path] = None):
        config = NajConfig(
            profile_dir=str(profile_dir),
            strategies=StrategyConfig(
                clone=Strategy.parse(clone),
                switch=Strategy.parse(switch),
            ),
        )
        return ProfileApplier(config, fake_git, cwd=cwd if cwd is not None else repo)

    return _make

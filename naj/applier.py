"""
Profile application.

ProfileApplier sequences everything that happens once the CLI knows the
profile ID and the trailing git arguments:

- Switch: Validating -> Sanitizing (hard strategies only) ->
  CleaningStale -> Applying -> Done, persisted in the local config
- Exec:   one git invocation with blind injections and the profile
  include passed as `-c` overrides, nothing persisted
- Setup:  run clone/init verbatim, then a hard Switch inside the new
  repository

The order sanitize, clean stale, apply is fixed. There is no rollback:
a failure leaves whatever the completed steps wrote.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .config import RuntimeOptions
from .config_file import NajConfig
from .console import print_debug
from .errors import ExternalToolFailure, IoFailure, NotARepository
from .git import GitRunner
from .mutator import ConfigMutator
from .profiles import ProfileStore
from .sanitizer import DEFAULT_POLICY, SanitizerPolicy, build_exec_args, find_identity_leftovers
from .strategy import Action, Strategy, classify_action, resolve_strategy, should_sanitize
from .utils import current_directory, infer_target_directory, is_repository


class ApplyState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SANITIZING = "sanitizing"
    CLEANING_STALE = "cleaning-stale"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SwitchReport:
    profile_id: str
    strategy: Strategy
    directory: Path
    include_path: Optional[Path] = None
    written_keys: List[str] = field(default_factory=list)
    removed_includes: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class SetupReport:
    target_dir: Path
    switch: Optional[SwitchReport] = None
    warnings: List[str] = field(default_factory=list)


class ProfileApplier:
    def __init__(
        self,
        config: NajConfig,
        runner: GitRunner,
        options: Optional[RuntimeOptions] = None,
        cwd: Optional[Path] = None,
        store: Optional[ProfileStore] = None,
        policy: SanitizerPolicy = DEFAULT_POLICY,
    ):
        self.config = config
        self.runner = runner
        self.options = options or RuntimeOptions()
        self.cwd = Path(cwd) if cwd is not None else current_directory()
        self.store = store or ProfileStore(config.profile_path, runner)
        self.policy = policy
        self.mutator = ConfigMutator(runner, self.cwd, self.store.profile_dir, self.options)
        self.state = ApplyState.IDLE

    def for_directory(self, directory: Path) -> "ProfileApplier":
        """Applier bound to another directory, sharing everything else."""
        return ProfileApplier(
            self.config,
            self.runner,
            options=self.options,
            cwd=directory,
            store=self.store,
            policy=self.policy,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, profile_id: str, args: Sequence[str], force: bool = False):
        action = classify_action(args)
        self._debug(f"action={action.value} args={list(args)}")

        if action is Action.SWITCH:
            return self.switch(profile_id, force=force)
        if action is Action.SETUP:
            return self.setup(profile_id, args)
        return self.exec(profile_id, args)

    def switch(
        self,
        profile_id: str,
        force: bool = False,
        base: Optional[Strategy] = None,
    ) -> SwitchReport:
        """Persistently apply a profile to the repository in self.cwd."""
        base = base or self.config.strategies.switch
        strategy = resolve_strategy(base, force)
        self._debug(f"strategy base={base.value} force={force} effective={strategy.value}")

        try:
            return self._switch(profile_id, strategy)
        except Exception:
            self._enter(ApplyState.FAILED)
            raise

    def exec(self, profile_id: str, args: Sequence[str]) -> None:
        """Run one git command under a profile without persisting anything."""
        self._require_repository()
        profile_path = self.store.resolve(profile_id)

        result = self.runner.run(
            build_exec_args(profile_path, args, self.policy),
            cwd=self.cwd,
            interactive=True,
        )
        if not result.ok:
            raise ExternalToolFailure("exec", result.returncode)

    def setup(self, profile_id: str, args: Sequence[str]) -> SetupReport:
        """
        Run clone/init, then apply the profile to the new repository.

        The creation command runs without injections since the
        repository may not exist yet.
        """

        self.store.resolve(profile_id)

        result = self.runner.run(list(args), cwd=self.cwd, interactive=True)
        if not result.ok:
            raise ExternalToolFailure(f"setup ({args[0]})", result.returncode)

        target = infer_target_directory(args)
        repo_dir = (self.cwd / target).resolve()
        report = SetupReport(target_dir=target)
        self._debug(f"setup target={target} resolved={repo_dir}")

        if not is_repository(repo_dir):
            report.warnings.append(
                f"Could not find repository at {repo_dir} to apply profile"
            )
            return report

        report.switch = self.for_directory(repo_dir).switch(
            profile_id,
            force=True,
            base=self.config.strategies.clone,
        )
        return report

    # ------------------------------------------------------------------
    # Switch states
    # ------------------------------------------------------------------

    def _switch(self, profile_id: str, strategy: Strategy) -> SwitchReport:
        self._enter(ApplyState.VALIDATING)
        self._require_repository()
        profile_path = self.store.resolve(profile_id)
        report = SwitchReport(profile_id=profile_id, strategy=strategy, directory=self.cwd)

        sanitize = should_sanitize(strategy)
        self._debug(f"should_sanitize={sanitize}")
        if sanitize:
            self._enter(ApplyState.SANITIZING)
            self._sanitize()

        self._enter(ApplyState.CLEANING_STALE)
        report.removed_includes = self.mutator.clean_stale_includes()

        self._enter(ApplyState.APPLYING)
        if strategy.is_include:
            self.mutator.add_include(profile_path, replace_stale=False)
            report.include_path = profile_path
        else:
            pairs = self.store.read_pairs(profile_id)
            report.written_keys = self.mutator.write_pairs(pairs)

        self._enter(ApplyState.DONE)
        if strategy.is_include:
            report.warnings.extend(self._dirty_config_warnings())
        return report

    def _sanitize(self) -> None:
        for section in self.policy.sections:
            self.mutator.remove_section(section)
        for key in self.policy.keys:
            self.mutator.unset_key(key)

    def _dirty_config_warnings(self) -> List[str]:
        config_file = self.cwd / ".git" / "config"
        if not config_file.is_file():
            self._debug(f"skipping dirty-config check, no file at {config_file}")
            return []

        try:
            raw = config_file.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise IoFailure(f"Failed to read {config_file}: {e}") from e

        leftovers = find_identity_leftovers(raw)
        if not leftovers:
            return []
        return [
            "Local config still has identity settings ("
            + ", ".join(leftovers)
            + ") that may take precedence over the profile. "
            "Use --force or a hard strategy to clear them."
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_repository(self) -> None:
        if not is_repository(self.cwd):
            raise NotARepository(self.cwd)

    def _enter(self, state: ApplyState) -> None:
        self._debug(f"state {self.state.value} -> {state.value}")
        self.state = state

    def _debug(self, msg: str) -> None:
        if self.options.debug:
            print_debug(msg)

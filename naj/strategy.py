"""
Strategy and action decisions.

Given the configured strategy, the force flag and the trailing git
arguments, this module decides:
- which action the invocation requests
- which strategy is effective for this run
- whether identity settings must be purged first

Decisions DO NOT touch git or the filesystem. They only return values.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from .errors import ConfigError

SETUP_VERBS = ("clone", "init")


class Action(Enum):
    SETUP = "setup"
    EXEC = "exec"
    SWITCH = "switch"


class Strategy(Enum):
    """
    How a profile is applied to the local repository config.

    The value is the literal used in the configuration file: lower case
    means soft (keep unrelated settings), upper case means hard (purge
    identity settings before applying).
    """

    INCLUDE_SOFT = "include"
    INCLUDE_HARD = "INCLUDE"
    OVERRIDE_SOFT = "override"
    OVERRIDE_HARD = "OVERRIDE"

    @classmethod
    def parse(cls, literal: str) -> "Strategy":
        text = str(literal).strip()
        for member in cls:
            if member.value == text:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigError(f"Unknown strategy '{literal}' (expected one of: {choices})")

    @property
    def is_hard(self) -> bool:
        return self in (Strategy.INCLUDE_HARD, Strategy.OVERRIDE_HARD)

    @property
    def is_include(self) -> bool:
        return self in (Strategy.INCLUDE_SOFT, Strategy.INCLUDE_HARD)

    @property
    def is_override(self) -> bool:
        return not self.is_include

    def hardened(self) -> "Strategy":
        """Hard variant of the same family."""
        return Strategy.INCLUDE_HARD if self.is_include else Strategy.OVERRIDE_HARD


def classify_action(args: Sequence[str]) -> Action:
    if not args:
        return Action.SWITCH
    if args[0] in SETUP_VERBS:
        return Action.SETUP
    return Action.EXEC


def resolve_strategy(base: Strategy, force: bool) -> Strategy:
    """Escalate a soft strategy to its hard variant when forced; never de-escalate."""
    if force:
        return base.hardened()
    return base


def should_sanitize(strategy: Strategy) -> bool:
    return strategy.is_hard

"""
Configuration file loading, validation, and initialization.

This module answers one question:
    "How does the user want profiles applied?"

Responsibilities:
- Load the YAML configuration file
- Create it with commented defaults on first run
- Validate structure and strategy literals
- Expose a clean Python representation

This module does NOT:
- Touch git
- Resolve or read profiles
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from .config import (
    CONFIG_FILENAME,
    DEFAULT_CLONE_STRATEGY,
    DEFAULT_SWITCH_STRATEGY,
    RuntimeOptions,
    default_profile_dir,
    get_config_root,
)
from .errors import ConfigError, IoFailure
from .strategy import Strategy
from .utils import ensure_dir, expand_path

DEFAULT_CONFIG_TEMPLATE = """\
# naj configuration

profile_dir: "{profile_dir}"

strategies:
  # include: link the profile file from the repository config
  # override: write the profile values into the repository config
  # INCLUDE, OVERRIDE: clear identity settings first, then apply
  clone: {clone}   # used after clone/init, always hard
  switch: {switch}  # used by `naj <profile>`
"""


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass
class StrategyConfig:
    clone: Strategy = Strategy.INCLUDE_HARD
    switch: Strategy = Strategy.INCLUDE_SOFT


@dataclass
class NajConfig:
    profile_dir: str
    strategies: StrategyConfig = field(default_factory=StrategyConfig)

    @property
    def profile_path(self) -> Path:
        """Profile directory with `~` expanded."""
        return expand_path(self.profile_dir)

    # ------------------------------------------------------------------
    # Loading API
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path) -> "NajConfig":
        """
        Load and validate a configuration file.

        Raises:
            ConfigError: if the file is missing or invalid
        """

        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file {path}: {e}") from e
        except OSError as e:
            raise IoFailure(f"Failed to read config file {path}: {e}") from e

        return cls._from_dict(raw if raw is not None else {})

    @classmethod
    def initialize(cls, root: Path, profile_dir: str) -> "NajConfig":
        """Write a commented default config under `root` and load it."""
        ensure_dir(root)
        config_path = root / CONFIG_FILENAME

        text = DEFAULT_CONFIG_TEMPLATE.format(
            # YAML double-quoted strings treat backslash as an escape
            profile_dir=profile_dir.replace("\\", "\\\\"),
            clone=DEFAULT_CLONE_STRATEGY,
            switch=DEFAULT_SWITCH_STRATEGY,
        )
        try:
            config_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise IoFailure(f"Failed to write default config {config_path}: {e}") from e

        config = cls.load(config_path)
        ensure_dir(config.profile_path)
        return config

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @classmethod
    def _from_dict(cls, data: Any) -> "NajConfig":
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping")

        profile_dir = data.get("profile_dir")
        if not profile_dir or not isinstance(profile_dir, str):
            raise ConfigError("Config is missing 'profile_dir'")

        return cls(
            profile_dir=profile_dir,
            strategies=cls._parse_strategies(data.get("strategies") or {}),
        )

    @staticmethod
    def _parse_strategies(data: Dict[str, Any]) -> StrategyConfig:
        if not isinstance(data, dict):
            raise ConfigError("'strategies' must be a mapping")

        return StrategyConfig(
            clone=Strategy.parse(data.get("clone", DEFAULT_CLONE_STRATEGY)),
            switch=Strategy.parse(data.get("switch", DEFAULT_SWITCH_STRATEGY)),
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(options: RuntimeOptions) -> NajConfig:
    """Load the user's config, creating it on first use."""
    root = get_config_root(options)
    config_path = root / CONFIG_FILENAME

    if not config_path.exists():
        return NajConfig.initialize(root, default_profile_dir(options))

    return NajConfig.load(config_path)

"""
Global constants and environment handling.

This module is responsible for:
- Defining global constants and defaults
- Naming the environment variables the tool reads
- Capturing those variables once per invocation as RuntimeOptions

Nothing in this file should depend on:
- the configuration file contents
- the profile store
- git
- CLI arguments

The environment is read in exactly one place (RuntimeOptions.from_env)
and the resulting value is passed explicitly to the components that
need it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Mapping, Optional

# ---------------------------------------------------------------------------
# Tool versioning
# ---------------------------------------------------------------------------

TOOL_NAME: Final[str] = "naj"
TOOL_VERSION: Final[str] = "0.1.0"

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

CONFIG_FILENAME: Final[str] = "config.yml"
PROFILES_DIRNAME: Final[str] = "profiles"
PROFILE_SUFFIX: Final[str] = ".gitconfig"
DEFAULT_PROFILE_DIR: Final[str] = "~/.config/naj/profiles"
DEFAULT_SWITCH_STRATEGY: Final[str] = "include"
DEFAULT_CLONE_STRATEGY: Final[str] = "INCLUDE"
DEFAULT_EDITOR: Final[str] = "vi"
GIT_EXECUTABLE: Final[str] = "git"

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_CONFIG_PATH: Final[str] = "NAJ_CONFIG_PATH"
ENV_MOCKING: Final[str] = "NAJ_MOCKING"
ENV_DEBUG: Final[str] = "NAJ_DEBUG"
ENV_EDITOR: Final[str] = "EDITOR"
ENV_XDG_CONFIG_HOME: Final[str] = "XDG_CONFIG_HOME"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuntimeOptions:
    """
    Per-invocation toggles.

    mocking: print mutating git invocations instead of running them
    debug:   emit internal state on the diagnostic stream
    config_path: explicit configuration root, if any
    """

    mocking: bool = False
    debug: bool = False
    config_path: Optional[Path] = None
    editor: str = DEFAULT_EDITOR

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeOptions":
        env = os.environ if environ is None else environ
        config_path = env.get(ENV_CONFIG_PATH)
        return cls(
            mocking=ENV_MOCKING in env,
            debug=ENV_DEBUG in env,
            config_path=Path(config_path) if config_path else None,
            editor=env.get(ENV_EDITOR) or DEFAULT_EDITOR,
        )


def get_config_root(
    options: RuntimeOptions,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """
    Return the directory holding config.yml.

    Resolution order: NAJ_CONFIG_PATH, $XDG_CONFIG_HOME/naj, ~/.config/naj.
    """

    if options.config_path is not None:
        return options.config_path

    env = os.environ if environ is None else environ
    xdg = env.get(ENV_XDG_CONFIG_HOME)
    if xdg:
        return Path(xdg) / TOOL_NAME
    return Path.home() / ".config" / TOOL_NAME


def default_profile_dir(options: RuntimeOptions) -> str:
    """Profile directory written into a freshly generated config file."""
    if options.config_path is not None:
        return str(options.config_path / PROFILES_DIRNAME)
    return DEFAULT_PROFILE_DIR

"""
naj

Keeps several named git identities (name, email, signing key, SSH
command) and applies one of them to a repository's local config
without leaking another identity's settings.
"""

__version__ = "0.1.0"

from .applier import ProfileApplier, SetupReport, SwitchReport
from .config import RuntimeOptions
from .config_file import NajConfig, load_config
from .git import GitResult, SubprocessGitRunner
from .mutator import ConfigMutator
from .profiles import ProfileStore
from .sanitizer import DEFAULT_POLICY, SanitizerPolicy
from .strategy import Action, Strategy, classify_action, resolve_strategy, should_sanitize

__all__ = [
    "ProfileApplier",
    "SetupReport",
    "SwitchReport",
    "RuntimeOptions",
    "NajConfig",
    "load_config",
    "GitResult",
    "SubprocessGitRunner",
    "ConfigMutator",
    "ProfileStore",
    "DEFAULT_POLICY",
    "SanitizerPolicy",
    "Action",
    "Strategy",
    "classify_action",
    "resolve_strategy",
    "should_sanitize",
]

"""
Command-line interface for naj.

This module wires the other components together and provides the
user-facing commands:
- <profile-id>               apply a profile to the current repository
- <profile-id> <git args>    run one git command under a profile
- <profile-id> clone|init    create a repository, then apply the profile
- -c / -r / -e / -l          manage profile files
- -h                         help
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Tuple

from .applier import ProfileApplier, SetupReport, SwitchReport
from .config import TOOL_VERSION, RuntimeOptions
from .config_file import NajConfig, load_config
from .console import (
    Colors,
    colored,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from .errors import NajError
from .git import SubprocessGitRunner
from .profiles import ProfileStore

FORCE_FLAGS = ("-f", "--force")


# ---------------------------------------------------------------------------
# CLI context
# ---------------------------------------------------------------------------


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(self, options: RuntimeOptions):
        self.options = options

        # Lazy-loaded
        self._config: Optional[NajConfig] = None
        self._runner: Optional[SubprocessGitRunner] = None
        self._store: Optional[ProfileStore] = None

    @property
    def config(self) -> NajConfig:
        """Load (or initialize) the config file lazily."""
        if self._config is None:
            self._config = load_config(self.options)
        return self._config

    @property
    def runner(self) -> SubprocessGitRunner:
        if self._runner is None:
            self._runner = SubprocessGitRunner(self.options)
        return self._runner

    @property
    def store(self) -> ProfileStore:
        if self._store is None:
            self._store = ProfileStore(self.config.profile_path, self.runner)
        return self._store

    def applier(self) -> ProfileApplier:
        return ProfileApplier(
            self.config,
            self.runner,
            options=self.options,
            store=self.store,
        )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def report_switch(report: SwitchReport) -> None:
    print_success(f"Switched to profile '{report.profile_id}' ({report.strategy.value})")
    for warning in report.warnings:
        print_warning(warning)


def report_setup(report: SetupReport) -> None:
    print_info(f"Detected target directory: {report.target_dir}")
    if report.switch is not None:
        report_switch(report.switch)
    for warning in report.warnings:
        print_warning(warning)


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def cmd_apply(ctx: CLIContext, args: argparse.Namespace) -> int:
    """Switch, Exec or Setup depending on the trailing git arguments."""
    git_args = list(args.git_args)
    force = args.force
    # git has no global -f, so a leading one belongs to naj
    while git_args and git_args[0] in FORCE_FLAGS:
        force = True
        git_args.pop(0)

    result = ctx.applier().run(args.profile_id, git_args, force=force)

    if isinstance(result, SwitchReport):
        report_switch(result)
    elif isinstance(result, SetupReport):
        report_setup(result)
    return 0


def cmd_create(ctx: CLIContext, args: argparse.Namespace) -> int:
    name, email, profile_id = args.create
    ctx.store.create(name, email, profile_id)
    print_success(f"Created profile '{profile_id}'")
    return 0


def cmd_remove(ctx: CLIContext, args: argparse.Namespace) -> int:
    ctx.store.remove(args.remove)
    print_success(f"Removed profile '{args.remove}'")
    return 0


def cmd_edit(ctx: CLIContext, args: argparse.Namespace) -> int:
    ctx.store.edit(args.edit, editor=ctx.options.editor)
    return 0


def cmd_list(ctx: CLIContext, args: argparse.Namespace) -> int:
    ids = ctx.store.list_ids()
    if not ids:
        print_info(f"No profiles found in {ctx.store.profile_dir}")
        return 0
    for profile_id in ids:
        print(profile_id)
    return 0


def cmd_help(ctx: Optional[CLIContext], args: argparse.Namespace) -> int:
    """
    Show help message.
    """
    help_text = f"""
{colored('naj', Colors.BOLD)} — switch git identities per repository

{colored('USAGE:', Colors.CYAN)}
  naj [-f] <profile-id>               Apply a profile to the current repository
  naj <profile-id> <git args...>      Run one git command under a profile
  naj <profile-id> clone <url> [dir]  Clone, then apply the profile (hard)
  naj <profile-id> init [dir]         Init, then apply the profile (hard)

{colored('PROFILE MANAGEMENT:', Colors.CYAN)}
  -c, --create NAME EMAIL ID  Create a profile
  -r, --remove ID             Remove a profile
  -e, --edit ID               Open a profile in $EDITOR
  -l, --list                  List profiles

{colored('OPTIONS:', Colors.CYAN)}
  -f, --force                 Use the hard variant of the configured strategy
  -h, --help                  Show this help message and exit
  --version                   Show version and exit

{colored('STRATEGIES (config.yml, strategies.switch / strategies.clone):', Colors.CYAN)}
  include     Link the profile file, keep existing settings
  INCLUDE     Clear identity settings, then link the profile file
  override    Write profile values, keep other settings
  OVERRIDE    Clear identity settings, then write profile values

{colored('ENVIRONMENT:', Colors.CYAN)}
  NAJ_CONFIG_PATH             Directory holding config.yml
  NAJ_MOCKING                 Print git commands that change state instead of running them
  NAJ_DEBUG                   Print internal decisions to stderr
  EDITOR                      Editor used by --edit (default: vi)

{colored('VERSION:', Colors.CYAN)}
  {TOOL_VERSION}
"""
    print(help_text)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="naj",
        description="Switch git identities per repository",
        add_help=False,
    )

    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Escalate the configured strategy to its hard variant",
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show help message",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"naj {TOOL_VERSION}",
    )

    manage = parser.add_mutually_exclusive_group()
    manage.add_argument(
        "-c", "--create",
        nargs=3,
        metavar=("NAME", "EMAIL", "ID"),
        help="Create a profile",
    )
    manage.add_argument("-r", "--remove", metavar="ID", help="Remove a profile")
    manage.add_argument("-e", "--edit", metavar="ID", help="Edit a profile")
    manage.add_argument("-l", "--list", action="store_true", help="List profiles")

    return parser


# Options that consume following tokens, with how many.
_VALUE_OPTIONS = {
    "-c": 3, "--create": 3,
    "-r": 1, "--remove": 1,
    "-e": 1, "--edit": 1,
}


def split_argv(argv: List[str]) -> Tuple[List[str], Optional[str], List[str]]:
    """
    Split argv into (naj options, profile ID, git arguments).

    Everything after the profile ID belongs to git verbatim, including
    tokens that look like naj options.
    """

    idx = 0
    while idx < len(argv):
        token = argv[idx]
        if token == "--":
            rest = argv[idx + 1:]
            profile_id = rest[0] if rest else None
            return argv[:idx], profile_id, rest[1:]
        if not token.startswith("-") or token == "-":
            return argv[:idx], token, argv[idx + 1:]
        idx += 1 + _VALUE_OPTIONS.get(token, 0)

    return argv, None, []


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[List[str]] = None, options: Optional[RuntimeOptions] = None) -> int:
    """Main CLI entry point."""
    if argv is None:
        argv = sys.argv[1:]

    naj_args, profile_id, git_args = split_argv(list(argv))
    parser = build_parser()
    args = parser.parse_args(naj_args)
    args.profile_id = profile_id
    args.git_args = git_args

    managing = bool(args.create or args.remove or args.edit or args.list)

    if args.help or (not managing and not args.profile_id):
        return cmd_help(None, args)

    if managing and args.profile_id:
        print_error("Profile management flags cannot be combined with a profile ID")
        return 2

    ctx = CLIContext(options or RuntimeOptions.from_env())

    if args.create:
        cmd_func = cmd_create
    elif args.remove:
        cmd_func = cmd_remove
    elif args.edit:
        cmd_func = cmd_edit
    elif args.list:
        cmd_func = cmd_list
    else:
        cmd_func = cmd_apply

    try:
        return cmd_func(ctx, args)
    except NajError as e:
        print_error(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        if ctx.options.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

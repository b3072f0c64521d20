"""
Sanitizer policy.

Static description of which configuration sections and keys carry
identity or signing state, and of the transient overrides that blank
them out for a one-shot git invocation.

This module does NOT:
- run git
- decide when sanitization happens (see strategy.should_sanitize)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class SanitizerPolicy:
    sections: Tuple[str, ...]
    keys: Tuple[str, ...]
    blind_injections: Tuple[Tuple[str, str], ...]


DEFAULT_POLICY = SanitizerPolicy(
    # Sections holding personal identity or signing settings.
    sections=("user", "author", "committer", "gpg", "gpg.ssh"),
    # Keys that point at private material or force a signing protocol.
    keys=(
        "core.sshCommand",
        "commit.gpgsign",
        "tag.gpgsign",
        "http.cookieFile",
    ),
    # Neutral values so an incomplete profile never falls back to the
    # global identity.
    blind_injections=(
        ("user.name", ""),
        ("user.email", ""),
        ("user.signingkey", ""),
        ("core.sshCommand", ""),
        ("gpg.format", "openpgp"),
        ("gpg.ssh.program", "ssh-keygen"),
        ("gpg.program", "gpg"),
        ("commit.gpgsign", "false"),
        ("tag.gpgsign", "false"),
    ),
)


def blind_injection_args(policy: SanitizerPolicy = DEFAULT_POLICY) -> List[str]:
    args: List[str] = []
    for key, value in policy.blind_injections:
        args.extend(["-c", f"{key}={value}"])
    return args


def build_exec_args(
    profile_path: Path,
    user_args: Sequence[str],
    policy: SanitizerPolicy = DEFAULT_POLICY,
) -> List[str]:
    """
    Argument vector for a one-shot command under a profile.

    Order matters: the blind injections come first so the profile
    include, processed after them, wins for every key it sets.
    """

    args = blind_injection_args(policy)
    args.extend(["-c", f"include.path={profile_path}"])
    args.extend(user_args)
    return args


# ---------------------------------------------------------------------------
# Dirty-config diagnostic
# ---------------------------------------------------------------------------

_SECTION_RE = re.compile(r"^\s*\[\s*([A-Za-z0-9.-]+)(?:\s+\"[^\"]*\")?\s*\]")
_IDENTITY_SECTION_RE = re.compile(r"^\s*\[\s*(user|author|committer|gpg)\b", re.IGNORECASE)
_SIGNING_KEY_RE = re.compile(r"^\s*(sshcommand|gpgsign)\s*=", re.IGNORECASE)


def find_identity_leftovers(raw_config: str) -> List[str]:
    """
    Scan raw config text for identity settings that may shadow a profile.

    Returns human-readable findings such as `[user]` or `core.sshCommand`,
    in file order and without duplicates.
    """

    findings: List[str] = []
    section = ""

    for line in raw_config.splitlines():
        header = _SECTION_RE.match(line)
        if header:
            section = header.group(1).lower()
            identity = _IDENTITY_SECTION_RE.match(line)
            if identity:
                finding = f"[{identity.group(1).lower()}]"
                if finding not in findings:
                    findings.append(finding)
            continue

        key = _SIGNING_KEY_RE.match(line)
        if key and section:
            finding = f"{section}.{key.group(1).lower()}"
            if finding not in findings:
                findings.append(finding)

    return findings

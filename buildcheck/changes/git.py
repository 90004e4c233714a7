"""
Change Discovery

Works out the trigger kind and the changed paths from a GitHub Actions
environment and the git history.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from ..preflight.host import Host
from ..preflight.models import ProbeError
from .filter import TriggerKind

logger = logging.getLogger(__name__)

_NULL_SHA = "0" * 40

# Runner variables read by change discovery.
GITHUB_VARIABLES = ("GITHUB_EVENT_NAME", "GITHUB_REF", "GITHUB_EVENT_PATH", "GITHUB_SHA")


class CommitRange(NamedTuple):
    """Base and head commits to diff."""
    base: str
    head: str


def ci_environment(host: Host) -> Dict[str, str]:
    """The GitHub runner variables that are set on ``host``."""
    env = {}
    for name in GITHUB_VARIABLES:
        value = host.env(name)
        if value is not None:
            env[name] = value
    return env


def detect_trigger(env: Mapping[str, str]) -> TriggerKind:
    """
    Map the CI event to a trigger kind.

    Args:
        env: Environment variables (GITHUB_EVENT_NAME, GITHUB_REF)
    """
    event = env.get("GITHUB_EVENT_NAME", "")
    ref = env.get("GITHUB_REF", "")

    if event == "workflow_dispatch":
        return TriggerKind.MANUAL
    if ref.startswith("refs/tags/"):
        return TriggerKind.TAG
    if event in ("pull_request", "pull_request_target"):
        return TriggerKind.PULL_REQUEST
    return TriggerKind.PUSH


def _load_event(env: Mapping[str, str]) -> Dict[str, Any]:
    path = env.get("GITHUB_EVENT_PATH")
    if not path:
        return {}
    try:
        with open(Path(path), "r") as f:
            return json.load(f) or {}
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Cannot read event payload %s: %s", path, e)
        return {}


def comparison_range(env: Mapping[str, str]) -> Optional[CommitRange]:
    """
    Commits to compare for the current event.

    Pull requests compare the PR base with its head; pushes compare the
    previous tip with the new one.

    Returns:
        CommitRange, or None when there is no usable base (e.g. the first
        push of a new branch)
    """
    event = _load_event(env)

    if detect_trigger(env) == TriggerKind.PULL_REQUEST:
        pr = event.get("pull_request") or {}
        base = (pr.get("base") or {}).get("sha")
        head = (pr.get("head") or {}).get("sha")
    else:
        base = event.get("before")
        head = env.get("GITHUB_SHA") or event.get("after")

    if not base or not head or base == _NULL_SHA:
        return None
    return CommitRange(base=base, head=head)


def changed_paths(commits: Optional[CommitRange], host: Host, timeout: float) -> Optional[List[str]]:
    """
    List the files changed between two commits.

    Returns:
        Changed paths, or None if they cannot be determined
    """
    if commits is None:
        return None

    try:
        result = host.run(
            ["git", "diff", "--name-only", f"{commits.base}..{commits.head}"],
            timeout=timeout,
        )
    except ProbeError as e:
        logger.warning("git diff failed: %s", e.message)
        return None

    if not result.ok:
        logger.warning("git diff exited with %s: %s", result.returncode, result.stderr.strip())
        return None

    return [line.strip() for line in result.stdout.splitlines() if line.strip()]

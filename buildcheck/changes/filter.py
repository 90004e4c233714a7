"""
Change Relevance Filter

Decides whether a change set warrants a Windows build at all.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..config.defaults import CHANGE_PATTERNS

logger = logging.getLogger(__name__)


class TriggerKind(str, Enum):
    """What started the run."""
    PUSH = "push"
    PULL_REQUEST = "pull_request"
    MANUAL = "manual"
    TAG = "tag"


# Explicit operator intent always runs, whatever changed.
FORCED_TRIGGERS = frozenset({TriggerKind.MANUAL, TriggerKind.TAG})


@dataclass(frozen=True)
class ChangeSet:
    """Paths modified by the change under evaluation."""
    paths: FrozenSet[str]

    @classmethod
    def of(cls, paths: Iterable[str]) -> "ChangeSet":
        return cls(frozenset(p.strip() for p in paths if p and p.strip()))

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self):
        return iter(sorted(self.paths))


@dataclass(frozen=True)
class FilterDecision:
    """Outcome of the filter with the reason behind it."""
    should_run: bool
    reason: str
    matched: Tuple[str, ...] = field(default_factory=tuple)


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> "re.Pattern[str]":
    """
    Translate a glob into a regex.

    ``**`` matches any characters including ``/``; ``*`` and ``?`` stop at
    ``/``. Matching is case-sensitive and anchored at both ends.
    """
    out = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "*":
            if pattern[i:i + 2] == "**":
                out.append(".*")
                i += 2
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(c))
        i += 1
    return re.compile("".join(out) + r"\Z")


def path_matches(path: str, pattern: str) -> bool:
    """Check a single path against a single glob."""
    return _compile_glob(pattern).match(path.replace("\\", "/")) is not None


def matching_paths(paths: Iterable[str], patterns: Sequence[str]) -> List[str]:
    """Paths that match at least one pattern, sorted."""
    return sorted(p for p in paths if any(path_matches(p, pat) for pat in patterns))


def decide(
    changed_paths: Optional[Iterable[str]],
    trigger: TriggerKind,
    patterns: Optional[Sequence[str]] = None,
) -> FilterDecision:
    """
    Decide whether to run, and why.

    Args:
        changed_paths: Modified paths, or None if they could not be determined
        trigger: What started the run
        patterns: Glob patterns of relevant paths (defaults to CHANGE_PATTERNS)

    Returns:
        FilterDecision
    """
    patterns = list(patterns) if patterns is not None else CHANGE_PATTERNS

    if trigger in FORCED_TRIGGERS:
        return FilterDecision(True, f"{trigger.value} trigger always runs")

    if changed_paths is None:
        # Fail open: skipping a required build silently is worse than an extra run.
        logger.warning("Changed paths could not be determined; running anyway")
        return FilterDecision(True, "changed paths unknown")

    changes = ChangeSet.of(changed_paths)
    matched = matching_paths(changes.paths, patterns)
    if matched:
        return FilterDecision(True, f"{len(matched)} relevant change(s)", tuple(matched))

    return FilterDecision(False, f"none of {len(changes)} changed path(s) are relevant")


def should_run(
    changed_paths: Optional[Iterable[str]],
    trigger: TriggerKind,
    patterns: Optional[Sequence[str]] = None,
) -> bool:
    """Pure predicate form of ``decide``."""
    return decide(changed_paths, trigger, patterns).should_run

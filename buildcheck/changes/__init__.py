"""Change relevance filtering and change discovery."""

from .filter import (
    ChangeSet,
    FilterDecision,
    TriggerKind,
    decide,
    path_matches,
    should_run,
)
from .git import (
    CommitRange,
    changed_paths,
    ci_environment,
    comparison_range,
    detect_trigger,
)

__all__ = [
    "ChangeSet",
    "FilterDecision",
    "TriggerKind",
    "decide",
    "path_matches",
    "should_run",
    "CommitRange",
    "changed_paths",
    "ci_environment",
    "comparison_range",
    "detect_trigger",
]

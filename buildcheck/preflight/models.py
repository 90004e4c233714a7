"""
Pre-flight Check Models

Shared data types for environment verification.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import reduce
from typing import Dict, NamedTuple, Optional, Tuple


class CheckStatus(str, Enum):
    """Outcome of a single check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    INFO = "info"


class Verdict(str, Enum):
    """Overall readiness of the host."""
    READY = "ready"
    READY_WITH_WARNINGS = "ready_with_warnings"
    NOT_READY = "not_ready"


class ProbeErrorKind(str, Enum):
    """Why a probe could not report a clean pass."""
    MISSING_DEPENDENCY = "missing_dependency"
    VERSION_TOO_LOW = "version_too_low"
    PERMISSION_DENIED = "permission_denied"
    PROBE_TIMEOUT = "probe_timeout"
    WORKSPACE_MISMATCH = "workspace_mismatch"


class ProbeError(Exception):
    """
    Raised by the host adapter and by checks when a probe cannot succeed.

    The checker converts it into a CheckResult; it never reaches the caller.
    """

    def __init__(
        self,
        kind: ProbeErrorKind,
        message: str,
        secondary: bool = False,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.secondary = secondary
        self.hint = hint

    @property
    def status(self) -> CheckStatus:
        return status_for(self.kind, self.secondary)


def status_for(kind: ProbeErrorKind, secondary: bool = False) -> CheckStatus:
    """
    Map an error kind to the status it produces.

    Args:
        kind: Error category
        secondary: Only meaningful for WORKSPACE_MISMATCH; a missing
            secondary marker is a warning

    Returns:
        FAIL or WARN
    """
    if kind == ProbeErrorKind.MISSING_DEPENDENCY:
        return CheckStatus.FAIL
    if kind == ProbeErrorKind.WORKSPACE_MISMATCH:
        return CheckStatus.WARN if secondary else CheckStatus.FAIL
    return CheckStatus.WARN


@dataclass(frozen=True)
class CheckResult:
    """Result of a single pre-flight check."""
    name: str
    status: CheckStatus
    detail: str
    hint: Optional[str] = None
    kind: Optional[ProbeErrorKind] = None
    facts: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_error(cls, name: str, error: ProbeError) -> "CheckResult":
        """Build the result a ProbeError stands for."""
        return cls(
            name=name,
            status=error.status,
            detail=error.message,
            hint=error.hint,
            kind=error.kind,
        )

    @property
    def passed(self) -> bool:
        return self.status in (CheckStatus.PASS, CheckStatus.INFO)

    def to_dict(self) -> Dict[str, object]:
        """Serialize to dictionary for JSON output."""
        data: Dict[str, object] = {
            "name": self.name,
            "status": self.status.value,
            "detail": self.detail,
        }
        if self.hint:
            data["hint"] = self.hint
        if self.kind:
            data["kind"] = self.kind.value
        if self.facts:
            data["facts"] = dict(self.facts)
        return data

    def __str__(self) -> str:
        return f"[{self.status.value.upper()}] {self.name}: {self.detail}"


class ReportCounts(NamedTuple):
    """Tally of results by status."""
    passed: int = 0
    warned: int = 0
    failed: int = 0


def _tally(counts: ReportCounts, result: CheckResult) -> ReportCounts:
    if result.status == CheckStatus.PASS:
        return counts._replace(passed=counts.passed + 1)
    if result.status == CheckStatus.WARN:
        return counts._replace(warned=counts.warned + 1)
    if result.status == CheckStatus.FAIL:
        return counts._replace(failed=counts.failed + 1)
    return counts


def verdict_for(counts: ReportCounts) -> Verdict:
    """Derive the verdict from a tally."""
    if counts.failed:
        return Verdict.NOT_READY
    if counts.warned:
        return Verdict.READY_WITH_WARNINGS
    return Verdict.READY


@dataclass(frozen=True)
class EnvironmentReport:
    """
    All check results of one run.

    Counts and verdict are always derived from ``results``.
    """
    results: Tuple[CheckResult, ...]

    @classmethod
    def from_results(cls, results) -> "EnvironmentReport":
        return cls(results=tuple(results))

    @property
    def counts(self) -> ReportCounts:
        return reduce(_tally, self.results, ReportCounts())

    @property
    def verdict(self) -> Verdict:
        return verdict_for(self.counts)

    @property
    def ready(self) -> bool:
        return self.verdict != Verdict.NOT_READY

    @property
    def failures(self) -> Tuple[CheckResult, ...]:
        return tuple(r for r in self.results if r.status == CheckStatus.FAIL)

    @property
    def warnings(self) -> Tuple[CheckResult, ...]:
        return tuple(r for r in self.results if r.status == CheckStatus.WARN)

    @property
    def facts(self) -> Dict[str, str]:
        """Facts of every result merged in result order."""
        merged: Dict[str, str] = {}
        for result in self.results:
            merged.update(result.facts)
        return merged

    def get(self, name: str) -> Optional[CheckResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None

    def to_dict(self) -> Dict[str, object]:
        counts = self.counts
        return {
            "verdict": self.verdict.value,
            "counts": counts._asdict(),
            "results": [r.to_dict() for r in self.results],
        }

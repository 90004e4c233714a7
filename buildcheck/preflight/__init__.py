"""
Pre-flight Check Module

Verifies that a Windows host can build the workspace before a build starts.
"""

from .models import (
    CheckResult,
    CheckStatus,
    EnvironmentReport,
    ProbeError,
    ProbeErrorKind,
    ReportCounts,
    Verdict,
)
from .host import CommandResult, Host, SystemHost
from .checker import EnvironmentProbe
from .remediation import Remediator
from .versions import compare_version

__all__ = [
    "EnvironmentProbe",
    "Remediator",
    "CheckResult",
    "CheckStatus",
    "EnvironmentReport",
    "ProbeError",
    "ProbeErrorKind",
    "ReportCounts",
    "Verdict",
    "CommandResult",
    "Host",
    "SystemHost",
    "compare_version",
]

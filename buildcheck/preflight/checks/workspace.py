"""
Workspace Validation

Confirms the checker runs from the project root.
"""

from ...config.models import ProbeConfig
from ..host import Host
from ..models import CheckResult, CheckStatus, ProbeError, ProbeErrorKind

NAME = "workspace"


def check_workspace(config: ProbeConfig, host: Host) -> CheckResult:
    """
    Look for the marker files of the project root.

    Raises:
        ProbeError: WORKSPACE_MISMATCH, primary when the primary marker is
            missing and secondary when only a secondary marker is
    """
    ws = config.workspace
    root = host.cwd
    hint = "Run from the repository root"

    if not host.exists(str(root / ws.primary_marker)):
        raise ProbeError(
            ProbeErrorKind.WORKSPACE_MISMATCH,
            f"{ws.primary_marker} not found in {root}",
            hint=hint,
        )

    missing = [m for m in ws.secondary_markers if not host.exists(str(root / m))]
    if missing:
        raise ProbeError(
            ProbeErrorKind.WORKSPACE_MISMATCH,
            f"{root} is missing {', '.join(missing)}",
            secondary=True,
            hint=hint,
        )

    return CheckResult(
        name=NAME,
        status=CheckStatus.PASS,
        detail=f"Project root {root}",
    )

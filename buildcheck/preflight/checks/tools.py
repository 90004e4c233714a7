"""
Build Graph and Optional Tool Validation

CMake is required; the optional tools are conveniences and only warn.
"""

from ...config.models import OptionalToolConfig, ProbeConfig
from ..host import Host
from ..models import CheckResult, CheckStatus, ProbeError, ProbeErrorKind
from ..search import find_tool

BUILD_GRAPH_NAME = "build-graph-tool"


def optional_check_name(tool: OptionalToolConfig) -> str:
    return f"optional:{tool.name}"


def check_build_graph_tool(config: ProbeConfig, host: Host) -> CheckResult:
    """
    Locate the build-graph tool (CMake).

    The ``cmake-path`` fact is the directory to prepend to PATH; it is empty
    when the tool is already on PATH.
    """
    search = config.build_graph_tool
    location = find_tool(search, host)

    if location is None:
        raise ProbeError(
            ProbeErrorKind.MISSING_DEPENDENCY,
            f"{search.display_name} not found",
            hint=search.hint,
        )

    detail = f"{search.display_name} at {location.path}"
    if not location.from_candidates:
        detail += " (on PATH)"

    return CheckResult(
        name=BUILD_GRAPH_NAME,
        status=CheckStatus.PASS,
        detail=detail,
        facts={"cmake-path": location.directory if location.from_candidates else ""},
    )


def check_optional_tool(tool: OptionalToolConfig, host: Host) -> CheckResult:
    """Presence-only check; absence is a warning, never a failure."""
    path = host.which(tool.executable)

    if path:
        return CheckResult(
            name=optional_check_name(tool),
            status=CheckStatus.PASS,
            detail=f"{tool.executable} at {path}",
        )

    return CheckResult(
        name=optional_check_name(tool),
        status=CheckStatus.WARN,
        detail=f"{tool.executable} not found on PATH (optional)",
        hint=tool.hint,
    )

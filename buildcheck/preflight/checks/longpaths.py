"""
Long Path Support Validation

Checks the git and Windows settings that allow paths beyond 260 characters.
Both are warnings: builds start without them but may fail on deep paths.
"""

from ...config.models import ProbeConfig
from ..host import Host
from ..models import CheckResult, CheckStatus, ProbeError, ProbeErrorKind

GIT_NAME = "git-long-paths"
OS_NAME = "os-long-paths"

_GIT_TRUE = {"true", "yes", "on", "1"}


def check_git_long_paths(config: ProbeConfig, host: Host) -> CheckResult:
    """Check that git is configured with long path support."""
    key = config.long_paths.git_key

    try:
        result = host.run(["git", "config", "--global", "--get", key], timeout=config.timeout)
    except ProbeError as e:
        if e.kind != ProbeErrorKind.MISSING_DEPENDENCY:
            raise
        return CheckResult(
            name=GIT_NAME,
            status=CheckStatus.WARN,
            detail=f"git not found; cannot read {key}",
            hint="Install Git for Windows",
        )

    value = result.stdout.strip()
    if result.ok and value.lower() in _GIT_TRUE:
        return CheckResult(
            name=GIT_NAME,
            status=CheckStatus.PASS,
            detail=f"{key} = {value}",
        )

    return CheckResult(
        name=GIT_NAME,
        status=CheckStatus.WARN,
        detail=f"{key} is {value or 'not set'}",
        hint=f"Run: git config --global {key} true (or rerun with --fix)",
    )


def check_os_long_paths(config: ProbeConfig, host: Host) -> CheckResult:
    """Check the system-wide LongPathsEnabled registry value."""
    lp = config.long_paths

    if not host.is_windows:
        return CheckResult(
            name=OS_NAME,
            status=CheckStatus.INFO,
            detail=f"Not applicable on {host.system}",
        )

    value = host.read_registry_dword(lp.registry_key, lp.registry_value, timeout=config.timeout)

    if value == 1:
        return CheckResult(
            name=OS_NAME,
            status=CheckStatus.PASS,
            detail=f"{lp.registry_value} = 1",
        )

    return CheckResult(
        name=OS_NAME,
        status=CheckStatus.WARN,
        detail=f"{lp.registry_value} is {'not set' if value is None else value}",
        hint="Rerun with --fix from an elevated (administrator) shell",
    )

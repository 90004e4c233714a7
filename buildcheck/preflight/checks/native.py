"""
Native Build Tools Validation

Checks for the MSVC C/C++ build tools and the Windows platform SDK.
"""

import json
import logging
import re
from typing import Optional

from ...config.models import ProbeConfig
from ..host import Host
from ..models import CheckResult, CheckStatus, ProbeError, ProbeErrorKind
from ..search import expand_candidate, find_tool
from ..versions import compare_version, sort_versions

logger = logging.getLogger(__name__)

CPP_NAME = "cpp-build-tools"
SDK_NAME = "platform-sdk"


def check_cpp_build_tools(config: ProbeConfig, host: Host) -> CheckResult:
    """
    Locate the C/C++ build tools.

    vswhere is asked first when it is installed; otherwise, or when it
    reports nothing, the candidate paths and then PATH are searched.
    """
    cpp = config.cpp_tools

    installation = _query_vswhere(config, host)
    if installation:
        name = installation.get("displayName", "Visual Studio")
        path = installation.get("installationPath", "")
        return CheckResult(
            name=CPP_NAME,
            status=CheckStatus.PASS,
            detail=f"{name} at {path}",
            facts={"vs-path": path},
        )

    location = find_tool(cpp.search, host)
    if location is None:
        raise ProbeError(
            ProbeErrorKind.MISSING_DEPENDENCY,
            f"{cpp.search.display_name} not found",
            hint=cpp.search.hint,
        )

    return CheckResult(
        name=CPP_NAME,
        status=CheckStatus.PASS,
        detail=f"{cpp.search.display_name} at {location.path}",
    )


def _query_vswhere(config: ProbeConfig, host: Host) -> Optional[dict]:
    """Latest Visual Studio installation with the C++ component, per vswhere."""
    cpp = config.cpp_tools
    vswhere = expand_candidate(cpp.vswhere, host)
    if not vswhere or not host.exists(vswhere):
        return None

    try:
        result = host.run(
            [
                vswhere,
                "-latest",
                "-products", "*",
                "-requires", cpp.required_component,
                "-format", "json",
            ],
            timeout=config.timeout,
        )
    except ProbeError as e:
        logger.info("vswhere failed, falling back to path search: %s", e.message)
        return None

    if not result.ok:
        return None

    try:
        installations = json.loads(result.stdout or "[]")
    except json.JSONDecodeError:
        logger.info("vswhere returned unreadable output")
        return None

    if not installations:
        logger.info("vswhere found no installation with %s", cpp.required_component)
        return None
    return installations[0]


def check_platform_sdk(config: ProbeConfig, host: Host) -> CheckResult:
    """
    Find the newest installed SDK and compare it with the minimum.

    Returns:
        PASS if new enough, WARN if older than the minimum

    Raises:
        ProbeError: MISSING_DEPENDENCY when no SDK version directory exists
    """
    sdk = config.sdk
    minimum = sdk.minimum_version
    hint = f"Install Windows SDK version {minimum} or later"

    root = expand_candidate(sdk.root, host)
    pattern = re.compile(sdk.pattern)
    versions = [d for d in host.list_dirs(root) if pattern.match(d)] if root else []

    if not versions:
        raise ProbeError(
            ProbeErrorKind.MISSING_DEPENDENCY,
            f"No Windows SDK found under {root or sdk.root}",
            hint=hint,
        )

    latest = sort_versions(versions, descending=True)[0]

    if compare_version(latest, minimum) >= 0:
        return CheckResult(
            name=SDK_NAME,
            status=CheckStatus.PASS,
            detail=f"Windows SDK {latest} (minimum {minimum})",
            facts={"sdk-version": latest},
        )

    return CheckResult(
        name=SDK_NAME,
        status=CheckStatus.WARN,
        detail=f"Windows SDK {latest} is older than {minimum}",
        hint=hint,
        kind=ProbeErrorKind.VERSION_TOO_LOW,
        facts={"sdk-version": latest},
    )

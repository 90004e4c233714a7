"""
Rust Toolchain Validation

Checks that the toolchain manager is installed and reports compiler versions.
"""

import logging
from typing import Optional

from ...config.models import ProbeConfig
from ..host import Host
from ..models import CheckResult, CheckStatus, ProbeError, ProbeErrorKind
from ..versions import extract_version

logger = logging.getLogger(__name__)

NAME = "toolchain"


def check_toolchain(config: ProbeConfig, host: Host) -> CheckResult:
    """
    Locate the toolchain manager and report the compiler version.

    Args:
        config: Probe configuration
        host: Machine to probe

    Returns:
        PASS with the compiler version, WARN if the manager exists but the
        compiler does not answer

    Raises:
        ProbeError: MISSING_DEPENDENCY when the manager is not on PATH
    """
    tc = config.toolchain
    manager_path = host.which(tc.manager)

    if not manager_path:
        raise ProbeError(
            ProbeErrorKind.MISSING_DEPENDENCY,
            f"Rust toolchain manager '{tc.manager}' not found on PATH",
            hint=tc.hint,
        )

    try:
        compiler = host.run([tc.compiler, "--version"], timeout=config.timeout)
    except ProbeError as e:
        if e.kind != ProbeErrorKind.MISSING_DEPENDENCY:
            raise
        compiler = None

    if compiler is None or not compiler.ok:
        return CheckResult(
            name=NAME,
            status=CheckStatus.WARN,
            detail=f"{tc.manager} found at {manager_path} but {tc.compiler} is not usable",
            hint=f"Run '{tc.manager} show' in the project root to install the pinned toolchain",
        )

    version = extract_version(compiler.first_line) or "unknown"
    parts = [compiler.first_line]

    cargo_line = _tool_version_line(tc.package_manager, config.timeout, host)
    if cargo_line:
        parts.append(cargo_line)

    return CheckResult(
        name=NAME,
        status=CheckStatus.PASS,
        detail="; ".join(parts),
        facts={"rust-version": version},
    )


def _tool_version_line(executable: str, timeout: float, host: Host) -> Optional[str]:
    """First line of ``<executable> --version``, None if it cannot be read."""
    try:
        result = host.run([executable, "--version"], timeout=timeout)
    except ProbeError as e:
        logger.debug("Could not read %s version: %s", executable, e.message)
        return None
    return result.first_line if result.ok else None

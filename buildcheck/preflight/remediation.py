"""
Remediation

Automatic fixes for checks with a known cure. Fixes are only attempted on
request (``--fix``), are idempotent, and never make a result worse.
"""

import logging
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict

from ..config.models import ProbeConfig
from .checks.longpaths import GIT_NAME, OS_NAME
from .checks.toolchain import NAME as TOOLCHAIN_NAME
from .host import Host
from .models import CheckResult, CheckStatus, ProbeError, ProbeErrorKind

logger = logging.getLogger(__name__)

_RANK = {
    CheckStatus.PASS: 0,
    CheckStatus.INFO: 0,
    CheckStatus.WARN: 1,
    CheckStatus.FAIL: 2,
}


class Remediator:
    """
    Applies fixes and re-checks.

    Each fix is keyed by the name of the check it repairs.
    """

    def __init__(self, config: ProbeConfig, host: Host):
        """
        Initialize the remediator.

        Args:
            config: Probe configuration
            host: Machine to modify
        """
        self.config = config
        self.host = host
        self._fixes: Dict[str, Callable[[], None]] = {
            GIT_NAME: self.enable_git_long_paths,
            OS_NAME: self.enable_os_long_paths,
            TOOLCHAIN_NAME: self.install_toolchain,
        }

    def can_fix(self, result: CheckResult) -> bool:
        """Check if a result is a WARN/FAIL with a known fix."""
        return (
            result.status in (CheckStatus.WARN, CheckStatus.FAIL)
            and result.name in self._fixes
        )

    def remediate(
        self,
        result: CheckResult,
        recheck: Callable[[], CheckResult],
    ) -> CheckResult:
        """
        Try to fix the cause of a result and record the outcome.

        Args:
            result: Original result
            recheck: Re-runs the check after the fix

        Returns:
            The re-checked result, or the original with the attempt noted
            if the fix failed or would have made things worse
        """
        if not self.can_fix(result):
            return result

        logger.info("Attempting automatic fix for %s", result.name)
        try:
            self._fixes[result.name]()
        except ProbeError as e:
            logger.warning("Automatic fix for %s failed: %s", result.name, e.message)
            return replace(result, detail=f"{result.detail} (automatic fix failed: {e.message})")
        except Exception as e:
            logger.warning("Automatic fix for %s crashed: %s", result.name, e, exc_info=True)
            return replace(result, detail=f"{result.detail} (automatic fix failed: {e})")

        after = recheck()

        if _RANK[after.status] > _RANK[result.status]:
            return replace(
                result,
                detail=f"{result.detail} (automatic fix attempted: {after.detail})",
            )

        if after.status == CheckStatus.PASS:
            return replace(after, detail=f"{after.detail} (fixed automatically)")

        return replace(after, detail=f"{after.detail} (automatic fix attempted)")

    def enable_git_long_paths(self) -> None:
        """Set the git long path flag globally."""
        key = self.config.long_paths.git_key
        result = self.host.run(
            ["git", "config", "--global", key, "true"],
            timeout=self.config.timeout,
        )
        if not result.ok:
            raise ProbeError(
                ProbeErrorKind.PERMISSION_DENIED,
                f"git config {key} failed: {result.stderr.strip() or result.returncode}",
            )

    def enable_os_long_paths(self) -> None:
        """Write LongPathsEnabled=1; needs administrator rights."""
        if not self.host.is_windows:
            raise ProbeError(
                ProbeErrorKind.MISSING_DEPENDENCY,
                f"Long path registry setting does not exist on {self.host.system}",
            )
        lp = self.config.long_paths
        self.host.write_registry_dword(
            lp.registry_key, lp.registry_value, 1, timeout=self.config.timeout
        )

    def install_toolchain(self) -> None:
        """
        Install the toolchain manager if missing, then the pinned toolchain.

        ``rustup show`` installs whatever ``rust-toolchain.toml`` pins and is
        a no-op when it is already installed.
        """
        tc = self.config.toolchain
        cargo_bin = str(self.host.home / ".cargo" / "bin")

        if not self.host.which(tc.manager):
            installer = Path(tempfile.gettempdir()) / "rustup-init.exe"
            self.host.download(tc.installer_url, installer, timeout=tc.install_timeout)
            try:
                result = self.host.run([str(installer)] + tc.installer_args, timeout=tc.install_timeout)
            finally:
                self.host.remove_file(installer)
            if not result.ok:
                raise ProbeError(
                    ProbeErrorKind.MISSING_DEPENDENCY,
                    f"rustup-init exited with {result.returncode}",
                )

        self.host.prepend_path(cargo_bin)
        result = self.host.run([tc.manager, "show"], timeout=tc.install_timeout)
        if not result.ok:
            raise ProbeError(
                ProbeErrorKind.MISSING_DEPENDENCY,
                f"'{tc.manager} show' exited with {result.returncode}",
            )

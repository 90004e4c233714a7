"""
Pre-flight Checker

Main orchestrator for environment verification checks.
"""

import logging
from dataclasses import replace
from functools import partial
from typing import Callable, List, Optional, Tuple

from ..config.models import ProbeConfig
from .checks import (
    check_build_graph_tool,
    check_cpp_build_tools,
    check_git_long_paths,
    check_optional_tool,
    check_os_long_paths,
    check_platform_sdk,
    check_toolchain,
    check_workspace,
    optional_check_name,
)
from .host import Host, SystemHost
from .models import CheckResult, CheckStatus, EnvironmentReport, ProbeError
from .remediation import Remediator

logger = logging.getLogger(__name__)

CheckFn = Callable[[], CheckResult]


class EnvironmentProbe:
    """
    Orchestrates environment verification checks.

    Runs, in a fixed order, checks that validate:
    - The Rust toolchain manager and compiler
    - Long path support in git and in Windows
    - MSVC C/C++ build tools
    - The Windows platform SDK version
    - CMake
    - Optional tools (docker, node, an editor)
    - The working directory is the project root

    A check that fails or crashes never stops the ones after it.
    """

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        host: Optional[Host] = None,
    ):
        """
        Initialize the probe.

        Args:
            config: Probe configuration (defaults when omitted)
            host: Machine to probe (this machine when omitted)
        """
        self.config = config or ProbeConfig()
        self.host = host or SystemHost()
        self.remediator = Remediator(self.config, self.host)

    def checks(self) -> List[Tuple[str, CheckFn]]:
        """Configured checks as (name, callable) pairs, in execution order."""
        config, host = self.config, self.host
        checks: List[Tuple[str, CheckFn]] = [
            ("toolchain", partial(check_toolchain, config, host)),
            ("git-long-paths", partial(check_git_long_paths, config, host)),
            ("os-long-paths", partial(check_os_long_paths, config, host)),
            ("cpp-build-tools", partial(check_cpp_build_tools, config, host)),
            ("platform-sdk", partial(check_platform_sdk, config, host)),
            ("build-graph-tool", partial(check_build_graph_tool, config, host)),
        ]
        for tool in config.optional_tools:
            checks.append((optional_check_name(tool), partial(check_optional_tool, tool, host)))
        checks.append(("workspace", partial(check_workspace, config, host)))
        return checks

    def check_names(self) -> List[str]:
        return [name for name, _ in self.checks()]

    def run_checks(self, fix: bool = False) -> List[CheckResult]:
        """
        Run every configured check.

        Args:
            fix: Attempt known automatic fixes for WARN/FAIL results

        Returns:
            One result per configured check, in execution order
        """
        results = []
        for name, check in self.checks():
            result = self._run_isolated(name, check)
            if fix and self.remediator.can_fix(result):
                result = self.remediator.remediate(
                    result, partial(self._run_isolated, name, check)
                )
            logger.info("%s: %s", name, result.status.value)
            results.append(result)
        return results

    def run_all(self, fix: bool = False) -> EnvironmentReport:
        """
        Run every check and aggregate the results.

        Returns:
            EnvironmentReport with all check results
        """
        return EnvironmentReport.from_results(self.run_checks(fix=fix))

    def run_check(self, check_name: str, fix: bool = False) -> Optional[CheckResult]:
        """
        Run a specific check by name.

        Args:
            check_name: Name of the check to run
            fix: Attempt the check's automatic fix if it does not pass

        Returns:
            CheckResult or None if check not found
        """
        for name, check in self.checks():
            if name == check_name:
                result = self._run_isolated(name, check)
                if fix:
                    result = self.remediator.remediate(
                        result, partial(self._run_isolated, name, check)
                    )
                return result
        return None

    def _run_isolated(self, name: str, check: CheckFn) -> CheckResult:
        """Run one check, converting any error into a result."""
        try:
            result = check()
        except ProbeError as e:
            logger.debug("%s: %s (%s)", name, e.message, e.kind.value)
            return CheckResult.from_error(name, e)
        except Exception as e:
            logger.warning("Check %s crashed: %s", name, e, exc_info=True)
            return CheckResult(
                name=name,
                status=CheckStatus.FAIL,
                detail=f"Check crashed: {e}",
            )

        if result.name != name:
            result = replace(result, name=name)
        return result

from __future__ import annotations

import tempfile
from pathlib import Path

from buildcheck.config import ProbeConfig
from buildcheck.config.defaults import LONG_PATHS_REGISTRY_KEY, RUSTUP_INSTALLER_URL
from buildcheck.preflight import EnvironmentProbe, Remediator
from buildcheck.preflight.host import CommandResult
from buildcheck.preflight.models import CheckResult, CheckStatus
from conftest import FakeHost, install_rust, ok

REGISTRY = (LONG_PATHS_REGISTRY_KEY, "LongPathsEnabled")


def test_git_long_paths_fix_is_idempotent(host: FakeHost, config: ProbeConfig) -> None:
    host.git_config.clear()
    probe = EnvironmentProbe(config, host)

    first = probe.run_check("git-long-paths", fix=True)
    second = probe.run_check("git-long-paths", fix=True)

    assert first.status == CheckStatus.PASS
    assert "fixed automatically" in first.detail
    assert second.status == CheckStatus.PASS
    assert host.git_config["core.longpaths"] == "true"


def test_os_long_paths_fix_applied_twice(host: FakeHost, config: ProbeConfig) -> None:
    host.registry[REGISTRY] = 0
    remediator = Remediator(config, host)

    remediator.enable_os_long_paths()
    remediator.enable_os_long_paths()

    assert host.registry[REGISTRY] == 1
    assert EnvironmentProbe(config, host).run_check("os-long-paths").status == CheckStatus.PASS


def test_permission_denied_keeps_warning(host: FakeHost, config: ProbeConfig) -> None:
    host.registry[REGISTRY] = 0
    host.registry_writable = False

    result = EnvironmentProbe(config, host).run_check("os-long-paths", fix=True)

    assert result.status == CheckStatus.WARN
    assert "automatic fix failed" in result.detail
    assert "administrator" in result.detail


def test_fix_never_escalates_warning(host: FakeHost, config: ProbeConfig) -> None:
    original = CheckResult(name="git-long-paths", status=CheckStatus.WARN, detail="core.longpaths is not set")
    worse = CheckResult(name="git-long-paths", status=CheckStatus.FAIL, detail="git broke")

    result = Remediator(config, host).remediate(original, recheck=lambda: worse)

    assert result.status == CheckStatus.WARN
    assert "git broke" in result.detail


def test_checks_without_fixes_are_left_alone(host: FakeHost, config: ProbeConfig) -> None:
    result = CheckResult(name="platform-sdk", status=CheckStatus.FAIL, detail="missing")
    remediator = Remediator(config, host)
    assert not remediator.can_fix(result)
    assert remediator.remediate(result, recheck=lambda: None) is result


def test_toolchain_installed_by_fix(host: FakeHost, config: ProbeConfig) -> None:
    del host.executables["rustup"]
    del host.commands[("rustc", "--version")]
    installer = Path(tempfile.gettempdir()) / "rustup-init.exe"

    def run_installer(h: FakeHost) -> CommandResult:
        install_rust(h)
        return ok()

    host.commands[(str(installer), "-y", "--default-toolchain", "none")] = run_installer
    host.commands[("rustup", "show")] = ok("active toolchain\n")

    report = EnvironmentProbe(config, host).run_all(fix=True)

    toolchain = report.get("toolchain")
    assert toolchain.status == CheckStatus.PASS
    assert "fixed automatically" in toolchain.detail
    assert host.downloads == [(RUSTUP_INSTALLER_URL, installer)]
    assert host.removed == [installer]
    assert host.path_prepends == [str(Path("/home/builder") / ".cargo" / "bin")]


def test_failed_toolchain_install_keeps_failure(empty_host: FakeHost, config: ProbeConfig) -> None:
    result = EnvironmentProbe(config, empty_host).run_check("toolchain", fix=True)

    assert result.status == CheckStatus.FAIL
    assert "automatic fix failed" in result.detail
    assert "rustup" in result.detail


def test_default_run_has_no_side_effects(host: FakeHost, config: ProbeConfig) -> None:
    host.git_config.clear()
    host.registry[REGISTRY] = 0

    EnvironmentProbe(config, host).run_all()

    assert "core.longpaths" not in host.git_config
    assert host.registry[REGISTRY] == 0


class _BrokenDownloadHost(FakeHost):
    def download(self, url: str, destination: Path, timeout: float) -> None:
        raise ConnectionResetError("connection reset by peer")


def test_unexpected_fix_error_keeps_every_result(config: ProbeConfig) -> None:
    host = _BrokenDownloadHost()

    results = EnvironmentProbe(config, host).run_checks(fix=True)

    assert len(results) == len(EnvironmentProbe(config, host).check_names())
    toolchain = results[0]
    assert toolchain.name == "toolchain"
    assert toolchain.status == CheckStatus.FAIL
    assert "automatic fix failed: connection reset by peer" in toolchain.detail

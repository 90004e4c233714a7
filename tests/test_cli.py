from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from buildcheck.cli import cli
from buildcheck.preflight.host import CommandResult
from conftest import FakeHost


def _invoke(host: FakeHost, *args: str):
    return CliRunner().invoke(cli, list(args), obj={"host": host})


def test_check_ready_host_exits_zero(host: FakeHost) -> None:
    result = _invoke(host, "check", "--format", "text")
    assert result.exit_code == 0, result.output
    assert "Summary: 10 passed, 0 warned, 0 failed - READY" in result.output


def test_check_missing_toolchain_exits_nonzero(host: FakeHost) -> None:
    del host.executables["rustup"]
    result = _invoke(host, "check", "--format", "text")
    assert result.exit_code == 1
    assert "[FAIL] toolchain: Rust toolchain manager 'rustup' not found on PATH" in result.output


def test_check_table_output(host: FakeHost) -> None:
    result = _invoke(host, "check")
    assert result.exit_code == 0
    assert "Verifying Build Environment" in result.output
    assert "READY" in result.output


def test_check_json_output(host: FakeHost) -> None:
    host.git_config.clear()
    result = _invoke(host, "check", "--format", "json")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["verdict"] == "ready_with_warnings"
    assert data["counts"] == {"passed": 9, "warned": 1, "failed": 0}
    assert len(data["results"]) == 10


def test_check_fix_repairs_git_long_paths(host: FakeHost) -> None:
    host.git_config.clear()
    result = _invoke(host, "check", "--fix", "--format", "text")
    assert result.exit_code == 0
    assert host.git_config["core.longpaths"] == "true"
    assert "0 warned" in result.output


def test_check_github_outputs(host: FakeHost, tmp_path: Path) -> None:
    output = tmp_path / "output"
    summary = tmp_path / "summary.md"
    host.environ["GITHUB_OUTPUT"] = str(output)
    host.environ["GITHUB_STEP_SUMMARY"] = str(summary)

    result = _invoke(host, "check", "--format", "text", "--github")

    assert result.exit_code == 0
    assert output.read_text() == "rust-version=1.81.0\ncmake-path=C:\\Program Files\\CMake\\bin\n"
    assert "| `toolchain` |" in summary.read_text()


def test_check_invalid_config_is_usage_error(host: FakeHost, tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("timeout: -5\n")
    result = _invoke(host, "check", "--config", str(bad))
    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_should_run_with_paths() -> None:
    host = FakeHost()
    relevant = _invoke(host, "should-run", "--trigger", "pull_request", "crates/foo/src/lib.rs")
    irrelevant = _invoke(host, "should-run", "--trigger", "pull_request", "README.md")

    assert relevant.output.strip().splitlines()[-1] == "true"
    assert irrelevant.output.strip().splitlines()[-1] == "false"


def test_should_run_manual_trigger() -> None:
    result = _invoke(FakeHost(), "should-run", "--trigger", "manual")
    assert result.output.strip().splitlines()[-1] == "true"


def test_should_run_detects_trigger_from_host_environment() -> None:
    host = FakeHost()
    host.environ.update({"GITHUB_EVENT_NAME": "push", "GITHUB_REF": "refs/tags/v1.2.0"})

    result = _invoke(host, "should-run")

    assert result.output.strip().splitlines()[-1] == "true"
    assert not any(call[:2] == ["git", "diff"] for call in host.calls)


def test_should_run_diffs_push_range_from_host_environment(tmp_path: Path) -> None:
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"before": "a" * 40, "after": "b" * 40}))
    host = FakeHost()
    host.environ.update({
        "GITHUB_EVENT_NAME": "push",
        "GITHUB_REF": "refs/heads/main",
        "GITHUB_EVENT_PATH": str(event),
        "GITHUB_SHA": "b" * 40,
    })
    host.commands[("git", "diff", "--name-only", f"{'a' * 40}..{'b' * 40}")] = CommandResult(0, "docs/index.md\n")

    result = _invoke(host, "should-run")

    assert result.output.strip().splitlines()[-1] == "false"


def test_should_run_fails_open_when_diff_unavailable(tmp_path: Path) -> None:
    host = FakeHost()
    output = tmp_path / "output"
    host.environ["GITHUB_OUTPUT"] = str(output)

    result = _invoke(host, "should-run", "--trigger", "push", "--base", "abc", "--github")

    assert result.output.strip().splitlines()[-1] == "true"
    assert output.read_text() == "should_run=true\n"


def test_summarize_jobs_command() -> None:
    passing = _invoke(FakeHost(), "summarize-jobs", "Build=success", "Bundle=skipped")
    failing = _invoke(FakeHost(), "summarize-jobs", "Build=success", "Test=failure")

    assert passing.exit_code == 0
    assert failing.exit_code == 1
    assert "[FAIL] Test: Failed" in failing.output


def test_summarize_jobs_rejects_bad_argument() -> None:
    result = _invoke(FakeHost(), "summarize-jobs", "Build")
    assert result.exit_code == 2


def test_init_and_show_config(tmp_path: Path) -> None:
    target = tmp_path / "buildcheck.yaml"

    init = _invoke(FakeHost(), "init-config", "--output", str(target), "--force")
    shown = _invoke(FakeHost(), "show-config", "--config", str(target))

    assert init.exit_code == 0
    assert yaml.safe_load(target.read_text())["sdk"]["minimum_version"] == "10.0.20348.0"
    assert shown.exit_code == 0
    assert yaml.safe_load(shown.output)["timeout"] == 10.0

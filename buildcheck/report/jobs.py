"""
Pipeline job summary.

Folds the results of the pipeline's jobs into a report, so the summary job
fails the run on any failed or cancelled job but not on skipped ones.
"""

from typing import Iterable, List, Tuple

from ..preflight.models import CheckResult, CheckStatus, EnvironmentReport

JOB_STATUS = {
    "success": CheckStatus.PASS,
    "failure": CheckStatus.FAIL,
    "cancelled": CheckStatus.FAIL,
}


def parse_job_result(text: str) -> Tuple[str, str]:
    """
    Split ``"Name=result"``.

    Raises:
        ValueError: If there is no ``=`` or the name is empty
    """
    name, sep, result = text.partition("=")
    if not sep or not name.strip():
        raise ValueError(f"Expected NAME=RESULT, got '{text}'")
    return name.strip(), result.strip().lower()


def job_check_result(name: str, result: str) -> CheckResult:
    """Map one CI job result to a CheckResult."""
    status = JOB_STATUS.get(result, CheckStatus.WARN)
    labels = {
        CheckStatus.PASS: "Passed",
        CheckStatus.FAIL: "Failed" if result == "failure" else "Cancelled",
    }
    return CheckResult(
        name=name,
        status=status,
        detail=labels.get(status, result or "unknown"),
    )


def summarize_jobs(jobs: Iterable[Tuple[str, str]]) -> EnvironmentReport:
    """Build a report from (job name, result) pairs, keeping their order."""
    results: List[CheckResult] = [job_check_result(name, result) for name, result in jobs]
    return EnvironmentReport.from_results(results)

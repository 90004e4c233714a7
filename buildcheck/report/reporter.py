"""
Readiness Reporter

Turns an EnvironmentReport into an exit code and deterministic text.
"""

from typing import List, Tuple

from rich.markup import escape
from rich.table import Table

from ..preflight.models import CheckResult, CheckStatus, EnvironmentReport, Verdict

EXIT_READY = 0
EXIT_NOT_READY = 1

STATUS_LABELS = {
    CheckStatus.PASS: "PASS",
    CheckStatus.WARN: "WARN",
    CheckStatus.FAIL: "FAIL",
    CheckStatus.INFO: "INFO",
}

STATUS_STYLES = {
    CheckStatus.PASS: "green",
    CheckStatus.WARN: "yellow",
    CheckStatus.FAIL: "red",
    CheckStatus.INFO: "dim",
}

VERDICT_LABELS = {
    Verdict.READY: "READY",
    Verdict.READY_WITH_WARNINGS: "READY WITH WARNINGS",
    Verdict.NOT_READY: "NOT READY",
}


def exit_code_for(report: EnvironmentReport) -> int:
    """Warnings alone never fail the run; any failure does."""
    return EXIT_NOT_READY if report.verdict == Verdict.NOT_READY else EXIT_READY


def _shows_detail(result: CheckResult, verbose: bool) -> bool:
    return verbose or result.status == CheckStatus.FAIL


def _one_line(text: str) -> str:
    return " ".join(text.splitlines())


def render_result(result: CheckResult, verbose: bool = False) -> str:
    """The status line for one result, with its hint for WARN and FAIL."""
    line = f"[{STATUS_LABELS[result.status]}] {result.name}"
    if _shows_detail(result, verbose) and result.detail:
        line += f": {_one_line(result.detail)}"
    if result.hint and result.status in (CheckStatus.FAIL, CheckStatus.WARN):
        line += f" (hint: {_one_line(result.hint)})"
    return line


def summary_line(report: EnvironmentReport) -> str:
    counts = report.counts
    return (
        f"Summary: {counts.passed} passed, {counts.warned} warned, "
        f"{counts.failed} failed - {VERDICT_LABELS[report.verdict]}"
    )


def render_text(report: EnvironmentReport, verbose: bool = False) -> str:
    """One line per result plus a trailing summary line."""
    lines: List[str] = [render_result(result, verbose) for result in report.results]
    lines.append(summary_line(report))
    return "\n".join(lines)


def summarize(report: EnvironmentReport, verbose: bool = False) -> Tuple[int, str]:
    """
    Summarize a report.

    Args:
        report: Aggregated check results
        verbose: Include details of passing and warning checks

    Returns:
        Tuple of (exit_code, rendered_text)
    """
    return exit_code_for(report), render_text(report, verbose)


def render_table(report: EnvironmentReport, verbose: bool = False) -> Table:
    """Rich table of the results for interactive terminals."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Details")

    for result in report.results:
        style = STATUS_STYLES[result.status]
        status = f"[{style}]{STATUS_LABELS[result.status]}[/{style}]"

        details = escape(result.detail) if _shows_detail(result, verbose) else ""
        if result.hint and result.status in (CheckStatus.FAIL, CheckStatus.WARN):
            hint = f"[dim]{escape(result.hint)}[/dim]"
            details = f"{details}\n{hint}" if details else hint

        table.add_row(escape(result.name), status, details)

    return table

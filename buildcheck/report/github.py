"""
GitHub Actions integration.

Renders the Markdown step summary and writes job outputs.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from jinja2 import Environment, StrictUndefined

from ..preflight.models import CheckStatus, EnvironmentReport
from .reporter import STATUS_LABELS, VERDICT_LABELS

logger = logging.getLogger(__name__)

STATUS_ICONS = {
    CheckStatus.PASS: "✅",
    CheckStatus.WARN: "⚠️",
    CheckStatus.FAIL: "❌",
    CheckStatus.INFO: "ℹ️",
}

STEP_SUMMARY_TEMPLATE = """\
## {{ title }}

| Check | Status | Details |
|---|---|---|
{% for r in results -%}
| `{{ r.name }}` | {{ icons[r.status] }} {{ labels[r.status] }} | {{ r.detail | cell }}{% if r.hint and r.status.value in ("warn", "fail") %}<br>_{{ r.hint | cell }}_{% endif %} |
{% endfor %}
**{{ verdict }}**: {{ counts.passed }} passed, {{ counts.warned }} warned, {{ counts.failed }} failed
"""


def _cell(value: Optional[str]) -> str:
    """Make text safe inside a Markdown table cell."""
    return (value or "").replace("|", "\\|").replace("\n", " ")


def _environment() -> Environment:
    env = Environment(undefined=StrictUndefined, keep_trailing_newline=True, autoescape=False)
    env.filters["cell"] = _cell
    return env


def render_step_summary(report: EnvironmentReport, title: str = "Build Environment Verification") -> str:
    """
    Render a report as Markdown for ``$GITHUB_STEP_SUMMARY``.

    Args:
        report: Aggregated check results
        title: Heading of the summary

    Returns:
        Markdown text
    """
    template = _environment().from_string(STEP_SUMMARY_TEMPLATE)
    return template.render(
        title=title,
        results=report.results,
        icons=STATUS_ICONS,
        labels=STATUS_LABELS,
        verdict=VERDICT_LABELS[report.verdict],
        counts=report.counts,
    )


def write_github_outputs(path: Union[str, Path], values: Mapping[str, str]) -> None:
    """
    Append ``key=value`` lines to the ``$GITHUB_OUTPUT`` file.

    Args:
        path: Output file provided by the runner
        values: Outputs to publish
    """
    with open(Path(path), "a", encoding="utf-8") as f:
        for key, value in values.items():
            if "\n" in value:
                raise ValueError(f"Output '{key}' must be a single line")
            f.write(f"{key}={value}\n")
    logger.debug("Wrote %d output(s) to %s", len(values), path)


def append_step_summary(path: Union[str, Path], markdown: str) -> None:
    """Append Markdown to the ``$GITHUB_STEP_SUMMARY`` file."""
    with open(Path(path), "a", encoding="utf-8") as f:
        f.write(markdown)
        if not markdown.endswith("\n"):
            f.write("\n")

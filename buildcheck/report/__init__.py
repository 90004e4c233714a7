"""Readiness reporting: exit codes, text, tables and CI summaries."""

from .reporter import (
    EXIT_NOT_READY,
    EXIT_READY,
    exit_code_for,
    render_table,
    render_text,
    summarize,
)
from .github import append_step_summary, render_step_summary, write_github_outputs
from .jobs import parse_job_result, summarize_jobs

__all__ = [
    "EXIT_NOT_READY",
    "EXIT_READY",
    "exit_code_for",
    "render_table",
    "render_text",
    "summarize",
    "append_step_summary",
    "render_step_summary",
    "write_github_outputs",
    "parse_job_result",
    "summarize_jobs",
]

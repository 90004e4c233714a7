"""
Command-line interface for the build environment checker.

Provides commands for verifying a Windows build host, deciding whether a
change needs a Windows build, and summarizing pipeline results.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm

from . import __version__
from .changes import (
    CommitRange,
    TriggerKind,
    changed_paths,
    ci_environment,
    comparison_range,
    decide,
    detect_trigger,
)
from .config import ConfigError, ConfigLoader, ProbeConfig
from .preflight import EnvironmentProbe, Host, SystemHost
from .report import (
    append_step_summary,
    parse_job_result,
    render_step_summary,
    render_table,
    summarize,
    summarize_jobs,
    write_github_outputs,
)
from .report.reporter import VERDICT_LABELS

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Send log records to stderr through Rich."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _host(ctx: click.Context) -> Host:
    return ctx.obj.get("host") or SystemHost()


def _load_config(config: Optional[str], host: Host) -> ProbeConfig:
    try:
        loader = ConfigLoader(config) if config else ConfigLoader.discover(host.cwd)
        return loader.load().config
    except ConfigError as e:
        raise click.UsageError(str(e))


# ============================================================
# Main CLI Group
# ============================================================

@click.group()
@click.version_option(version=__version__, prog_name="buildcheck")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, debug: bool):
    """
    Windows Build Environment Checker

    Verifies that a machine can build the workspace and decides whether a
    change needs a Windows build at all.
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    _configure_logging(debug=debug)


# ============================================================
# CHECK Command
# ============================================================

@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (default: discovered in the working directory)",
)
@click.option("--fix", is_flag=True, help="Attempt automatic fixes for failed or warning checks")
@click.option("--verbose", "-v", is_flag=True, help="Show details of passing and warning checks")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "text", "json"]),
    default="table",
    help="Output format",
)
@click.option(
    "--github",
    is_flag=True,
    help="Write outputs to $GITHUB_OUTPUT and a summary to $GITHUB_STEP_SUMMARY",
)
@click.pass_context
def check(ctx, config: Optional[str], fix: bool, verbose: bool, output_format: str, github: bool):
    """Verify the build environment of this machine."""
    if verbose:
        _configure_logging(verbose=True, debug=ctx.obj.get("debug", False))

    host = _host(ctx)
    probe_config = _load_config(config, host)
    probe = EnvironmentProbe(config=probe_config, host=host)

    if output_format == "table":
        console.print("\n[bold blue]Verifying Build Environment[/bold blue]\n")
        if fix:
            console.print("[yellow]Automatic fixes enabled[/yellow]\n")

    report = probe.run_all(fix=fix)
    exit_code, text = summarize(report, verbose=verbose)

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif output_format == "text":
        click.echo(text)
    else:
        console.print(render_table(report, verbose=verbose))
        console.print()
        style = "green" if report.ready else "red"
        counts = report.counts
        console.print(
            f"[{style}]{VERDICT_LABELS[report.verdict]}: {counts.passed} passed, "
            f"{counts.warned} warnings, {counts.failed} failed[/{style}]"
        )
        if not report.ready:
            console.print("\n[bold]Please fix the failures above before building.[/bold]")

    if github:
        _publish_to_github(
            host,
            outputs={
                "rust-version": report.facts.get("rust-version", ""),
                "cmake-path": report.facts.get("cmake-path", ""),
            },
            summary=render_step_summary(report),
        )

    if exit_code:
        sys.exit(exit_code)


def _publish_to_github(host: Host, outputs: dict, summary: Optional[str] = None) -> None:
    output_path = host.env("GITHUB_OUTPUT")
    if output_path:
        write_github_outputs(output_path, outputs)
    else:
        logger.warning("GITHUB_OUTPUT is not set; outputs not written")

    summary_path = host.env("GITHUB_STEP_SUMMARY")
    if summary and summary_path:
        append_step_summary(summary_path, summary)


# ============================================================
# SHOULD-RUN Command
# ============================================================

@cli.command("should-run")
@click.argument("paths", nargs=-1)
@click.option(
    "--trigger",
    type=click.Choice([t.value for t in TriggerKind]),
    help="Trigger kind (default: detected from the GitHub Actions environment)",
)
@click.option("--base", help="Base commit to diff from")
@click.option("--head", default="HEAD", show_default=True, help="Head commit to diff to")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file with change patterns",
)
@click.option("--github", is_flag=True, help="Write should_run to $GITHUB_OUTPUT")
@click.pass_context
def should_run_command(
    ctx,
    paths: Tuple[str, ...],
    trigger: Optional[str],
    base: Optional[str],
    head: str,
    config: Optional[str],
    github: bool,
):
    """
    Decide whether a change needs a Windows build.

    Changed PATHS may be given directly; otherwise they are taken from
    git diff between --base and --head, or from the CI event.
    Prints "true" or "false".
    """
    host = _host(ctx)
    probe_config = _load_config(config, host)
    ci_env = ci_environment(host)
    trigger_kind = TriggerKind(trigger) if trigger else detect_trigger(ci_env)

    if paths:
        changed = list(paths)
    elif trigger_kind in (TriggerKind.MANUAL, TriggerKind.TAG):
        changed = []
    else:
        commits = CommitRange(base, head) if base else comparison_range(ci_env)
        changed = changed_paths(commits, host, timeout=probe_config.timeout)

    decision = decide(changed, trigger_kind, probe_config.changes.patterns)

    if decision.matched:
        err_console.print(f"Detected changes in: {', '.join(decision.matched)}")
    err_console.print(f"[dim]{decision.reason}[/dim]")

    if github:
        _publish_to_github(host, outputs={"should_run": str(decision.should_run).lower()})

    click.echo(str(decision.should_run).lower())


# ============================================================
# SUMMARIZE-JOBS Command
# ============================================================

@cli.command("summarize-jobs")
@click.argument("jobs", nargs=-1, required=True)
@click.option("--github", is_flag=True, help="Append the summary to $GITHUB_STEP_SUMMARY")
@click.pass_context
def summarize_jobs_command(ctx, jobs: Tuple[str, ...], github: bool):
    """
    Summarize pipeline job results given as NAME=RESULT.

    Fails if any job failed or was cancelled.
    """
    try:
        pairs = [parse_job_result(j) for j in jobs]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="JOBS")

    report = summarize_jobs(pairs)
    exit_code, text = summarize(report, verbose=True)
    click.echo(text)

    if github:
        summary_path = _host(ctx).env("GITHUB_STEP_SUMMARY")
        if summary_path:
            append_step_summary(summary_path, render_step_summary(report, title="Windows Build Summary"))

    if exit_code:
        sys.exit(exit_code)


# ============================================================
# CONFIG Commands
# ============================================================

@cli.command("init-config")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default="buildcheck.yaml",
    show_default=True,
    help="File to write",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file without asking")
def init_config(output: str, force: bool):
    """Write the default configuration to a YAML file."""
    output_path = Path(output)

    if output_path.exists() and not force:
        if not Confirm.ask(f"[yellow]{output} exists. Overwrite?[/yellow]"):
            console.print("[red]Aborted.[/red]")
            return

    ConfigLoader().save(output_path)

    console.print(Panel.fit(
        f"[green]Default configuration written to[/green] [cyan]{output}[/cyan]\n\n"
        f"Edit candidate paths, the minimum SDK version or the change patterns,\n"
        f"then run: [yellow]buildcheck check -c {output}[/yellow]",
        title="Configuration Created",
    ))


@cli.command("show-config")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (default: discovered in the working directory)",
)
@click.pass_context
def show_config(ctx, config: Optional[str]):
    """Print the effective configuration."""
    probe_config = _load_config(config, _host(ctx))
    click.echo(yaml.dump(probe_config.model_dump(exclude_none=True), default_flow_style=False, sort_keys=False))


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    cli()

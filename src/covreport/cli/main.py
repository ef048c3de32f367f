"""covreport CLI - covreport command."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from covreport import __version__
from covreport.ci.git import SubprocessRunner
from covreport.ci.payload import build_payload, serialize_payload
from covreport.ci.providers import detect
from covreport.ci.upload import submit
from covreport.config import CovReportConfig, load_config
from covreport.core.console import pluralize, spinner, status
from covreport.core.errors import CovReportError
from covreport.core.logging import configure_logging, get_log_file_path, get_logger
from covreport.coverage.loader import load_trace
from covreport.coverage.models import CoverageRecord, Tally
from covreport.coverage.printer import render
from covreport.coverage.zero import MarkerFileSink, zero_coverage

_TRACE_ARG = click.argument(
    "trace", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_BY_OPTION = click.option(
    "--by",
    type=click.Choice(["line", "expression"]),
    default=None,
    help="Tally granularity (default from config: line)",
)


log = get_logger("cli")


def _failure(error: CovReportError) -> click.ClickException:
    """Log the full error and point at the log file when one is configured."""
    log.error("command_failed", **error.to_dict())
    message = str(error)
    log_file = get_log_file_path()
    if log_file:
        message = f"{message}. See {log_file} for details."
    return click.ClickException(message)


def _config(ctx: click.Context) -> CovReportConfig:
    config: CovReportConfig = ctx.obj["config"]
    return config


@click.group()
@click.version_option(version=__version__, prog_name="covreport")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """covreport - Coverage summaries and uploads from execution traces."""
    ctx.ensure_object(dict)
    try:
        config = load_config()
    except CovReportError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.obj["config"] = config


@cli.command("report")
@_TRACE_ARG
@click.option(
    "--group",
    "group_by",
    type=click.Choice(["filename", "functions"]),
    default=None,
    help="Group summary lines by file or function",
)
@_BY_OPTION
@click.option("--max-groups", type=click.IntRange(min=1), default=None, help="Group lines to show")
@click.pass_context
def report_command(
    ctx: click.Context,
    trace: Path,
    group_by: str | None,
    by: str | None,
    max_groups: int | None,
) -> None:
    """Print a coverage summary for TRACE."""
    settings = _config(ctx).report
    try:
        report = load_trace(trace)
        render(
            report,
            group_by=group_by or settings.group_by,
            by=by or settings.by,
            max_groups=max_groups or settings.max_groups,
            green=settings.green_threshold,
            yellow=settings.yellow_threshold,
        )
    except CovReportError as e:
        raise _failure(e) from e


def _zero_table(rows: list[Tally]) -> Table:
    table = Table(title="Zero coverage", title_justify="left")
    table.add_column("File")
    table.add_column("Function")
    table.add_column("Line", justify="right")
    expression = bool(rows) and isinstance(rows[0], CoverageRecord)
    if expression:
        table.add_column("Columns", justify="right")
    for row in rows:
        cells = [row.filename, row.functions or "", str(row.first_line)]
        if isinstance(row, CoverageRecord):
            cells.append(f"{row.first_column}-{row.last_column}")
        table.add_row(*cells)
    return table


@cli.command("zero")
@_TRACE_ARG
@_BY_OPTION
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--markers",
    "markers_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write zero-coverage markers to this JSON file instead of listing them",
)
@click.pass_context
def zero_command(
    ctx: click.Context,
    trace: Path,
    by: str | None,
    as_json: bool,
    markers_path: Path | None,
) -> None:
    """List locations in TRACE that were never executed."""
    config = _config(ctx)
    sink = MarkerFileSink(markers_path) if markers_path else None
    try:
        report = load_trace(trace)
        result = zero_coverage(
            report,
            by=by or config.report.by,
            sink=sink,
            use_markers=config.markers.enabled,
        )
    except CovReportError as e:
        raise _failure(e) from e

    if sink is not None and not isinstance(result, list):
        status(f"Wrote {pluralize(sink.written, 'marker')} to {sink.path}", style="success")
        return
    rows = result

    if as_json:
        click.echo(json.dumps([row.as_dict() for row in rows]))
        return

    if not rows:
        status("No zero-coverage locations", style="success")
        return
    Console().print(_zero_table(rows))
    status(f"{pluralize(len(rows), 'location')} with zero coverage", style="warning")


@cli.command("upload")
@_TRACE_ARG
@click.option(
    "--repo-token",
    envvar="COVERALLS_TOKEN",
    default=None,
    help="Repo token; submits a job with git metadata",
)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory source file names are relative to (default: current directory)",
)
@click.option("--dry-run", is_flag=True, help="Print the payload instead of submitting it")
@click.pass_context
def upload_command(
    ctx: click.Context,
    trace: Path,
    repo_token: str | None,
    root: Path | None,
    dry_run: bool,
) -> None:
    """Upload TRACE coverage to the coverage service."""
    config = _config(ctx)
    token = repo_token or config.upload.repo_token
    try:
        report = load_trace(trace)
        ci = detect()
        payload = build_payload(
            report,
            ci,
            token,
            run=SubprocessRunner(cwd=root, timeout=config.git.timeout_sec),
            root=root,
        )
        if dry_run:
            click.echo(serialize_payload(payload))
            return
        with spinner("Uploading coverage"):
            response = submit(
                payload,
                endpoint=config.upload.endpoint,
                timeout=config.upload.timeout_sec,
            )
    except CovReportError as e:
        raise _failure(e) from e

    files = pluralize(len(payload["source_files"]), "file")
    status(f"Uploaded {files} (HTTP {response.status_code})", style="success")


if __name__ == "__main__":
    cli()

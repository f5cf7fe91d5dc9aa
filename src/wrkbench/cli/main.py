"""Main CLI entry point for wrkbench.

This module defines the Typer application and all CLI commands.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer

from wrkbench import __version__
from wrkbench.benchmarks.period import HistoryPeriod

if TYPE_CHECKING:
    from wrkbench.core.config import Settings
    from wrkbench.regression.models import RegressionResult, Variance

# Create the main Typer app
app = typer.Typer(
    name="wrkbench",
    help="wrkbench: HTTP benchmarks with wrk, with history and regression tracking.",
    add_completion=False,
    no_args_is_help=True,
)

# Global state for options
state: dict[str, bool] = {
    "json": False,
    "no_color": False,
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wrkbench v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
    no_color: Annotated[
        bool,
        typer.Option(
            "--no-color",
            help="Disable colored output.",
        ),
    ] = False,
) -> None:
    """wrkbench: HTTP benchmarks with history and regression tracking.

    Run wrk against an endpoint, keep every run on disk and compare new
    runs with the best runs of the past.
    """
    from wrkbench.core.config import Settings

    state["json"] = json_output
    state["no_color"] = no_color
    logging.basicConfig(
        level=getattr(logging, Settings().log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version() -> None:
    """Show the current version."""
    typer.echo(f"wrkbench v{__version__}")


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _settings(history_dir: str | None = None, max_error_percentage: float | None = None) -> Settings:
    """Settings from the environment, with command line overrides."""
    from wrkbench.core.config import Settings

    overrides: dict[str, Any] = {}
    if history_dir is not None:
        overrides["history_dir"] = Path(history_dir)
    if max_error_percentage is not None:
        overrides["max_error_percentage"] = max_error_percentage
    return Settings(**overrides)


def _parse_headers(headers: list[str] | None) -> dict[str, str]:
    """Parse ``Name: value`` header options."""
    parsed: dict[str, str] = {}
    for header in headers or []:
        name, separator, value = header.partition(":")
        if not separator or not name.strip():
            raise _fail(f"Invalid header '{header}', expected 'Name: value'")
        parsed[name.strip()] = value.strip()
    return parsed


def _json_delta(value: float) -> float | str:
    if math.isinf(value):
        return "+inf" if value > 0 else "-inf"
    return round(value, 4)


def _variance_to_dict(variance: Variance, result: RegressionResult) -> dict[str, Any]:
    return {
        "timestamp": variance.timestamp.isoformat() if variance.timestamp else None,
        "verdict": result.verdict,
        "current": variance.new.model_dump(mode="json"),
        "old": variance.old.model_dump(mode="json"),
        "delta": {metric: _json_delta(value) for metric, value in variance.delta.items()},
        "alerts": [
            {"metric": alert.metric, "severity": alert.severity, "message": alert.message}
            for alert in result.alerts
        ],
        "improvements": [{"metric": change.metric, "message": change.message} for change in result.improvements],
    }


def _report(variance: Variance, markdown: str | None, fail_on_regression: bool, title: str) -> None:
    """Print a variance, optionally write markdown and gate on regressions."""
    from wrkbench.regression import RegressionDetector
    from wrkbench.reporters import ConsoleReporter, MarkdownReporter

    result = RegressionDetector().detect(variance)

    if state["json"]:
        typer.echo(json.dumps(_variance_to_dict(variance, result), indent=2))
    else:
        reporter = ConsoleReporter(use_colors=not state["no_color"])
        reporter.report_variance(variance, title=title)
        reporter.report_regression(result)

    if markdown:
        path = MarkdownReporter().write(variance, markdown)
        if not state["json"]:
            typer.echo(f"  Markdown report saved to: {path}")

    if fail_on_regression and result.has_regressions:
        raise typer.Exit(1)


@app.command()
def bench(
    url: Annotated[
        str,
        typer.Argument(help="Full URL of the request to benchmark, e.g. http://localhost:8080/api."),
    ],
    threads: Annotated[
        int,
        typer.Option("--threads", "-t", min=1, help="Number of wrk threads."),
    ] = 8,
    connections: Annotated[
        int,
        typer.Option("--connections", "-c", min=1, help="Number of open connections."),
    ] = 32,
    duration: Annotated[
        int,
        typer.Option("--duration", "-d", min=1, help="Duration of each run in seconds."),
    ] = 30,
    exponential: Annotated[
        bool,
        typer.Option("--exponential", help="Run the 16-profile threads x connections grid."),
    ] = False,
    plan: Annotated[
        str | None,
        typer.Option("--plan", "-p", help="Path to a YAML benchmark plan."),
    ] = None,
    period: Annotated[
        HistoryPeriod,
        typer.Option("--period", case_sensitive=False, help="History window to compare against."),
    ] = HistoryPeriod.LAST,
    history_dir: Annotated[
        str | None,
        typer.Option("--history-dir", help="Directory where history is stored."),
    ] = None,
    max_error_percentage: Annotated[
        float | None,
        typer.Option("--max-error-percentage", help="Max percentage of failed requests for a healthy run."),
    ] = None,
    method: Annotated[
        str,
        typer.Option("--method", "-m", help="HTTP method."),
    ] = "GET",
    header: Annotated[
        list[str] | None,
        typer.Option("--header", "-H", help="Request header as 'Name: value'. Repeatable."),
    ] = None,
    body: Annotated[
        str,
        typer.Option("--body", help="Request body."),
    ] = "",
    script: Annotated[
        str | None,
        typer.Option("--script", "-s", help="User Lua script (must not define done())."),
    ] = None,
    markdown: Annotated[
        str | None,
        typer.Option("--markdown", help="Write the comparison as markdown to this file."),
    ] = None,
    fail_on_regression: Annotated[
        bool,
        typer.Option("--fail-on-regression", help="Exit with status 1 if a regression is detected."),
    ] = False,
) -> None:
    """Benchmark an endpoint and compare with history.

    Examples:
        wrkbench bench http://localhost:8080/api
        wrkbench bench http://localhost:8080/api -t 4 -c 64 -d 10
        wrkbench bench http://localhost:8080/api --exponential --period day
        wrkbench bench http://localhost:8080/api --plan plan.yaml --fail-on-regression
    """
    from pydantic import ValidationError

    from wrkbench.adapters import WrkExecutor
    from wrkbench.benchmarks import BenchmarkHistory
    from wrkbench.core import BenchmarkConfig, BenchmarkPlan, NoHistoryError, WrkBenchError

    settings = _settings(history_dir, max_error_percentage)
    try:
        executor = WrkExecutor(
            url,
            method=method,
            headers=_parse_headers(header),
            body=body,
            user_script=script,
            wrk_binary=settings.wrk_binary,
            timeout=settings.timeout_seconds,
        )
    except WrkBenchError as e:
        raise _fail(str(e)) from e

    if plan:
        try:
            configs = BenchmarkPlan.from_yaml(plan).benchmarks
        except (FileNotFoundError, ValidationError) as e:
            raise _fail(str(e)) from e
    elif exponential:
        configs = BenchmarkConfig.exponential(timedelta(seconds=duration))
    else:
        configs = [BenchmarkConfig(threads=threads, connections=connections, duration=duration)]

    if not configs:
        raise _fail("No benchmarks to run")

    history = BenchmarkHistory.from_settings(executor, settings)
    try:
        runs = history.bench(configs)
    except WrkBenchError as e:
        raise _fail(str(e)) from e

    if not state["json"]:
        typer.echo()
        for run in runs:
            status = "ok" if run.success else f"failed {run.error}".rstrip()
            typer.echo(f"  {run.config}: {run.requests_per_sec:.2f} requests/sec ({status})")

    try:
        variance = history.variance(period)
    except NoHistoryError as e:
        if state["json"]:
            typer.echo(json.dumps({"runs": [run.model_dump(mode="json") for run in runs], "variance": None}))
        else:
            typer.echo(f"  No history to compare with yet ({e}).")
        return
    except WrkBenchError as e:
        raise _fail(str(e)) from e

    _report(variance, markdown, fail_on_regression, title=f"Variance against {period.value} history")


@app.command()
def compare(
    period: Annotated[
        HistoryPeriod,
        typer.Option("--period", case_sensitive=False, help="History window to compare against."),
    ] = HistoryPeriod.LAST,
    history_dir: Annotated[
        str | None,
        typer.Option("--history-dir", help="Directory where history is stored."),
    ] = None,
    markdown: Annotated[
        str | None,
        typer.Option("--markdown", help="Write the comparison as markdown to this file."),
    ] = None,
    fail_on_regression: Annotated[
        bool,
        typer.Option("--fail-on-regression", help="Exit with status 1 if a regression is detected."),
    ] = False,
) -> None:
    """Compare the most recent stored run with earlier history.

    Examples:
        wrkbench compare
        wrkbench compare --period week --markdown variance.md
    """
    from wrkbench.benchmarks import JSONHistoryStore, best_run
    from wrkbench.core import WrkBenchError
    from wrkbench.regression import compare as compare_runs

    settings = _settings(history_dir)
    store = JSONHistoryStore(settings.history_dir)
    try:
        records = store.list(limit=1)
        if not records:
            raise _fail(f"No history records in {settings.history_dir}")
        latest = records[0]
        new = best_run(latest.runs)
        history = store.load(
            period, True, known=latest.runs, exclude_timestamp=latest.timestamp, now=latest.timestamp
        )
        variance = compare_runs(new, best_run(history))
    except WrkBenchError as e:
        raise _fail(str(e)) from e

    _report(variance, markdown, fail_on_regression, title=f"Variance against {period.value} history")


@app.command()
def history(
    period: Annotated[
        HistoryPeriod,
        typer.Option("--period", case_sensitive=False, help="History window to list."),
    ] = HistoryPeriod.FOREVER,
    history_dir: Annotated[
        str | None,
        typer.Option("--history-dir", help="Directory where history is stored."),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Maximum number of records to show."),
    ] = 20,
) -> None:
    """List stored benchmark records, most recent first.

    Examples:
        wrkbench history
        wrkbench history --period week --limit 5
    """
    from wrkbench.benchmarks import JSONHistoryStore, best_run
    from wrkbench.benchmarks.models import format_timestamp
    from wrkbench.core import StatsError, WrkBenchError

    settings = _settings(history_dir)
    store = JSONHistoryStore(settings.history_dir)
    try:
        records = store.list(period=period, limit=limit)
    except WrkBenchError as e:
        raise _fail(str(e)) from e

    rows: list[dict[str, Any]] = []
    for record in records:
        try:
            best: float | None = best_run(record.runs).requests_per_sec
        except StatsError:
            best = None
        rows.append(
            {
                "timestamp": format_timestamp(record.timestamp),
                "runs": len(record.runs),
                "successful": sum(1 for run in record.runs if run.success),
                "best_requests_per_sec": best,
            }
        )

    if state["json"]:
        typer.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        typer.echo(f"  No history records in {settings.history_dir}")
        return

    typer.echo()
    for row in rows:
        best_text = f"{row['best_requests_per_sec']:.2f}" if row["best_requests_per_sec"] is not None else "-"
        typer.echo(
            f"  {row['timestamp']}  runs: {row['runs']}  successful: {row['successful']}  "
            f"best requests/sec: {best_text}"
        )
    typer.echo()


if __name__ == "__main__":
    app()

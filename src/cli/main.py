"""`tempo` command line.

    tempo [OPTIONS] log DATE [HOURS]
    tempo [OPTIONS] see DATE
    tempo doctor run | setup

Configuration problems, rejected credentials and malformed arguments stop the
process with status 1 before any day is processed. Failures on a single day
are printed and the remaining days are still processed.
"""

from __future__ import annotations

import logging
from datetime import date

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.jira_client import authenticate
from adapters.tempo_client import TempoClient
from cli import __version__, doctor
from cli.ui_components import build_hooks, print_fatal
from core.config import AppSettings, load_settings
from core.errors import ConfigError, InvalidDateFormat, InvalidHoursFormat
from core.services.date_expressions import parse_date_expression, parse_hours
from core.services.timesheet import Timesheet, TimesheetHooks

DATE_HELP = "week[+N|-N], today[+N|-N], YYYY/MM/DD or YYYY-MM-DD"

app = typer.Typer(
    no_args_is_help=True,
    help="Log worked hours using Jira and the Tempo plugin.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; keep it for --debug only.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"tempo {__version__}")
        raise typer.Exit()


def load_cli_settings(ctx: typer.Context) -> AppSettings:
    try:
        return load_settings(ctx.obj or {})
    except ConfigError as exc:
        print_fatal(_console, str(exc))
        raise typer.Exit(code=1) from exc


def _parse_args(date_expr: str, hours: str | None, default_hours: int) -> tuple[list[date], int]:
    try:
        return parse_date_expression(date_expr), parse_hours(hours, default=default_hours)
    except (InvalidDateFormat, InvalidHoursFormat) as exc:
        print_fatal(_console, str(exc))
        raise typer.Exit(code=1) from exc


def open_timesheet(
    settings: AppSettings,
    hooks: TimesheetHooks,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Timesheet:
    """Authenticate against Jira and wire both clients; exit on bad credentials."""

    result = authenticate(settings, transport=transport)
    if not result.ok or result.client is None:
        print_fatal(_console, str(result.error))
        raise typer.Exit(code=1)

    tracker = result.client
    tempo = TempoClient(
        settings=settings,
        author_account_id=tracker.user.account_id,
        transport=transport,
    )
    return Timesheet(tracker=tracker, time_log=tempo, hooks=hooks)


@app.callback()
def main(
    ctx: typer.Context,
    jira_url: str | None = typer.Option(
        None,
        "--jira-url",
        help="Base url for your company Jira (e.g. https://my-company.atlassian.net/) [env: JIRA_URL]",
    ),
    jira_project_key: str | None = typer.Option(
        None,
        "--jira-project-key",
        help="Key of the Jira project used to track timesheet tasks [env: JIRA_PROJECT_KEY]",
    ),
    jira_user: str | None = typer.Option(
        None,
        "--jira-user",
        help="Jira username (email) [env: JIRA_USERNAME]",
    ),
    jira_token: str | None = typer.Option(
        None,
        "--jira-token",
        help="Jira REST API token [env: JIRA_TOKEN]",
    ),
    tempo_token: str | None = typer.Option(
        None,
        "--tempo-token",
        help="Tempo REST API token [env: TEMPO_TOKEN]",
    ),
    debug: bool = typer.Option(False, "--debug", help="Log HTTP traffic and response dumps."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Log worked hours using Jira and the Tempo plugin."""

    configure_logging(debug)
    ctx.obj = {
        "jira_url": jira_url,
        "jira_project_key": jira_project_key,
        "jira_username": jira_user,
        "jira_token": jira_token,
        "tempo_token": tempo_token,
    }


@app.command("log")
def log_command(
    ctx: typer.Context,
    date_expr: str = typer.Argument(..., metavar="DATE", help=DATE_HELP),
    hours: str | None = typer.Argument(None, metavar="[HOURS]", help="Whole hours per day (default: 8)."),
) -> None:
    """Create a Jira ticket per day and assign it worked hours in Tempo."""

    settings = load_cli_settings(ctx)
    days, worked = _parse_args(date_expr, hours, settings.default_hours)

    with open_timesheet(settings, build_hooks(_console)) as timesheet:
        timesheet.log_days(days, worked)

    _console.print("Done. Have a nice day!")


@app.command("see")
def see_command(
    ctx: typer.Context,
    date_expr: str = typer.Argument(..., metavar="DATE", help=DATE_HELP),
) -> None:
    """Check that a Jira ticket and a Tempo entry exist for each day."""

    settings = load_cli_settings(ctx)
    days, _ = _parse_args(date_expr, None, settings.default_hours)

    with open_timesheet(settings, build_hooks(_console)) as timesheet:
        timesheet.see_days(days)


def run() -> None:
    app()

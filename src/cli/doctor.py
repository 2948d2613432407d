"""Doctor commands: environment diagnostics and first-time setup."""

from __future__ import annotations

import httpx
import typer
from rich.console import Console

from adapters.http_client import build_client
from adapters.jira_client import authenticate
from cli.ui_components import build_doctor_table
from core.config import AppSettings, load_settings, write_user_env_vars
from core.errors import ConfigError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_jira(settings: AppSettings) -> tuple[bool, str]:
    result = authenticate(settings)
    if not result.ok or result.client is None:
        return False, str(result.error)
    user = result.client.user
    result.client.close()
    return True, f"{user.display_name or user.email_address or '?'} ({user.account_id})"


def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    """Any HTTP answer counts as reachable; only network failures fail."""

    try:
        with build_client(settings, base_url=url) as client:
            response = client.get("")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc)


@app.command()
def run(ctx: typer.Context) -> None:
    """Check configuration, Jira credentials and Tempo reachability."""

    table = build_doctor_table()

    try:
        settings = load_settings(ctx.obj or {})
    except ConfigError as exc:
        table.add_row("Configuration", "FAIL", str(exc))
        _console.print(table)
        _console.print("\n[yellow]Hint:[/yellow] run `tempo doctor setup` or export the JIRA_*/TEMPO_* variables.")
        raise typer.Exit(code=1) from exc

    table.add_row("Configuration", "OK", f"project {settings.jira_project_key} on {settings.jira_url}")

    ok_jira, detail_jira = _check_jira(settings)
    table.add_row("Jira credentials", "OK" if ok_jira else "FAIL", detail_jira)

    ok_tempo, detail_tempo = _check_http(settings, settings.tempo_api_url)
    table.add_row("Tempo connectivity", "OK" if ok_tempo else "FAIL", detail_tempo)

    _console.print(table)
    if not (ok_jira and ok_tempo):
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive setup (stores credentials in the per-user .env)."""

    jira_url = typer.prompt("Jira base URL (e.g. https://my-company.atlassian.net/)").strip()
    project_key = typer.prompt("Jira project key").strip()
    username = typer.prompt("Jira username (email)").strip()
    jira_token = typer.prompt("Jira API token", hide_input=True).strip()
    tempo_token = typer.prompt("Tempo API token", hide_input=True).strip()

    if not all((jira_url, project_key, username, jira_token, tempo_token)):
        raise typer.BadParameter("all values are required")

    env_path = write_user_env_vars(
        {
            "JIRA_URL": jira_url,
            "JIRA_PROJECT_KEY": project_key,
            "JIRA_USERNAME": username,
            "JIRA_TOKEN": jira_token,
            "TEMPO_TOKEN": tempo_token,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")

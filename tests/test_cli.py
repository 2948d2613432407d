"""
Unit Tests for the `tempo` CLI
==============================
"""
import functools
from datetime import date

import pytest
from typer.testing import CliRunner

import cli.doctor as doctor
import cli.main as cli_main
from core.config import load_settings
from core.services.date_expressions import week_days

runner = CliRunner()

ENV_VARS = ("JIRA_URL", "JIRA_PROJECT_KEY", "JIRA_USERNAME", "JIRA_TOKEN", "TEMPO_TOKEN", "TEMPO_TIMESHEET_TEMPO_API_URL")


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    no_files = functools.partial(load_settings, use_env_files=False)
    monkeypatch.setattr(cli_main, "load_settings", no_files)
    monkeypatch.setattr(doctor, "load_settings", no_files)


@pytest.fixture
def wired(monkeypatch, transport):
    monkeypatch.setattr(
        cli_main,
        "open_timesheet",
        functools.partial(cli_main.open_timesheet, transport=transport),
    )
    monkeypatch.setenv("TEMPO_TIMESHEET_TEMPO_API_URL", "https://api.tempo.test/core/3")


FLAGS = [
    "--jira-url", "https://acme.atlassian.test",
    "--jira-project-key", "TS",
    "--jira-user", "dev@acme.test",
    "--jira-token", "jira-token",
    "--tempo-token", "tempo-token",
]


class TestLog:

    def test_logs_each_day(self, wired, backend):
        result = runner.invoke(cli_main.app, FLAGS + ["log", "2024/03/04", "6"])

        assert result.exit_code == 0, result.output
        assert "https://acme.atlassian.test/browse/TS-1  6h  2024/03/04 Monday" in result.output
        assert "Done. Have a nice day!" in result.output
        assert backend.worklogs[0]["billableSeconds"] == 21600

    def test_default_hours(self, wired, backend):
        result = runner.invoke(cli_main.app, FLAGS + ["log", "2024-03-04"])

        assert result.exit_code == 0, result.output
        assert backend.worklogs[0]["timeSpentSeconds"] == 8 * 3600

    def test_week(self, wired, backend):
        result = runner.invoke(cli_main.app, FLAGS + ["log", "week", "6"])

        assert result.exit_code == 0, result.output
        expected = [d.strftime("%Y/%m/%d") for d in week_days(date.today())]
        assert [i["summary"][:10] for i in backend.issues] == expected

    def test_per_day_failure_does_not_change_exit_status(self, wired, backend):
        backend.reject_summaries.add("2024/03/04 Monday")

        result = runner.invoke(cli_main.app, FLAGS + ["log", "2024/03/04"])

        assert result.exit_code == 0
        assert "Failed attempt to log 8 hours for Monday 2024-03-04" in result.output
        assert backend.worklogs == []

    def test_environment_configuration(self, wired, backend, monkeypatch):
        monkeypatch.setenv("JIRA_URL", "https://acme.atlassian.test/")
        monkeypatch.setenv("JIRA_PROJECT_KEY", "TS")
        monkeypatch.setenv("JIRA_USERNAME", "dev@acme.test")
        monkeypatch.setenv("JIRA_TOKEN", "jira-token")
        monkeypatch.setenv("TEMPO_TOKEN", "tempo-token")

        result = runner.invoke(cli_main.app, ["log", "2024/03/04", "2"])

        assert result.exit_code == 0, result.output
        assert len(backend.worklogs) == 1


class TestFatalErrors:

    def test_invalid_date(self, wired, backend):
        result = runner.invoke(cli_main.app, FLAGS + ["log", "banana"])

        assert result.exit_code == 1
        assert "unrecognized argument for date" in result.output
        assert backend.requests == []

    def test_offset_beyond_calendar(self, wired, backend):
        result = runner.invoke(cli_main.app, FLAGS + ["log", "today+99999999"])

        assert result.exit_code == 1
        assert "unrecognized argument for date" in result.output
        assert "Traceback" not in result.output
        assert backend.requests == []

    def test_invalid_hours(self, wired, backend):
        result = runner.invoke(cli_main.app, FLAGS + ["log", "today", "lots"])

        assert result.exit_code == 1
        assert "unrecognized argument for hours" in result.output
        assert backend.requests == []

    def test_missing_configuration(self, wired, backend):
        result = runner.invoke(cli_main.app, ["log", "today"])

        assert result.exit_code == 1
        assert "JIRA_URL" in result.output
        assert backend.requests == []

    def test_bad_credentials(self, wired, backend):
        backend.jira_token = "something-else"

        result = runner.invoke(cli_main.app, FLAGS + ["see", "week"])

        assert result.exit_code == 1
        assert "error while fetching Jira user" in result.output
        assert len(backend.requests) == 1


class TestSee:

    def test_reports_hours(self, wired, backend):
        runner.invoke(cli_main.app, FLAGS + ["log", "2024/03/04", "3"])

        result = runner.invoke(cli_main.app, FLAGS + ["see", "2024/03/04"])

        assert result.exit_code == 0, result.output
        assert "https://acme.atlassian.test/browse/TS-1  3h  2024/03/04 Monday" in result.output

    def test_missing_ticket(self, wired):
        result = runner.invoke(cli_main.app, FLAGS + ["see", "2024/03/05"])

        assert result.exit_code == 0
        assert "Failed attempt to see logged hours for Tuesday 2024-03-05" in result.output
        assert "found no issue" in result.output


class TestVersion:

    def test_version(self):
        result = runner.invoke(cli_main.app, ["--version"])
        assert result.exit_code == 0
        assert "tempo 1.0" in result.output


class TestScriptEntry:

    def test_main_runs_the_cli(self, monkeypatch):
        import main

        calls = []
        monkeypatch.setattr(main, "run", lambda: calls.append("run"))

        main.main()

        assert calls == ["run"]

    def test_run_is_the_console_script(self):
        import main

        assert main.run is cli_main.run

class TestDoctor:

    def test_setup_writes_user_env(self, tmp_path):
        answers = "https://acme.atlassian.net/\nTS\ndev@acme.test\njira-token\ntempo-token\n"

        result = runner.invoke(cli_main.app, ["doctor", "setup"], input=answers)

        assert result.exit_code == 0, result.output
        env_file = tmp_path / "config" / "tempo-timesheet" / ".env"
        content = env_file.read_text(encoding="utf-8")
        assert "JIRA_URL=https://acme.atlassian.net/" in content
        assert "TEMPO_TOKEN=tempo-token" in content

    def test_run_without_configuration(self):
        result = runner.invoke(cli_main.app, ["doctor", "run"])

        assert result.exit_code == 1
        assert "Configuration" in result.output
        assert "FAIL" in result.output

    def test_run_reports_checks(self, monkeypatch):
        monkeypatch.setattr(doctor, "_check_jira", lambda settings: (True, "Dev (acc-123)"))
        monkeypatch.setattr(doctor, "_check_http", lambda settings, url: (True, "HTTP 404"))

        result = runner.invoke(cli_main.app, FLAGS + ["doctor", "run"])

        assert result.exit_code == 0, result.output
        assert "Jira credentials" in result.output
        assert "Tempo connectivity" in result.output

"""Application configuration.

- Centralizes environment variables (pydantic-settings) so the CLI and the
  adapters read the same, already validated values.
- Settings are frozen: loaded once at startup and passed explicitly to both
  clients.

Lookup order for every field: CLI flag, environment variable, `./.env`,
per-user `.env` (see `get_user_env_file`).

The five credentials keep their bare `JIRA_*`/`TEMPO_*` names; every other
setting is read from `TEMPO_TIMESHEET_<FIELD>`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Mapping

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigError

APP_NAME = "tempo-timesheet"
ENV_PREFIX = "TEMPO_TIMESHEET_"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: Mapping[str, str | None], env_path: Path | None = None) -> Path:
    """Write/update variables in the per-user .env, keeping unrelated keys."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# tempo-timesheet user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central, immutable configuration of the tool."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        # Project first (dev), then the per-user file written by `doctor setup`.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    # An explicit alias bypasses ENV_PREFIX: these read JIRA_URL, TEMPO_TOKEN...
    jira_url: str = Field(
        ...,
        validation_alias="jira_url",
        min_length=1,
        description="Base URL of the company Jira (e.g. https://my-company.atlassian.net/).",
    )
    jira_project_key: str = Field(
        ...,
        validation_alias="jira_project_key",
        min_length=1,
        description="Key of the Jira project used to track timesheet tasks.",
    )
    jira_username: str = Field(
        ...,
        validation_alias="jira_username",
        min_length=1,
        description="Jira username (email).",
    )
    jira_token: str = Field(
        ...,
        validation_alias="jira_token",
        min_length=1,
        description="Jira REST API token.",
    )
    tempo_token: str = Field(
        ...,
        validation_alias="tempo_token",
        min_length=1,
        description="Tempo REST API token.",
    )

    tempo_api_url: str = Field(
        default="https://api.tempo.io/core/3",
        min_length=8,
        description="Base URL of the Tempo REST API.",
    )
    jira_api_path: str = Field(
        default="rest/api/2",
        min_length=1,
        description="Path of the Jira REST API, relative to jira_url.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    default_hours: int = Field(
        default=8,
        ge=0,
        le=24,
        description="Hours logged per day when none are given.",
    )
    user_agent: str = Field(
        default=f"{APP_NAME}/1.0",
        min_length=1,
        description="User-Agent sent to both APIs.",
    )

    @field_validator("jira_url")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value.endswith("/"):
            value += "/"
        return value

    @field_validator("jira_api_path")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return value.strip().strip("/")


def _env_name(name: str) -> str:
    field = AppSettings.model_fields.get(name)
    if field is not None and field.validation_alias is None:
        return ENV_PREFIX + name.upper()
    return name.upper()


def load_settings(
    overrides: Mapping[str, Any] | None = None,
    *,
    use_env_files: bool = True,
) -> AppSettings:
    """Build `AppSettings`, letting non-empty `overrides` (CLI flags) win.

    Raises `ConfigError` naming every missing or invalid setting.
    """

    values = {k: v for k, v in (overrides or {}).items() if v is not None}
    if not use_env_files:
        values["_env_file"] = None
    try:
        return AppSettings(**values)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            name = ".".join(str(part) for part in error.get("loc", ()))
            problems.append(f"{_env_name(name)}: {error.get('msg', 'invalid value')}")
        raise ConfigError("invalid configuration: " + "; ".join(problems)) from exc

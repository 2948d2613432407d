"""Jira adapter: identity, ticket creation and ticket search.

Uses the Jira REST API v2 with HTTP basic auth (username/email + API token).
Query language reference:
https://support.atlassian.com/jira-software-cloud/docs/advanced-search-reference-jql-fields/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.http_client import build_client, json_body, send
from core.config import AppSettings
from core.domain.models import JiraUser, Ticket
from core.domain.naming import issue_summary, summary_search_variants
from core.errors import (
    AmbiguousResultError,
    AuthError,
    CreateError,
    NotFoundError,
    TransportError,
)

logger = logging.getLogger(__name__)

SERVICE = "jira"
ISSUE_TYPE = "Task"


def _jql_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_search_jql(*, assignee: str, project_key: str, day: date) -> str:
    slashed, hyphenated = summary_search_variants(day)
    return (
        f"assignee = {_jql_string(assignee)}"
        f" AND (summary ~ {_jql_string(slashed)} OR summary ~ {_jql_string(hyphenated)})"
        f" AND project = {_jql_string(project_key)}"
    )


def _ticket_from_issue(issue: dict[str, Any]) -> Ticket:
    fields = issue.get("fields") or {}
    assignee = fields.get("assignee") or {}
    return Ticket(
        key=issue.get("key", ""),
        summary=fields.get("summary") or "",
        assignee_account_id=assignee.get("accountId"),
        self_url=issue.get("self") or "",
    )


@dataclass(frozen=True)
class AuthResult:
    """Outcome of `authenticate`; callers decide whether to stop."""

    client: JiraClient | None = None
    error: AuthError | None = None

    @property
    def ok(self) -> bool:
        return self.client is not None and self.error is None


class JiraClient:
    """Maps a day to its ticket, by creating it or by finding it."""

    def __init__(self, *, settings: AppSettings, user: JiraUser, http: httpx.Client) -> None:
        self._settings = settings
        self._http = http
        self.user = user

    @property
    def project_key(self) -> str:
        return self._settings.jira_project_key

    def close(self) -> None:
        self._http.close()

    def create_ticket(self, day: date) -> Ticket:
        """Create the ticket for `day`, assigned to the caller.

        The create response only holds `id`, `key` and `self`; the returned
        ticket carries the summary and assignee that were sent.
        """

        summary = issue_summary(day)
        payload = {
            "fields": {
                "assignee": {"accountId": self.user.account_id},
                "project": {"key": self.project_key},
                "summary": summary,
                "issuetype": {"name": ISSUE_TYPE},
            }
        }
        response = send(
            self._http,
            "POST",
            "issue",
            service=SERVICE,
            error_cls=CreateError,
            json=payload,
        )
        data = json_body(response, service=SERVICE)
        if not isinstance(data, dict) or not data.get("key"):
            raise CreateError(
                "jira error: unknown error while creating issue (no key in response)",
                status_code=response.status_code,
            )

        ticket = Ticket(
            key=data["key"],
            summary=summary,
            assignee_account_id=self.user.account_id,
            self_url=data.get("self") or "",
        )
        logger.info("Created Jira issue %s (%s)", ticket.key, ticket.summary)
        return ticket

    def find_ticket(self, assignee: str, day: date) -> Ticket:
        """Find the single ticket of `assignee` for `day` in the project."""

        jql = build_search_jql(assignee=assignee, project_key=self.project_key, day=day)
        response = send(
            self._http,
            "GET",
            "search",
            service=SERVICE,
            params={"jql": jql, "fields": "summary,assignee"},
        )
        data = json_body(response, service=SERVICE)
        issues = data.get("issues") if isinstance(data, dict) else None
        issues = [issue for issue in issues or [] if isinstance(issue, dict)]

        if not issues:
            raise NotFoundError(
                f"found no issue matching assignee='{assignee}' and "
                f"summary='{issue_summary(day)}' and project='{self.project_key}'"
            )
        if len(issues) > 1:
            raise AmbiguousResultError(
                f"found more than one issue (expected 1) matching assignee='{assignee}' "
                f"and date='{day.isoformat()}'",
                [issue.get("key", "?") for issue in issues],
            )
        return _ticket_from_issue(issues[0])


def authenticate(
    settings: AppSettings,
    *,
    transport: httpx.BaseTransport | None = None,
) -> AuthResult:
    """Fetch the caller's identity and build a `JiraClient` bound to it."""

    http = build_client(
        settings,
        base_url=f"{settings.jira_url}{settings.jira_api_path}/",
        auth=httpx.BasicAuth(settings.jira_username, settings.jira_token),
        transport=transport,
    )
    hint = "hint: are the username (email) and token provided correct?"
    try:
        response = send(http, "GET", "myself", service=SERVICE)
        user = JiraUser.model_validate(json_body(response, service=SERVICE))
    except TransportError as exc:
        http.close()
        return AuthResult(error=AuthError(f"error while fetching Jira user ({hint}): {exc}"))
    except ValidationError as exc:
        http.close()
        return AuthResult(error=AuthError(f"unexpected Jira user payload ({hint}): {exc}"))

    logger.debug("Authenticated to Jira as %s", user.account_id)
    return AuthResult(client=JiraClient(settings=settings, user=user, http=http))

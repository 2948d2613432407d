"""Tempo adapter: write and read worklogs for a Jira issue key.

API reference: https://apidocs.tempo.io/ (bearer token auth).
"""

from __future__ import annotations

import logging
from datetime import date

import httpx
from pydantic import ValidationError

from adapters.http_client import build_client, json_body, send
from core.config import AppSettings
from core.domain.models import NewWorklog, Worklog, WorklogPage
from core.errors import SubmitError, TransportError

logger = logging.getLogger(__name__)

SERVICE = "tempo"
SECONDS_PER_HOUR = 60 * 60
START_OF_DAY = "00:00:00"


class TempoClient:
    """Tempo API client bound to one author (the Jira account of the caller)."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        author_account_id: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._author_account_id = author_account_id
        self._http = build_client(
            settings,
            base_url=settings.tempo_api_url,
            extra_headers={"Authorization": f"Bearer {settings.tempo_token}"},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def log_day(self, day: date, hours: int, ticket_key: str) -> Worklog | None:
        """Log `hours` on `day` against `ticket_key`, starting at midnight."""

        logged_seconds = hours * SECONDS_PER_HOUR
        worklog = NewWorklog(
            issue_key=ticket_key,
            time_spent_seconds=logged_seconds,
            billable_seconds=logged_seconds,
            start_date=day,
            start_time=START_OF_DAY,
            description=f"Working on issue {ticket_key}.",
            author_account_id=self._author_account_id,
            remaining_estimate_seconds=0,
        )
        response = send(
            self._http,
            "POST",
            "/worklogs",
            service=SERVICE,
            error_cls=SubmitError,
            json=worklog.model_dump(mode="json", by_alias=True),
        )
        logger.info("Logged %ss on %s for %s", logged_seconds, day.isoformat(), ticket_key)

        if not response.content:
            return None
        try:
            return Worklog.model_validate(response.json())
        except (ValueError, ValidationError):
            logger.debug("Tempo returned an unexpected worklog body for %s", ticket_key)
            return None

    def get_logged_hours(self, ticket_key: str) -> int:
        """Whole hours billed on `ticket_key` (single page, truncated)."""

        response = send(
            self._http,
            "GET",
            "/worklogs",
            service=SERVICE,
            params={"issue": ticket_key},
        )
        try:
            page = WorklogPage.model_validate(json_body(response, service=SERVICE))
        except ValidationError as exc:
            raise TransportError(f"tempo error: unexpected worklogs payload: {exc}") from exc
        return page.billable_seconds // SECONDS_PER_HOUR

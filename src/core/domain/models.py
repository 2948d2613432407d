"""Domain models (Pydantic v2).

- Describe *what* the data is (tickets, users, worklogs), not *how* it is
  fetched.
- Aliases mirror the camelCase names used by the Jira and Tempo REST APIs, so
  the adapters can validate responses and serialize requests directly.
"""

from __future__ import annotations

from datetime import date, datetime
from urllib.parse import urlsplit

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class JiraUser(BaseModel):
    """Identity of the caller as returned by the tracker."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    account_id: str = Field(
        ...,
        alias="accountId",
        min_length=1,
        description="Opaque account identifier, used as assignee and worklog author.",
    )
    email_address: str | None = Field(
        default=None,
        alias="emailAddress",
        description="Email, absent when hidden by the user's privacy settings.",
    )
    display_name: str | None = Field(
        default=None,
        alias="displayName",
    )

    @property
    def search_identity(self) -> str:
        """Value used in `assignee = ...` searches."""

        return self.email_address or self.account_id


class Ticket(BaseModel):
    """A tracker issue created or found for one date."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(..., min_length=1, description="Project-scoped key, e.g. 'TS-12'.")
    summary: str = Field(..., description="Date-convention summary ('YYYY/MM/DD Weekday').")
    assignee_account_id: str | None = Field(default=None)
    self_url: str = Field(
        default="",
        alias="self",
        description="Machine (REST) URL of the issue resource.",
    )

    def link_to_ui(self) -> str:
        """Browsable link for humans; the REST URL when it cannot be parsed."""

        try:
            parts = urlsplit(self.self_url)
        except ValueError:
            return self.self_url
        if not parts.scheme or not parts.netloc:
            return self.self_url
        return f"{parts.scheme}://{parts.netloc}/browse/{self.key}"


class NewWorklog(BaseModel):
    """Body of `POST /worklogs`."""

    model_config = ConfigDict(populate_by_name=True)

    issue_key: str = Field(..., alias="issueKey")
    time_spent_seconds: int = Field(..., ge=0, alias="timeSpentSeconds")
    billable_seconds: int = Field(..., ge=0, alias="billableSeconds")
    start_date: date = Field(..., alias="startDate")
    start_time: str = Field(default="00:00:00", alias="startTime")
    description: str = Field(default="")
    author_account_id: str = Field(..., alias="authorAccountId")
    remaining_estimate_seconds: int = Field(default=0, alias="remainingEstimateSeconds")


class WorklogIssue(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: str | None = None
    id: int | None = None


class WorklogAuthor(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    account_id: str | None = Field(default=None, alias="accountId")
    display_name: str | None = Field(default=None, alias="displayName")


class Worklog(BaseModel):
    """A worklog as returned by Tempo. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    tempo_worklog_id: int | None = Field(default=None, alias="tempoWorklogId")
    issue: WorklogIssue | None = None
    time_spent_seconds: int = Field(default=0, alias="timeSpentSeconds")
    billable_seconds: int = Field(default=0, alias="billableSeconds")
    start_date: date | None = Field(default=None, alias="startDate")
    start_time: str | None = Field(default=None, alias="startTime")
    description: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    author: WorklogAuthor | None = None


class WorklogPageMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = 0
    offset: int = 0
    limit: int = 0


class WorklogPage(BaseModel):
    """One page of `GET /worklogs`."""

    model_config = ConfigDict(extra="ignore")

    metadata: WorklogPageMetadata = Field(default_factory=WorklogPageMetadata)
    results: list[Worklog] = Field(default_factory=list)

    @property
    def billable_seconds(self) -> int:
        return sum(worklog.billable_seconds for worklog in self.results)

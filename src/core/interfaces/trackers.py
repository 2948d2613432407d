"""Contracts of the two remote services.

Protocol keeps the orchestrator independent from the HTTP adapters: the Jira
and Tempo clients satisfy these structurally, and so do in-memory fakes.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from core.domain.models import JiraUser, Ticket, Worklog


@runtime_checkable
class IssueTracker(Protocol):
    """Creates and finds the ticket tracking a given day."""

    user: JiraUser

    def create_ticket(self, day: date) -> Ticket:
        ...

    def find_ticket(self, assignee: str, day: date) -> Ticket:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class TimeLog(Protocol):
    """Records and reads worked time against a ticket key."""

    def log_day(self, day: date, hours: int, ticket_key: str) -> Worklog | None:
        ...

    def get_logged_hours(self, ticket_key: str) -> int:
        ...

    def close(self) -> None:
        ...

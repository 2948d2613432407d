"""Timesheet orchestration.

Ties the issue tracker and the time log together, one day at a time:
- `log`: create the day's ticket, then log hours on it.
- `see`: find the day's ticket, then read the hours logged on it.

Days are processed sequentially and independently. A failing day is reported
through the hooks and the next day is processed. Printing is left to the
hooks, so the CLI and the tests can observe the flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, Iterable

from core.domain.models import Ticket
from core.domain.naming import weekday_name
from core.errors import TimesheetError
from core.interfaces.trackers import IssueTracker, TimeLog


class DayState(str, Enum):
    START = "start"
    TICKET_RESOLVED = "ticket_resolved"
    WORKLOG_SUBMITTED = "worklog_submitted"
    DONE = "done"
    FAILED = "failed"


class Action(str, Enum):
    LOG = "log"
    SEE = "see"


@dataclass
class DayOutcome:
    """What happened to one day."""

    day: date
    action: Action
    state: DayState = DayState.START
    hours: int | None = None
    ticket: Ticket | None = None
    error: TimesheetError | None = None
    failed_at: DayState | None = None

    @property
    def ok(self) -> bool:
        return self.state is DayState.DONE

    def fail(self, error: TimesheetError) -> None:
        self.failed_at = self.state
        self.state = DayState.FAILED
        self.error = error

    def describe_failure(self) -> str:
        if self.action is Action.LOG:
            what = f"log {self.hours} hours"
        else:
            what = "see logged hours"
        return f"Failed attempt to {what} for {weekday_name(self.day)} {self.day.isoformat()}: {self.error}"


@dataclass
class TimesheetHooks:
    """Optional callbacks for UI layers."""

    detail: Callable[[date, Ticket, int], None] | None = None
    failure: Callable[[DayOutcome], None] | None = None


@dataclass
class TimesheetRun:
    """Outcomes of a multi-day invocation, in processing order."""

    outcomes: list[DayOutcome] = field(default_factory=list)

    @property
    def failures(self) -> list[DayOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


class Timesheet:
    """Owns both clients for its lifetime and closes them on `close`."""

    def __init__(
        self,
        *,
        tracker: IssueTracker,
        time_log: TimeLog,
        hooks: TimesheetHooks | None = None,
    ) -> None:
        self._tracker = tracker
        self._time_log = time_log
        self._hooks = hooks or TimesheetHooks()

    def __enter__(self) -> Timesheet:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        try:
            self._tracker.close()
        finally:
            self._time_log.close()

    def _detail(self, day: date, ticket: Ticket, hours: int) -> None:
        if self._hooks.detail:
            self._hooks.detail(day, ticket, hours)

    def _failed(self, outcome: DayOutcome, error: TimesheetError) -> DayOutcome:
        outcome.fail(error)
        if self._hooks.failure:
            self._hooks.failure(outcome)
        return outcome

    def log(self, day: date, hours: int) -> DayOutcome:
        """Create the ticket for `day` and log `hours` on it.

        A ticket that was created stays in place when the worklog fails.
        """

        outcome = DayOutcome(day=day, action=Action.LOG, hours=hours)
        try:
            outcome.ticket = self._tracker.create_ticket(day)
            outcome.state = DayState.TICKET_RESOLVED
            self._detail(day, outcome.ticket, hours)

            self._time_log.log_day(day, hours, outcome.ticket.key)
            outcome.state = DayState.WORKLOG_SUBMITTED
        except TimesheetError as exc:
            return self._failed(outcome, exc)

        outcome.state = DayState.DONE
        return outcome

    def see(self, day: date) -> DayOutcome:
        """Find the ticket for `day` and read the hours logged on it."""

        outcome = DayOutcome(day=day, action=Action.SEE)
        try:
            outcome.ticket = self._tracker.find_ticket(self._tracker.user.search_identity, day)
            outcome.state = DayState.TICKET_RESOLVED
            outcome.hours = self._time_log.get_logged_hours(outcome.ticket.key)
        except TimesheetError as exc:
            return self._failed(outcome, exc)

        self._detail(day, outcome.ticket, outcome.hours)
        outcome.state = DayState.DONE
        return outcome

    def log_days(self, days: Iterable[date], hours: int) -> TimesheetRun:
        run = TimesheetRun()
        for day in days:
            run.outcomes.append(self.log(day, hours))
        return run

    def see_days(self, days: Iterable[date]) -> TimesheetRun:
        run = TimesheetRun()
        for day in days:
            run.outcomes.append(self.see(day))
        return run

"""Error taxonomy for the timesheet flow.

Two families:
- fatal, pre-flight: `ConfigError`, `AuthError`, `InvalidDateFormat`,
  `InvalidHoursFormat`. The CLI stops before any date is processed.
- per-date: `TransportError` (and subclasses), `NotFoundError`,
  `AmbiguousResultError`. The orchestrator reports them and moves on.
"""

from __future__ import annotations

from typing import Sequence


class TimesheetError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(TimesheetError):
    """Missing or invalid configuration."""


class AuthError(TimesheetError):
    """The tracker rejected the configured credentials."""


class InvalidDateFormat(TimesheetError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"unrecognized argument for date: {value!r}")


class InvalidHoursFormat(TimesheetError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"unrecognized argument for hours: {value!r}")


class TransportError(TimesheetError):
    """Network failure or non-2xx response.

    `dump` holds the raw HTTP response (status line, headers, body) when a
    response was received, for diagnostics.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        dump: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.dump = dump
        full = message
        if dump:
            full = f"{message}\nResponse:\n{dump}"
        super().__init__(full)


class CreateError(TransportError):
    """Ticket creation was rejected by the tracker."""


class SubmitError(TransportError):
    """Worklog submission was rejected by the time-log service."""


class NotFoundError(TimesheetError):
    """A tracker search matched no ticket."""


class AmbiguousResultError(TimesheetError):
    """A tracker search matched more than one ticket."""

    def __init__(self, message: str, keys: Sequence[str]) -> None:
        self.keys = list(keys)
        super().__init__(f"{message}: {','.join(self.keys)}")

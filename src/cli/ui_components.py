"""CLI UI components (Rich).

Keeps command logic apart from presentation; the callbacks below are plugged
into `TimesheetHooks`.
"""

from __future__ import annotations

from datetime import date

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.domain.models import Ticket
from core.services.timesheet import DayOutcome, TimesheetHooks


def detail_line(ticket: Ticket, hours: int) -> Text:
    """`<link>  <N>h  <summary>`"""

    line = Text()
    line.append(ticket.link_to_ui(), style="cyan")
    line.append(f"  {hours}h  ", style="bold")
    line.append(ticket.summary)
    return line


def build_hooks(console: Console) -> TimesheetHooks:
    def detail(day: date, ticket: Ticket, hours: int) -> None:
        console.print(detail_line(ticket, hours), soft_wrap=True)

    def failure(outcome: DayOutcome) -> None:
        console.print(Text(outcome.describe_failure(), style="red"), soft_wrap=True)

    return TimesheetHooks(detail=detail, failure=failure)


def print_fatal(console: Console, message: str) -> None:
    console.print(Text.assemble(("Error: ", "bold red"), message), soft_wrap=True)


def build_doctor_table() -> Table:
    table = Table(title="tempo-timesheet doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table

"""Date convention: how a calendar date maps to a ticket summary.

The same mapping is used to create tickets and to find them again, so both
sides must go through these helpers.
"""

from __future__ import annotations

from datetime import date

SUMMARY_DATE_FORMAT = "%Y/%m/%d"

# Fixed English names: `%A` follows the process locale.
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def issue_summary(day: date) -> str:
    """Summary of the ticket tracking `day`, e.g. '2024/03/05 Tuesday'."""

    return f"{day.strftime(SUMMARY_DATE_FORMAT)} {weekday_name(day)}"


def summary_search_variants(day: date) -> tuple[str, str]:
    """Slash and hyphen spellings of the summary.

    The tracker may normalize '/' into '-' in summaries, so searches match both.
    """

    summary = issue_summary(day)
    return summary, summary.replace("/", "-")

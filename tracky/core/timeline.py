"""Group notes into a Today bucket and a Year > Month > Week > Day tree.

Days are assigned by their calendar date in the viewer's timezone. Each day
is filed under its own year and month; a week whose days straddle a month
boundary therefore shows up once under each month, holding only that
month's days. All containers are sorted most-recent first, while notes
inside a day keep the order the server returned them in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from dateutil import tz

from tracky.core.expansion import ExpansionState
from tracky.models import DayGroup, MonthGroup, Note, Timeline, WeekGroup, YearGroup
from tracky.utils.dates import day_key, local_day_start, monday_of_week, week_key

logger = logging.getLogger(__name__)


def group_notes(
    notes: Iterable[Note],
    now: datetime | None = None,
    zone: tzinfo | None = None,
    expansion: ExpansionState | None = None,
) -> Timeline:
    """Partition notes into a timeline.

    Args:
        notes: Notes in the order the server returned them.
        now: Current instant (defaults to the system clock).
        zone: Viewer timezone (defaults to the machine's local zone).
        expansion: Store consulted for which day nodes start open. Without
            one every day node starts closed.

    Returns:
        A Timeline whose year/month/week nodes for the current date are
        marked open.

    Raises:
        InvalidTimestampError: If a note's created_at cannot be interpreted.
    """
    if now is None:
        now = datetime.now(tz.UTC)
    today = local_day_start(now, zone)
    current_monday = monday_of_week(today)

    timeline = Timeline(today_date=today)

    # year -> month -> week key -> day key -> DayGroup
    tree: dict[int, dict[int, dict[str, dict[str, DayGroup]]]] = {}
    mondays: dict[str, date] = {}

    for note in notes:
        note_day = local_day_start(note.created_at, zone)

        if note_day == today:
            timeline.today.append(note)
            continue

        wk = week_key(note_day)
        dk = day_key(note_day)
        mondays.setdefault(wk, monday_of_week(note_day))

        days = (
            tree.setdefault(note_day.year, {})
            .setdefault(note_day.month, {})
            .setdefault(wk, {})
        )
        if dk not in days:
            days[dk] = DayGroup(key=dk, date=note_day)
        days[dk].notes.append(note)

    for year in sorted(tree, reverse=True):
        year_group = YearGroup(year=year, open=year == today.year)

        for month in sorted(tree[year], reverse=True):
            month_group = MonthGroup(
                year=year,
                month=month,
                open=(year == today.year and month == today.month),
            )

            for wk in sorted(tree[year][month], reverse=True):
                monday = mondays[wk]
                week_group = WeekGroup(
                    key=wk,
                    monday=monday,
                    open=monday == current_monday,
                )

                days = tree[year][month][wk]
                for dk in sorted(days, reverse=True):
                    day = days[dk]
                    day.open = expansion is not None and expansion.is_expanded(dk)
                    week_group.days.append(day)

                month_group.weeks.append(week_group)

            year_group.months.append(month_group)

        timeline.years.append(year_group)

    logger.debug(
        "Grouped %d notes: %d today, %d days in %d years",
        timeline.note_count,
        len(timeline.today),
        sum(1 for _ in timeline.iter_days()),
        len(timeline.years),
    )
    return timeline


def group(
    notes: Iterable[Note],
    now: datetime | None = None,
    zone: tzinfo | None = None,
) -> tuple[list[Note], list[YearGroup]]:
    """Return the (today bucket, year nodes) pair for a batch of notes."""
    timeline = group_notes(notes, now=now, zone=zone)
    return timeline.today, timeline.years


def open_day_keys(timeline: Timeline) -> list[str]:
    """Day keys that are currently open in a timeline."""
    return [day.key for day in timeline.iter_days() if day.open]

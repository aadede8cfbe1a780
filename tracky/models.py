"""Data models for tracky."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any

from tracky.utils.dates import MONTH_NAMES, iso_week_number, parse_instant


@dataclass
class Notebook:
    """A notebook on the server."""

    id: int
    name: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Notebook:
        """Create a Notebook from API response data."""
        return cls(id=data["id"], name=data.get("name", ""))


@dataclass
class Note:
    """A note as returned by the server. Read-only to the timeline."""

    id: int
    content: str
    created_at: datetime  # Timezone-aware
    user_id: int | None = None
    notebook_id: int | None = None

    @classmethod
    def from_api_response(
        cls,
        data: dict[str, Any],
        notebook_id: int | None = None,
        zone: tzinfo | None = None,
    ) -> Note:
        """Create a Note from API response data.

        Raises:
            InvalidTimestampError: If created_at is missing or unparseable.
        """
        return cls(
            id=data["id"],
            content=data.get("content", ""),
            created_at=parse_instant(data.get("created_at", ""), zone),
            user_id=data.get("user_id"),
            notebook_id=notebook_id,
        )


@dataclass
class DayGroup:
    """One local calendar day and its notes, in server order."""

    key: str  # DayKey, YYYY-MM-DD
    date: date
    notes: list[Note] = field(default_factory=list)
    open: bool = False


@dataclass
class WeekGroup:
    """A Monday-start week, scoped to the month that contains its days."""

    key: str  # WeekKey, day key of the Monday
    monday: date
    days: list[DayGroup] = field(default_factory=list)
    open: bool = False

    @property
    def iso_week(self) -> int:
        """ISO week number, for display only."""
        return iso_week_number(self.monday)


@dataclass
class MonthGroup:
    """A calendar month within a year.

    ``month`` counts from 1 (January) to 12, like ``datetime.date.month``,
    not from 0.
    """

    year: int
    month: int  # 1-12
    weeks: list[WeekGroup] = field(default_factory=list)
    open: bool = False

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month - 1]


@dataclass
class YearGroup:
    """A calendar year."""

    year: int
    months: list[MonthGroup] = field(default_factory=list)
    open: bool = False


@dataclass
class Timeline:
    """Result of grouping a batch of notes.

    ``today`` holds the notes created on the viewer's current local day, which
    are kept out of the year tree.
    """

    today_date: date
    today: list[Note] = field(default_factory=list)
    years: list[YearGroup] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.today and not self.years

    @property
    def note_count(self) -> int:
        """Total number of notes across the today bucket and the tree."""
        return len(self.today) + sum(len(day.notes) for day in self.iter_days())

    def iter_days(self) -> Iterator[DayGroup]:
        """Iterate over every day node in display order."""
        for year in self.years:
            for month in year.months:
                for week in month.weeks:
                    yield from week.days

    def find_day(self, key: str) -> DayGroup | None:
        """Get a day node by its day key."""
        for day in self.iter_days():
            if day.key == key:
                return day
        return None

"""Render a Timeline as a rich tree."""

from __future__ import annotations

from datetime import tzinfo

from rich.markup import escape
from rich.text import Text
from rich.tree import Tree

from tracky.config import Config
from tracky.models import DayGroup, MonthGroup, Note, Timeline, WeekGroup, YearGroup
from tracky.utils.dates import format_day_label, format_note_time, format_week_label

OPEN_MARKER = "▾"
CLOSED_MARKER = "▸"

EMPTY_MESSAGE = "[dim]No notes yet.[/dim]"


def _marker(is_open: bool) -> str:
    return OPEN_MARKER if is_open else CLOSED_MARKER


def _count(n: int) -> str:
    return f"[dim]({n} note{'s' if n != 1 else ''})[/dim]"


def _day_total(days: list[DayGroup]) -> int:
    return sum(len(day.notes) for day in days)


def _week_total(week: WeekGroup) -> int:
    return _day_total(week.days)


def _month_total(month: MonthGroup) -> int:
    return sum(_week_total(week) for week in month.weeks)


def _year_total(year: YearGroup) -> int:
    return sum(_month_total(month) for month in year.months)


def format_note(note: Note, config: Config, zone: tzinfo | None) -> Text:
    """One line per note: timestamp, id and content (escaped)."""
    stamp = format_note_time(note.created_at, zone, config.datetime_format)
    content = escape(note.content.strip())
    return Text.from_markup(f"[cyan]{stamp}[/cyan] [dim]#{note.id}[/dim] {content}")


def _add_notes(
    branch: Tree, notes: list[Note], config: Config, zone: tzinfo | None
) -> None:
    for note in notes:
        branch.add(format_note(note, config, zone))


def render_timeline(
    timeline: Timeline,
    config: Config,
    zone: tzinfo | None = None,
    expand_all: bool = False,
    title: str = "Notes",
) -> Tree:
    """Build the tree for a timeline.

    Closed nodes show a note count instead of their children. With
    ``expand_all`` every node is drawn open.
    """
    root = Tree(f"[bold]{escape(title)}[/bold]")

    if timeline.is_empty:
        root.add(EMPTY_MESSAGE)
        return root

    if timeline.today:
        today = root.add(
            f"{OPEN_MARKER} [bold green]Today[/bold green] {_count(len(timeline.today))}"
        )
        _add_notes(today, timeline.today, config, zone)

    for year in timeline.years:
        year_open = expand_all or year.open
        year_branch = root.add(
            f"{_marker(year_open)} [bold]{year.year}[/bold] {_count(_year_total(year))}"
        )
        if not year_open:
            continue

        for month in year.months:
            month_open = expand_all or month.open
            month_branch = year_branch.add(
                f"{_marker(month_open)} [bold blue]{month.name}[/bold blue] "
                f"{_count(_month_total(month))}"
            )
            if not month_open:
                continue

            for week in month.weeks:
                week_open = expand_all or week.open
                label = format_week_label(week.monday, config.week_label_format)
                if config.show_week_numbers:
                    label = f"{label} (W{week.iso_week:02d})"
                week_branch = month_branch.add(
                    f"{_marker(week_open)} [magenta]{label}[/magenta] "
                    f"{_count(_week_total(week))}"
                )
                if not week_open:
                    continue

                for day in week.days:
                    day_open = expand_all or day.open
                    day_branch = week_branch.add(
                        f"{_marker(day_open)} {format_day_label(day.date)} "
                        f"[dim]{day.key}[/dim] {_count(len(day.notes))}"
                    )
                    if day_open:
                        _add_notes(day_branch, day.notes, config, zone)

    return root

"""Pure calendar calculations — no UI dependencies."""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Sequence

from holiday_index import HolidayIndex

# Weeks start on Sunday and end on Saturday
DAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
QUARTER_MONTHS = 3


class CellKind(str, Enum):
    FILLER_BEFORE = "filler-before"
    FILLER_AFTER = "filler-after"
    REAL = "real"


class WeekClass(str, Enum):
    NONE = "none"
    LIGHT = "light"
    DENSE = "dense"


@dataclass
class GridCell:
    """One slot of a month grid.

    Filler cells carry the real date of the adjacent month so week
    totals at month edges see their holidays; ``kind`` only drives
    display. ``week_class`` is filled in by :func:`partition_weeks`.
    """

    date: date
    kind: CellKind
    is_weekend: bool = False
    is_today: bool = False
    holiday_names: tuple[str, ...] = ()
    week_class: WeekClass = WeekClass.NONE

    @property
    def is_filler(self) -> bool:
        return self.kind is not CellKind.REAL

    @property
    def is_holiday(self) -> bool:
        return bool(self.holiday_names)


@dataclass
class WeekGroup:
    cells: list[GridCell]
    holiday_count: int
    classification: WeekClass


@dataclass
class MonthView:
    """A month grid ready for display: label, cells and week groups."""

    label: str
    year: int
    month: int
    cells: list[GridCell] = field(default_factory=list)
    weeks: list[WeekGroup] = field(default_factory=list)


# ------------------------------------------------------------------
# Month arithmetic
# ------------------------------------------------------------------
def normalize_month(year: int, month: int) -> tuple[int, int]:
    """Carry an out-of-range 1-based month into the year (13 -> Jan next year)."""
    carry, m0 = divmod(month - 1, 12)
    return year + carry, m0 + 1


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    return normalize_month(year, month + delta)


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    return shift_month(year, month, -1)


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    return shift_month(year, month, 1)


def sunday_weekday(d: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (d.weekday() + 1) % 7


def month_label(year: int, month: int) -> str:
    year, month = normalize_month(year, month)
    return f"{calendar.month_name[month]} {year}"


def quarter_label(year: int, month: int) -> str:
    """Return e.g. ``"November - January 2024"``; the year is the start year."""
    year, month = normalize_month(year, month)
    _end_year, end_month = shift_month(year, month, QUARTER_MONTHS - 1)
    return f"{calendar.month_name[month]} - {calendar.month_name[end_month]} {year}"


def holiday_years(year: int, month: int, months: int = 1) -> list[int]:
    """Years whose holidays are needed to render ``months`` months from (year, month).

    Covers the displayed months plus one month either side, so January
    pulls in the previous year and December the next one.
    """
    years = {shift_month(year, month, offset)[0] for offset in range(-1, months + 1)}
    return sorted(years)


# ------------------------------------------------------------------
# Month grid
# ------------------------------------------------------------------
def build_month_grid(year: int, month: int, index: HolidayIndex,
                     today: date) -> list[GridCell]:
    """Return the cells of a month, padded with filler days to whole weeks."""
    year, month = normalize_month(year, month)
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    first_weekday = sunday_weekday(first)
    remaining = (7 - (first_weekday + days_in_month) % 7) % 7

    def make(d: date, kind: CellKind) -> GridCell:
        return GridCell(
            date=d,
            kind=kind,
            is_weekend=sunday_weekday(d) in (0, 6),
            is_today=kind is CellKind.REAL and d == today,
            holiday_names=index.lookup(d),
        )

    cells = [make(first - timedelta(days=first_weekday - i), CellKind.FILLER_BEFORE)
             for i in range(first_weekday)]
    cells += [make(first + timedelta(days=i), CellKind.REAL)
              for i in range(days_in_month)]
    last = date(year, month, days_in_month)
    cells += [make(last + timedelta(days=i + 1), CellKind.FILLER_AFTER)
              for i in range(remaining)]
    return cells


# ------------------------------------------------------------------
# Week aggregation
# ------------------------------------------------------------------
def classify_count(holiday_count: int) -> WeekClass:
    if holiday_count <= 0:
        return WeekClass.NONE
    if holiday_count == 1:
        return WeekClass.LIGHT
    return WeekClass.DENSE


def partition_weeks(cells: Sequence[GridCell]) -> list[WeekGroup]:
    """Split cells into Saturday-terminated weeks and classify them.

    The last group may be shorter when the sequence does not end on a
    Saturday. Each member cell gets its group's classification.
    """
    weeks: list[WeekGroup] = []
    current: list[GridCell] = []
    for i, cell in enumerate(cells):
        current.append(cell)
        if sunday_weekday(cell.date) == 6 or i == len(cells) - 1:
            count = sum(len(c.holiday_names) for c in current)
            klass = classify_count(count)
            for c in current:
                c.week_class = klass
            weeks.append(WeekGroup(cells=current, holiday_count=count,
                                   classification=klass))
            current = []
    return weeks


def week_containing(weeks: Sequence[WeekGroup], d: date) -> WeekGroup | None:
    return next((w for w in weeks if any(c.date == d for c in w.cells)), None)


def holiday_weeks_only(weeks: Sequence[WeekGroup]) -> list[WeekGroup]:
    """Return the weeks that contain at least one holiday."""
    return [w for w in weeks if w.classification is not WeekClass.NONE]


# ------------------------------------------------------------------
# Month / quarter composition
# ------------------------------------------------------------------
def build_month(year: int, month: int, index: HolidayIndex, today: date) -> MonthView:
    year, month = normalize_month(year, month)
    cells = build_month_grid(year, month, index, today)
    return MonthView(label=month_label(year, month), year=year, month=month,
                     cells=cells, weeks=partition_weeks(cells))


def build_quarter(start_year: int, start_month: int, index: HolidayIndex,
                  today: date) -> list[MonthView]:
    """Return the three consecutive months of a rolling quarter.

    ``index`` must already hold the holidays of every year in
    :func:`holiday_years` for the quarter.
    """
    return [build_month(*shift_month(start_year, start_month, offset), index, today)
            for offset in range(QUARTER_MONTHS)]

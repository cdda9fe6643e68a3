"""View state and render orchestration: fetch, index, compose."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Awaitable, Callable, Protocol

from calendar_logic import (
    QUARTER_MONTHS,
    MonthView,
    build_month,
    build_quarter,
    holiday_years,
    month_label,
    quarter_label,
    shift_month,
)
from holiday_api import Country, HolidayCache, choose_default_country
from holiday_index import HolidayIndex, HolidayRecord

logger = logging.getLogger(__name__)


class ViewMode(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class HolidaySource(Protocol):
    cache: HolidayCache

    def fetch_holidays_for_year(
        self, country: str, year: int, warnings: list[str] | None = None,
    ) -> Awaitable[list[HolidayRecord]]: ...

    def fetch_available_countries(self) -> Awaitable[list[Country]]: ...


@dataclass
class CalendarView:
    mode: ViewMode
    label: str
    country: str
    today: date
    months: list[MonthView] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class CalendarController:
    """Holds the displayed month, view mode and country, and renders them.

    Every render builds a fresh :class:`HolidayIndex` from all yearly
    collections it needs; nothing is built before every fetch finished.
    """

    def __init__(
        self,
        source: HolidaySource,
        country: str = "US",
        mode: ViewMode = ViewMode.MONTHLY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.source = source
        self.country = country
        self.mode = ViewMode(mode)
        self._today = today
        start = today()
        self.year = start.year
        self.month = start.month
        self.countries: list[Country] = []

    # ------------------------------------------------------------------
    # State changes
    # ------------------------------------------------------------------
    async def load_countries(self) -> list[Country]:
        """Fetch the country list and select the default country from it."""
        self.countries = await self.source.fetch_available_countries()
        self.set_country(choose_default_country(self.countries, self.country))
        return self.countries

    def set_country(self, country: str) -> None:
        if country != self.country:
            logger.info(f"Country changed {self.country} -> {country}")
            self.source.cache.clear()
        self.country = country

    def set_mode(self, mode: ViewMode | str) -> None:
        self.mode = ViewMode(mode)

    def navigate(self, delta: int) -> None:
        """Move the displayed (first) month by ``delta`` months."""
        self.year, self.month = shift_month(self.year, self.month, delta)

    def go_today(self) -> None:
        today = self._today()
        self.year, self.month = today.year, today.month

    # ------------------------------------------------------------------
    # Render
    # ------------------------------------------------------------------
    async def build_index(self, country: str, year: int, month: int,
                          months: int = 1,
                          warnings: list[str] | None = None) -> HolidayIndex:
        years = holiday_years(year, month, months)
        collections = await asyncio.gather(
            *(self.source.fetch_holidays_for_year(country, y, warnings) for y in years)
        )
        return HolidayIndex.build(collections)

    async def render(self) -> CalendarView:
        country, year, month, mode = self.country, self.year, self.month, self.mode
        span = QUARTER_MONTHS if mode is ViewMode.QUARTERLY else 1
        warnings: list[str] = []
        index = await self.build_index(country, year, month, span, warnings)
        today = self._today()
        if mode is ViewMode.QUARTERLY:
            months = build_quarter(year, month, index, today)
            label = quarter_label(year, month)
        else:
            months = [build_month(year, month, index, today)]
            label = month_label(year, month)
        logger.debug(f"Rendered {mode.value} view '{label}' for {country}")
        return CalendarView(mode=mode, label=label, country=country, today=today,
                            months=months, warnings=warnings)

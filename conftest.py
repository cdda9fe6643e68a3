"""
Pytest configuration and shared fixtures.
"""

from datetime import date
from typing import Any, Dict, List
from unittest.mock import AsyncMock

import pytest

from holiday_api import Country, HolidayCache
from holiday_index import HolidayIndex, HolidayRecord


class FakeHolidaySource:
    """In-memory stand-in for HolidayClient, keyed by (country, year)."""

    def __init__(self, data: Dict[tuple, List[HolidayRecord]] | None = None):
        self.cache = HolidayCache()
        self.data = data or {}
        self.fetch_mock = AsyncMock(side_effect=self._lookup)
        self.countries_mock = AsyncMock(return_value=[])

    async def _lookup(self, country: str, year: int) -> List[HolidayRecord]:
        cached = self.cache.get(country, year)
        if cached is not None:
            return cached
        epoch = self.cache.epoch
        records = list(self.data.get((country, year), []))
        self.cache.put(country, year, records, epoch=epoch)
        return records

    async def fetch_holidays_for_year(self, country: str, year: int,
                                      warnings: List[str] | None = None) -> List[HolidayRecord]:
        records = await self.fetch_mock(country, year)
        if warnings is not None and (country, year) not in self.data:
            warnings.append(f"No holiday data available for {country} in {year}.")
        return records

    async def fetch_available_countries(self) -> List[Country]:
        return await self.countries_mock()


def rec(iso: str, name: str) -> HolidayRecord:
    return HolidayRecord(date=date.fromisoformat(iso), name=name)


@pytest.fixture
def us_holidays() -> Dict[tuple, List[HolidayRecord]]:
    """A few US holidays around the 2024/2025 year boundary."""
    return {
        ("US", 2024): [
            rec("2024-01-01", "New Year's Day"),
            rec("2024-01-15", "Martin Luther King, Jr. Day"),
            rec("2024-07-04", "Independence Day"),
            rec("2024-11-28", "Thanksgiving Day"),
            rec("2024-12-25", "Christmas Day"),
        ],
        ("US", 2025): [
            rec("2025-01-01", "New Year's Day"),
            rec("2025-01-20", "Martin Luther King, Jr. Day"),
            rec("2025-01-20", "Inauguration Day"),
        ],
    }


@pytest.fixture
def fake_source(us_holidays) -> FakeHolidaySource:
    source = FakeHolidaySource(dict(us_holidays))
    source.data[("DE", 2024)] = [
        rec("2024-10-03", "German Unity Day"),
        rec("2024-12-25", "Christmas Day"),
        rec("2024-12-26", "St. Stephen's Day"),
    ]
    return source


@pytest.fixture
def us_index(us_holidays) -> HolidayIndex:
    return HolidayIndex.build(us_holidays.values())


@pytest.fixture
def sample_holiday_payload() -> List[Dict[str, Any]]:
    """Two entries as returned by the Nager.Date PublicHolidays endpoint."""
    return [
        {
            "date": "2024-01-01",
            "localName": "New Year's Day",
            "name": "New Year's Day",
            "countryCode": "US",
            "fixed": False,
            "global": True,
            "counties": None,
            "launchYear": None,
            "types": ["Public"],
        },
        {
            "date": "2024-07-04",
            "localName": "Independence Day",
            "name": "Independence Day",
            "countryCode": "US",
            "fixed": False,
            "global": True,
            "counties": None,
            "launchYear": None,
            "types": ["Public"],
        },
    ]


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")

"""Nager.Date public-holiday API client with an explicit per-country cache."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from exceptions import FetchFailure, MalformedPayload
from holiday_index import HolidayRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://date.nager.at/api/v3/"

COUNTRIES_UNAVAILABLE = "Could not fetch list of countries. Please check your internet connection."


class Country(BaseModel):
    """Entry of the ``AvailableCountries`` endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str = Field(..., alias="countryCode", min_length=1)
    name: str


class HolidayCache:
    """Yearly holiday collections keyed by (country, year).

    Owned by whoever drives rendering; cleared wholesale when the
    country changes. ``epoch`` moves on every clear so a fetch that
    started before the clear can tell its result is stale.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, int], list[HolidayRecord]] = {}
        self.epoch = 0

    def get(self, country: str, year: int) -> list[HolidayRecord] | None:
        return self._entries.get((country, year))

    def put(self, country: str, year: int, records: list[HolidayRecord],
            epoch: int | None = None) -> bool:
        """Store records unless the cache was cleared since ``epoch``."""
        if epoch is not None and epoch != self.epoch:
            return False
        self._entries[(country, year)] = records
        return True

    def clear(self) -> None:
        self._entries.clear()
        self.epoch += 1

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def failure_message(error: FetchFailure, country: str, year: int) -> str:
    """Text shown to the user when a year of holidays could not be loaded."""
    if error.status_code == 404:
        return f"No holiday data available for {country} in {year}."
    if error.status_code is not None:
        return f"Error fetching holidays for {country} in {year}. HTTP status: {error.status_code}."
    if isinstance(error, MalformedPayload):
        return f"Unexpected data format from holiday API for {country} in {year}."
    return f"Could not fetch holidays for {country} in {year}. Please check your internet connection."


class HolidayClient:
    """Async client for the Nager.Date v3 API.

    Public methods never raise on network, HTTP or payload errors: they
    log the failure, append a message to ``warnings`` when one is given
    and return an empty list.
    """

    def __init__(
        self,
        cache: HolidayCache,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cache = cache
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self._transport = transport

    async def fetch_holidays_for_year(
        self, country: str, year: int, warnings: Optional[list[str]] = None,
    ) -> list[HolidayRecord]:
        """Return all public holidays of ``country`` in ``year`` (cached)."""
        cached = self.cache.get(country, year)
        if cached is not None:
            logger.debug(f"Holiday cache hit for {country}-{year}")
            return cached

        epoch = self.cache.epoch
        url = f"{self.base_url}PublicHolidays/{year}/{country}"
        try:
            data = await self._get_json(url)
            if not isinstance(data, list):
                raise MalformedPayload(url=url)
            records = [HolidayRecord.from_api(item) for item in data]
        except FetchFailure as e:
            logger.warning(f"Could not fetch holidays for {country}-{year}: {e.message}")
            if warnings is not None:
                warnings.append(failure_message(e, country, year))
            return []

        if self.cache.put(country, year, records, epoch=epoch):
            logger.info(f"Fetched {len(records)} holidays for {country}-{year}")
        else:
            logger.debug(f"Cache cleared while fetching {country}-{year}; not caching")
        return records

    async def fetch_available_countries(self) -> list[Country]:
        """Return the countries the API knows about, sorted by name."""
        url = f"{self.base_url}AvailableCountries"
        try:
            data = await self._get_json(url)
            if not isinstance(data, list):
                raise MalformedPayload(url=url)
            countries = [Country.model_validate(item) for item in data]
        except ValidationError as e:
            logger.warning(f"Unexpected country entry from {url}: {e.error_count()} error(s)")
            return []
        except FetchFailure as e:
            logger.warning(f"Could not fetch list of countries: {e.message}")
            return []
        countries.sort(key=lambda c: c.name.casefold())
        return countries

    async def _get_json(self, url: str) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout,
                                         transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise FetchFailure(
                f"HTTP status {e.response.status_code} for {url}",
                status_code=e.response.status_code,
                url=url,
            ) from e
        except httpx.HTTPError as e:
            raise FetchFailure(f"Request to {url} failed: {e}", url=url) from e
        except ValueError as e:
            raise MalformedPayload(f"Invalid JSON from {url}: {e}", url=url) from e


def choose_default_country(countries: Sequence[Country], preferred: str = "US") -> str:
    """Return ``preferred`` when offered, else the first country's code."""
    codes = [c.code for c in countries]
    if preferred in codes or not codes:
        return preferred
    return codes[0]

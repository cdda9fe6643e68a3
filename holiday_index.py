"""Holiday records and the date-keyed holiday index (no I/O)."""

import datetime
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from exceptions import MalformedPayload


class HolidayRecord(BaseModel):
    """One public holiday as delivered by the holiday API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: datetime.date = Field(..., description="Calendar day of the holiday")
    name: str = Field(..., description="English holiday name")
    local_name: str = Field("", alias="localName")
    country_code: str = Field("", alias="countryCode")

    @field_validator("local_name", "country_code", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Optional[Any]) -> Any:
        return "" if value is None else value

    @classmethod
    def from_api(cls, raw: Any) -> "HolidayRecord":
        """Parse a Nager.Date ``PublicHolidays`` entry."""
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise MalformedPayload(
                f"Invalid holiday entry {raw!r}: {exc.error_count()} validation error(s)"
            ) from exc


class HolidayIndex:
    """Immutable mapping of calendar date to holiday names.

    Names keep the order in which their collections were supplied.
    Identical records from overlapping collections are all kept, so
    callers should pass each year's collection once per build.
    """

    __slots__ = ("_by_date",)

    def __init__(self, by_date: dict[date, tuple[str, ...]] | None = None) -> None:
        self._by_date: dict[date, tuple[str, ...]] = dict(by_date or {})

    @classmethod
    def build(cls, collections: Iterable[Sequence[HolidayRecord]]) -> "HolidayIndex":
        merged: dict[date, list[str]] = {}
        for records in collections:
            for rec in records:
                merged.setdefault(rec.date, []).append(rec.name)
        return cls({d: tuple(names) for d, names in merged.items()})

    def lookup(self, d: date) -> tuple[str, ...]:
        """Return the holiday names for ``d`` (empty when none)."""
        return self._by_date.get(d, ())

    def count(self, d: date) -> int:
        return len(self._by_date.get(d, ()))

    def dates(self) -> list[date]:
        return sorted(self._by_date)

    def __contains__(self, d: object) -> bool:
        return d in self._by_date

    def __len__(self) -> int:
        return len(self._by_date)

    def __repr__(self) -> str:
        return f"HolidayIndex({len(self)} dates)"

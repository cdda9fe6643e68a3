"""
Unit tests for HolidayRecord parsing and HolidayIndex merging.
"""

from datetime import date

import pytest

from conftest import rec
from exceptions import FetchFailure, MalformedPayload
from holiday_index import HolidayIndex, HolidayRecord


@pytest.mark.unit
class TestHolidayIndexBuild:

    def test_lookup_returns_names_for_date(self, us_index):
        assert us_index.lookup(date(2024, 7, 4)) == ("Independence Day",)

    def test_lookup_without_holiday_is_empty(self, us_index):
        assert us_index.lookup(date(2024, 7, 5)) == ()
        assert us_index.count(date(2024, 7, 5)) == 0

    def test_overlapping_records_are_not_deduplicated(self):
        first = [rec("2024-01-01", "New Year")]
        second = [rec("2024-01-01", "New Year")]

        index = HolidayIndex.build([first, second])

        assert index.lookup(date(2024, 1, 1)) == ("New Year", "New Year")
        assert index.count(date(2024, 1, 1)) == 2
        assert len(index) == 1

    def test_names_follow_collection_order(self):
        a = [rec("2025-01-20", "Martin Luther King, Jr. Day")]
        b = [rec("2025-01-20", "Inauguration Day")]

        assert HolidayIndex.build([a, b]).lookup(date(2025, 1, 20)) == (
            "Martin Luther King, Jr. Day", "Inauguration Day")
        assert HolidayIndex.build([b, a]).lookup(date(2025, 1, 20)) == (
            "Inauguration Day", "Martin Luther King, Jr. Day")

    def test_spans_multiple_years(self, us_index):
        assert date(2024, 12, 25) in us_index
        assert date(2025, 1, 1) in us_index
        assert us_index.dates()[0] == date(2024, 1, 1)
        assert us_index.dates()[-1] == date(2025, 1, 20)

    def test_build_from_nothing(self):
        index = HolidayIndex.build([])
        assert len(index) == 0
        assert index.lookup(date(2024, 1, 1)) == ()

    def test_rebuild_does_not_touch_previous_index(self, us_index):
        rebuilt = HolidayIndex.build([[rec("2024-07-04", "Other")]])
        assert us_index.lookup(date(2024, 7, 4)) == ("Independence Day",)
        assert rebuilt.lookup(date(2024, 7, 4)) == ("Other",)


@pytest.mark.unit
class TestHolidayRecordFromApi:

    def test_parses_nager_entry(self, sample_holiday_payload):
        record = HolidayRecord.from_api(sample_holiday_payload[1])

        assert record.date == date(2024, 7, 4)
        assert record.name == "Independence Day"
        assert record.local_name == "Independence Day"
        assert record.country_code == "US"

    def test_optional_fields_default_to_empty(self):
        record = HolidayRecord.from_api({"date": "2024-05-01", "name": "Labour Day"})
        assert record.local_name == ""
        assert record.country_code == ""

    def test_null_optional_fields_become_empty(self):
        record = HolidayRecord.from_api(
            {"date": "2024-05-01", "name": "Labour Day", "localName": None, "countryCode": None})
        assert (record.local_name, record.country_code) == ("", "")

    def test_records_are_immutable(self):
        record = rec("2024-05-01", "Labour Day")
        with pytest.raises(ValueError):
            record.name = "May Day"

    @pytest.mark.parametrize("raw", [
        {"name": "No date"},
        {"date": "2024-13-40", "name": "Bad date"},
        {"date": "2024-01-01"},
        {"date": "2024-01-01", "name": 5},
        {"date": "2024-01-01", "name": "New Year", "localName": 5},
        {"date": "2024-01-01", "name": "New Year", "countryCode": ["US"]},
        ["2024-01-01", "List"],
    ])
    def test_malformed_entry_raises(self, raw):
        with pytest.raises(MalformedPayload):
            HolidayRecord.from_api(raw)

    def test_malformed_payload_is_a_fetch_failure(self):
        with pytest.raises(FetchFailure):
            HolidayRecord.from_api({})

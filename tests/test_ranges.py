"""Tests for merging dates into overall date ranges."""

from itertools import permutations

import pytest

from repository_hierarchy.dates.parser import parse_calendar_date, parse_date
from repository_hierarchy.dates.ranges import DateRange, merge_date_ranges


def dates(*texts):
    return [parse_date(text) for text in texts]


class TestMergeDateRanges:
    """Earliest minimum and latest maximum of a set of dates."""

    def test_no_dates(self):
        assert merge_date_ranges([]) is None

    def test_single_date(self):
        merged = merge_date_ranges(dates("ABT 1650"))
        assert merged.minimum == merged.maximum == parse_calendar_date("1650")
        assert merged.is_single

    def test_overall_range(self):
        merged = merge_date_ranges(dates("ABT 1650", "BET 1600 AND 1620", "FROM 1630 TO 1640"))
        assert merged.minimum == parse_calendar_date("1600")
        assert merged.maximum == parse_calendar_date("1650")

    def test_order_independent(self):
        values = dates(
            "1650",
            "1 JAN 1650",
            "31 DEC 1650",
            "@#DJULIAN@ 1650",
            "BET 1640 AND 1660",
            "1699/00",
            "1700",
        )
        results = {merge_date_ranges(list(order)) for order in permutations(values)}
        assert len(results) == 1

    def test_ties_prefer_the_tighter_bound(self):
        merged = merge_date_ranges(dates("1650", "1 JAN 1650", "31 DEC 1650"))
        assert merged.minimum == parse_calendar_date("1 JAN 1650")
        assert merged.maximum == parse_calendar_date("31 DEC 1650")

    def test_calendars_compare_by_julian_day(self):
        gregorian = parse_calendar_date("5 JAN 1700")
        julian = parse_calendar_date("@#DJULIAN@ 1 JAN 1700")
        merged = merge_date_ranges([julian, gregorian])
        assert merged.minimum == gregorian
        assert merged.maximum == julian

    def test_merges_ranges(self):
        first = DateRange(parse_calendar_date("1650"), parse_calendar_date("1660"))
        second = DateRange(parse_calendar_date("1600"), None)
        merged = merge_date_ranges([first, second])
        assert merged.minimum.year == 1600
        assert merged.maximum.year == 1660

    def test_result_is_a_closed_range(self):
        merged = merge_date_ranges([DateRange(None, parse_calendar_date("1700"))])
        assert merged.minimum == merged.maximum == parse_calendar_date("1700")


class TestDateRange:
    """Range construction."""

    def test_needs_a_bound(self):
        with pytest.raises(ValueError):
            DateRange(None, None)

    def test_rejects_reversed_bounds(self):
        with pytest.raises(ValueError):
            DateRange(parse_calendar_date("1700"), parse_calendar_date("1650"))

    def test_from_dates(self):
        date_range = DateRange.from_dates(parse_date("BET 1650 AND 1700"))
        assert date_range.minimum.year == 1650
        assert date_range.maximum.year == 1700
        assert str(date_range) == "FROM 1650 TO 1700"

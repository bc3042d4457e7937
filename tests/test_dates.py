"""Tests for GEDCOM date parsing and calendar bounds."""

import pytest

from repository_hierarchy.dates.calendar import CalendarDate, CalendarType
from repository_hierarchy.dates.parser import (
    GedcomDate,
    dates_for_source,
    parse_calendar_date,
    parse_date,
)
from repository_hierarchy.exceptions import DateParseError


class TestParseCalendarDate:
    """Single dates without qualifiers."""

    def test_year_only(self):
        date = parse_calendar_date("1650")
        assert date == CalendarDate(CalendarType.GREGORIAN, 1650)

    def test_full_date(self):
        date = parse_calendar_date("1 MAR 1650")
        assert (date.year, date.month, date.day) == (1650, 3, 1)

    def test_lowercase_and_extra_whitespace(self):
        assert parse_calendar_date("  1  mar   1650 ") == parse_calendar_date("1 MAR 1650")

    def test_calendar_escape(self):
        date = parse_calendar_date("@#DJULIAN@ 1 MAR 1650")
        assert date.calendar is CalendarType.JULIAN

    def test_french_republican_escape(self):
        date = parse_calendar_date("@#DFRENCH R@ 1 VEND 1")
        assert date.calendar is CalendarType.FRENCH_R
        assert date.month == 1

    def test_dual_year(self):
        date = parse_calendar_date("1699/00")
        assert date.year == 1699
        assert date.dual_year == 1700
        assert date.year_text == "1699/00"

    @pytest.mark.parametrize("text", ["1698/00", "1699/01", "1699/99"])
    def test_dual_year_must_follow_the_year(self, text):
        with pytest.raises(DateParseError, match="does not follow"):
            parse_calendar_date(text)
        assert parse_date(text) is None

    def test_bc(self):
        date = parse_calendar_date("44 B.C.")
        assert date.bc
        assert date.astronomical_year == -43

    @pytest.mark.parametrize(
        "text",
        ["", "MAR", "1 2 MAR 1650", "32 MAR 1650", "1 FOO 1650", "@#DROMAN@ 1650"],
    )
    def test_invalid(self, text):
        with pytest.raises(DateParseError):
            parse_calendar_date(text)

    def test_month_of_other_calendar_is_invalid(self):
        with pytest.raises(DateParseError):
            parse_calendar_date("@#DHEBREW@ MAR 5760")


class TestCalendarBounds:
    """Julian day spans of partial dates."""

    def test_exact_date_has_one_day(self):
        date = parse_calendar_date("1 MAR 1650")
        assert date.min_jd == date.max_jd

    def test_year_spans_whole_year(self):
        assert parse_calendar_date("1650").max_jd - parse_calendar_date("1650").min_jd == 364
        assert parse_calendar_date("2000").max_jd - parse_calendar_date("2000").min_jd == 365

    def test_month_spans_whole_month(self):
        gregorian = parse_calendar_date("FEB 1700")
        julian = parse_calendar_date("@#DJULIAN@ FEB 1700")
        assert gregorian.max_jd - gregorian.min_jd == 27
        assert julian.max_jd - julian.min_jd == 28

    def test_year_bounds_match_first_and_last_day(self):
        year = parse_calendar_date("1650")
        assert year.min_jd == parse_calendar_date("1 JAN 1650").min_jd
        assert year.max_jd == parse_calendar_date("31 DEC 1650").max_jd

    def test_julian_date_is_later_than_same_gregorian_date(self):
        julian = parse_calendar_date("@#DJULIAN@ 1 JAN 1700")
        gregorian = parse_calendar_date("1 JAN 1700")
        assert julian.min_jd - gregorian.min_jd == 10

    def test_french_republican_epoch(self):
        assert (
            parse_calendar_date("@#DFRENCH R@ 1 VEND 1").min_jd
            == parse_calendar_date("22 SEP 1792").min_jd
        )

    def test_hebrew_year_starts_in_tishri(self):
        year = parse_calendar_date("@#DHEBREW@ 5760")
        assert year.min_jd == parse_calendar_date("11 SEP 1999").min_jd
        assert year.iso_parts("min")[0] == 1999
        assert year.iso_parts("max")[0] == 2000

    def test_gedcom_round_trip_text(self):
        assert parse_calendar_date("@#DJULIAN@ 1 MAR 1650").gedcom() == "@#DJULIAN@ 1 MAR 1650"
        assert parse_calendar_date("44 B.C.").gedcom() == "44 B.C."

    def test_dual_year_only_in_gregorian(self):
        with pytest.raises(DateParseError):
            CalendarDate(CalendarType.JULIAN, 1699, dual_year=1700)


class TestGedcomDate:
    """Qualified date values."""

    @pytest.mark.parametrize("qualifier", ["ABT", "CAL", "EST", "BEF", "AFT", "FROM", "TO"])
    def test_single_qualifiers(self, qualifier):
        date = GedcomDate.parse(f"{qualifier} 1650")
        assert date.qualifier == qualifier
        assert date.minimum_date == date.maximum_date == parse_calendar_date("1650")

    def test_between(self):
        date = GedcomDate.parse("BET 1650 AND 1700")
        assert date.qualifier == "BET"
        assert date.minimum_date.year == 1650
        assert date.maximum_date.year == 1700

    def test_from_to(self):
        date = GedcomDate.parse("FROM 1 JAN 1650 TO 1700")
        assert date.is_range
        assert date.minimum_date.day == 1
        assert date.maximum_date.year == 1700

    def test_reversed_range_is_swapped(self):
        date = GedcomDate.parse("BET 1700 AND 1650")
        assert date.minimum_date.year == 1650
        assert date.maximum_date.year == 1700

    def test_mismatched_range_keywords_are_invalid(self):
        with pytest.raises(DateParseError):
            GedcomDate.parse("BET 1650 TO 1700")

    def test_interpreted(self):
        date = GedcomDate.parse("INT 1650 (sixteen fifty)")
        assert date.qualifier == "INT"
        assert date.phrase == "sixteen fifty"
        assert date.is_ok

    def test_phrase_has_no_bounds(self):
        date = GedcomDate.parse("(unknown)")
        assert not date.is_ok
        assert date.minimum_date is None

    def test_text_is_kept(self):
        assert str(GedcomDate.parse("abt 1650")) == "abt 1650"


class TestParseDate:
    """Lenient parsing used during extraction."""

    @pytest.mark.parametrize("text", ["", "   ", "(unknown)", "sometime", "31 FEB 1650"])
    def test_unusable_values_give_none(self, text):
        assert parse_date(text) is None

    def test_valid_value(self):
        assert parse_date("ABT 1650").qualifier == "ABT"

    def test_dates_for_source(self, records):
        dates = dates_for_source(records.record("S1"))
        assert [date.text for date in dates] == ["FROM 1650 TO 1700"]

    def test_dates_for_source_without_data(self, records):
        assert dates_for_source(records.record("S4")) == []

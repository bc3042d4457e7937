"""Calendar dates with partial precision.

A calendar date is one point in a calendar system, known to the day, the month
or only the year. Every date covers a span of Julian days: ``min_jd`` is the
first day it could mean and ``max_jd`` the last (equal for exact dates). The
Julian day numbers make dates from different calendars comparable.
"""

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from math import floor

from convertdate import french_republican, gregorian, hebrew, julian

from repository_hierarchy.exceptions import DateParseError


class CalendarType(str, Enum):
    """Calendars supported in GEDCOM date values, keyed by their escape."""

    GREGORIAN = "@#DGREGORIAN@"
    JULIAN = "@#DJULIAN@"
    HEBREW = "@#DHEBREW@"
    FRENCH_R = "@#DFRENCH R@"


# Month tokens in GEDCOM order. The number is the month as convertdate counts it.
MONTHS: dict[CalendarType, dict[str, int]] = {
    CalendarType.GREGORIAN: {
        "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
        "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
    },
    CalendarType.HEBREW: {
        "TSH": 7, "CSH": 8, "KSL": 9, "TVT": 10, "SHV": 11, "ADR": 12, "ADS": 13,
        "NSN": 1, "IYR": 2, "SVN": 3, "TMZ": 4, "AAV": 5, "ELL": 6,
    },
    CalendarType.FRENCH_R: {
        "VEND": 1, "BRUM": 2, "FRIM": 3, "NIVO": 4, "PLUV": 5, "VENT": 6, "GERM": 7,
        "FLOR": 8, "PRAI": 9, "MESS": 10, "THER": 11, "FRUC": 12, "COMP": 13,
    },
}
MONTHS[CalendarType.JULIAN] = MONTHS[CalendarType.GREGORIAN]

# Calendars whose years are counted like ISO years
AD_CALENDARS = {CalendarType.GREGORIAN, CalendarType.JULIAN}

_CALENDAR_ORDER = {calendar: index for index, calendar in enumerate(CalendarType)}


def _jdn(jd: float) -> int:
    """Julian day number of the day that contains a (half-day based) Julian date."""
    return floor(jd + 0.5)


def gregorian_from_jdn(jdn: int) -> tuple[int, int, int]:
    """(year, month, day) in the proleptic Gregorian calendar, astronomical years."""
    year, month, day = gregorian.from_jd(jdn - 0.5)
    return int(year), int(month), int(day)


@dataclass(frozen=True)
class CalendarDate:
    """A possibly partial date in one calendar."""

    calendar: CalendarType
    year: int
    month: int | None = None
    day: int | None = None
    bc: bool = False
    dual_year: int | None = None

    def __post_init__(self) -> None:
        if self.year < 1:
            raise DateParseError(f"Invalid year {self.year}")
        if self.day is not None and self.month is None:
            raise DateParseError("A day needs a month")
        if self.bc and self.calendar not in AD_CALENDARS:
            raise DateParseError(f"B.C. is not valid in the {self.calendar.name} calendar")
        if self.dual_year is not None and self.calendar is not CalendarType.GREGORIAN:
            raise DateParseError("Dual years are only valid in the Gregorian calendar")
        if self.dual_year is not None and self.dual_year != self.year + 1:
            raise DateParseError(f"Dual year {self.dual_year} does not follow {self.year}")
        if self.month is not None and self.month not in MONTHS[self.calendar].values():
            raise DateParseError(f"No month {self.month} in the {self.calendar.name} calendar")
        # Computing the bounds validates day and month against the calendar
        try:
            _ = self.min_jd, self.max_jd
        except ValueError as e:
            raise DateParseError(str(e)) from e

    @property
    def astronomical_year(self) -> int:
        """Year used for calculations: dual years use the later year, 1 B.C. is 0."""
        year = self.dual_year if self.dual_year is not None else self.year
        return 1 - year if self.bc else year

    @property
    def minimum_date(self) -> "CalendarDate":
        return self

    @property
    def maximum_date(self) -> "CalendarDate":
        return self

    @cached_property
    def min_jd(self) -> int:
        """First Julian day covered by this date."""
        month = self.month or self._first_month()
        return self._to_jdn(self.astronomical_year, month, self.day or 1)

    @cached_property
    def max_jd(self) -> int:
        """Last Julian day covered by this date."""
        year = self.astronomical_year
        if self.day is not None:
            return self.min_jd
        if self.month is None:
            return self._to_jdn(year + 1, self._first_month(), 1) - 1
        return self._to_jdn(year, self.month, self._month_length(year, self.month))

    def _first_month(self) -> int:
        # Hebrew years begin with Tishri
        return 7 if self.calendar is CalendarType.HEBREW else 1

    def _month_length(self, year: int, month: int) -> int:
        if self.calendar is CalendarType.HEBREW:
            return hebrew.month_days(year, month)
        if self.calendar is CalendarType.FRENCH_R:
            if month == 13:
                return self._to_jdn(year + 1, 1, 1) - self._to_jdn(year, 13, 1)
            return 30
        if month == 12:
            return 31
        return self._to_jdn(year, month + 1, 1) - self._to_jdn(year, month, 1)

    def _to_jdn(self, year: int, month: int, day: int) -> int:
        if self.calendar is CalendarType.GREGORIAN:
            return _jdn(gregorian.to_jd(year, month, day))
        if self.calendar is CalendarType.JULIAN:
            # convertdate counts Julian years historically: no year 0
            return _jdn(julian.to_jd(year if year > 0 else year - 1, month, day))
        if self.calendar is CalendarType.HEBREW:
            if month == 13 and hebrew.year_months(year) == 12:
                raise ValueError(f"Hebrew year {year} has no month ADS")
            if day > hebrew.month_days(year, month):
                raise ValueError(f"Hebrew month {month} of {year} has no day {day}")
            return _jdn(hebrew.to_jd(year, month, day))
        if day > 30:
            raise ValueError(f"French month {month} has no day {day}")
        return _jdn(french_republican.to_jd(year, month, day))

    @property
    def sort_key(self) -> tuple:
        """Total order: Julian day span first, then the remaining fields."""
        return (
            self.min_jd,
            self.max_jd,
            _CALENDAR_ORDER[self.calendar],
            self.astronomical_year,
            self.year,
            self.bc,
            self.month or 0,
            self.day or 0,
            self.dual_year or 0,
        )

    @property
    def month_token(self) -> str | None:
        """GEDCOM month token, e.g. JAN or TSH."""
        if self.month is None:
            return None
        for token, number in MONTHS[self.calendar].items():
            if number == self.month:
                return token
        return None

    @property
    def year_text(self) -> str:
        """Year as written in GEDCOM, e.g. 1699/00 or 44 B.C."""
        text = str(self.year)
        if self.dual_year is not None:
            text += f"/{self.dual_year % 100:02d}"
        if self.bc:
            text += " B.C."
        return text

    def iso_parts(self, bound: str = "min") -> tuple[int, int | None, int | None]:
        """Year, month and day of this date for ISO rendering.

        Gregorian and Julian dates keep their own reckoning. Other calendars
        are converted to the Gregorian date of the first or last day covered.

        Args:
            bound: "min" or "max", the end of the span to convert

        Returns:
            (astronomical year, month or None, day or None)
        """
        if self.calendar in AD_CALENDARS:
            return self.astronomical_year, self.month, self.day
        year, month, day = gregorian_from_jdn(self.min_jd if bound == "min" else self.max_jd)
        if self.month is None:
            return year, None, None
        if self.day is None:
            return year, month, None
        return year, month, day

    def gedcom(self) -> str:
        """Format this date as a GEDCOM date value."""
        parts = []
        if self.calendar is not CalendarType.GREGORIAN:
            parts.append(self.calendar.value)
        if self.day is not None:
            parts.append(str(self.day))
        if self.month_token:
            parts.append(self.month_token)
        parts.append(self.year_text)
        return " ".join(parts)

    def __str__(self) -> str:
        return self.gedcom()

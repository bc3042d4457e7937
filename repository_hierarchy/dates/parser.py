"""Parsing of GEDCOM date values.

GEDCOM dates are loosely formatted: they may be partial (year only), approximate
(ABT 1650), two-part ranges (BET 1650 AND 1700, FROM 1650 TO 1700), phrases, or
written in another calendar (@#DJULIAN@ 1 MAR 1650). Every parsed value exposes
a minimum and a maximum calendar date.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from repository_hierarchy.dates.calendar import MONTHS, CalendarDate, CalendarType
from repository_hierarchy.exceptions import DateParseError
from repository_hierarchy.schemas.records import GedcomRecord

logger = logging.getLogger(__name__)

CALENDAR_ESCAPE_RE = re.compile(r"^@#D([A-Z ]+?)@\s*")
BC_SUFFIX_RE = re.compile(r"\s*(?:B\.?\s?C\.?(?:E\.?)?)$")
YEAR_RE = re.compile(r"^(\d{1,4})(?:/(\d{2}))?$")
DAY_RE = re.compile(r"^\d{1,2}$")

TWO_PART_RE = re.compile(r"^(BET|FROM)\s+(.+?)\s+(AND|TO)\s+(.+)$")
INTERPRETED_RE = re.compile(r"^INT\s+(.+?)\s*\((.*)\)$", re.IGNORECASE | re.DOTALL)
PHRASE_RE = re.compile(r"^\((.*)\)$", re.DOTALL)

SINGLE_QUALIFIERS = ("ABT", "CAL", "EST", "BEF", "AFT", "FROM", "TO", "INT")
RANGE_QUALIFIERS = {"BET": "AND", "FROM": "TO"}


def parse_calendar_date(text: str) -> CalendarDate:
    """Parse a single GEDCOM date, e.g. ``@#DJULIAN@ 1 MAR 1650``.

    Args:
        text: Date without qualifiers

    Returns:
        The calendar date

    Raises:
        DateParseError: If the text is not a valid date
    """
    text = " ".join(text.upper().split())
    calendar = CalendarType.GREGORIAN

    escape = CALENDAR_ESCAPE_RE.match(text)
    if escape:
        try:
            calendar = CalendarType(f"@#D{escape.group(1)}@")
        except ValueError:
            raise DateParseError(f"Unsupported calendar: {escape.group(1)}") from None
        text = text[escape.end():]

    bc = False
    suffix = BC_SUFFIX_RE.search(text)
    if suffix and suffix.start() > 0:
        bc = True
        text = text[: suffix.start()]

    tokens = text.split()
    if not 1 <= len(tokens) <= 3:
        raise DateParseError(f"Not a date: {text!r}")

    year_match = YEAR_RE.match(tokens[-1])
    if not year_match:
        raise DateParseError(f"No year in date: {text!r}")
    year = int(year_match.group(1))
    dual_year = None
    if year_match.group(2):
        # 1699/00 means the year that began in 1699 and ends in 1700
        dual_year = (year // 100) * 100 + int(year_match.group(2))
        if dual_year <= year:
            dual_year += 100

    month = None
    if len(tokens) >= 2:
        month = MONTHS[calendar].get(tokens[-2])
        if month is None:
            raise DateParseError(f"Unknown month {tokens[-2]!r} for {calendar.name} calendar")

    day = None
    if len(tokens) == 3:
        if not DAY_RE.match(tokens[0]):
            raise DateParseError(f"Invalid day: {tokens[0]!r}")
        day = int(tokens[0])

    return CalendarDate(
        calendar=calendar, year=year, month=month, day=day, bc=bc, dual_year=dual_year
    )


@dataclass(frozen=True)
class GedcomDate:
    """A parsed GEDCOM date value.

    Attributes:
        qualifier: ABT, CAL, EST, BEF, AFT, INT, FROM, TO, BET or None
        date1: First (or only) date
        date2: Second date of a BET/AND or FROM/TO range
        phrase: Free text of INT dates and phrase-only dates
        text: The original value
    """

    qualifier: str | None
    date1: CalendarDate | None
    date2: CalendarDate | None = None
    phrase: str | None = None
    text: str = ""

    @classmethod
    def parse(cls, text: str) -> GedcomDate:
        """Parse a GEDCOM date value.

        Raises:
            DateParseError: If the value is not a valid GEDCOM date
        """
        original = text.strip()
        if not original:
            raise DateParseError("Empty date")

        phrase = PHRASE_RE.match(original)
        if phrase:
            return cls(qualifier=None, date1=None, phrase=phrase.group(1), text=original)

        interpreted = INTERPRETED_RE.match(original)
        if interpreted:
            return cls(
                qualifier="INT",
                date1=parse_calendar_date(interpreted.group(1)),
                phrase=interpreted.group(2),
                text=original,
            )

        normalized = " ".join(original.upper().split())

        two_part = TWO_PART_RE.match(normalized)
        if two_part and RANGE_QUALIFIERS[two_part.group(1)] == two_part.group(3):
            date1 = parse_calendar_date(two_part.group(2))
            date2 = parse_calendar_date(two_part.group(4))
            if date2.max_jd < date1.min_jd:
                logger.debug(f"Swapping reversed date range {original!r}")
                date1, date2 = date2, date1
            return cls(qualifier=two_part.group(1), date1=date1, date2=date2, text=original)

        qualifier, _, rest = normalized.partition(" ")
        if qualifier in SINGLE_QUALIFIERS and rest:
            return cls(qualifier=qualifier, date1=parse_calendar_date(rest), text=original)

        return cls(qualifier=None, date1=parse_calendar_date(normalized), text=original)

    @property
    def is_ok(self) -> bool:
        """Whether this value has calendar bounds (phrases do not)."""
        return self.date1 is not None

    @property
    def is_range(self) -> bool:
        return self.date2 is not None

    @property
    def minimum_date(self) -> CalendarDate | None:
        return self.date1

    @property
    def maximum_date(self) -> CalendarDate | None:
        return self.date2 if self.date2 is not None else self.date1

    def __str__(self) -> str:
        return self.text


def parse_date(text: str) -> GedcomDate | None:
    """Parse a GEDCOM date value, returning None if it has no usable bounds."""
    try:
        date = GedcomDate.parse(text)
    except DateParseError as e:
        logger.debug(f"Ignoring unparseable date {text!r}: {e}")
        return None
    return date if date.is_ok else None


def dates_for_source(source: GedcomRecord) -> list[GedcomDate]:
    """Get the event dates recorded in the DATA facts of a source.

    Dates are the DATE facts two levels below SOUR:DATA (SOUR:DATA > EVEN >
    DATE). Dates that cannot be parsed are skipped.

    Args:
        source: Source record

    Returns:
        Parsed dates in file order
    """
    dates = []
    for data in source.facts_by_tag("DATA"):
        for depth, fact in data.descendants("DATE"):
            if depth != 2:
                continue
            date = parse_date(fact.value)
            if date is not None:
                dates.append(date)
    return dates

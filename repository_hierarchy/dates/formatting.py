"""Human readable and ISO renderings of dates and date ranges.

The ISO form of a range is derived from its human readable rendering: the
range is rendered with numeric dates and the locale's range tokens, then the
markup, whitespace and tokens are stripped and every year is padded to four
digits. ``normalize_iso_text`` does the stripping and can be applied again to
its own output without changing it.
"""

import re
from typing import Literal

from repository_hierarchy.config import settings
from repository_hierarchy.dates.calendar import CalendarDate, CalendarType
from repository_hierarchy.dates.locale import DEFAULT_RANGE_TOKENS, ISO_END_MARKER, RangeTokens
from repository_hierarchy.dates.parser import GedcomDate
from repository_hierarchy.dates.ranges import DateBounds, DateRange
from repository_hierarchy.utils import remove_html_tags

Precision = Literal["year", "day"]

DATE_MARKUP = '<span class="date">{}</span>'

QUALIFIER_WORDS = {
    "ABT": "about",
    "CAL": "calculated",
    "EST": "estimated",
    "BEF": "before",
    "AFT": "after",
    "INT": "interpreted",
}

MONTH_NAMES = {
    "JAN": "January", "FEB": "February", "MAR": "March", "APR": "April",
    "MAY": "May", "JUN": "June", "JUL": "July", "AUG": "August",
    "SEP": "September", "OCT": "October", "NOV": "November", "DEC": "December",
}

CALENDAR_LABELS = {
    CalendarType.JULIAN: "Julian",
    CalendarType.HEBREW: "Hebrew",
    CalendarType.FRENCH_R: "French",
}

WHITESPACE_RE = re.compile(r"\s+")
# A year of one to three digits at the start of a bound
SHORT_YEAR_RE = re.compile(r"(^|/)(-?)(\d{1,3})(?=[-/]|$)")


def display_calendar_date(date: CalendarDate) -> str:
    """Render a calendar date for people, e.g. ``1 March 1650 (Julian)``."""
    parts = []
    if date.day is not None:
        parts.append(str(date.day))
    if date.month_token:
        parts.append(MONTH_NAMES.get(date.month_token, date.month_token.title()))
    parts.append(date.year_text)
    text = " ".join(parts)
    if date.calendar in CALENDAR_LABELS:
        text += f" ({CALENDAR_LABELS[date.calendar]})"
    return text


def iso_calendar_date(date: CalendarDate, bound: str = "min", precision: Precision = "year") -> str:
    """Render a calendar date numerically (years are not padded yet)."""
    year, month, day = date.iso_parts(bound)
    text = f"-{abs(year)}" if year < 0 else str(year)
    if precision == "day" and month is not None:
        text += f"-{month:02d}"
        if day is not None:
            text += f"-{day:02d}"
    return text


def display_date(date: GedcomDate, tokens: RangeTokens | None = None) -> str:
    """Render a parsed GEDCOM date for people, with each date in markup.

    Args:
        date: Parsed date
        tokens: Range tokens of the display locale

    Returns:
        Text such as ``about <span class="date">1650</span>``
    """
    tokens = tokens or DEFAULT_RANGE_TOKENS
    if not date.is_ok:
        return date.phrase or ""

    first = DATE_MARKUP.format(display_calendar_date(date.date1))
    if date.qualifier == "BET":
        return f"between {first} and {DATE_MARKUP.format(display_calendar_date(date.date2))}"
    if date.qualifier == "FROM" and date.date2 is not None:
        second = DATE_MARKUP.format(display_calendar_date(date.date2))
        return f"{tokens.start} {first} {tokens.end} {second}"
    if date.qualifier == "FROM":
        return f"{tokens.start} {first}"
    if date.qualifier == "TO":
        return f"{tokens.end} {first}"
    if date.qualifier == "INT":
        return f"interpreted {first} ({date.phrase})" if date.phrase else f"interpreted {first}"
    if date.qualifier in QUALIFIER_WORDS:
        return f"{QUALIFIER_WORDS[date.qualifier]} {first}"
    return first


def render_date_range(
    date_range: DateRange,
    tokens: RangeTokens | None = None,
    *,
    iso: bool = False,
    precision: Precision = "year",
) -> str:
    """Render a date range with each bound in markup.

    Args:
        date_range: Range to render
        tokens: Range tokens of the display locale
        iso: Render bounds numerically instead of with month names
        precision: With iso, "day" keeps known months and days

    Returns:
        ``<span class="date">1650</span>`` for single dates,
        ``From <span ...>873</span> To <span ...>1000</span>`` otherwise
    """
    tokens = tokens or DEFAULT_RANGE_TOKENS

    def render(date: CalendarDate, bound: str) -> str:
        text = iso_calendar_date(date, bound, precision) if iso else display_calendar_date(date)
        return DATE_MARKUP.format(text)

    minimum, maximum = date_range.minimum, date_range.maximum
    if minimum is None:
        return f"{tokens.end} {render(maximum, 'max')}"
    if maximum is None:
        return f"{tokens.start} {render(minimum, 'min')}"
    if minimum == maximum:
        return render(minimum, "min")
    return f"{tokens.start} {render(minimum, 'min')} {tokens.end} {render(maximum, 'max')}"


def display_date_range(date_range: DateRange, tokens: RangeTokens | None = None) -> str:
    """Render a date range for people."""
    return render_date_range(date_range, tokens)


def normalize_iso_text(text: str, tokens: RangeTokens | None = None) -> str:
    """Turn a rendered numeric date range into ``YYYY`` or ``YYYY/YYYY``.

    Markup and whitespace are removed, the start token is dropped and the end
    token becomes ``/``. A range with one bound only, or with equal bounds,
    collapses to that bound. Years are zero-padded to four digits.

    Args:
        text: Output of ``render_date_range(..., iso=True)``
        tokens: Range tokens the text was rendered with

    Returns:
        The ISO text
    """
    tokens = tokens or DEFAULT_RANGE_TOKENS
    text = remove_html_tags(text)
    text = WHITESPACE_RE.sub("", text)
    for token, marker in tokens.substitutions.items():
        token = WHITESPACE_RE.sub("", token)
        if token:
            text = text.replace(token, marker)

    text = text.strip(ISO_END_MARKER)
    text = SHORT_YEAR_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}{m.group(3).zfill(4)}", text)

    lower, separator, upper = text.partition(ISO_END_MARKER)
    if separator and lower == upper:
        text = lower
    return text


def format_iso(
    date_range: DateRange | DateBounds,
    tokens: RangeTokens | None = None,
    precision: Precision | None = None,
) -> str:
    """Format a date range as ISO text, e.g. ``0873/1000`` or ``1650``.

    Args:
        date_range: Range, or any date with minimum and maximum bounds
        tokens: Range tokens used for the intermediate rendering
        precision: "year" (default from settings) or "day"

    Returns:
        The ISO text
    """
    if not isinstance(date_range, DateRange):
        date_range = DateRange.from_dates(date_range)
    tokens = tokens or DEFAULT_RANGE_TOKENS
    precision = precision or settings.iso_date_precision
    rendered = render_date_range(date_range, tokens, iso=True, precision=precision)
    return normalize_iso_text(rendered, tokens)

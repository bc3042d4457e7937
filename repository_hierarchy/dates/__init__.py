"""Date parsing, merging and formatting for genealogical date values."""

from repository_hierarchy.dates.calendar import CalendarDate, CalendarType
from repository_hierarchy.dates.formatting import (
    display_date,
    display_date_range,
    format_iso,
    normalize_iso_text,
)
from repository_hierarchy.dates.locale import RangeTokens, resolve_range_tokens
from repository_hierarchy.dates.parser import GedcomDate, dates_for_source, parse_date
from repository_hierarchy.dates.ranges import DateRange, merge_date_ranges

__all__ = [
    "CalendarDate",
    "CalendarType",
    "DateRange",
    "GedcomDate",
    "RangeTokens",
    "dates_for_source",
    "display_date",
    "display_date_range",
    "format_iso",
    "merge_date_ranges",
    "normalize_iso_text",
    "parse_date",
    "resolve_range_tokens",
]

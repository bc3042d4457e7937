"""Overall date ranges.

A date range is the span between the earliest and the latest of a set of dates,
for example all event dates recorded for a source.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from repository_hierarchy.dates.calendar import CalendarDate


class DateBounds(Protocol):
    """Anything with a minimum and a maximum calendar date."""

    @property
    def minimum_date(self) -> CalendarDate | None: ...

    @property
    def maximum_date(self) -> CalendarDate | None: ...


def _min_key(date: CalendarDate) -> tuple:
    return date.sort_key


def _max_key(date: CalendarDate) -> tuple:
    key = date.sort_key
    return (key[1], key[0], *key[2:])


@dataclass(frozen=True)
class DateRange:
    """Span from a minimum to a maximum date; one side may be open."""

    minimum: CalendarDate | None
    maximum: CalendarDate | None

    def __post_init__(self) -> None:
        if self.minimum is None and self.maximum is None:
            raise ValueError("A date range needs at least one bound")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.maximum.max_jd < self.minimum.min_jd
        ):
            raise ValueError(f"Date range ends before it starts: {self.minimum} > {self.maximum}")

    @classmethod
    def from_dates(cls, date: DateBounds) -> DateRange:
        """Create a range covering one date value."""
        return cls(minimum=date.minimum_date, maximum=date.maximum_date)

    @property
    def minimum_date(self) -> CalendarDate | None:
        return self.minimum

    @property
    def maximum_date(self) -> CalendarDate | None:
        return self.maximum

    @property
    def is_single(self) -> bool:
        """Whether the range has one bound only, or two equal ones."""
        return self.minimum is None or self.maximum is None or self.minimum == self.maximum

    def __str__(self) -> str:
        if self.is_single:
            return str(self.minimum or self.maximum)
        return f"FROM {self.minimum} TO {self.maximum}"


def merge_date_ranges(dates: Iterable[DateBounds]) -> DateRange | None:
    """Get the overall date range of a set of dates.

    The earliest minimum and the latest maximum are kept. Dates compare by the
    Julian days they cover, so dates from different calendars can be merged.
    Ties are broken on the remaining date fields, which makes the result
    independent of the input order.

    Args:
        dates: Parsed dates, calendar dates or date ranges

    Returns:
        The overall range, or None if there are no dates
    """
    min_date: CalendarDate | None = None
    max_date: CalendarDate | None = None

    for date in dates:
        # An open side counts as the other bound
        candidate_min = date.minimum_date or date.maximum_date
        candidate_max = date.maximum_date or date.minimum_date

        if candidate_min is not None and (
            min_date is None or _min_key(candidate_min) < _min_key(min_date)
        ):
            min_date = candidate_min
        if candidate_max is not None and (
            max_date is None or _max_key(candidate_max) > _max_key(max_date)
        ):
            max_date = candidate_max

    if min_date is None or max_date is None:
        return None
    return DateRange(minimum=min_date, maximum=max_date)

"""Call number hierarchy of the sources held by a repository.

Archives give their holdings hierarchical call numbers, e.g. ``Fonds A/Series
3/Item 12``. Splitting the call numbers at a delimiter gives a tree of
categories (``Fonds A/`` > ``Series 3/``) with the sources as leaves.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any

from repository_hierarchy.config import settings
from repository_hierarchy.dates.formatting import format_iso
from repository_hierarchy.dates.locale import RangeTokens
from repository_hierarchy.dates.ranges import DateRange, merge_date_ranges
from repository_hierarchy.facts import call_number_for_source, date_range_for_source
from repository_hierarchy.schemas.records import GedcomRecord, RecordRepository
from repository_hierarchy.utils import natural_key

logger = logging.getLogger(__name__)


def _iso_or_none(date_range: DateRange | None, tokens: RangeTokens | None) -> str | None:
    return format_iso(date_range, tokens) if date_range is not None else None


def split_call_number(call_number: str, delimiters: list[str]) -> tuple[list[str], str]:
    """Split a call number into category names and the rest.

    Each category name keeps its trailing delimiter, so joining the names and
    the rest gives back the call number.

    Args:
        call_number: Call number, e.g. "A/3/12"
        delimiters: Delimiters between the levels, e.g. ["/"]

    Returns:
        (["A/", "3/"], "12")
    """
    delimiters = [delimiter for delimiter in delimiters if delimiter]
    if not delimiters:
        return [], call_number

    pattern = "|".join(re.escape(delimiter) for delimiter in delimiters)
    parts = re.split(f"({pattern})", call_number)
    names = [parts[i] + parts[i + 1] for i in range(0, len(parts) - 1, 2)]
    return names, parts[-1]


class CallNumberCategory:
    """A category of the call number hierarchy."""

    def __init__(self, name: str = "", parent: "CallNumberCategory | None" = None):
        """Initialize a category.

        Args:
            name: Name of this level including its delimiter, "" for the root
            parent: Enclosing category, None for the root
        """
        self.name = name
        self.parent = parent
        self._sub_categories: dict[str, CallNumberCategory] = {}
        self._sources: list[tuple[str, GedcomRecord]] = []

    @property
    def full_name(self) -> str:
        """Call number prefix up to and including this category."""
        if self.parent is None:
            return self.name
        return self.parent.full_name + self.name

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1

    @property
    def sub_categories(self) -> list["CallNumberCategory"]:
        """Direct sub-categories in natural order."""
        return sort_call_number_categories_by_name(self._sub_categories.values())

    @property
    def sources(self) -> list[GedcomRecord]:
        """Sources directly in this category, in natural call number order."""
        return [source for _, source in self._sorted_sources()]

    def _sorted_sources(self) -> list[tuple[str, GedcomRecord]]:
        return sorted(self._sources, key=lambda item: natural_key(item[0]))

    def get_or_create(self, name: str) -> "CallNumberCategory":
        """Get the sub-category with a name, creating it if needed."""
        if name not in self._sub_categories:
            self._sub_categories[name] = CallNumberCategory(name, parent=self)
        return self._sub_categories[name]

    def add_source(self, source: GedcomRecord, call_number: str | None = None) -> None:
        """Add a source with its call number to this category."""
        self._sources.append((call_number or "", source))

    def walk(self) -> Iterator["CallNumberCategory"]:
        """This category and all categories below it, depth first."""
        yield self
        for category in self.sub_categories:
            yield from category.walk()

    def all_sources(self) -> list[GedcomRecord]:
        """Sources of this category and all categories below it."""
        return [source for category in self.walk() for source in category.sources]

    def date_range(self) -> DateRange | None:
        """Overall date range of all sources below this category."""
        return merge_date_ranges(
            date_range
            for date_range in map(date_range_for_source, self.all_sources())
            if date_range is not None
        )

    def to_dict(self, tokens: RangeTokens | None = None) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "date_range": _iso_or_none(self.date_range(), tokens),
            "sources": [
                {
                    "xref": source.xref,
                    "title": source.name,
                    "call_number": call_number or None,
                    "date_range": _iso_or_none(date_range_for_source(source), tokens),
                }
                for call_number, source in self._sorted_sources()
            ],
            "sub_categories": [category.to_dict(tokens) for category in self.sub_categories],
        }

    def __repr__(self) -> str:
        return f"<CallNumberCategory(full_name='{self.full_name}', sources={len(self._sources)})>"


def sort_call_number_categories_by_name(
    categories: Iterable[CallNumberCategory],
) -> list[CallNumberCategory]:
    """Sort categories by full name in natural order."""
    return sorted(categories, key=lambda category: natural_key(category.full_name))


def build_hierarchy(
    repository: GedcomRecord,
    records: RecordRepository,
    *,
    delimiters: list[str] | None = None,
) -> CallNumberCategory:
    """Build the call number hierarchy of a repository.

    Args:
        repository: Repository record
        records: Record repository holding the sources
        delimiters: Call number delimiters (default: from settings)

    Returns:
        Root category; sources without call number are attached to it
    """
    delimiters = delimiters if delimiters is not None else settings.call_number_delimiters
    root = CallNumberCategory()

    for source in records.sources_for_repository(repository.xref):
        call_number = call_number_for_source(source, repository)
        if call_number is None:
            root.add_source(source)
            continue

        category = root
        names, _ = split_call_number(call_number, delimiters)
        for name in names:
            category = category.get_or_create(name)
        category.add_source(source, call_number)

    logger.debug(
        f"Built hierarchy for {repository.xref}: "
        f"{sum(1 for _ in root.walk()) - 1} categories, {len(root.all_sources())} sources"
    )
    return root

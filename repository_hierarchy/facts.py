"""Extraction of repository and source facts.

This module reads the typed values that the hierarchy and the EAD export need
(address lines, call numbers, reference numbers, places and date ranges) out
of the fact lists of repository and source records. Values handed out for
document generation are escaped with markupsafe, so they can be embedded in
HTML or XML as they are.
"""

import logging
from collections.abc import Iterable

from markupsafe import Markup, escape

from repository_hierarchy.dates.formatting import Precision, display_date_range, format_iso
from repository_hierarchy.dates.locale import RangeTokens
from repository_hierarchy.dates.parser import dates_for_source
from repository_hierarchy.dates.ranges import DateRange, merge_date_ranges
from repository_hierarchy.schemas.records import GedcomRecord, RecordRepository
from repository_hierarchy.utils import natural_key

logger = logging.getLogger(__name__)

# Keys derived from nested facts, used by the hierarchy and the EAD export
CALL_NUMBER_KEY = "SOUR:REPO:CALN"
DATE_RANGE_KEY = "SOUR:DATA:EVEN:DATE"
REFERENCE_TYPE_KEY = "SOUR:REFN:TYPE"

SOURCE_TAGS = [
    "SOUR:DATA",
    "SOUR:AUTH",
    "SOUR:TITL",
    "SOUR:ABBR",
    "SOUR:PUBL",
    "SOUR:TEXT",
    "SOUR:REPO",
    "SOUR:REFN",
    "SOUR:RIN",
    "SOUR:NOTE",
]


def gedcom_address_tags(level: int) -> list[str]:
    """Get the address tags of repositories in GEDCOM.

    Args:
        level: 1 for the repository facts, 2 for the parts of an address

    Returns:
        List of tags, empty for other levels
    """
    if level == 1:
        return [
            "REPO:ADDR",
            "REPO:PHON",
            "REPO:EMAIL",
            "REPO:FAX",
            "REPO:WWW",
        ]
    if level == 2:
        return [
            "ADR1",
            "ADR2",
            "ADR3",
            "CITY",
            "STAE",
            "POST",
            "CTRY",
        ]
    return []


def repository_address_lines(repository: GedcomRecord) -> dict[str, Markup]:
    """Get the address lines of a repository.

    Args:
        repository: Repository record

    Returns:
        Escaped values keyed by tag, e.g. {"REPO:ADDR": ..., "CITY": ...}
    """
    address_lines: dict[str, Markup] = {}
    level1_tags = gedcom_address_tags(1)
    level2_tags = gedcom_address_tags(2)

    for fact in repository.facts:
        if fact.tag in level1_tags:
            address_lines[fact.tag] = escape(fact.value)

        if fact.tag == "REPO:ADDR":
            for tag in level2_tags:
                value = fact.attribute(tag)
                if value is not None:
                    address_lines[tag] = escape(value)

    return address_lines


def _references_repository(value: str, repository: GedcomRecord | None) -> bool:
    return repository is None or value == repository.pointer


def call_number_for_source(
    source: GedcomRecord, repository: GedcomRecord | None = None
) -> str | None:
    """Get the call number of a source.

    Args:
        source: Source record
        repository: Only use call numbers given for this repository

    Returns:
        The call number of the last matching repository reference, or None
    """
    call_number = None
    for fact in source.facts_by_tag("SOUR:REPO"):
        if not _references_repository(fact.value, repository):
            continue
        value = fact.attribute("CALN")
        if value is not None:
            call_number = value
    return call_number


def date_range_for_source(source: GedcomRecord) -> DateRange | None:
    """Get the overall range of the event dates recorded for a source."""
    return merge_date_ranges(dates_for_source(source))


def iso_date_range_for_source(
    source: GedcomRecord,
    tokens: RangeTokens | None = None,
    precision: Precision | None = None,
) -> str | None:
    """Get the date range of a source in ISO format, e.g. ``1650/1700``."""
    date_range = date_range_for_source(source)
    if date_range is None:
        return None
    return format_iso(date_range, tokens, precision)


def display_date_range_for_source(
    source: GedcomRecord, tokens: RangeTokens | None = None
) -> str | None:
    """Get the date range of a source for people to read."""
    date_range = date_range_for_source(source)
    if date_range is None:
        return None
    return display_date_range(date_range, tokens)


def source_values_by_tag(
    source: GedcomRecord,
    repository: GedcomRecord | None = None,
    *,
    tokens: RangeTokens | None = None,
    precision: Precision | None = None,
) -> dict[str, Markup]:
    """Get the values of a source keyed by tag.

    Besides the level 1 source tags, the map holds the call number
    (SOUR:REPO:CALN), the ISO date range of the recorded events
    (SOUR:DATA:EVEN:DATE) and the reference number type (SOUR:REFN:TYPE)
    when they are present. Later facts with the same tag overwrite earlier ones.

    Args:
        source: Source record
        repository: Only take call numbers given for this repository
        tokens: Range tokens for the date range rendering
        precision: Precision of the ISO date range

    Returns:
        Escaped values keyed by tag
    """
    source_values: dict[str, str] = {}

    for fact in source.facts:
        if fact.tag not in SOURCE_TAGS:
            continue

        source_values[fact.tag] = fact.value

        if fact.tag == "SOUR:REPO":
            if not _references_repository(fact.value, repository):
                continue
            call_number = fact.attribute("CALN")
            if call_number is not None:
                source_values[CALL_NUMBER_KEY] = call_number

        elif fact.tag == "SOUR:DATA":
            date_range_text = iso_date_range_for_source(source, tokens, precision)
            if date_range_text:
                source_values[DATE_RANGE_KEY] = date_range_text

        elif fact.tag == "SOUR:REFN":
            reference_type = fact.attribute("TYPE")
            if reference_type is not None:
                source_values[REFERENCE_TYPE_KEY] = reference_type

    # Escape characters which cause errors in XML/HTML
    return {key: escape(value) for key, value in source_values.items()}


def places_for_source(source: GedcomRecord) -> list[str]:
    """Get the place of the events recorded for a source.

    Only the first place (SOUR:DATA > EVEN > PLAC) of the first DATA fact is
    used.

    Returns:
        A list with at most one place
    """
    data_facts = source.facts_by_tag("SOUR:DATA")
    if not data_facts:
        return []

    for depth, fact in data_facts[0].descendants("PLAC"):
        if depth == 2 and fact.value:
            return [fact.value]
    return []


def sort_sources_by_call_number(
    sources: Iterable[GedcomRecord], repository: GedcomRecord | None = None
) -> list[GedcomRecord]:
    """Sort sources by call number in natural order (sources without one first)."""
    return sorted(
        sources, key=lambda source: natural_key(call_number_for_source(source, repository))
    )


def default_repository_xref(records: RecordRepository) -> str | None:
    """Get the xref of the first repository, or None if there is none."""
    for repository in records.repositories():
        return repository.xref
    logger.debug("No repository records found")
    return None

"""Pydantic schemas for genealogical records.

Records are read once from a GEDCOM file and never modified afterwards. Each
record owns an ordered list of facts; each fact may carry nested sub-facts.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

REPOSITORY_RECORD_TYPE = "REPO"
SOURCE_RECORD_TYPE = "SOUR"


class Fact(BaseModel):
    """One (tag, value, sub-facts) entry of a genealogical record."""

    model_config = ConfigDict(frozen=True)

    tag: str = Field(description="Qualified tag, e.g. REPO:ADDR for level 1 or CITY below")
    value: str = Field(default="", description="Value with continuation lines folded in")
    sub_facts: tuple[Fact, ...] = Field(
        default=(), description="Nested facts one level below this one"
    )

    @property
    def attributes(self) -> dict[str, str]:
        """First value of every direct sub-fact, keyed by tag."""
        attributes: dict[str, str] = {}
        for sub_fact in self.sub_facts:
            attributes.setdefault(sub_fact.tag, sub_fact.value)
        return attributes

    def attribute(self, tag: str) -> str | None:
        """Return the value of the first direct sub-fact with a tag.

        Args:
            tag: Sub-fact tag, e.g. CALN

        Returns:
            The value, or None if there is no such sub-fact or it is empty
        """
        for sub_fact in self.sub_facts:
            if sub_fact.tag == tag:
                return sub_fact.value or None
        return None

    def children(self, tag: str) -> list[Fact]:
        """Return all direct sub-facts with a tag."""
        return [sub_fact for sub_fact in self.sub_facts if sub_fact.tag == tag]

    def descendants(self, tag: str | None = None) -> Iterator[tuple[int, Fact]]:
        """Walk the sub-facts depth first.

        Args:
            tag: Only yield facts with this tag

        Yields:
            (depth, fact) pairs, depth 1 being the direct sub-facts
        """
        stack = [(1, sub_fact) for sub_fact in reversed(self.sub_facts)]
        while stack:
            depth, fact = stack.pop()
            if tag is None or fact.tag == tag:
                yield depth, fact
            stack.extend((depth + 1, sub_fact) for sub_fact in reversed(fact.sub_facts))


class GedcomRecord(BaseModel):
    """A level-0 GEDCOM record with its facts."""

    model_config = ConfigDict(frozen=True)

    xref: str = Field(description="Cross reference id without the surrounding @ signs")
    record_type: str = Field(description="Record tag, e.g. REPO or SOUR")
    facts: tuple[Fact, ...] = Field(default=(), description="Level 1 facts in file order")

    def facts_by_tag(self, *tags: str) -> list[Fact]:
        """Return the facts with one of the given tags.

        Tags may be given qualified (SOUR:DATA) or plain (DATA).
        """
        wanted = {tag if ":" in tag else f"{self.record_type}:{tag}" for tag in tags}
        return [fact for fact in self.facts if fact.tag in wanted]

    def first_value(self, tag: str) -> str | None:
        """Return the value of the first fact with a tag, or None."""
        for fact in self.facts_by_tag(tag):
            if fact.value:
                return fact.value
        return None

    @property
    def pointer(self) -> str:
        """The xref as it appears in pointer values (@X1@)."""
        return f"@{self.xref}@"

    @property
    def name(self) -> str:
        """Display name of the record."""
        if self.record_type == SOURCE_RECORD_TYPE:
            return self.first_value("TITL") or self.first_value("ABBR") or self.xref
        return self.first_value("NAME") or self.xref

    def __repr__(self) -> str:
        return f"<GedcomRecord(type='{self.record_type}', xref='{self.xref}')>"


class RecordRepository(Protocol):
    """Access to the records of one family tree."""

    def repositories(self) -> list[GedcomRecord]:
        """All repository records in file order."""
        ...

    def sources(self) -> list[GedcomRecord]:
        """All source records in file order."""
        ...

    def record(self, xref: str) -> GedcomRecord:
        """The record with an xref; raises RecordNotFoundError."""
        ...

    def sources_for_repository(self, xref: str) -> list[GedcomRecord]:
        """Sources with at least one SOUR:REPO pointer to a repository."""
        ...


Fact.model_rebuild()

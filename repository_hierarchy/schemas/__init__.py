"""Pydantic schemas for genealogical records."""

from repository_hierarchy.schemas.records import (
    REPOSITORY_RECORD_TYPE,
    SOURCE_RECORD_TYPE,
    Fact,
    GedcomRecord,
    RecordRepository,
)

__all__ = [
    "REPOSITORY_RECORD_TYPE",
    "SOURCE_RECORD_TYPE",
    "Fact",
    "GedcomRecord",
    "RecordRepository",
]

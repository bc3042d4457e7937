"""Ingestion module for reading genealogical records."""

from repository_hierarchy.ingestion.gedcom import GedcomFile, parse_gedcom, read_gedcom

__all__ = ["GedcomFile", "parse_gedcom", "read_gedcom"]

"""Exceptions raised by Repository Hierarchy."""


class RepositoryHierarchyError(Exception):
    """Base class for all errors raised by this package."""


class GedcomParseError(RepositoryHierarchyError, ValueError):
    """A GEDCOM line could not be read."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class DateParseError(RepositoryHierarchyError, ValueError):
    """A GEDCOM date value could not be parsed."""


class RecordNotFoundError(RepositoryHierarchyError, KeyError):
    """No record exists for the requested xref."""

    def __init__(self, xref: str):
        self.xref = xref
        super().__init__(xref)

    def __str__(self) -> str:
        return f"Record not found: {self.xref}"


class ExportError(RepositoryHierarchyError, OSError):
    """Writing an exported document to its buffer failed."""

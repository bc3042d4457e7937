"""GEDCOM reader for repository and source records.

Files are read with ged4py, which detects the character set from the byte
order mark or the ``1 CHAR`` header line (ANSEL, ANSI, UTF-8, ...) and folds
CONC/CONT lines into their parent value. The ged4py record tree is then
mapped into immutable record objects. The resulting collection is the record
repository the rest of the package works against: extraction code receives it
explicitly instead of looking records up globally.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO

from ged4py import model
from ged4py.parser import GedcomLine, GedcomReader, IntegrityError, ParserError

from repository_hierarchy.exceptions import GedcomParseError, RecordNotFoundError
from repository_hierarchy.schemas.records import (
    REPOSITORY_RECORD_TYPE,
    SOURCE_RECORD_TYPE,
    Fact,
    GedcomRecord,
)

logger = logging.getLogger(__name__)

# ged4py turns these values into name tuples and DateValue objects
TEXT_VALUE_TAGS = frozenset({"DATE", "NAME"})


class TextValueReader(GedcomReader):
    """GedcomReader that keeps DATE and NAME values as GEDCOM text.

    Dates are parsed by :mod:`repository_hierarchy.dates`, which needs the
    original qualifiers and calendar escapes, and repository names are plain
    text rather than personal names.
    """

    def _make_record(self, parent: model.Record | None, gline: GedcomLine) -> model.Record | None:
        if gline.tag not in TEXT_VALUE_TAGS:
            return super()._make_record(parent, gline)

        record = model.Record()
        record.level = gline.level
        record.xref_id = gline.xref_id
        record.tag = gline.tag
        record.value = gline.value
        record.sub_records = []
        record.offset = gline.offset
        record.dialect = model.Dialect.DEFAULT
        if parent:
            parent.sub_records.append(record)
        return record


def _strip_pointer(xref: str) -> str:
    return xref.strip("@")


def _to_fact(record: model.Record, qualifier: str | None = None) -> Fact:
    tag = f"{qualifier}:{record.tag}" if qualifier else record.tag
    return Fact(
        tag=tag,
        value=record.value or "",
        sub_facts=tuple(_to_fact(sub_record) for sub_record in record.sub_records),
    )


def read_gedcom(file: BinaryIO, encoding: str | None = None) -> list[GedcomRecord]:
    """Read level-0 records from a binary GEDCOM stream.

    Records without an xref (HEAD, TRLR) are skipped.

    Args:
        file: Seekable binary stream positioned at the start of the file
        encoding: Codec to use instead of the one declared in the file

    Returns:
        Records in file order

    Raises:
        GedcomParseError: If the file is malformed or cannot be decoded
    """
    records = []
    try:
        with TextValueReader(file, encoding=encoding) as reader:
            for record in reader.records0():
                if not record.xref_id:
                    logger.debug(f"Skipping {record.tag} record without xref")
                    continue
                records.append(
                    GedcomRecord(
                        xref=_strip_pointer(record.xref_id),
                        record_type=record.tag,
                        facts=tuple(_to_fact(fact, record.tag) for fact in record.sub_records),
                    )
                )
    except (ParserError, IntegrityError) as e:
        raise GedcomParseError(str(e)) from e
    except UnicodeDecodeError as e:
        raise GedcomParseError(f"cannot decode GEDCOM text as {e.encoding}: {e.reason}") from e
    except OSError as e:
        # ged4py reports a file that ends inside the header as OSError
        raise GedcomParseError(str(e)) from e
    return records


def parse_gedcom(text: str) -> list[GedcomRecord]:
    """Parse GEDCOM text into level-0 records.

    Args:
        text: GEDCOM file contents

    Returns:
        Records in file order

    Raises:
        GedcomParseError: If a line is malformed or skips a level
    """
    return read_gedcom(io.BytesIO(text.encode("utf-8")), encoding="utf-8")


class GedcomFile:
    """Records of one GEDCOM file, addressable by xref."""

    def __init__(self, records: list[GedcomRecord], source_path: Path | None = None):
        """Initialize the record collection.

        Args:
            records: Parsed level-0 records
            source_path: File the records were read from, if any
        """
        self.source_path = source_path
        self._records = list(records)
        self._by_xref = {record.xref: record for record in self._records}

    @classmethod
    def from_text(cls, text: str) -> "GedcomFile":
        """Create a record collection from GEDCOM text."""
        return cls(parse_gedcom(text))

    @classmethod
    def from_path(cls, path: Path) -> "GedcomFile":
        """Read a GEDCOM file in the character set its header declares.

        Raises:
            FileNotFoundError: If the file does not exist
            GedcomParseError: If the file is malformed or cannot be decoded
        """
        path = Path(path)
        with path.open("rb") as file:
            records = read_gedcom(file)
        logger.info(f"Read {len(records)} records from {path}")
        return cls(records, source_path=path)

    def records_of_type(self, record_type: str) -> list[GedcomRecord]:
        """All records with a record tag, in file order."""
        return [record for record in self._records if record.record_type == record_type]

    def repositories(self) -> list[GedcomRecord]:
        return self.records_of_type(REPOSITORY_RECORD_TYPE)

    def sources(self) -> list[GedcomRecord]:
        return self.records_of_type(SOURCE_RECORD_TYPE)

    def record(self, xref: str) -> GedcomRecord:
        """Get a record by xref.

        Args:
            xref: Record id, with or without surrounding @ signs

        Returns:
            The record

        Raises:
            RecordNotFoundError: If no record has this xref
        """
        try:
            return self._by_xref[_strip_pointer(xref)]
        except KeyError:
            raise RecordNotFoundError(_strip_pointer(xref)) from None

    def sources_for_repository(self, xref: str) -> list[GedcomRecord]:
        pointer = f"@{_strip_pointer(xref)}@"
        return [
            source
            for source in self.sources()
            if any(fact.value == pointer for fact in source.facts_by_tag("REPO"))
        ]

    def __len__(self) -> int:
        return len(self._records)

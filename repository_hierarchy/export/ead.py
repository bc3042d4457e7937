"""EAD finding aid for a repository.

Builds an EAD 2002 document (Encoded Archival Description) describing one
repository: its name and address, and its sources arranged in the call number
hierarchy. Call number categories become series components, sources become
file components.
"""

import logging
from datetime import date

from lxml import etree
from markupsafe import Markup

from repository_hierarchy import __version__
from repository_hierarchy.config import Settings, settings
from repository_hierarchy.dates.calendar import CalendarType
from repository_hierarchy.dates.formatting import format_iso
from repository_hierarchy.dates.locale import RangeTokens
from repository_hierarchy.dates.ranges import DateRange
from repository_hierarchy.facts import (
    CALL_NUMBER_KEY,
    DATE_RANGE_KEY,
    REFERENCE_TYPE_KEY,
    date_range_for_source,
    gedcom_address_tags,
    places_for_source,
    repository_address_lines,
    source_values_by_tag,
)
from repository_hierarchy.hierarchy import CallNumberCategory, build_hierarchy
from repository_hierarchy.schemas.records import GedcomRecord, RecordRepository
from repository_hierarchy.utils import validate_whether_url

logger = logging.getLogger(__name__)

EAD_NAMESPACE = "urn:isbn:1-931666-22-9"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
EAD_SCHEMA_LOCATION = f"{EAD_NAMESPACE} http://www.loc.gov/ead/ead.xsd"

NSMAP = {None: EAD_NAMESPACE, "xlink": XLINK_NAMESPACE, "xsi": XSI_NAMESPACE}


def _text(value: str | None) -> str | None:
    # Extracted values are escaped for HTML; lxml escapes on its own
    if isinstance(value, Markup):
        return value.unescape()
    return value


def _element(
    parent: etree._Element, tag: str, text: str | None = None, **attributes: str | None
) -> etree._Element:
    element = etree.SubElement(
        parent,
        f"{{{EAD_NAMESPACE}}}{tag}",
        {key: value for key, value in attributes.items() if value is not None},
    )
    if text is not None:
        element.text = _text(text)
    return element


def _add_unitdate(did: etree._Element, iso: str, date_range: DateRange) -> etree._Element:
    # Julian dates keep their own years, everything else is rendered in Gregorian years
    calendars = {date.calendar for date in (date_range.minimum, date_range.maximum) if date}
    calendar = "julian" if calendars == {CalendarType.JULIAN} else "gregorian"
    return _element(did, "unitdate", iso, normal=_text(iso), era="ce", calendar=calendar)


class EADBuilder:
    """Build the EAD document of a repository."""

    def __init__(
        self,
        records: RecordRepository,
        config: Settings | None = None,
        tokens: RangeTokens | None = None,
    ):
        """Initialize the builder.

        Args:
            records: Record repository holding the repository and its sources
            config: Settings for the EAD header (default: global settings)
            tokens: Range tokens for date ranges
        """
        self.records = records
        self.config = config or settings
        self.tokens = tokens

    def build(self, repository: GedcomRecord, created: date | None = None) -> etree._ElementTree:
        """Build the EAD document.

        Args:
            repository: Repository record
            created: Creation date written to the header (default: today)

        Returns:
            The document tree
        """
        hierarchy = build_hierarchy(
            repository, self.records, delimiters=self.config.call_number_delimiters
        )

        root = etree.Element(f"{{{EAD_NAMESPACE}}}ead", nsmap=NSMAP)
        root.set(f"{{{XSI_NAMESPACE}}}schemaLocation", EAD_SCHEMA_LOCATION)
        root.set("audience", "external")

        self._add_header(root, repository, created or date.today())

        archdesc = _element(root, "archdesc", level="collection", type="inventory")
        self._add_repository_did(archdesc, repository, hierarchy)

        dsc = _element(archdesc, "dsc", type="combined")
        for category in hierarchy.sub_categories:
            self._add_category(dsc, category, repository)
        for source in hierarchy.sources:
            self._add_source(dsc, source, repository)

        logger.info(
            f"Built EAD document for {repository.xref} with {len(hierarchy.all_sources())} sources"
        )
        return etree.ElementTree(root)

    def _add_header(self, root: etree._Element, repository: GedcomRecord, created: date) -> None:
        header = _element(
            root,
            "eadheader",
            countryencoding="iso3166-1",
            dateencoding="iso8601",
            langencoding="iso639-2b",
            repositoryencoding="iso15511",
            scriptencoding="iso15924",
            relatedencoding="MARC21",
        )
        _element(
            header,
            "eadid",
            repository.xref,
            countrycode=self.config.ead_country_code,
            mainagencycode=self.config.ead_main_agency_code,
            identifier=repository.xref,
        )

        filedesc = _element(header, "filedesc")
        titlestmt = _element(filedesc, "titlestmt")
        _element(titlestmt, "titleproper", repository.name)

        profiledesc = _element(header, "profiledesc")
        creation = _element(profiledesc, "creation", f"repository_hierarchy {__version__} ")
        _element(creation, "date", created.isoformat(), normal=created.isoformat())
        langusage = _element(profiledesc, "langusage")
        _element(langusage, "language", langcode=self.config.ead_language_code)

    def _add_repository_did(
        self, archdesc: etree._Element, repository: GedcomRecord, hierarchy: CallNumberCategory
    ) -> None:
        did = _element(archdesc, "did")

        repository_element = _element(did, "repository")
        _element(repository_element, "corpname", repository.name)

        address_lines = repository_address_lines(repository)
        if address_lines:
            address = _element(repository_element, "address")
            for tag in [*gedcom_address_tags(2), *gedcom_address_tags(1)]:
                value = address_lines.get(tag)
                if not value:
                    continue
                if tag == "REPO:WWW" and validate_whether_url(_text(value)):
                    line = _element(address, "addressline")
                    link = _element(line, "extref", value)
                    link.set(f"{{{XLINK_NAMESPACE}}}href", _text(value))
                elif tag == "REPO:ADDR":
                    # Full address text; skipped when its parts were given
                    if not any(address_lines.get(part) for part in gedcom_address_tags(2)):
                        for text in _text(value).splitlines():
                            _element(address, "addressline", text)
                else:
                    _element(address, "addressline", value)

        _element(did, "unittitle", repository.name)

        date_range = hierarchy.date_range()
        if date_range is not None:
            iso = format_iso(date_range, self.tokens, self.config.iso_date_precision)
            _add_unitdate(did, iso, date_range)

    def _add_category(
        self, parent: etree._Element, category: CallNumberCategory, repository: GedcomRecord
    ) -> None:
        component = _element(parent, "c", level="series")
        did = _element(component, "did")
        _element(did, "unittitle", category.name)

        date_range = category.date_range()
        if date_range is not None:
            iso = format_iso(date_range, self.tokens, self.config.iso_date_precision)
            _add_unitdate(did, iso, date_range)

        for sub_category in category.sub_categories:
            self._add_category(component, sub_category, repository)
        for source in category.sources:
            self._add_source(component, source, repository)

    def _add_source(
        self, parent: etree._Element, source: GedcomRecord, repository: GedcomRecord
    ) -> None:
        values = source_values_by_tag(
            source, repository, tokens=self.tokens, precision=self.config.iso_date_precision
        )

        component = _element(parent, "c", level="file", id=f"source_{source.xref}")
        did = _element(component, "did")

        if values.get(CALL_NUMBER_KEY):
            _element(did, "unitid", values[CALL_NUMBER_KEY], type="call number")
        if values.get("SOUR:REFN"):
            reference_type = _text(values.get(REFERENCE_TYPE_KEY)) or "reference number"
            _element(did, "unitid", values["SOUR:REFN"], type=reference_type)

        title = values.get("SOUR:TITL") or values.get("SOUR:ABBR") or source.name
        _element(did, "unittitle", title)

        if values.get(DATE_RANGE_KEY):
            _add_unitdate(did, values[DATE_RANGE_KEY], date_range_for_source(source))

        if values.get("SOUR:AUTH"):
            origination = _element(did, "origination", label="author")
            _element(origination, "persname", values["SOUR:AUTH"])

        for place in places_for_source(source):
            _element(did, "physloc", place)

        if values.get("SOUR:NOTE") and not values["SOUR:NOTE"].startswith("@"):
            note = _element(did, "note")
            _element(note, "p", values["SOUR:NOTE"])

        if values.get("SOUR:PUBL"):
            bibliography = _element(component, "bibliography")
            _element(bibliography, "p", values["SOUR:PUBL"])


def build_ead_document(
    repository: GedcomRecord,
    records: RecordRepository,
    *,
    config: Settings | None = None,
    tokens: RangeTokens | None = None,
    created: date | None = None,
) -> etree._ElementTree:
    """Build the EAD document of a repository.

    Args:
        repository: Repository record
        records: Record repository holding the sources
        config: Settings for the EAD header (default: global settings)
        tokens: Range tokens for date ranges
        created: Creation date written to the header (default: today)

    Returns:
        The document tree
    """
    return EADBuilder(records, config=config, tokens=tokens).build(repository, created=created)


def serialize_document(tree: etree._ElementTree) -> bytes:
    """Serialize a document tree to UTF-8 XML with declaration."""
    return etree.tostring(tree, xml_declaration=True, encoding="UTF-8", pretty_print=True)

"""Shared fixtures: a small GEDCOM file with two repositories and their sources."""

from pathlib import Path

import pytest

from repository_hierarchy.ingestion.gedcom import GedcomFile

SAMPLE_GEDCOM = """\
0 HEAD
1 CHAR UTF-8
0 @R1@ REPO
1 NAME Stadtarchiv Musterstadt
1 ADDR Marktplatz 1
2 CONT 12345 Musterstadt
2 ADR1 Marktplatz 1
2 CITY Musterstadt
2 POST 12345
2 CTRY Germany
1 PHON +49 123 456
1 WWW https://www.example.org/archiv
0 @R2@ REPO
1 NAME Kirchenarchiv
0 @S1@ SOUR
1 TITL Kirchenbuch Taufen
1 AUTH Pfarramt & Co
1 REPO @R1@
2 CALN Fonds A/Series 1/Item 2
1 DATA
2 EVEN BIRT
3 DATE FROM 1650 TO 1700
3 PLAC Musterstadt
1 REFN 4711
2 TYPE Signatur
0 @S2@ SOUR
1 TITL Kirchenbuch Heiraten
1 REPO @R1@
2 CALN Fonds A/Series 1/Item 10
1 DATA
2 EVEN MARR
3 DATE BET 1600 AND 1620
0 @S3@ SOUR
1 TITL Steuerliste
1 REPO @R1@
2 CALN Fonds A/Series 2/Item 1
1 DATA
2 EVEN CENS
3 DATE ABT 873
0 @S4@ SOUR
1 TITL Ohne Signatur
1 REPO @R1@
0 @S5@ SOUR
1 TITL Anderes Archiv
1 REPO @R2@
2 CALN X/1
0 @I1@ INDI
1 NAME John /Doe/
0 TRLR
"""


@pytest.fixture
def gedcom_text() -> str:
    return SAMPLE_GEDCOM


@pytest.fixture
def records() -> GedcomFile:
    return GedcomFile.from_text(SAMPLE_GEDCOM)


@pytest.fixture
def repository(records):
    return records.record("R1")


@pytest.fixture
def gedcom_path(tmp_path) -> Path:
    path = tmp_path / "sample.ged"
    path.write_text(SAMPLE_GEDCOM, encoding="utf-8")
    return path


@pytest.fixture
def mislabelled_gedcom_path(tmp_path) -> Path:
    """A file that declares UTF-8 but is written in Windows-1252."""
    path = tmp_path / "mislabelled.ged"
    path.write_bytes(SAMPLE_GEDCOM.replace("Musterstadt", "Münster").encode("cp1252"))
    return path

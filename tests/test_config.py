"""Tests for settings and exceptions."""

import logging

import pytest

from repository_hierarchy.config import Settings
from repository_hierarchy.exceptions import (
    DateParseError,
    GedcomParseError,
    RecordNotFoundError,
    RepositoryHierarchyError,
)


class TestSettings:
    """Settings loaded from the environment."""

    def test_defaults(self, monkeypatch):
        names = [
            "LOCALE",
            "ISO_DATE_PRECISION",
            "CALL_NUMBER_DELIMITERS",
            "CORS_ORIGINS",
            "LOG_LEVEL",
        ]
        for name in names:
            monkeypatch.delenv(name, raising=False)
        config = Settings(_env_file=None)
        assert config.locale == "en"
        assert config.iso_date_precision == "year"
        assert config.call_number_delimiters == ["/"]
        assert config.cors_origins == []
        assert config.get_log_level() == logging.WARNING

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("LOCALE", "de")
        monkeypatch.setenv("CALL_NUMBER_DELIMITERS", '["/", "."]')
        monkeypatch.setenv("CORS_ORIGINS", '["http://localhost:8080"]')
        config = Settings(_env_file=None)
        assert config.locale == "de"
        assert config.call_number_delimiters == ["/", "."]
        assert config.cors_origins == ["http://localhost:8080"]

    def test_log_level(self):
        assert Settings(log_level="debug").get_log_level() == logging.DEBUG
        with pytest.raises(ValueError, match="Unknown LOG_LEVEL"):
            Settings(log_level="chatty").get_log_level()


class TestExceptions:
    """Exception hierarchy."""

    def test_base_class(self):
        for error in [DateParseError, GedcomParseError, RecordNotFoundError]:
            assert issubclass(error, RepositoryHierarchyError)

    def test_builtin_bases(self):
        assert issubclass(DateParseError, ValueError)
        assert issubclass(GedcomParseError, ValueError)
        assert issubclass(RecordNotFoundError, KeyError)

    def test_gedcom_error_line_number(self):
        error = GedcomParseError("bad line", line_number=3)
        assert error.line_number == 3
        assert str(error) == "line 3: bad line"

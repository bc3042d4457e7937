"""Locale tokens that mark the start and the end of a date range.

Human readable ranges read "From 873 To 1000" in English and "Von 873 Bis 1000"
in German. The ISO formatter needs to know these tokens to turn such text into
"0873/1000", so they are looked up here once instead of being spelled out in
the formatting code.
"""

from dataclasses import dataclass

from repository_hierarchy.config import Settings, settings

# locale -> (start of date range, end of date range)
RANGE_TOKENS: dict[str, tuple[str, str]] = {
    "en": ("From", "To"),
    "de": ("Von", "Bis"),
    "nl": ("Van", "Tot"),
    "fr": ("Du", "Au"),
    "es": ("Desde", "Hasta"),
    "it": ("Dal", "Al"),
}

DEFAULT_LOCALE = "en"

# Markers the tokens stand for in ISO 8601 interval notation
ISO_START_MARKER = ""
ISO_END_MARKER = "/"


@dataclass(frozen=True)
class RangeTokens:
    """Start and end tokens of a date range in one locale."""

    start: str
    end: str

    @property
    def substitutions(self) -> dict[str, str]:
        """Map of locale token to its ISO marker, start token first."""
        return {self.start: ISO_START_MARKER, self.end: ISO_END_MARKER}


def resolve_range_tokens(
    locale: str = DEFAULT_LOCALE, start: str | None = None, end: str | None = None
) -> RangeTokens:
    """Get the range tokens for a locale.

    Args:
        locale: Locale code such as "de" or "de_DE"; unknown locales fall back to English
        start: Override for the start token
        end: Override for the end token

    Returns:
        The resolved tokens
    """
    language = locale.replace("-", "_").split("_")[0].lower()
    default_start, default_end = RANGE_TOKENS.get(language, RANGE_TOKENS[DEFAULT_LOCALE])
    return RangeTokens(start=start or default_start, end=end or default_end)


def tokens_from_settings(config: Settings | None = None) -> RangeTokens:
    """Resolve the range tokens configured in the settings."""
    config = config or settings
    return resolve_range_tokens(config.locale, config.range_start_token, config.range_end_token)


# Resolved once at import; pass explicit tokens to use another locale
DEFAULT_RANGE_TOKENS = tokens_from_settings()

"""Small text helpers shared by the extraction and export code."""

import re
from urllib.parse import quote, urlsplit, urlunsplit

from pydantic import AnyUrl, TypeAdapter, ValidationError

DIGITS_RE = re.compile(r"(\d+)")
HTML_TAG_RE = re.compile(r"<[a-z]+[^<>]*>([^<>]+?)</[a-z]+>")

_url_adapter = TypeAdapter(AnyUrl)


def natural_key(text: str | None) -> tuple:
    """Sort key comparing digit runs by their numeric value.

    ``sorted(["A 10", "A 9"], key=natural_key)`` gives ``["A 9", "A 10"]``.
    Leading whitespace is ignored. None sorts like the empty string.
    """
    parts = DIGITS_RE.split((text or "").lstrip())
    # Digit runs sit at the odd positions, so types line up between keys
    return tuple(
        (int(part), part) if index % 2 else part for index, part in enumerate(parts)
    )


def remove_html_tags(text: str) -> str:
    """Replace ``<tag ...>text</tag>`` by its text."""
    return HTML_TAG_RE.sub(r"\1", text)


def validate_whether_url(url: str) -> bool:
    """Check whether a string is an absolute URL with a host.

    Path segments are percent-encoded first, so URLs with spaces or umlauts
    in their path are accepted.

    Args:
        url: Candidate URL

    Returns:
        True if the string is a valid URL
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False

    if not parts.scheme or not parts.netloc:
        return False

    path = "/".join(quote(segment, safe="%") for segment in parts.path.split("/"))
    try:
        _url_adapter.validate_python(urlunsplit(parts._replace(path=path)))
    except ValidationError:
        return False
    return True

"""Parse the ``path?query`` part of an endpoint descriptor into a :class:`UriSchema`.

Placeholders are ``{name}`` tokens where *name* contains no braces,
whitespace, or URL delimiters (``/``, ``?``, ``&``, ``=``).  Anything else
that involves braces -- ``{``, ``}}``, ``{}``, ``{a b}`` -- is kept as
literal text.  Passing ``strict=True`` turns unbalanced or empty braces
into a :class:`~declarest.exceptions.ConfigError` instead.

The query segment is parsed as a plain ``k=v&k2=v2`` string.  A pair whose
value is a placeholder (``page={page}``) stays in the literal defaults with
the placeholder text as its value; the name is also reported in
``query_params`` so it can be substituted from call parameters.
"""

from __future__ import annotations

import re
from urllib.parse import unquote_plus

from declarest.exceptions import ConfigError
from declarest.models import UriSchema

PLACEHOLDER_RE = re.compile(r"\{([^{}\s/?&=]+)\}")
"""Matches a single ``{name}`` placeholder and captures *name*."""


def extract_placeholders(text: str) -> tuple[str, ...]:
    """Return the distinct placeholder names in *text*, in order of first appearance.

    Example::

        >>> extract_placeholders("/a/{x}/b/{y}/{x}")
        ('x', 'y')
    """
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_RE.finditer(text):
        seen.setdefault(match.group(1), None)
    return tuple(seen)


def check_braces(text: str) -> None:
    """Raise :class:`ConfigError` if *text* contains a malformed placeholder.

    Every ``{`` must be closed by a ``}`` before the next ``{`` and must
    enclose a valid placeholder name.
    """
    stripped = PLACEHOLDER_RE.sub("", text)
    if "{" in stripped or "}" in stripped:
        raise ConfigError(f"Malformed placeholder in URI template: {text!r}")


def parse_query_string(query: str) -> dict[str, str]:
    """Parse ``k=v&k2=v2`` into an insertion-ordered dict.

    Keys without ``=`` map to an empty string and later duplicates replace
    earlier ones.  Percent-escapes are decoded; placeholder braces survive
    untouched because they are never escaped in a descriptor.
    """
    result: dict[str, str] = {}
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        result[unquote_plus(key)] = unquote_plus(value)
    return result


def parse_uri(uri: str, strict: bool = False) -> UriSchema:
    """Parse a descriptor URI into its path template, defaults, and placeholder names.

    The string is split on the first ``?``.  The left side is kept verbatim
    as the path template; the right side (if any) becomes the literal query
    defaults.  Placeholder names are scanned separately on each side.

    Args:
        uri: The URI part of a descriptor, e.g. ``"/users/{id}?fields=name"``.
        strict: When ``True``, malformed braces raise instead of being
            treated as literal text.

    Returns:
        A frozen :class:`~declarest.models.UriSchema`.

    Raises:
        ConfigError: Only when *strict* is set and the template is malformed.
    """
    path, sep, query = uri.partition("?")

    if strict:
        check_braces(path)
        check_braces(query)

    return UriSchema(
        path=path,
        path_params=extract_placeholders(path),
        query=parse_query_string(query) if sep else {},
        query_params=extract_placeholders(query) if sep else (),
    )

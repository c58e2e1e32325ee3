"""Turn an endpoint descriptor into the immutable :class:`RequestTemplate` for a method.

A descriptor is a two-token string ``"<VERB> <PATH>[?<QUERY>]"``::

    "get /users/{id}"
    "POST /users/{id}/avatar?overwrite=true"

The verb is upper-cased but not checked against a fixed list, so unusual
verbs reach the transport unchanged.
"""

from __future__ import annotations

from typing import Optional

from declarest.exceptions import ConfigError
from declarest.models import ClientOptions, RequestTemplate
from declarest.parser.uri import parse_uri


def split_descriptor(descriptor: str) -> tuple[str, str]:
    """Split *descriptor* into ``(VERB, uri)``.

    Raises:
        ConfigError: If the descriptor is not exactly two whitespace-separated
            tokens.
    """
    tokens = descriptor.split()
    if len(tokens) != 2:
        raise ConfigError(f"Invalid rest endpoint declaration - {descriptor}")
    verb, uri = tokens
    return verb.upper(), uri


def _pick_list(picks: dict[str, list[str]], method_name: str) -> Optional[tuple[str, ...]]:
    keys = picks.get(method_name)
    if keys is None:
        return None
    return tuple(keys)


def build_request_template(
    descriptor: str,
    method_name: str,
    options: ClientOptions,
) -> RequestTemplate:
    """Build the request template shared by every call of *method_name*.

    Args:
        descriptor: The raw descriptor string from ``options.methods``.
        method_name: The generated method's name; used to look up the
            query and body pick-lists.
        options: Validated client options supplying the base URL, headers,
            pick-lists, and template strictness.

    Returns:
        A frozen :class:`~declarest.models.RequestTemplate`.

    Raises:
        ConfigError: If the descriptor is malformed, or if
            ``options.strict_templates`` is set and a placeholder is malformed.
    """
    verb, uri = split_descriptor(descriptor)

    try:
        uri_schema = parse_uri(uri, strict=options.strict_templates)
    except ConfigError as exc:
        raise ConfigError(f"{method_name}: {exc.message}") from exc

    return RequestTemplate(
        method_name=method_name,
        base_url=options.base_url,
        http_method=verb,
        uri_schema=uri_schema,
        headers=dict(options.headers) if options.headers else None,
        query_pick=_pick_list(options.query, method_name),
        body_pick=_pick_list(options.body, method_name),
    )

"""Project call parameters onto a request template's path, query string, and body.

This module is the per-call half of the descriptor pipeline.  Given the
frozen :class:`~declarest.models.RequestTemplate` of a method and the
caller's parameters, :func:`project` computes where each parameter lands.

**Projection rules:**

* **Path** -- every ``{name}`` in the path template is replaced with
  ``params[name]``.  A missing (or ``None``) value becomes an empty string.
* **Query, read verbs** (``GET``, ``HEAD``, ``OPTIONS``, and anything that
  is not a write verb) -- all parameters that are not path parameters, then
  the template's literal defaults for keys the caller did not supply (or
  passed as ``None``), then the optional query pick-list.
* **Query, write verbs** (``POST``, ``PUT``, ``PATCH``, ``DELETE``) -- only
  the template's literal defaults, with values replaced by call parameters
  whose names appear as placeholders in the query segment.  An unreplaced
  placeholder keeps its literal ``{name}`` text.
* Names consumed by the path never appear in the query, on any verb.
* **Body** -- all parameters that are not path parameters, restricted by the
  optional body pick-list.  Only sent for write verbs.

Nothing here mutates its inputs: every call allocates fresh dicts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

from declarest.models import RequestTemplate
from declarest.parser.uri import PLACEHOLDER_RE

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
"""Verbs that carry a request body and take query values from placeholders only."""

# Characters left unescaped by JavaScript's encodeURIComponent.
_QUERY_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class Projection:
    """Where a call's parameters land in the outgoing request.

    Attributes:
        path: The path template with placeholders substituted.
        query_string: Encoded ``k=v&...`` string without a leading ``?``;
            empty when there is nothing to send.
        body: Body payload candidates (only sent for write verbs).
    """

    path: str
    query_string: str
    body: dict[str, Any]

    @property
    def uri(self) -> str:
        """Return the path joined with the query string, omitting an empty ``?``."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path


def is_write_method(http_method: str) -> bool:
    return http_method.upper() in WRITE_METHODS


def stringify(value: Any) -> str:
    """Render a parameter value the way it appears in a URL.

    Booleans become ``true``/``false``, ``None`` becomes an empty string and
    lists/tuples are joined with commas.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    return str(value)


def render_path(path_template: str, params: Mapping[str, Any]) -> str:
    """Substitute every ``{name}`` in *path_template* from *params*."""
    return PLACEHOLDER_RE.sub(lambda m: stringify(params.get(m.group(1))), path_template)


def _without(params: Mapping[str, Any], excluded: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if k not in excluded}


def _pick(values: Mapping[str, Any], keys: Optional[tuple[str, ...]]) -> dict[str, Any]:
    if keys is None:
        return dict(values)
    return {k: values[k] for k in keys if k in values}


def build_query(template: RequestTemplate, params: Mapping[str, Any]) -> dict[str, Any]:
    """Compute the query mapping for a call, before encoding.

    Names consumed by the path never reach the query, not even through a
    template default.  On read verbs a ``None`` value falls back to the
    template default, if there is one.
    """
    schema = template.uri_schema
    defaults = _without(schema.query, schema.path_params)

    if not is_write_method(template.http_method):
        query = _without(params, schema.path_params)
        for key, default in defaults.items():
            if query.get(key) is None:
                query[key] = default
        return _pick(query, template.query_pick)

    query = defaults
    for name in schema.query_params:
        if name in params and name not in schema.path_params:
            query[name] = params[name]
    return query


def build_body(template: RequestTemplate, params: Mapping[str, Any]) -> dict[str, Any]:
    """Compute the body payload for a call."""
    body = _without(params, template.uri_schema.path_params)
    return _pick(body, template.body_pick)


def encode_query(query: Mapping[str, Any]) -> str:
    """Percent-encode *query* as ``k=v`` pairs joined by ``&``, skipping ``None`` values.

    Example::

        >>> encode_query({"k": "v", "q": "a b", "x": None})
        'k=v&q=a%20b'
    """
    pairs = []
    for key, value in query.items():
        if value is None:
            continue
        pairs.append(
            f"{quote(str(key), safe=_QUERY_SAFE)}={quote(stringify(value), safe=_QUERY_SAFE)}"
        )
    return "&".join(pairs)


def project(template: RequestTemplate, params: Mapping[str, Any]) -> Projection:
    """Project *params* onto *template*.

    Args:
        template: The method's frozen request template.
        params: The call parameters; never mutated.

    Returns:
        A :class:`Projection` with the rendered path, encoded query string,
        and body payload.

    Example::

        template = build_request_template(
            "get /test1/{param1}/stuff/{param2}", "test1", options
        )
        project(template, {"param1": 1, "param2": 2, "k": "v"}).uri
        # '/test1/1/stuff/2?k=v'
    """
    return Projection(
        path=render_path(template.uri_schema.path, params),
        query_string=encode_query(build_query(template, params)),
        body=build_body(template, params),
    )

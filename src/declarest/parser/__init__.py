"""Descriptor parser -- turn ``"VERB /path/{p}?q={q}"`` strings into request templates.

This sub-package handles everything that happens once, at client
construction time, for each declared method.

Typical usage::

    from declarest.parser import build_request_template, parse_uri

    schema = parse_uri("/users/{id}?fields=name")
    template = build_request_template("GET /users/{id}", "get_user", options)

Sub-modules:

* :mod:`~declarest.parser.uri` -- Split a URI template into path template,
  placeholder names, and literal query defaults.
* :mod:`~declarest.parser.descriptor` -- Split the verb from the URI and
  attach per-method pick-lists and headers.
"""

from declarest.parser.descriptor import build_request_template, split_descriptor
from declarest.parser.uri import extract_placeholders, parse_uri

__all__ = ["build_request_template", "split_descriptor", "extract_placeholders", "parse_uri"]

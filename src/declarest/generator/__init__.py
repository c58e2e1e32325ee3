"""Per-call request composition -- parameter projection and hook resolution.

Typical usage::

    from declarest.generator import project, TransformSpec, resolve_transform

    projection = project(template, {"id": 42, "fields": "name"})
    projection.uri  # '/users/42?fields=name'

Sub-modules:

* :mod:`~declarest.generator.projector` -- Map call parameters onto the
  path, query string, and body of a request template.
* :mod:`~declarest.generator.transforms` -- Decide which request
  transformer, response transformer, and error handler apply to a method.
"""

from declarest.generator.projector import Projection, project
from declarest.generator.transforms import TransformSpec, resolve_all, resolve_transform

__all__ = ["Projection", "project", "TransformSpec", "resolve_all", "resolve_transform"]

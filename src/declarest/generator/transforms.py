"""Resolve request transformers, response transformers, and error handlers per method.

Each of the three hooks is configured the same way: absent, a single
callable applied to every method, or a mapping of method name to callable.
:class:`TransformSpec` captures that choice as a tagged value and
:func:`resolve_transform` picks the callable governing one method, falling
back to a per-kind default.

Defaults:

* request transformer -- :func:`keep_request`, which leaves parameters,
  body, and options untouched;
* response transformer -- :func:`extract_body`, which returns the decoded
  response payload;
* error handler -- ``None``, so failures propagate unchanged.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from declarest.exceptions import ConfigError


class TransformKind(str, enum.Enum):
    """How a transform option was configured."""

    ABSENT = "absent"
    GLOBAL = "global"
    PER_METHOD = "per_method"


@dataclass(frozen=True)
class TransformSpec:
    """Tagged form of a transform option.

    Attributes:
        kind: Which variant this is.
        function: The callable for :attr:`TransformKind.GLOBAL`.
        per_method: Method name to callable for :attr:`TransformKind.PER_METHOD`.
            Entries that are not callable are ignored during resolution.
    """

    kind: TransformKind = TransformKind.ABSENT
    function: Optional[Callable[..., Any]] = None
    per_method: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_option(cls, value: Any, option_name: str = "transform") -> TransformSpec:
        """Classify a raw option value.

        Raises:
            ConfigError: If *value* is neither ``None``, a callable, nor a mapping.
        """
        if value is None:
            return cls()
        if callable(value):
            return cls(kind=TransformKind.GLOBAL, function=value)
        if isinstance(value, Mapping):
            return cls(kind=TransformKind.PER_METHOD, per_method=dict(value))
        raise ConfigError(f"{option_name} must be a callable or a mapping of callables")


def keep_request(params: Any, body: Any, options: Any) -> None:
    """Default request transformer: keep the computed values as they are."""
    return None


def extract_body(response: Any, original_params: Any = None, params: Any = None) -> Any:
    """Default response transformer: return the decoded payload of *response*."""
    return response.data


def resolve_transform(
    spec: TransformSpec,
    method_name: str,
    default: Optional[Callable[..., Any]],
) -> Optional[Callable[..., Any]]:
    """Return the callable that governs *method_name* under *spec*.

    Resolution order: a global callable wins, then a callable per-method
    entry, then *default*.
    """
    if spec.kind is TransformKind.GLOBAL:
        return spec.function
    if spec.kind is TransformKind.PER_METHOD:
        candidate = spec.per_method.get(method_name)
        if callable(candidate):
            return candidate
    return default


@dataclass(frozen=True)
class ResolvedTransforms:
    """The three hooks resolved for one method."""

    transform_request: Callable[..., Any]
    transform_response: Callable[..., Any]
    error_handler: Optional[Callable[..., Any]]


def resolve_all(
    method_name: str,
    transform_request: TransformSpec,
    transform_response: TransformSpec,
    error_handler: TransformSpec,
) -> ResolvedTransforms:
    """Resolve all three hooks for *method_name* with their defaults."""
    return ResolvedTransforms(
        transform_request=resolve_transform(transform_request, method_name, keep_request)
        or keep_request,
        transform_response=resolve_transform(transform_response, method_name, extract_body)
        or extract_body,
        error_handler=resolve_transform(error_handler, method_name, None),
    )

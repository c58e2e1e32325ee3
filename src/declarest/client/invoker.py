"""Per-call pipeline of a generated API method.

A :class:`MethodInvoker` is created once per declared method and executes
every call of that method through these stages:

1. **Validate** (synchronous) -- parameter shape and required fields are
   checked when the method is *called*, before any coroutine exists, so a
   :class:`~declarest.exceptions.ValidationError` is raised at the call
   site and nothing is dispatched.
2. **Clone** -- parameters and call options are deep-copied; nothing the
   pipeline does can leak back into caller-owned objects.
3. **Transform request** -- the resolved request transformer receives
   ``(params, body, options)`` and may return a replacement
   ``(params, body, options)`` triple.
4. **Dispatch** -- the request is composed from the template and awaited
   on the transport.
5. **Transform response** -- the resolved response transformer receives
   ``(response, original_params, params)``; its return value is the result.
6. **Handle error** -- when an error handler is resolved, any failure from
   stages 3-5 is passed to it and its return value becomes the result.

Transformers and error handlers may be plain functions or coroutine
functions.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any, Coroutine, Optional

from declarest.client.response import ApiResponse, describe_failure
from declarest.client.transport import RequestOptions, Transport
from declarest.exceptions import DeclarestError, HandlerError, ValidationError, status_error
from declarest.generator.projector import is_write_method, project
from declarest.generator.transforms import ResolvedTransforms
from declarest.models import DEFAULT_RESPONSE_TYPE, RequestTemplate

logger = logging.getLogger(__name__)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class MethodInvoker:
    """Callable behind one generated client method.

    Args:
        template: The method's frozen request template.
        transforms: Request/response transformers and error handler
            resolved for this method.
        transport: The transport every request is dispatched on.
        required: Parameter names that must be present in every call.
        response_type: Client-wide default response type.
        raw_response: Skip payload decoding for every call.
        timeout: Client-wide default timeout in seconds.
    """

    def __init__(
        self,
        template: RequestTemplate,
        transforms: ResolvedTransforms,
        transport: Transport,
        required: tuple[str, ...] = (),
        response_type: Optional[str] = DEFAULT_RESPONSE_TYPE,
        raw_response: bool = False,
        timeout: Optional[float] = None,
    ) -> None:
        self.template = template
        self.transforms = transforms
        self.transport = transport
        self.required = required
        self.response_type = response_type
        self.raw_response = raw_response
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.template.method_name

    def __repr__(self) -> str:
        schema = self.template.uri_schema
        return f"<MethodInvoker {self.name}: {self.template.http_method} {schema.path}>"

    def __call__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Coroutine[Any, Any, Any]:
        """Validate the call synchronously and return the awaitable request.

        Raises:
            ValidationError: Immediately, if *params* or *options* is not a
                mapping or a required parameter is missing.
        """
        self.validate(params, options)

        # Copied before the coroutine exists, so later caller mutation cannot leak in
        call_params: dict[str, Any] = copy.deepcopy(dict(params)) if params else {}
        call_options: dict[str, Any] = copy.deepcopy(dict(options)) if options else {}
        return self._run(call_params, call_options)

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate(
        self,
        params: Optional[Mapping[str, Any]],
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Check parameter shape and required fields for this method."""
        if options is not None and not isinstance(options, Mapping):
            raise ValidationError(
                f"{self.name}: additional request options must be a mapping",
                method_name=self.name,
            )

        if params is not None and not isinstance(params, Mapping):
            raise ValidationError(
                f"{self.name}: method params must be a mapping", method_name=self.name
            )

        if not self.required:
            return

        if params is None:
            raise ValidationError(
                f"{self.name}: method params must be a mapping with fields: "
                + ", ".join(self.required),
                method_name=self.name,
            )

        for field in self.required:
            if field not in params:
                raise ValidationError(
                    f"{self.name}: {field} param is required",
                    method_name=self.name,
                    field=field,
                )

    # ------------------------------------------------------------------ #
    # Pipeline
    # ------------------------------------------------------------------ #

    async def _run(self, params: dict[str, Any], options: dict[str, Any]) -> Any:
        logger.debug("called method %s", self.name)

        try:
            result = await self._execute(params, options)
        except Exception as exc:
            handler = self.transforms.error_handler
            if handler is None:
                logger.debug("method %s failed: %s", self.name, exc)
                raise
            return await self._handle_error(handler, exc)

        logger.debug("method %s settled", self.name)
        return result

    async def _execute(self, params: dict[str, Any], options: dict[str, Any]) -> Any:
        original_params = copy.deepcopy(params)
        body: Any = project(self.template, params).body

        transformed = await _resolve(self.transforms.transform_request(params, body, options))
        if isinstance(transformed, (tuple, list)) and len(transformed) == 3:
            params, body, options = transformed
            params = params if params is not None else {}
            options = options if options is not None else {}

        request = self.compose(params, body, options)
        response = await self.transport(request)
        self._check_status(response)

        return await _resolve(
            self.transforms.transform_response(response, original_params, params)
        )

    def compose(
        self,
        params: Mapping[str, Any],
        body: Any,
        options: Mapping[str, Any],
    ) -> RequestOptions:
        """Build the :class:`RequestOptions` for one call.

        Template headers are overlaid by ``options["headers"]``.  The body is
        attached only for write verbs.
        """
        template = self.template
        projection = project(template, params)

        headers: dict[str, Any] = dict(template.headers or {})
        if options.get("headers"):
            headers.update(options["headers"])

        response_type = (
            options.get("response_type")
            or options.get("responseType")
            or self.response_type
            or DEFAULT_RESPONSE_TYPE
        )
        timeout = options.get("timeout", self.timeout)

        return RequestOptions(
            method=template.http_method,
            url=template.base_url + projection.uri,
            headers=headers,
            body=body if is_write_method(template.http_method) else None,
            response_type=response_type,
            raw_response=self.raw_response,
            timeout=timeout,
        )

    def _check_status(self, response: Any) -> None:
        status = getattr(response, "status_code", None)
        if not isinstance(status, int) or 200 <= status < 300:
            return
        if isinstance(response, ApiResponse):
            message = describe_failure(response)
        else:
            message = f"HTTP {status}"
        raise status_error(status, message, response)

    async def _handle_error(self, handler: Callable[[Exception], Any], error: Exception) -> Any:
        logger.debug("routing %s failure to error handler: %s", self.name, error)
        try:
            return await _resolve(handler(error))
        except DeclarestError:
            raise
        except Exception as exc:
            if exc is error:
                raise
            raise HandlerError(
                f"{self.name}: error handler failed: {exc}", original=error
            ) from exc

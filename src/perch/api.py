"""Request-handling adapter — wrap a resource handler as a chirp endpoint.

The endpoint runs, in order: the configured ``auth_request`` hook, parameter
collection, optional validation against the handler's companion rule, and
the handler itself.  Handler signatures follow the method key::

    index(request, params)
    show(request, id, params)
    create(request, params)
    update(request, id, params)
    destroy(request, id, params)

``params`` merges query parameters, the JSON body (``create``/``update``)
and path parameters, in increasing priority.

Return values are negotiated into JSON::

    Response      -> passed through unchanged
    None          -> 204 No Content
    anything else -> {"data": value}  (201 for create, 200 otherwise)
"""

import json
from collections.abc import Mapping
from typing import Any

from chirp import Request, Response
from chirp.validation import validate

from perch._errors import RestError
from perch._types import HandlerFunc, ValidationRules
from perch.config import RestConfig
from perch.routes.binder import ID_PARAM, ROUTE_SPECS
from perch.routes.modules import MethodKey
from perch.routes.paths import UrlPath

_JSON = "application/json; charset=utf-8"

# Method keys whose request body is merged into params
_BODY_KEYS: frozenset[MethodKey] = frozenset({MethodKey.CREATE, MethodKey.UPDATE})


def make_endpoint(
    config: RestConfig,
    key: MethodKey,
    resource: str,
    handler: HandlerFunc,
    rule: Any = None,
    path: UrlPath | None = None,
) -> HandlerFunc:
    """Build the chirp endpoint for one resource handler.

    The returned coroutine function closes over its arguments only and keeps
    no state between requests.

    Args:
        config: Supplies the optional ``auth_request`` hook.
        key: Method key the handler was exported under.
        resource: Resource name, used to name the endpoint.
        handler: Async-normalized resource handler.
        rule: chirp validation rules ``{field: [validator, ...]}``, or a
            callable taking the collected params and returning such rules.
        path: Route template the endpoint is registered under.  Path
            parameters are read from the request path by position against
            it.  Without one, the router's captured names are used.

    """
    auth = config.auth_request
    member = ROUTE_SPECS[key].member
    reads_body = key in _BODY_KEYS
    success_status = 201 if key is MethodKey.CREATE else 200

    async def endpoint(request: Request) -> Response:
        if auth is not None and not await auth(request):
            return _error(401, "Unauthorized")

        path_values = _path_values(path, request)
        try:
            params = await _collect_params(request, path_values, reads_body=reads_body)
        except RestError as exc:
            return _error(exc.status, exc.message)

        if rule is not None:
            errors = _check(rule, params)
            if errors:
                return _json({"message": "Validation Failed", "errors": errors}, 422)

        args: list[Any] = [request]
        if member:
            args.append(path_values.get(ID_PARAM))
        args.append(params)

        try:
            result = await handler(*args)
        except RestError as exc:
            return _error(exc.status, exc.message)

        if isinstance(result, Response):
            return result
        if result is None:
            return Response(status=204)
        return _json({"data": result}, success_status)

    endpoint.__name__ = f"{resource}_{key.value}"
    endpoint.__qualname__ = endpoint.__name__
    return endpoint


async def _collect_params(
    request: Request,
    path_values: Mapping[str, str],
    *,
    reads_body: bool,
) -> dict[str, Any]:
    params: dict[str, Any] = dict(request.query)

    if reads_body:
        raw = await request.body()
        if raw:
            try:
                body = json.loads(raw)
            except ValueError as exc:
                msg = f"Request body is not valid JSON: {exc}"
                raise RestError(400, msg) from exc
            if not isinstance(body, dict):
                raise RestError(400, "Request body must be a JSON object")
            params.update(body)

    params.update(path_values)
    return params


def _path_values(path: UrlPath | None, request: Request) -> dict[str, str]:
    if path is None:
        return dict(request.path_params)
    return path.extract(request.path)


def _check(rule: Any, params: Mapping[str, Any]) -> dict[str, list[str]]:
    rules: ValidationRules = rule(params) if callable(rule) else rule
    data = {
        k: v if isinstance(v, str) else json.dumps(v)
        for k, v in params.items()
        if v is not None
    }
    return validate(data, dict(rules)).errors


def _error(status: int, message: str) -> Response:
    return _json({"message": message}, status)


def _json(payload: object, status: int) -> Response:
    body = json.dumps(payload, default=str)
    return Response(body=body, status=status, content_type=_JSON)

"""Declarative guards rejecting requests with missing input.

Both guards are dependency factories. Declare them on a route or router
after ``app_response``::

    @router.post(
        "/accounts",
        dependencies=[
            Depends(require_headers("x-api-key")),
            Depends(require_params(["email", "name"])),
        ],
    )

When every declared name is present the dependency returns and the
pipeline continues. Otherwise it raises ``GuardRejectedError`` with one
message per missing name, in declaration order, and the exception handler
emits the BadRequest outcome (400) through the request's responder. The
route body never runs.
"""

from collections.abc import Awaitable, Callable

import orjson
from fastapi import Request
from loguru import logger

from src.core.constants import MISSING_HEADER_MESSAGE, MISSING_PARAMETER_MESSAGE
from src.core.exceptions import GuardRejectedError
from src.core.fields import FieldMap, contains_any
from src.core.types import RequiredNames

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

type Guard = Callable[[Request], Awaitable[None]]


def normalize_names(names: RequiredNames) -> tuple[str, ...]:
    """Normalize one name or a collection of names into a tuple.

    Ordered collections keep their order; sets are sorted so the messages
    come out deterministic.
    """
    if isinstance(names, str):
        return (names,)
    if isinstance(names, set | frozenset):
        return tuple(sorted(names))
    return tuple(names)


def missing_params(
    names: RequiredNames,
    body: FieldMap,
    path_params: FieldMap,
    query_params: FieldMap,
) -> list[str]:
    """List a message for every name absent from body, path and query.

    Presence in any one source suffices; sources are checked in that order.

    Args:
        names: Required parameter name(s).
        body: Parsed request body fields.
        path_params: Path parameters.
        query_params: Query string parameters.

    Returns:
        list[str]: ``Missing required parameter: <name>`` messages.
    """
    sources = (body, path_params, query_params)
    return [
        MISSING_PARAMETER_MESSAGE.format(name=name)
        for name in normalize_names(names)
        if not contains_any(sources, name)
    ]


def missing_headers(names: RequiredNames, headers: FieldMap) -> list[str]:
    """List a message for every header name absent from the request.

    Args:
        names: Required header name(s).
        headers: Request headers.

    Returns:
        list[str]: ``Missing required header parameter: <name>`` messages.
    """
    return [
        MISSING_HEADER_MESSAGE.format(name=name)
        for name in normalize_names(names)
        if not headers.contains(name)
    ]


async def read_body_fields(request: Request) -> FieldMap:
    """Parse the request body into fields.

    JSON objects and form submissions yield their keys. Anything else (no
    body, JSON arrays or scalars, malformed JSON, other content types)
    yields no fields.

    Args:
        request: The incoming request.

    Returns:
        FieldMap: Body fields.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        return FieldMap(await request.form())

    raw = await request.body()
    if not raw:
        return FieldMap()
    try:
        return FieldMap(orjson.loads(raw))
    except orjson.JSONDecodeError:
        logger.debug("Request body is not JSON; treating it as empty")
        return FieldMap()


def _reject(messages: list[str], kind: str) -> None:
    if messages:
        logger.info(
            "Guard rejected request: {}",
            kind,
            missing=messages,
        )
        raise GuardRejectedError(messages, context={"guard": kind})


def require_params(names: RequiredNames) -> Guard:
    """Build a guard requiring parameters in body, path or query.

    Args:
        names: One parameter name or a collection of names.

    Returns:
        Guard: FastAPI dependency raising ``GuardRejectedError`` on failure.
    """
    required = normalize_names(names)

    async def guard(request: Request) -> None:
        _reject(
            missing_params(
                required,
                await read_body_fields(request),
                FieldMap(request.path_params),
                FieldMap(request.query_params),
            ),
            "params",
        )

    return guard


def require_headers(names: RequiredNames) -> Guard:
    """Build a guard requiring request headers.

    Header names match case-insensitively.

    Args:
        names: One header name or a collection of names.

    Returns:
        Guard: FastAPI dependency raising ``GuardRejectedError`` on failure.
    """
    required = normalize_names(names)

    async def guard(request: Request) -> None:
        _reject(missing_headers(required, FieldMap(request.headers)), "headers")

    return guard

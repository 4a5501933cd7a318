"""Global exception handlers for the FastAPI application.

Every exception that reaches the application boundary is translated into
exactly one error outcome of the request's responder, so clients always
receive an envelope with a non-empty ``exception`` list and never a raw
traceback or an empty body.

Translation table:
- ``OutcomeError`` (including ``GuardRejectedError``) -> its outcome
- ``RequestValidationError`` -> ``invalid`` (422)
- ``HTTPException`` -> the outcome mapped to its status code, or an error
  envelope carrying the raw status code when unmapped
- any other ``Exception`` -> ``server_error`` (500)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.responder import Responder, get_responder
from src.core.config import get_settings
from src.core.exceptions import OutcomeError
from src.core.outcomes import ErrorInput, status_label


def _responder_for(request: Request) -> Responder:
    """Return a responder ready to emit, discarding an undelivered outcome."""
    responder = get_responder(request)
    if responder.sent is not None:
        logger.warning(
            "Discarding {} response; handler raised before returning it",
            status_label(responder.sent),
        )
        responder.reset()
    return responder


def format_validation_errors(exc: RequestValidationError) -> list[str]:
    """Render pydantic validation errors as ``<location>: <message>`` strings.

    Args:
        exc: The validation error raised by FastAPI.

    Returns:
        list[str]: One message per error, in the order pydantic reported them.
    """
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


async def outcome_error_handler(request: Request, exc: Exception) -> Response:
    """Handle OutcomeError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The OutcomeError exception to handle

    Returns:
        Response: Envelope for the requested outcome

    Raises:
        TypeError: If exc is not an OutcomeError instance
    """
    if not isinstance(exc, OutcomeError):
        raise TypeError(f"Expected OutcomeError, got {type(exc).__name__}")

    log_method = logger.info if exc.is_expected else logger.error
    log_method(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        error_code=exc.error_code,
        outcome=exc.outcome.name,
        path=request.url.path,
        **exc.context,
    )

    return _responder_for(request).respond(exc.outcome, exc.errors)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: 422 envelope listing each validation failure

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    messages = format_validation_errors(exc)
    logger.warning(
        "Request validation failed",
        path=request.url.path,
        method=request.method,
        validation_errors=messages,
    )

    return _responder_for(request).invalid(messages)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException.

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: Envelope with the exception detail as the error message

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
        detail=exc.detail,
    )

    detail: ErrorInput = (
        exc.detail if isinstance(exc.detail, str | list) else str(exc.detail)
    )
    response = _responder_for(request).respond_status(exc.status_code, detail)

    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle generic exceptions.

    Catches all unhandled exceptions and converts them to a 500 envelope.
    In production, hides internal error details from clients.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: 500 envelope with a generic error message
    """
    responder = _responder_for(request)
    # Runs outside the request context middleware, so bind the ids here
    logger.opt(exception=exc).bind(**responder.context.log_fields()).error(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
    )

    if get_settings().environment == "production":
        message = "An internal server error occurred"
    else:
        message = f"Internal server error: {type(exc).__name__}: {exc}"

    return responder.server_error(message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(OutcomeError, outcome_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")

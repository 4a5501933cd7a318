"""FastAPI application factory.

Wires the envelope layer into an application:
- Logging setup
- Exception handlers translating every failure into an envelope
- Request context middleware (timer start, correlation headers)
- Request logging middleware
- A health endpoint answered by the default-source responder

Routers built by the surrounding application add their own
``app_response(source)`` dependency and guards.
"""

from typing import Annotated

from fastapi import Depends, FastAPI, Response

from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.api.responder import Responder, app_response, get_responder
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
    )

    register_exception_handlers(application)

    # Middleware run in reverse order of registration: the context middleware
    # is added last so the timer starts before anything else runs
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)

    @application.get(
        "/health",
        dependencies=[Depends(app_response(settings.response_config.default_source))],
    )
    async def health(
        responder: Annotated[Responder, Depends(get_responder)],
    ) -> Response:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            Response: ``ok`` envelope with the service status.
        """
        return responder.ok(
            {
                "status": "healthy",
                "app_name": settings.app_name,
                "version": settings.app_version,
            }
        )

    return application


app = create_app()

"""Run the envelope API under uvicorn.

``setup_logging`` already routes uvicorn's loggers through Loguru, so
uvicorn is started with ``log_config=None`` and keeps that wiring.
"""

import os

import uvicorn
from loguru import logger

from src.core.config import Settings, get_settings
from src.core.logging import setup_logging

APP_IMPORT_PATH = "src.api.main:app"


def resolve_port(settings: Settings) -> int:
    """Listening port; container platforms override it with ``PORT``."""
    return int(os.environ.get("PORT", settings.api_port))


def main() -> None:
    settings = get_settings()
    setup_logging(settings)

    port = resolve_port(settings)
    logger.info(
        "Serving {} on {}:{}",
        settings.app_name,
        settings.api_host,
        port,
        environment=settings.environment,
        reload=settings.debug,
    )
    uvicorn.run(
        APP_IMPORT_PATH,
        host=settings.api_host,
        port=port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()

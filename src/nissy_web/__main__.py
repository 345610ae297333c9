"""Run the gateway with uvicorn: ``python -m nissy_web``."""

import logging

import uvicorn

from .app import create_app
from .config import Settings
from .log import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("Nissy Web running at http://%s:%s", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

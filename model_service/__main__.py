"""Serve the model service with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from model_service.api.main import create_app
from model_service.config import get_config
from model_service.logger import configure_logging

logger = logging.getLogger("model_service")


def main() -> None:
    config = get_config()
    configure_logging(config.log_level)
    logger.info("Server starting on %s:%d", config.host, config.port)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Entrypoint: python -m direct_chat"""
from __future__ import annotations

import logging

import uvicorn

from direct_chat.api.middleware.correlation_id import CorrelationIdFilter
from direct_chat.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


def configure_logging() -> None:
    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT, handlers=[handler])


def main() -> None:
    configure_logging()
    uvicorn.run(
        "direct_chat.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()

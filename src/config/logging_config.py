"""
Logging Configuration for the Labour Law Assistant
JSON lines on stdout; every pipeline stage logs through a module logger from here
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

# Provider SDKs log every HTTP round-trip at INFO; keep them at WARNING
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "hpack", "postgrest")


def _quiet_provider_loggers() -> None:
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logger(
    name: str = "labour_ai",
    level: Optional[str] = None,
) -> logging.Logger:
    """
    Return a logger that writes JSON records (timestamp, level, logger name, message).

    Args:
        name: Logger name (usually __name__ of calling module)
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Defaults to LOG_LEVEL env var or INFO
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
                rename_fields={"levelname": "level", "name": "logger"},
            )
        )
        logger.addHandler(handler)
        # uvicorn installs its own root handler; avoid printing each record twice
        logger.propagate = False

    logger.setLevel(getattr(logging, level, logging.INFO))
    _quiet_provider_loggers()
    return logger


logger = setup_logger("labour_ai")

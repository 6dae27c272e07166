"""Opt-in log output for the ``logto_client`` logger tree.

The library only creates module loggers under ``logto_client``. Applications
that want its output without configuring logging themselves call
``setup_logging``; the root logger is never touched.
"""

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGER = "logto_client"


def setup_logging(
    level: str | None = None,
    log_file: Path | None = None,
    *,
    propagate: bool = False,
) -> logging.Logger:
    """Attach handlers to the ``logto_client`` logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Log level (defaults to LOGTO_LOG_LEVEL env var or INFO)
        log_file: Optional file to write records to, in addition to stderr
        propagate: Also pass records on to the root logger's handlers

    Returns:
        The ``logto_client`` logger
    """
    level = level or os.getenv("LOGTO_LOG_LEVEL", "INFO")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    logger.propagate = propagate

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

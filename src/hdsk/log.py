"""Structured logging shared by the facade and the CLI."""

import logging
import os

from .config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, attaching a stream handler on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()

        level = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
        logger.setLevel(getattr(logging, level, logging.WARNING))

        formatter = logging.Formatter(
            "[%(asctime)s.%(msecs)03d] %(levelname)s [%(name)s]: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def log(logger: logging.Logger, level: str, message: str, **kwargs):
    """Log a message with optional key=value context appended."""
    log_method = getattr(logger, level.lower(), logger.info)

    if kwargs:
        context = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        message = f"{message} | {context}"

    log_method(message)

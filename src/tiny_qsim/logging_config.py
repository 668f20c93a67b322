"""Logging configuration for tiny-qsim."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from tiny_qsim import config


def setup_logging(
    name: str = "tiny_qsim",
    level: str | None = None,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Set up a logger with a console handler and an optional rotating file.

    Nothing is configured at import time; applications (the CLI, notebooks)
    call this once and library modules keep using ``logging.getLogger``.

    Parameters
    ----------
    name : str
        Logger name. Defaults to the package logger, so every module logger
        inherits the handlers.
    level : str | None
        DEBUG, INFO, WARNING, ERROR or CRITICAL. Defaults to
        ``config.LOG_LEVEL``.
    log_file : Path | None
        When given, records are also written to this file.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    if level is None:
        level = config.LOG_LEVEL
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(config.LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

"""
Logging configuration for the clean-air route planner.

Library modules only call `logging.getLogger(__name__)`; everything under the
`cleanair` namespace inherits the handlers configured here. The CLI and the
API both reach this through `load_settings()`.

A second call (another scenario, an API reload) never stacks handlers. It
retunes the level of the ones already attached, so a scenario that asks for
DEBUG gets DEBUG even when a previous load set INFO.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "cleanair"
LOG_FILENAME = "cleanair.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    # Accept "info" as well as "INFO" from YAML.
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(
    log_dir: Path | None,
    level: str | int = "INFO",
    *,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    numeric = parse_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric)
    logger.propagate = False
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        logger.addHandler(stream)

    # The file handler is bound to the first log directory seen in this process.
    if log_dir is not None and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILENAME,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(numeric)
    return logger

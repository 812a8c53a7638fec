"""Logging configuration module for Analemma Calculator."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from analemma_calc.config import LoggingConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Logger the diagnostics observer writes its DEBUG summaries to
DIAGNOSTICS_LOGGER = "diagnostics"


def _file_handler(config: LoggingConfig) -> Optional[logging.Handler]:
    """Rotating file handler for ``config.file``, or None if it cannot be opened."""
    log_path = Path(config.file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            log_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        logging.getLogger(__name__).warning(
            f"Cannot write to log file {log_path} ({e}), logging to console only"
        )
        return None


def setup_logger(
    config: Optional[LoggingConfig] = None,
    name: str = "analemma_calc",
) -> logging.Logger:
    """Set up and configure the package logger.

    Console output goes to stderr so ``--json`` output on stdout stays
    parseable. Levels are set on loggers only; handlers pass everything they
    receive, which lets ``config.diagnostics`` open the diagnostics logger to
    DEBUG while the rest of the package stays at ``config.level``.

    Args:
        config: Logging configuration. If None, uses defaults.
        name: Package logger name.

    Returns:
        Configured logger instance.
    """
    if config is None:
        config = LoggingConfig()

    logger = logging.getLogger(name)
    logger.setLevel(config.level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stderr)]
    if config.file:
        file_handler = _file_handler(config)
        if file_handler is not None:
            handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Propagated records are filtered by handler levels only, so this lets
    # summaries through without lowering the package level
    diagnostics = logging.getLogger(f"{name}.{DIAGNOSTICS_LOGGER}")
    diagnostics.setLevel(logging.DEBUG if config.diagnostics else logging.NOTSET)

    return logger


def get_logger(name: str = "analemma_calc") -> logging.Logger:
    """Get a logger inside the package hierarchy.

    Child loggers (``analemma_calc.series`` etc.) propagate to the package
    logger configured by :func:`setup_logger`. A bare console handler is only
    attached to the root package logger when nothing configured it yet.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    logger = logging.getLogger(name)
    root = logging.getLogger(name.split(".")[0])
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
    return logger

"""
Logging setup for Uplift.

Modules obtain loggers with ``get_logger(__name__)``; handlers are only
installed by ``setup_logging`` (called from the CLI or by applications).
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE_NAME = "uplift.log"

_PACKAGE_LOGGER = "uplift"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for *name*. Configuration happens in ``setup_logging``."""
    return logging.getLogger(name)


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None, stream=None) -> logging.Logger:
    """
    Configure the ``uplift`` package logger.

    Args:
        level: Logging level name.
        log_dir: Optional directory; when set, records are also written to
            ``<log_dir>/uplift.log``.
        stream: Console stream (defaults to stderr).

    Returns:
        The configured package logger. Calling again replaces the handlers
        installed by a previous call instead of stacking them.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if getattr(handler, "_uplift_handler", False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(DEFAULT_FORMAT)

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(formatter)
    console._uplift_handler = True
    logger.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path / LOG_FILE_NAME, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._uplift_handler = True
        logger.addHandler(file_handler)

    return logger

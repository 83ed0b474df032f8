"""Project logger for **SiteMirror**.

Every module logs through the ``SiteMirror`` logger::

    from site_mirror.logger import logger
    logger.info("Mirroring started")

The CLI calls :func:`configure` once per run to apply ``--log-level`` and
``--log-file``. Console output goes to stderr; stdout carries the run summary.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteMirror"


def configure(
    level: Union[int, str] = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the handlers of the project logger.

    *log_file* adds a rotating file (5 MB x 3) next to the console handler.
    """
    formatter = logging.Formatter(log_format)
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    lg.addHandler(console)

    if log_file is not None:
        file_handler = RotatingFileHandler(
            filename=str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        lg.addHandler(file_handler)

    lg.propagate = False
    return lg


logger: logging.Logger = configure()

__all__ = ["logger", "configure", "LOGGER_NAME", "DEFAULT_FORMAT"]

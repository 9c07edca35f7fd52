#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/logging_utils.py
"""Logging setup shared by the redactmd command line entry points.

Library modules only create module-level loggers; handlers are installed
here, once, by whichever entry point owns the process.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from redactmd.constants import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV_VAR

TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
PLAIN_FORMAT = "%(levelname)s: %(message)s"


def resolve_log_level(log_level: int | str | None) -> int:
    """Turn a level name, number, or ``None`` into a numeric logging level.

    ``None`` falls back to the ``REDACTMD_LOG_LEVEL`` environment variable and
    then to ``WARNING``. Unknown names resolve to ``INFO``.
    """
    if log_level is None:
        log_level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str | None = None,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure root logging handlers for a redactmd process.

    Parameters
    ----------
    log_level : int, str or None, default None
        Numeric logging level or level name (e.g. "DEBUG"). ``None`` reads
        the ``REDACTMD_LOG_LEVEL`` environment variable.
    log_file : str, optional
        Path to a log file that receives a copy of the console output.
    trace_mode : bool, default False
        Emit timestamps and logger names, useful when following which
        component produced a redaction or restoration message.

    Returns
    -------
    logging.Logger
        The configured root logger instance.

    """
    resolved_level = resolve_log_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        TRACE_FORMAT if trace_mode else PLAIN_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S" if trace_mode else None,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_file)

    return root_logger

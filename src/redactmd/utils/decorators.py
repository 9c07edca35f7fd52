#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/utils/decorators.py
"""Timing helpers for the redaction and reconstruction pipelines."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long a block took, at DEBUG level.

    Nothing is measured unless ``logger`` has DEBUG enabled.

    Parameters
    ----------
    logger : logging.Logger
        Logger receiving the timing message
    operation : str
        Label of the timed block, e.g. ``"Parsing (source)"``

    Examples
    --------
        >>> with debug_timer(logger, "Rendering (placeholders)"):
        ...     text = renderer.render_to_string(doc)

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start_time = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("%s completed in %.3fs", operation, time.perf_counter() - start_time)

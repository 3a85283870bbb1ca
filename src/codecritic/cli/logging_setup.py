"""codecritic logging setup.

A Rich console handler on *stderr* plus an optional timestamped file
handler, both attached to the ``codecritic`` logger.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "codecritic"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``codecritic`` logger.

    Parameters
    ----------
    level:
        Logging level name (case-insensitive).  Unknown names fall back to
        ``INFO``.
    log_file:
        Optional path for a :class:`~logging.FileHandler`; parent
        directories are created.
    console:
        Optional Rich console for the console handler.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Repeated calls replace handlers rather than stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
    )
    rich_handler.setLevel(numeric_level)
    logger.addHandler(rich_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger

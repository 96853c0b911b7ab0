from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: int = logging.WARNING,
    log_path: Optional[str] = None,
    also_console: bool = True,
) -> None:
    """Configure the betterprov logger.

    Console output for users goes through ui.console; this logger traces
    the commands the engines run. `level` applies to the console handler.
    The log file always gets the command trace (INFO), or more when
    `level` is lower. Calling it again replaces earlier handlers.
    """
    logger = logging.getLogger("betterprov")

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    handlers: list[logging.Handler] = []
    logger_level = level

    if log_path:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(min(level, logging.INFO))
        handlers.append(file_handler)
        logger_level = min(level, logging.INFO)

    if also_console:
        console = logging.StreamHandler()
        console.setLevel(level)
        handlers.append(console)

    if not handlers:
        # keep failures out of logging's last-resort stderr handler
        handlers.append(logging.NullHandler())

    logger.setLevel(logger_level)
    for h in handlers:
        h.setFormatter(fmt)
        logger.addHandler(h)

    logger.debug("Logging initialized (level=%s, file=%s)", logging.getLevelName(level), log_path)

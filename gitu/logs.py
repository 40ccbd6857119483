"""Logging setup for the interactive session.

stdout belongs to the UI, so records only go to a file under the platform
log directory, and only when debug logging is switched on.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "gitu"
LOG_FILENAME = "gitu.log"
DEBUG_ENV_VAR = "GITU_DEBUG"
LOG_FORMAT = "%(asctime)s %(name)s - %(levelname)s - %(message)s"


def debug_requested(config_debug: bool = False) -> bool:
    return config_debug or os.environ.get(DEBUG_ENV_VAR, "") == "1"


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def configure_logging(debug: bool, log_path: Path | None = None) -> Path | None:
    """Attach handlers to the ``gitu`` logger and return the log file, if any."""
    package_logger = logging.getLogger(APP_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if not debug:
        package_logger.addHandler(logging.NullHandler())
        package_logger.propagate = False
        return None

    path = log_path if log_path is not None else default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(file_handler)
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False
    package_logger.debug("debug logging to %s", path)
    return path

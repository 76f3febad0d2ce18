"""Module: logger_setup.py

Author: Michael Economou
Date: 2026-10-18

ConfigureLogger sets up root logging for exifkit entry points.
INFO and higher go to the console; ERROR and higher optionally go to a
rotating log file, and DEBUG and higher to an optional debug file. The
library modules never call this; only the CLI does.
"""

import contextlib
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler

from exifkit.config import (
    LOG_CONSOLE_FORMAT,
    LOG_CONSOLE_LEVEL,
    LOG_DATE_FORMAT,
    LOG_DEBUG_FILE_BACKUP_COUNT,
    LOG_DEBUG_FILE_ENABLED,
    LOG_DEBUG_FILE_MAX_BYTES,
    LOG_DIR,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_FORMAT,
    LOG_FILE_LEVEL,
    LOG_FILE_MAX_BYTES,
    LOG_TO_CONSOLE,
    LOG_TO_FILE,
)
from exifkit.utils.logging.logger_helper import DevOnlyFilter


def add_file_handler(
    logger: logging.Logger,
    log_path: str,
    level: int = logging.INFO,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> RotatingFileHandler:
    """Attaches a rotating file handler to a logger.

    Args:
        logger (logging.Logger): The logger to attach the handler to.
        log_path (str): Path to the log file.
        level (int): Logging level for this file handler.
        max_bytes (int): Maximum file size before rotating.
        backup_count (int): Number of backup files to keep.
    """
    directory = os.path.dirname(log_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(file_handler)
    return file_handler


class ConfigureLogger:
    """Configures process-wide logging on the root logger.

    Handlers are only added when the root logger has none, so constructing
    it twice (or inside an application that already set logging up) is safe.
    An explicit ``logger`` replaces the root logger as the target.
    """

    def __init__(
        self,
        log_name: str = "exifkit",
        log_dir: str = LOG_DIR,
        console_enabled: bool = LOG_TO_CONSOLE,
        console_level: int | str = LOG_CONSOLE_LEVEL,
        file_enabled: bool = LOG_TO_FILE,
        file_level: int | str = LOG_FILE_LEVEL,
        debug_enabled: bool = LOG_DEBUG_FILE_ENABLED,
        stream=None,
        logger: logging.Logger | None = None,
    ):
        self.logger = logger if logger is not None else logging.getLogger()
        self.logger.setLevel(logging.DEBUG)  # Accept everything; handlers filter levels

        if self.logger.hasHandlers():
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        if console_enabled:
            self._setup_console_handler(_to_level(console_level), stream)

        if file_enabled:
            add_file_handler(
                self.logger,
                os.path.join(log_dir, f"{log_name}_{timestamp}.log"),
                level=_to_level(file_level),
                max_bytes=LOG_FILE_MAX_BYTES,
                backup_count=LOG_FILE_BACKUP_COUNT,
            )

        if debug_enabled:
            add_file_handler(
                self.logger,
                os.path.join(log_dir, f"{log_name}_debug_{timestamp}.log"),
                level=logging.DEBUG,
                max_bytes=LOG_DEBUG_FILE_MAX_BYTES,
                backup_count=LOG_DEBUG_FILE_BACKUP_COUNT,
            )

    def _setup_console_handler(self, level: int, stream=None):
        """Sets up console handler with UTF-8-safe formatting and DevOnlyFilter."""
        console_handler = logging.StreamHandler(stream or sys.stderr)

        with contextlib.suppress(Exception):
            console_handler.stream.reconfigure(encoding="utf-8")

        console_handler.setLevel(level)
        console_handler.addFilter(DevOnlyFilter())
        console_handler.setFormatter(logging.Formatter(LOG_CONSOLE_FORMAT))
        self.logger.addHandler(console_handler)


def _to_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)

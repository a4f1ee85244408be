# ==================================================
# ================ Logger Utilities ================
# ==================================================
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

# Public API
__all__ = ["LOG_FORMAT", "make_file_handler", "get_logger", "get_error_logger"]

LOG_FORMAT: str = "%(asctime)s - %(levelname)s - %(message)s"


def _sync_handler_levels(logger: logging.Logger, level: int) -> None:
    """
    Ensure that all existing handlers attached to a logger use the specified log level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance whose handlers will be updated.
    level : int
        Logging level to apply to all handlers (e.g., logging.INFO, logging.DEBUG).
    """
    for h in logger.handlers:
        h.setLevel(level)


# ====[ Shared rotating file handler generator ]====
def make_file_handler(
    log_path: Union[str, Path],
    level: int,
    when: str = "midnight",
    backupCount: int = 7,
    encoding: str = "utf-8",
    interval: int = 1,
) -> TimedRotatingFileHandler:
    """
    Create a TimedRotatingFileHandler with a standard formatter.

    Parameters
    ----------
    log_path : str | Path
        Output log file path.
    level : int
        Logging level (e.g., logging.INFO).
    when : str, default 'midnight'
        Rotation interval basis per logging.handlers.TimedRotatingFileHandler.
    backupCount : int, default 7
        Number of backup files to keep.
    encoding : str, default 'utf-8'
        File encoding.
    interval : int, default 1
        Rotation interval multiplier.

    Returns
    -------
    TimedRotatingFileHandler
    """
    path = Path(log_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = TimedRotatingFileHandler(
        filename=str(path),
        when=when,
        interval=interval,
        backupCount=backupCount,
        encoding=encoding,
        delay=True,  # open file on first emit
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _attach_file_handler(logger: logging.Logger, log_path: Union[str, Path], level: int, **kwargs) -> None:
    """Add a rotating file handler for `log_path` unless the logger already writes there."""
    target = os.path.abspath(str(log_path))
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == target:
            return
    logger.addHandler(make_file_handler(log_path, level, **kwargs))

# ==================================================
# ================ Logger Factory ==================
# ==================================================

# ====[ Main logger: console (+ file) ]====
def get_logger(
    name: str = "matbridge",
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
    when: str = "midnight",
    backupCount: int = 7,
) -> logging.Logger:
    """
    Create and configure a logger with a console handler and, optionally, a daily rotating file.

    The logger is idempotent: repeated calls with the same `name` do not add duplicate handlers,
    they only resynchronize the level. A `log_dir` passed on a later call still gets its file.
    Log propagation is disabled to avoid duplicate messages from the root logger.

    Parameters
    ----------
    name : str, optional
        Name of the logger instance. Default is "matbridge".
    log_dir : str or Path, optional
        Directory where log files are stored. No file is written when None.
    level : int, optional
        Logging level (e.g., logging.INFO, logging.DEBUG). Default is logging.INFO.
    when : str, optional
        Time interval for log file rotation (e.g., "midnight", "D", "H").
    backupCount : int, optional
        Number of backup log files to keep. Default is 7.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    if log_dir is not None:
        today = datetime.now().strftime("%Y-%m-%d")
        log_path = Path(log_dir) / f"{name}_{today}.log"
        _attach_file_handler(logger, log_path, level, when=when, backupCount=backupCount)

    _sync_handler_levels(logger, level)

    return logger


# ====[ Error logger: file only ]====
def get_error_logger(
    name: str = "matbridge.errors",
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.ERROR,
    backupCount: int = 30,
) -> logging.Logger:
    """
    Create and configure a dedicated error logger with daily rotating file output.

    Unlike the main logger, this logger never writes to the console; callers
    re-raise what they log. Records are discarded until a call passes a
    `log_dir`; every distinct directory gets its own file handler.

    Parameters
    ----------
    name : str, optional
        Name of the logger instance. Default is "matbridge.errors".
    log_dir : str or Path, optional
        Directory where error logs are stored.
    level : int, optional
        Logging level to capture. Default is logging.ERROR.
    backupCount : int, optional
        Number of daily log files to retain. Default is 30.

    Returns
    -------
    logging.Logger
        Configured error logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        # keeps records off the last-resort stderr handler until a file is attached
        logger.addHandler(logging.NullHandler())

    if log_dir is not None:
        today = datetime.now().strftime("%Y-%m-%d")
        log_path = Path(log_dir) / f"errors_{today}.log"
        _attach_file_handler(logger, log_path, level, when="midnight", backupCount=backupCount)

    _sync_handler_levels(logger, level)

    return logger

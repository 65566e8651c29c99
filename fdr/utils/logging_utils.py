"""
Logging utilities for the feed digest reader.
Contains helper functions for consistent logging across modules.
"""
import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

CONSOLE_FORMAT = '[%(levelname)s] %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def log_run_summary(logger: logging.Logger, total: int, shown: int, new: int) -> None:
    """
    Log the outcome of one aggregation run in a consistent format.

    Args:
        logger: Logger instance to use
        total: Number of valid items gathered from all feeds
        shown: Number of items displayed
        new: Number of items seen for the first time
    """
    if total == 0:
        logger.info("No feed items to show")
        return

    logger.info(f"Run results: {total} items, {shown} shown, {new} new, {total - new} already seen")

    if new == 0:
        logger.info("No new items - everything was seen before")


def verbosity_to_level(verbose: int, default: str = "WARNING") -> str:
    """
    Map a ``-v`` count to a logging level name.

    Args:
        verbose: Number of times -v was given
        default: Level used when -v was not given

    Returns:
        Level name ("WARNING", "INFO" or "DEBUG")
    """
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return default.upper()


def setup_logging(log_level: str = "WARNING", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure console and optional file logging.

    Console records go to stderr so they never mix with the item listing on
    stdout.

    Args:
        log_level: Minimum logging level (e.g., "INFO", "DEBUG")
        log_dir: Directory to store log files, or None to log to the console only

    Returns:
        The configured root logger instance.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = TimedRotatingFileHandler(os.path.join(log_dir, 'fdr.log'), when='midnight',
                                                interval=1, backupCount=7, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    root_logger.debug(f"Logging configured to level {log_level.upper()}")
    return root_logger

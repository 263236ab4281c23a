"""Logging setup for FREE LIV TV with file and console output"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

DEFAULT_MAX_BYTES = 10 * 1024 * 1024

_SIZE_UNITS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}


def parse_size(value: str, default: int = DEFAULT_MAX_BYTES) -> int:
    """
    Parse a size string such as "10MB" into bytes.

    Plain integers are taken as bytes. Anything unparsable yields ``default``.
    """
    text = value.strip().upper()
    for suffix, factor in _SIZE_UNITS.items():
        if text.endswith(suffix):
            try:
                return int(text[: -len(suffix)]) * factor
            except ValueError:
                return default
    try:
        return int(text)
    except ValueError:
        return default


def setup_logging(
    log_level: str = "INFO",
    log_file_name: Optional[str] = None,
    log_to_console: bool = True,
    log_to_file: bool = True,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = 5,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for the FREE LIV TV server.

    This configures logging to write to:
    - Console (stdout)
    - File with rotation

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file_name: Path to log file (absolute or relative)
        log_to_console: Whether to log to console
        log_to_file: Whether to log to file
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep
        log_format: Custom log format string for the file handler

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    log_path = Path(log_file_name or "logs/freelivtv.log")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    file_formatter = logging.Formatter(
        log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if log_to_file:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Logging initialized - Level: {log_level}")
    if log_to_file:
        root_logger.info(
            f"Log file: {log_path} (max {max_bytes / (1024 * 1024):.1f} MB, backups: {backup_count})"
        )

    return root_logger


def log_exception(
    logger: logging.Logger, exception: Exception, message: str = "Exception occurred"
):
    """Log an exception with full traceback."""
    logger.error(f"{message}: {exception!s}", exc_info=True)

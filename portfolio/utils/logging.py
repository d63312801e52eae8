"""Logging utility with verbosity levels and optional file logging."""

import logging
import sys
from pathlib import Path
from typing import Optional


def verbosity_to_level(verbosity: int) -> int:
    """
    Map a -v count to a logging level.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)

    Returns:
        Logging level constant
    """
    if verbosity <= 0:
        return logging.WARNING
    elif verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging with verbosity levels and optional file output.

    Console output goes to stderr so that the export summary printed on
    stdout stays clean.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Optional log file path, always written at DEBUG

    Returns:
        Configured logger instance
    """
    log_level = verbosity_to_level(verbosity)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Set to DEBUG to allow all levels

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler with verbosity-based level
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(console_format)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # File handler (always DEBUG level to capture everything)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_format)
        root_logger.addHandler(file_handler)

    # The SDK logs every request at DEBUG; keep it quiet unless -vvv
    logging.getLogger("notion_client").setLevel(
        logging.DEBUG if verbosity >= 3 else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(
        logging.DEBUG if verbosity >= 3 else logging.WARNING
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized. Verbosity: {verbosity}, Log file: {log_file}")

    return logger

"""
Centralized logging configuration for tilecollapse.

Provides debug logging to file for solver and runner activity.
Log file: <data_root>/debug.log (with rotation)

Usage:
    from tilecollapse.logging_config import setup_logging
    setup_logging(data_root)  # Call once at startup

All tilecollapse.* loggers will write DEBUG to file, WARNING+ to console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime


# Global configuration
ROOT_LOGGER_NAME = "tilecollapse"
LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5  # Keep 5 backup files

_logging_initialized = False


def setup_logging(
    data_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for tilecollapse.

    Args:
        data_root: Path to data directory (log file goes here)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    global _logging_initialized

    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)  # Capture all levels

    # Clear any existing handlers (for re-initialization)
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()

    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-40s | %(funcName)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    # Console handler (less verbose)
    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-30s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not _logging_initialized:
        root_logger.info("=" * 80)
        root_logger.info(f"tilecollapse logging initialized at {datetime.now().isoformat()}")
        root_logger.info(f"Log file: {log_path.absolute()}")
        root_logger.info("=" * 80)
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger configured as child of the tilecollapse logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_step(
    logger: logging.Logger,
    step: int,
    position: tuple[int, int],
    tile_index: int,
    confidence: float | None = None,
) -> None:
    """Log a committed placement."""
    confidence_str = f" | confidence={confidence:.2f}" if confidence is not None else " | fallback"
    logger.debug(
        f"STEP {step:04d} | COMMIT | ({position[0]}, {position[1]}) <- tile {tile_index}{confidence_str}"
    )


def log_rebuild(
    logger: logging.Logger,
    tile_count: int,
    grid_size: int,
    details: str | None = None,
) -> None:
    """Log a constraint grid rebuild."""
    details_str = f" | {details}" if details else ""
    logger.info(f"REBUILD | tiles={tile_count} | grid={grid_size}x{grid_size}{details_str}")


def log_runner(
    logger: logging.Logger,
    action: str,
    details: str | None = None,
) -> None:
    """Log runner activity."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"RUNNER | {action}{details_str}")

"""Logging setup for the week planner.

Planner modules only call loguru's `logger`; sinks are configured here by the
embedding application (or by tests).
"""

import sys
from pathlib import Path

from loguru import logger

from weekplanner.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Per-leg transport comparisons are chatty at DEBUG
DEFAULT_MODULE_LEVELS = {"weekplanner.planning.transport": "INFO"}


def _level_filter(level: str, module_levels: dict[str, str]) -> dict[str, str]:
    levels = {"": level}
    for module, module_level in module_levels.items():
        # A module override may only make that module quieter
        if logger.level(module_level).no > logger.level(level).no:
            levels[module] = module_level
    return levels


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    module_levels: dict[str, str] | None = None,
) -> None:
    """Replace all loguru sinks with a console sink and an optional file sink.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; parent directories are created
        rotation: File rotation trigger (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept (e.g., "7 days")
        module_levels: Per-module minimum levels; defaults quiet the transport comparator
    """
    level_filter = _level_filter(level, DEFAULT_MODULE_LEVELS if module_levels is None else module_levels)

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, filter=level_filter, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            filter=level_filter,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
        )

    logger.info(f"Logger initialized with level={level}")


def setup_logger_from_settings() -> None:
    """Configure logging from LOG_LEVEL / LOG_FILE."""
    setup_logger(level=settings.log_level, log_file=settings.log_file)

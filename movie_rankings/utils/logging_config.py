"""
Logging configuration for the movie rankings service.

The API and the maintenance scripts share one root configuration: a console
handler on stdout and, when a file name is given, a size-rotated file under
``logs/``. Modules log through ``logging.getLogger(__name__)``.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Loggers that are only interesting when debugging
NOISY_LOGGERS = ('urllib3', 'sqlalchemy.engine', 'uvicorn.access')


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logging(
    log_file: Optional[str] = None,
    level: str = "INFO",
    log_dir: str = "logs",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        log_file: File name inside ``log_dir``; console only when None
        level: Level name ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        log_dir: Directory for the log file, created if missing
        max_bytes: Size at which the log file is rotated
        backup_count: Number of rotated files kept
        quiet: Loggers held at WARNING unless ``level`` is DEBUG

    Raises:
        ValueError: If ``level`` is not a logging level name
    """
    numeric_level = _level(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    full_log_path = None
    if log_file:
        full_log_path = Path(log_dir) / log_file
        full_log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(full_log_path, maxBytes=max_bytes, backupCount=backup_count))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING)

    if full_log_path:
        root_logger.info("Logging to file: %s", full_log_path)


def configure_api_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure logging for the API process.

    Args:
        level: Level name, usually from LOG_LEVEL
        log_file: Optional rotating log file name under ``logs/``
    """
    setup_logging(log_file=log_file, level=level)


def configure_script_logging(debug: bool = False):
    """
    Configure logging for maintenance scripts (console only).

    Args:
        debug: Enable debug logging (default: False)
    """
    setup_logging(level="DEBUG" if debug else "INFO")

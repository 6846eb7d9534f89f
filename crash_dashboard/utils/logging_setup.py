# ========================
# crash_dashboard/utils/logging_setup.py
# ========================

"""
Logging Configuration

Logging for the dashboard pipeline and the feed server. Pipeline modules log
through ``logging.getLogger(__name__)``; this module only wires up handlers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP client and server loggers that would otherwise log every feed request
QUIET_LOGGERS = ('urllib3', 'requests', 'uvicorn.access')

def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  log_dir: str = "logs") -> None:
    """
    Set up console logging and, optionally, a debug-level log file.

    Args:
        log_level (str): Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file (str): Log file name, written under ``log_dir``
        log_dir (str): Directory for log files, created on demand

    Raises:
        ValueError: If ``log_level`` is not a standard level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_path = Path(log_dir) / log_file
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Logging to file: {file_path}")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging initialized - Level: {log_level.upper()}")

def setup_logging_from_config(config: 'Config') -> None:
    """Set up logging from the LOG_LEVEL, LOG_FILE and LOG_DIR settings."""
    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file=config.LOG_FILE or None,
        log_dir=config.LOG_DIR,
    )

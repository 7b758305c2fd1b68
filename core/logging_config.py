"""
Logging for the Public Health Gateway.

Everything logs under the ``gateway`` namespace. setup_logging() attaches a
stdout handler and, optionally, a timestamped file in the log directory.
Per-request noise from the Dash dev server and the HTTP client is lowered to
WARNING unless the gateway itself runs at DEBUG.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "gateway"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("werkzeug", "urllib3")


def resolve_level(level: Union[int, str]) -> int:
    """Turn "debug"/"INFO"/10 into a numeric level; unknown names raise ValueError."""
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric


def log_file_path(log_dir: Path, now: Optional[datetime] = None) -> Path:
    """Path of a new log file, e.g. logs/gateway_20260119_093000.log."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return log_dir / f"{ROOT_LOGGER_NAME}_{stamp}.log"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    console: bool = True,
    file_logging: bool = False,
) -> logging.Logger:
    """
    Configure the gateway loggers. Safe to call again; handlers are replaced.

    Args:
        level: Numeric level or name such as "DEBUG" (default: INFO)
        log_dir: Directory for log files (default: ./logs/)
        console: Log to stdout
        file_logging: Also write a timestamped log file

    Returns:
        The ``gateway`` logger

    Usage:
        setup_logging()                 # console only
        setup_logging(level="DEBUG")    # includes stale-response drops
    """
    level = resolve_level(level)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    if console:
        _attach(root_logger, logging.StreamHandler(sys.stdout), level)

    if file_logging:
        log_dir = log_dir if log_dir is not None else Path("./logs")
        log_dir.mkdir(parents=True, exist_ok=True)
        _attach(root_logger, logging.FileHandler(log_file_path(log_dir), encoding="utf-8"), level)

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Module logger under the gateway namespace.

    Usage:
        logger = get_logger(__name__)   # cascade.controller -> gateway.cascade.controller
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

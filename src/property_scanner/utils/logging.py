"""Logging configuration for the property scanner."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty HTTP and mail libraries stay at WARNING unless debugging them directly
QUIET_LOGGERS = ("urllib3", "requests", "smtplib", "asyncio")

# Marks handlers installed here so a second call replaces them
_HANDLER_ATTR = "_property_scanner_handler"


def _build_handlers(log_dir: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_dir and Path(log_dir).is_dir():
        log_file = Path(log_dir) / f"property_scanner_{datetime.now():%Y%m%d}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    return handlers


def setup_logging(log_level: Optional[str] = None, log_dir: Optional[str] = "./logs") -> logging.Logger:
    """
    Configure scan logging on the root logger.

    Args:
        log_level: Logging level name. Defaults to LOG_LEVEL env var or INFO.
        log_dir: A dated log file is written here when the directory exists.

    Returns:
        The configured root logger
    """
    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root_logger.removeHandler(handler)
            handler.close()

    for handler in _build_handlers(log_dir):
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_ATTR, True)
        root_logger.addHandler(handler)

    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return root_logger

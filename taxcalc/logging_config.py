"""
Logging setup for TaxCalc.

Structured single-line output:

    [TIMESTAMP] [LEVEL] [MODULE:FUNCTION:LINE] MESSAGE
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """Formats records as [timestamp] [level] [location] message."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        location = f"{record.module}:{record.funcName}:{record.lineno}"
        msg = f"[{timestamp}] [{record.levelname:8s}] [{location}] {record.getMessage()}"

        if record.exc_info:
            msg += f"\n{self.formatException(record.exc_info)}"
        return msg


def setup_logger(
    name: str = "taxcalc",
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach TaxCalc handlers to a logger.

    Args:
        name: Logger name. Module loggers under ``taxcalc.`` inherit from "taxcalc".
        level: DEBUG, INFO, WARNING or ERROR. Defaults to INFO.
        log_file: Optional file path for a second handler.

    Returns:
        The configured logger. Calling again is a no-op once handlers exist.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger

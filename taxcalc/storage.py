# storage.py
"""
File I/O around the pure codecs. Every write replaces the whole file.
"""

import logging
import os
from pathlib import Path

from . import config_file, report
from .expenses import ImportMode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.txt"


def ensure_parent_dir(path) -> None:
    folder = os.path.dirname(os.fspath(path))
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


def write_text(path, text: str) -> None:
    ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    logger.info("Wrote %s", path)


def read_text(path) -> str:
    """Raises FileNotFoundError when the path does not exist."""
    if not Path(path).is_file():
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def export_config(path, session, now=None) -> bool:
    """Save a session; returns False and writes nothing if there is no data yet."""
    if session.is_empty:
        logger.info("No data to save")
        return False
    write_text(path, config_file.encode(session, now))
    return True


def import_config(path):
    """Load a session; ConfigParseError if the file is malformed."""
    return config_file.decode(read_text(path))


def import_expenses(path, ledger, mode=ImportMode.APPEND) -> int:
    """Import "label,value" lines from a file into a ledger."""
    lines = read_text(path).splitlines()
    return ledger.import_lines(lines, mode)


def save_report_csv(path, view) -> None:
    write_text(path, report.to_csv(view))


def save_report_txt(path, view) -> None:
    write_text(path, report.to_table(view))

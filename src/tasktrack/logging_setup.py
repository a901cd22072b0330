# src/tasktrack/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "tasktrack.log"
_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so a second setup call replaces only ours.
_OWNED = "_tasktrack_handler"


class _ConsoleNoiseFilter(logging.Filter):
    """Console shows every tasktrack record; everything else only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "tasktrack" or record.name.startswith("tasktrack."):
            return True
        return record.levelno >= logging.ERROR


def level_from_name(name: str | int, default: int = logging.INFO) -> int:
    """Map "DEBUG"/"info"/10 to a logging level; unknown names fall back to default."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(*, log_dir: str | Path, level: str | int = "INFO") -> Path:
    """
    Console at `level` (filtered), plus a DEBUG file at <log_dir>/tasktrack.log.

    Safe to call again: handlers from a previous call are replaced, foreign
    handlers (pytest's, the host app's) are left alone. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for h in [h for h in root.handlers if getattr(h, _OWNED, False)]:
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level_from_name(level))
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    for handler in (console, file_handler):
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        root.addHandler(handler)

    root.setLevel(logging.DEBUG)
    logging.captureWarnings(True)
    return log_file

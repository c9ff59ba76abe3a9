# src/hybridocr/logger.py

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Union, Optional

# --- Custom Log Level for Progress ---
PROGRESS = 25
logging.addLevelName(PROGRESS, "PROGRESS")

def progress(self, msg, *args, **kwargs):
    if self.isEnabledFor(PROGRESS):
        self._log(PROGRESS, msg, args, **kwargs)

logging.Logger.progress = progress

# --- Custom Filters ---
class OnlyLevelFilter(logging.Filter):
    def __init__(self, levelno: int):
        super().__init__()
        self.levelno = levelno
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno == self.levelno

class ExcludeLevelFilter(logging.Filter):
    def __init__(self, levelno: int):
        super().__init__()
        self.levelno = levelno
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno != self.levelno

class ProgressFormatter(logging.Formatter):
    """Renders progress records as 'phase current/total message'."""
    def format(self, record: logging.LogRecord) -> str:
        phase = getattr(record, "phase", None) or "-"
        current = getattr(record, "current", None)
        total = getattr(record, "total", None)
        counter = f" {current}/{total}" if current is not None and total is not None else ""
        return f"[{phase}{counter}] {record.getMessage()}"

# --- Main Configuration Function ---
def setup_logging(
    *,
    level: int = logging.INFO,
    file_path: Optional[Union[str, Path]] = None,
    file_level: Optional[int] = None,
    show_progress: bool = False,
    stream=None,
) -> logging.Logger:
    """
    Configures the "hybridocr" logger for command line use.

    Args:
        level: The base logging level for the console output.
        file_path: Path to the persistent log file.
        file_level: The logging level for the file.
        show_progress: Also print PROGRESS records on the console.
        stream: Console stream, stderr by default.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("hybridocr")
    levels = [level]
    if file_level is not None:
        levels.append(file_level)
    if show_progress:
        levels.append(PROGRESS)
    logger.setLevel(min(levels))
    logger.handlers.clear()
    logger.propagate = False

    # Console handler
    ch = logging.StreamHandler(stream or sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter("%(levelname)-8s | %(message)s"))
    ch.addFilter(ExcludeLevelFilter(PROGRESS))
    logger.addHandler(ch)

    if show_progress:
        ph = logging.StreamHandler(stream or sys.stderr)
        ph.setLevel(PROGRESS)
        ph.setFormatter(ProgressFormatter())
        ph.addFilter(OnlyLevelFilter(PROGRESS))
        logger.addHandler(ph)

    # File handler
    if file_path:
        fp = Path(file_path)
        fp.parent.mkdir(parents=True, exist_ok=True)
        # Use RotatingFileHandler for robustness with repeated batch runs
        fh = RotatingFileHandler(fp, maxBytes=5*1024*1024, backupCount=2, encoding="utf-8")
        fh.setLevel(file_level if file_level is not None else level)
        fh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)-8s | %(message)s"))
        fh.addFilter(ExcludeLevelFilter(PROGRESS))
        logger.addHandler(fh)

    return logger

"""
Logging setup for the "bard" logger.

Records go to stderr and to a per-day file under the log directory:
logs/bard_YYYYMMDD_<START_HHMMSS>.log
The HHMMSS part is the process start time and stays fixed across days.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

LOGGER_NAME = "bard"
LOG_FILE_PREFIX = "bard"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_PROCESS_START_TIME: Optional[str] = None


def _process_start_time() -> str:
    global _PROCESS_START_TIME
    if _PROCESS_START_TIME is None:
        _PROCESS_START_TIME = datetime.now().strftime("%H%M%S")
    return _PROCESS_START_TIME


def _today() -> str:
    return datetime.now().strftime("%Y%m%d")


def parse_level(log_level: str) -> int:
    """Map a level name to its numeric value; unknown names mean INFO."""
    level = logging.getLevelName(log_level.strip().upper())
    return level if isinstance(level, int) else logging.INFO


class DailyRotatingFileHandler(logging.FileHandler):
    """File handler that opens a new file when the calendar day changes."""

    def __init__(self, log_dir: str = "logs", encoding: str = "utf-8", prefix: str = LOG_FILE_PREFIX):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self._start_hhmmss = _process_start_time()
        self.current_date = _today()

        super().__init__(self.path_for(self.current_date), mode='a', encoding=encoding)

    def path_for(self, date_str: str) -> str:
        """Log file path for a YYYYMMDD date."""
        return str(self.log_dir / f"{self.prefix}_{date_str}_{self._start_hhmmss}.log")

    def rotate_if_needed(self) -> bool:
        """Switch files when the date changed since the last record."""
        today = _today()
        if today == self.current_date:
            return False

        self.close()
        self.current_date = today
        self.baseFilename = self.path_for(today)
        self.stream = self._open()
        return True

    def emit(self, record: logging.LogRecord) -> None:
        self.rotate_if_needed()
        super().emit(record)


def _build_handlers(level: int, log_dir: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        handlers.append(DailyRotatingFileHandler(log_dir=log_dir))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> logging.Logger:
    """
    Configure the "bard" logger and return it.

    Safe to call again (e.g. after .env changed LOG_LEVEL): previous
    handlers are closed and replaced.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for daily log files; None logs to stderr only

    Returns:
        logging.Logger: The configured "bard" logger
    """
    level = parse_level(log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(level, log_dir):
        logger.addHandler(handler)

    destination = log_dir if log_dir is not None else "stderr only"
    logger.debug(f"[Logging] Level {logging.getLevelName(level)}, output: {destination}")
    return logger

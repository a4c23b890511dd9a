# pricematch/config/logging_config.py

"""Per-run timestamped logging configuration for pricematch.

Each application launch creates a dedicated log file inside ``logs/``,
named with the launch timestamp (e.g. ``logs/run_20260214_153045.log``).
All ``pricematch.*`` loggers route through this file handler so that
every module's output lands in the same per-run log.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from pricematch.config.settings import Settings
from pricematch.models.source import SourceId

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(threadName)s | %(source)s | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(source)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SOURCE_IDS = frozenset(s.value for s in SourceId)


class SourceTagFilter(logging.Filter):
    """Stamp each record with the marketplace it concerns.

    Adapter loggers are named ``pricematch.<source>``; other modules
    may pass ``extra={"source": ...}``. Anything else is tagged ``-``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "source", None):
            leaf = record.name.rsplit(".", 1)[-1]
            record.source = leaf if leaf in _SOURCE_IDS else "-"
        return True


def setup_logging() -> Path:
    """Initialise the root ``pricematch`` logger for the current run.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("pricematch")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (e.g. tests) must not stack handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )
    file_handler.addFilter(SourceTagFilter())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )
    console_handler.addFilter(SourceTagFilter())

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file

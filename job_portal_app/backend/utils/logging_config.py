"""
Logging setup for the Job Portal API, the seed script and the auto-close
scheduler. All three share the root logger so job-role, application and
scheduler records land in one stream.
"""
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# per-request access lines, SQL echo and job-run chatter
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "apscheduler")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATE_FORMAT,
) -> None:
    """
    Route Job Portal records to stdout, and to `log_file` when configured.

    Called once from `backend.main` at import and from the seed script,
    with the LOG_LEVEL / LOG_FILE / LOG_FORMAT / LOG_DATE_FORMAT settings.
    Calling it again replaces the handlers instead of stacking them, so
    reloading the app does not duplicate scheduler or request records.

    Args:
        level: LOG_LEVEL name; unknown names fall back to INFO
        log_file: LOG_FILE path, or None for console only
        fmt: LOG_FORMAT record format
        datefmt: LOG_DATE_FORMAT timestamp format
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    # The auto-close task logs its own summary; APScheduler's per-run lines stay at WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger under the Job Portal root configuration."""
    return logging.getLogger(name)

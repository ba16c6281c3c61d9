from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for sheet2db: one stdout handler, `LABEL message` lines.

Labels are INFO / WARN / ERROR / DEBUG plus a SUMMARY level for the final run
line. Library modules only call logging.getLogger(__name__); records below the
`sheet2db` logger reach the handler installed by setup_logging(). Whether a
handler is installed never changes what gets imported.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_level",
]

LOGGER_NAME = "sheet2db"

# between INFO (20) and WARNING (30): shown at the default level, never filtered as a warning
SUMMARY_LEVEL = 25

_configured: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """`LABEL message`, with WARN instead of WARNING."""

    LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        SUMMARY_LEVEL: "SUMMARY",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LABELS.get(record.levelno, record.levelname)
        text = f"{label} {record.getMessage()}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Install the labeled stdout handler on the `sheet2db` logger.

    Calling it again returns the already configured logger unchanged.
    """
    global _configured
    if _configured is not None:
        return _configured

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    app_logger = logging.getLogger(LOGGER_NAME)
    _drop_handlers(app_logger)

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(LabeledFormatter())
    console.setLevel(level)
    app_logger.addHandler(console)
    app_logger.setLevel(level)
    # records stop here; the root logger never sees them
    app_logger.propagate = False

    _configured = app_logger
    return app_logger


def _drop_handlers(target: logging.Logger) -> None:
    for h in list(target.handlers):
        target.removeHandler(h)


def set_level(level: int | str) -> None:
    """Switch logger and handler levels (used by --debug)."""
    app_logger = get_logger()
    app_logger.setLevel(level)
    for h in app_logger.handlers:
        h.setLevel(level)


def get_logger() -> logging.Logger:
    return _configured if _configured is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger and detach its handlers (tests)."""
    global _configured
    app_logger = logging.getLogger(LOGGER_NAME)
    _drop_handlers(app_logger)
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True
    _configured = None

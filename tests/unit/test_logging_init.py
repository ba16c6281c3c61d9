from __future__ import annotations

import logging
from io import StringIO

from sheet2db.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    set_level,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    assert setup_logging() is first
    assert get_logger() is first
    assert len(first.handlers) == 1


def test_labeled_prefixes():
    out = StringIO()
    logger = logging.getLogger("test_sheet2db_labels")
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    handler = logging.StreamHandler(out)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.debug("d")
    logger.info("i")
    logger.warning("w")
    logger.error("e")
    logger.log(SUMMARY_LEVEL, "s")
    assert out.getvalue().splitlines() == ["DEBUG d", "INFO i", "WARN w", "ERROR e", "SUMMARY s"]


def test_module_loggers_use_application_handler(capsys):
    setup_logging()
    logging.getLogger("sheet2db.services.orchestrator").info("from module")
    assert "INFO from module" in capsys.readouterr().out


def test_log_summary_and_set_level(capsys):
    setup_logging()
    log_summary("tables=1 rows=2")
    get_logger().debug("hidden")
    set_level(logging.DEBUG)
    get_logger().debug("shown")
    out = capsys.readouterr().out
    assert "SUMMARY tables=1 rows=2" in out
    assert "hidden" not in out
    assert "DEBUG shown" in out


def test_reset_logging_removes_handlers():
    logger = setup_logging()
    reset_logging()
    assert logger.handlers == []
    assert logger.propagate is True

import logging

import pytest

from emgrid.logging_config import LOGGER_NAME, reset_logging, setup_logging


@pytest.fixture
def package_logger():
    yield logging.getLogger(LOGGER_NAME)
    reset_logging()


def test_console_handler_only(package_logger):
    logger = setup_logging(logging.DEBUG)

    assert logger is package_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_level_by_name(package_logger):
    setup_logging("warning")

    assert package_logger.level == logging.WARNING


def test_unknown_level_name(package_logger):
    with pytest.raises(ValueError):
        setup_logging("chatty")


def test_repeated_setup_does_not_duplicate_handlers(package_logger):
    setup_logging()
    setup_logging()

    assert len(package_logger.handlers) == 1


def test_reset_removes_handlers(package_logger):
    setup_logging()
    reset_logging()

    assert package_logger.handlers == []
    assert package_logger.level == logging.NOTSET


def test_log_file(package_logger, tmp_path):
    log_file = tmp_path / "grid.log"

    setup_logging(logging.DEBUG, log_file=str(log_file))
    logging.getLogger("emgrid.model.grid").debug("Padding axis 0")
    for handler in package_logger.handlers:
        handler.flush()

    assert len(package_logger.handlers) == 2
    content = log_file.read_text(encoding="utf-8")
    assert "Logging initialized at DEBUG." in content
    assert "emgrid.model.grid - DEBUG - Padding axis 0" in content

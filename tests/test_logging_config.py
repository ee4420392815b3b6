"""
Tests for logging setup
"""

import logging

import pytest

from lincat.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_handlers():
    root = logging.getLogger("lincat")
    saved = list(root.handlers)
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved:
        root.addHandler(handler)


class TestSetupLogging:
    """Test setup_logging()"""

    def test_console_only(self):
        logger = setup_logging("ERROR", log_file=None)

        assert [type(h) for h in logger.handlers] == [logging.StreamHandler]
        assert logger.handlers[0].level == logging.ERROR

    def test_file_receives_debug(self, tmp_path):
        log_file = tmp_path / "app.log"
        setup_logging(logging.WARNING, log_file=log_file)

        get_logger("test").debug("detail for the file")

        assert "detail for the file" in log_file.read_text()

    def test_reconfigure_replaces_handlers(self, tmp_path):
        setup_logging(logging.INFO, log_file=tmp_path / "a.log")
        logger = setup_logging(logging.INFO, log_file=None)

        assert len(logger.handlers) == 1

    def test_quiets_third_party(self):
        setup_logging(log_file=None)

        assert logging.getLogger("LiteLLM").level == logging.WARNING

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging("LOUD", log_file=None)

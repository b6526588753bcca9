"""Tests for logging_config.py."""

import logging

from rich.logging import RichHandler

from drlogseeker.logging_config import get_logger, setup_logging


class TestGetLogger:
    """Test logger naming."""

    def test_root(self):
        assert get_logger().name == "drlogseeker"

    def test_prefixes_foreign_names(self):
        assert get_logger("tools").name == "drlogseeker.tools"

    def test_keeps_package_names(self):
        assert get_logger("drlogseeker.scanning").name == "drlogseeker.scanning"


class TestSetupLogging:
    """Test level selection and handlers."""

    def test_default_level(self):
        assert setup_logging().level == logging.WARNING

    def test_verbose(self):
        assert setup_logging(verbose=True).level == logging.DEBUG

    def test_quiet_wins(self):
        assert setup_logging(verbose=True, quiet=True).level == logging.ERROR

    def test_rich_handler_installed(self):
        setup_logging()
        assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "drlog.log"
        setup_logging(verbose=True, log_file=str(log_file))
        get_logger("tests").info("hello from the test")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello from the test" in log_file.read_text(encoding="utf-8")
        setup_logging()

    def test_rich_handler_leaves_markup_alone(self):
        setup_logging(verbose=True)
        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
        assert handlers and all(h.markup is False for h in handlers)
        setup_logging()

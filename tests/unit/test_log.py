"""Tests for chatterbox logging setup."""

from __future__ import annotations

import io
import logging

import pytest

from chatterbox.log import PACKAGE_LOGGER, get_logger, setup_logging


def _our_handlers() -> list[logging.Handler]:
    return [
        h
        for h in logging.getLogger(PACKAGE_LOGGER).handlers
        if getattr(h, "_chatterbox_log_handler", False)
    ]


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_setup_logging_sets_package_level(self) -> None:
        setup_logging("DEBUG")

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_root_logger_untouched(self) -> None:
        root = logging.getLogger()
        level_before = root.level
        handlers_before = root.handlers[:]

        setup_logging("DEBUG")

        assert root.level == level_before
        assert root.handlers == handlers_before

    def test_default_level_is_info(self) -> None:
        assert setup_logging().level == logging.INFO

    def test_lowercase_and_padded_level(self) -> None:
        setup_logging(" warning ")

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING

    def test_numeric_level(self) -> None:
        setup_logging(logging.ERROR)

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR

    def test_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging("LOUD")

    def test_idempotent(self) -> None:
        setup_logging()
        setup_logging("DEBUG")

        assert len(_our_handlers()) == 1

    def test_handler_level_follows_latest_call(self) -> None:
        setup_logging("INFO")
        setup_logging("ERROR")

        assert _our_handlers()[0].level == logging.ERROR

    def test_records_written_pipe_separated(self) -> None:
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)

        get_logger("chatterbox.parser").info("hello")

        assert " | INFO     | chatterbox.parser | hello" in stream.getvalue()

    def test_stream_replaced_on_later_call(self) -> None:
        first, second = io.StringIO(), io.StringIO()
        setup_logging("INFO", stream=first)
        setup_logging("INFO", stream=second)

        get_logger("chatterbox.render").warning("moved")

        assert first.getvalue() == ""
        assert "moved" in second.getvalue()

    def test_other_packages_not_captured(self) -> None:
        stream = io.StringIO()
        setup_logging("DEBUG", stream=stream)

        logging.getLogger("somewhere.else").warning("not ours")

        assert stream.getvalue() == ""


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_get_logger_returns_named_logger(self) -> None:
        logger = get_logger("chatterbox.test")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "chatterbox.test"

import logging

import pytest

from docchat.logging.logger import Log, preview


class TestLog:
    def test_messages_reach_docchat_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="docchat"):
            Log.info("chat accepted")
            Log.warning("ocr skipped")
        assert [r.getMessage() for r in caplog.records] == ["chat accepted", "ocr skipped"]

    def test_configure_sets_level_once(self) -> None:
        Log.configure("warning")
        handlers = list(Log._logger.handlers)
        Log.configure("DEBUG")
        assert Log._logger.level == logging.DEBUG
        assert Log._logger.handlers == handlers


class TestPreview:
    def test_short_text_unchanged(self) -> None:
        assert preview("abc") == "abc"

    def test_long_text_truncated(self) -> None:
        assert preview("x" * 150) == "x" * 100 + "..."


class TestConfigureQuietsParsers:
    def test_pdfminer_raised_to_warning(self) -> None:
        Log.configure("DEBUG")
        assert logging.getLogger("pdfminer").level == logging.WARNING

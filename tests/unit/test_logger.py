import logging

import pytest

from docvault.logging.logger import Log


class TestRender:
    def test_message_without_context_is_unchanged(self) -> None:
        assert Log.render("hello", {}) == "hello"

    def test_context_is_sorted_and_repr_formatted(self) -> None:
        rendered = Log.render("stored", {"size": 3, "filename": "a.pdf"})
        assert rendered == "stored [filename='a.pdf' size=3]"


class TestEmit:
    def test_warning_reaches_logger_with_context(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="docvault"):
            Log.warning("Skipping entry", entry="broken.pdf")

        assert "Skipping entry [entry='broken.pdf']" in caplog.text

    def test_debug_is_dropped_below_level(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="docvault"):
            Log.debug("noisy")

        assert "noisy" not in caplog.text

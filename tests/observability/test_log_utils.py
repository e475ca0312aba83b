"""
Tests for logging helpers.
"""

import logging

from knowledge_core.observability import configure_logging
from knowledge_core.observability.log_utils import log_degraded, safe_log_value


class TestSafeLogValue:
    def test_none(self):
        assert safe_log_value(None) == "None"

    def test_collections_are_summarised(self):
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"

    def test_truncation(self):
        value = safe_log_value("x" * 20, max_length=5)

        assert value.startswith("xxxxx... (truncated, 20 total)")


class TestLogHelpers:
    def test_log_degraded_logs_warning_with_error_type(self, caplog):
        logger = logging.getLogger("tests.degraded")

        with caplog.at_level(logging.WARNING, logger="tests.degraded"):
            log_degraded(logger, "stage unavailable", ValueError("bad output"), batch=[1, 2])

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_type == "ValueError"
        assert record.batch == "list(2 items)"
        assert "stage unavailable: ValueError: bad output" in record.getMessage()

    def test_configure_logging_sets_level(self):
        configure_logging("debug")

        assert logging.getLogger().level == logging.DEBUG
        configure_logging("INFO")

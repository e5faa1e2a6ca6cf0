"""
Unit tests for crewwell.core.logging module.
"""
import json
import logging
import warnings

from pythonjsonlogger.json import JsonFormatter

from crewwell.core.logging import CrewWellJsonFormatter, configure_logging


class TestConfigureLogging:
    """Test the JSON logging setup."""

    def test_single_handler_after_repeated_calls(self):
        configure_logging("INFO")
        configure_logging("DEBUG")

        root = logging.getLogger()
        ours = [h for h in root.handlers if getattr(h, "_crewwell", False)]
        assert len(ours) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

        configure_logging("INFO")

    def test_json_record(self):
        formatter = CrewWellJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = logging.LogRecord("crewwell.test", logging.WARNING, __file__, 1, "Stored check-in %s", ("abc",), None)

        data = json.loads(formatter.format(record))

        assert data["message"] == "Stored check-in abc"
        assert data["level"] == "WARNING"
        assert data["name"] == "crewwell.test"
        assert data["timestamp"]

    def test_formatter_uses_current_module(self):
        record = logging.LogRecord("crewwell.test", logging.INFO, __file__, 1, "ok", None, None)

        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            formatter = CrewWellJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
            formatter.format(record)

        assert issubclass(CrewWellJsonFormatter, JsonFormatter)

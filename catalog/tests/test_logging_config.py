"""Tests for catalog logging setup."""

import json
import logging

import pytest

from catalog.logging_config import get_logger, log_catalog_event, setup_logging


@pytest.fixture
def log_dir(tmp_path):
    path = tmp_path / "logs"
    setup_logging(log_to_console=False, log_dir=path)
    yield path
    logging.getLogger("catalog").handlers.clear()


def _entries(log_dir):
    files = list(log_dir.glob("catalog_*.jsonl"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]


def test_get_logger_namespace():
    """Test that loggers live under the catalog namespace."""
    assert get_logger().name == "catalog"
    assert get_logger("seed").name == "catalog.seed"


class TestJSONLLogging:
    """Tests for the JSONL log file."""

    def test_event_fields_are_top_level(self, log_dir):
        """Test that event data is merged into the log entry."""
        log_catalog_event("seed_complete", {"message": "Seeded", "components": 24}, logger_name="seed")

        entry = _entries(log_dir)[-1]
        assert entry["event_type"] == "seed_complete"
        assert entry["message"] == "Seeded"
        assert entry["components"] == 24
        assert entry["logger"] == "catalog.seed"
        assert entry["level"] == "INFO"

    def test_message_defaults_to_event_type(self, log_dir):
        """Test the message of an event logged without one."""
        log_catalog_event("export_written", {"rows": 3})
        assert _entries(log_dir)[-1]["message"] == "export_written"

    def test_module_loggers_propagate(self, log_dir):
        """Test that plain module loggers reach the JSONL file."""
        logging.getLogger("catalog.products").debug("Resolved %s from %s", "abc", "catalog")

        entry = _entries(log_dir)[-1]
        assert entry["level"] == "DEBUG"
        assert entry["message"] == "Resolved abc from catalog"
        assert "event_type" not in entry

    def test_exceptions_are_recorded(self, log_dir):
        """Test that tracebacks are written to the exception field."""
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("db").exception("Write failed")

        entry = _entries(log_dir)[-1]
        assert "ValueError: boom" in entry["exception"]

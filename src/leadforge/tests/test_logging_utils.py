"""
Unit tests for LeadForge logging utilities.

Tests cover:
- JSON output and extra fields of StructuredFormatter
- Plain output of HumanReadableFormatter and its lead context suffix
- Lead context bound by lead_logger
- Logger namespacing and handler setup
"""
import json
import logging

import pytest

from leadforge.logging_utils import (
    HumanReadableFormatter,
    StructuredFormatter,
    get_logger,
    lead_logger,
    setup_logging,
)


def make_record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="leadforge.board",
        level=logging.WARNING,
        pathname="board.py",
        lineno=12,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    @pytest.mark.unit
    def test_json_fields(self):
        output = json.loads(StructuredFormatter().format(make_record("Store rejected")))

        assert output["level"] == "WARNING"
        assert output["message"] == "Store rejected"
        assert output["logger"] == "leadforge.board"
        assert output["service"] == "leadforge"
        assert output["source"]["line"] == 12
        assert "timestamp" in output

    @pytest.mark.unit
    def test_extra_fields(self):
        record = make_record("Lead classified", lead_id="42", tags={"Gold Mine": 1})

        output = json.loads(StructuredFormatter().format(record))

        assert output["extra"] == {"lead_id": "42", "tags": {"Gold Mine": 1}}

    @pytest.mark.unit
    def test_unserializable_extra_is_stringified(self):
        record = make_record("Lead classified", lead=object())

        output = json.loads(StructuredFormatter(include_timestamp=False).format(record))

        assert isinstance(output["extra"]["lead"], str)
        assert "timestamp" not in output


class TestHumanReadableFormatter:
    """Tests for HumanReadableFormatter."""

    @pytest.mark.unit
    def test_plain_format(self):
        formatted = HumanReadableFormatter(use_colors=False).format(make_record("Loaded"))

        assert "WARNING" in formatted
        assert "[leadforge.board] Loaded" in formatted

    @pytest.mark.unit
    def test_lead_context_suffix(self):
        record = make_record("Pinned", lead_id="42", action="toggle_pin")

        formatted = HumanReadableFormatter(use_colors=False).format(record)

        assert formatted.endswith("Pinned (lead_id=42 action=toggle_pin)")

    @pytest.mark.unit
    def test_no_suffix_without_lead_context(self):
        formatted = HumanReadableFormatter(use_colors=False).format(make_record("Loaded"))

        assert not formatted.endswith(")")


class TestLoggerSetup:
    """Tests for setup_logging and get_logger."""

    @pytest.mark.unit
    def test_get_logger_prefix(self):
        assert get_logger("classifier").name == "leadforge.classifier"
        assert get_logger("leadforge.board").name == "leadforge.board"

    @pytest.mark.unit
    def test_setup_logging_replaces_handlers(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(level="debug", structured=True)
            setup_logging(level="debug", structured=True)

            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestLeadLogger:
    """Tests for lead_logger and LeadLogAdapter."""

    @pytest.mark.unit
    def test_binds_lead_fields(self, caplog):
        log = lead_logger(get_logger("board"), "42", channel="GULF")

        with caplog.at_level(logging.INFO, logger="leadforge"):
            log.info("Lead classified", extra={"tag": "AUKAT"})

        record = caplog.records[-1]
        assert record.lead_id == "42"
        assert record.channel == "GULF"
        assert record.tag == "AUKAT"

    @pytest.mark.unit
    def test_call_site_extra_wins(self, caplog):
        log = lead_logger(get_logger("board"), "42", action="toggle_pin")

        with caplog.at_level(logging.INFO, logger="leadforge"):
            log.info("Retried", extra={"action": "delete_lead"})

        assert caplog.records[-1].action == "delete_lead"

    @pytest.mark.unit
    def test_structured_output_carries_lead_id(self, caplog):
        log = lead_logger(get_logger("board"), "42")

        with caplog.at_level(logging.INFO, logger="leadforge"):
            log.info("Leads deleted")

        output = json.loads(StructuredFormatter().format(caplog.records[-1]))
        assert output["extra"]["lead_id"] == "42"

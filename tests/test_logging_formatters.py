"""Tests for logging formatters."""

import json
import logging

from supervad.logging.formatters import SmartFormatter, PlainFormatter, JsonFormatter


def _make_record(msg="test message", level=logging.INFO, name="supervad.engine", **extra):
    record = logging.LogRecord(
        name=name, level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    record.extra_data = extra
    return record


class TestSmartFormatter:
    def test_output_contains_module_abbrev(self):
        line = SmartFormatter().format(_make_record(name="supervad.feeder"))
        assert "FED" in line
        assert "feeder" in line

    def test_output_contains_kv_pairs(self):
        line = SmartFormatter().format(_make_record(samples=320, state="active"))
        assert "samples=320" in line
        assert "state=active" in line

    def test_message_abbreviated(self):
        line = SmartFormatter().format(_make_record(msg="Segment completed"))
        assert "seg done" in line

    def test_elapsed_appended(self):
        record = _make_record()
        record.elapsed_ms = 1500
        assert "+1.5s" in SmartFormatter().format(record)

    def test_trace_depth_indents(self):
        line = SmartFormatter().format(_make_record(msg="-> fn", _depth=2, _trace_dir="entry"))
        assert "| | -> fn" in line
        assert "_depth" not in line


class TestPlainFormatter:
    def test_no_ansi_codes(self):
        line = PlainFormatter().format(_make_record(name="supervad.sink"))
        assert "\033[" not in line

    def test_contains_full_date(self):
        line = PlainFormatter().format(_make_record())
        assert "-" in line.split(" ")[0]

    def test_contains_kv_pairs(self):
        line = PlainFormatter().format(_make_record(tokens=3))
        assert "tokens=3" in line


class TestJsonFormatter:
    def test_output_is_valid_json(self):
        data = json.loads(JsonFormatter().format(_make_record()))
        assert data["msg"] == "test message"

    def test_includes_extra_data(self):
        data = json.loads(JsonFormatter().format(_make_record(samples=640, dur="0.04s")))
        assert data["samples"] == 640
        assert data["dur"] == "0.04s"

    def test_includes_level_and_module(self):
        data = json.loads(JsonFormatter().format(_make_record(level=logging.ERROR)))
        assert data["level"] == "ERROR"
        assert data["module"] == "engine"

    def test_private_keys_skipped(self):
        data = json.loads(JsonFormatter().format(_make_record(_depth=1)))
        assert "_depth" not in data

"""Unit tests for log formatting and structured context."""

import json
import logging

from neutron_deploy.utils.logging import ConsoleFormatter, JSONFormatter, LogContext, setup_logging


def _record(message="hello", **fields):
    record = logging.LogRecord("neutron_deploy.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in fields.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_structured_fields():
    line = JSONFormatter().format(_record(resource_id="a.b", operation="create", duration=1.5))

    data = json.loads(line)
    assert data["message"] == "hello"
    assert data["level"] == "INFO"
    assert data["resource_id"] == "a.b"
    assert data["operation"] == "create"
    assert data["duration"] == 1.5
    assert "region" not in data


def test_console_formatter_prefixes_resource():
    assert "[a.b] hello" in ConsoleFormatter().format(_record(resource_id="a.b"))
    assert "[None]" not in ConsoleFormatter().format(_record(resource_id=None))


def test_log_context_attaches_and_restores_fields():
    logger = logging.getLogger("neutron_deploy.test")

    with LogContext(logger, resource_id="a.b", operation="delete"):
        inside = logging.getLogRecordFactory()("x", logging.INFO, __file__, 1, "m", None, None)
    outside = logging.getLogRecordFactory()("x", logging.INFO, __file__, 1, "m", None, None)

    assert inside.resource_id == "a.b"
    assert inside.operation == "delete"
    assert not hasattr(outside, "resource_id")


def _new_record():
    return logging.getLogRecordFactory()("x", logging.INFO, __file__, 1, "m", None, None)


def test_console_formatter_appends_duration_without_color():
    line = ConsoleFormatter(use_color=False).format(_record("Applied create", resource_id="a.b", duration=2.44))

    assert line.endswith(" INFO     [a.b] Applied create (2.4s)")
    assert "\033[" not in line


def test_log_contexts_nest():
    logger = logging.getLogger("neutron_deploy.test")

    with LogContext(logger, resource_type="openstack_networking_subnetpool_v2", operation="plan"):
        with LogContext(logger, resource_id="a.b", operation="create", region=None):
            inner = _new_record()
        outer = _new_record()

    assert inner.resource_type == "openstack_networking_subnetpool_v2"
    assert inner.operation == "create"
    assert not hasattr(inner, "region")
    assert outer.operation == "plan"
    assert not hasattr(outer, "resource_id")


def test_setup_logging_writes_debug_records_to_file(tmp_path):
    root = logging.getLogger()
    try:
        log_file = setup_logging("warning", log_dir=tmp_path)
        logging.getLogger("neutron_deploy.test").debug("to file only")
        for handler in root.handlers:
            handler.flush()

        assert log_file.parent == tmp_path
        assert log_file.name.startswith("neutron-") and log_file.suffix == ".jsonl"
        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "to file only"
        assert entry["level"] == "DEBUG"
        assert logging.getLogger("openstack").level == logging.WARNING
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

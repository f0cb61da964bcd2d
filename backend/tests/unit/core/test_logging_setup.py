import json
import logging
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, text

from barberboss.core import logging_config
from barberboss.core.logging_config import (
    ConsoleFormatter,
    JSONFormatter,
    log_performance,
    setup_logging,
)
from barberboss.main import create_app


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    # pytest re-attaches its own capture handlers for the next phase
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(level)


def _record(msg="Report generated", **extra):
    record = logging.LogRecord(
        name="barberboss.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context():
    output = JSONFormatter().format(_record(context={"rows": 3}))

    data = json.loads(output)
    assert data["message"] == "Report generated"
    assert data["level"] == "INFO"
    assert data["context"] == {"rows": 3}


def test_console_formatter_leaves_record_untouched():
    record = _record()

    ConsoleFormatter("%(levelname)s %(message)s").format(record)

    assert record.levelname == "INFO"


def test_setup_logging_console_only(restore_root_logger):
    setup_logging(log_level="WARNING", log_to_file=False)

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1


def test_setup_logging_writes_files(restore_root_logger, tmp_path, monkeypatch):
    monkeypatch.setattr(logging_config, "LOG_DIR", tmp_path)

    setup_logging(log_level=logging.INFO, log_to_file=True, use_json_format=True)

    assert (tmp_path / "app.log").exists()
    assert (tmp_path / "barberboss_errors.log").exists()
    assert len(restore_root_logger.handlers) == 3


def test_log_performance_context(restore_root_logger):
    captured = []

    class ListHandler(logging.Handler):
        def emit(self, record):
            captured.append(record)

    setup_logging(log_level="INFO", log_to_file=False)
    restore_root_logger.addHandler(ListHandler())

    log_performance("report.generate", 12.5, report_type="billing", rows=3)

    record = captured[-1]
    assert record.name == "barberboss.performance"
    assert record.context == {
        "function": "report.generate",
        "duration_ms": 12.5,
        "report_type": "billing",
        "rows": 3,
    }


def test_sql_timing_logs_each_statement(restore_root_logger):
    captured = []

    class ListHandler(logging.Handler):
        def emit(self, record):
            captured.append(record)

    setup_logging(log_level="INFO", log_to_file=False, enable_sql_timing=True)
    restore_root_logger.addHandler(ListHandler())

    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    engine.dispose()

    timings = [r for r in captured if r.name == "sqlalchemy.performance"]
    assert timings
    assert "SELECT 1" in timings[-1].context["sql_query"]
    assert timings[-1].context["sql_duration_ms"] >= 0


def test_create_app_passes_sql_timing_flag(monkeypatch):
    monkeypatch.setenv("LOG_SQL_TIMING", "true")

    with patch("barberboss.main.setup_logging") as setup:
        create_app()

    assert setup.call_args.kwargs["enable_sql_timing"] is True

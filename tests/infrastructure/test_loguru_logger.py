from __future__ import annotations

from loguru import logger as loguru_logger

from infrastructure.logging.log_setup import add_file_logging
from infrastructure.logging.loguru_logger import LoguruLogger


def test_events_reach_loguru_with_bound_fields() -> None:
    records = []
    sink_id = loguru_logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        LoguruLogger().bind(run_id="r1").warning("workflow.aborted", code="transport")
    finally:
        loguru_logger.remove(sink_id)

    assert len(records) == 1
    record = records[0]
    assert record["level"].name == "WARNING"
    assert record["extra"]["run_id"] == "r1"
    assert record["extra"]["event"] == "workflow.aborted"
    assert record["message"] == "workflow.aborted code='transport'"


def test_message_with_braces_is_not_formatted() -> None:
    records = []
    sink_id = loguru_logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        LoguruLogger().info("template.render_failed", template="${oops")
    finally:
        loguru_logger.remove(sink_id)

    assert records[0]["message"] == "template.render_failed template='${oops'"


def test_add_file_logging_writes_file(tmp_path) -> None:
    path = tmp_path / ".httpflow.log"
    sink_id = add_file_logging(path, "INFO")
    try:
        LoguruLogger().info("workflow.start", requests=2)
    finally:
        loguru_logger.remove(sink_id)

    content = path.read_text(encoding="utf-8")
    assert "workflow.start requests=2" in content

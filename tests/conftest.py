# tests/conftest.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from application.ports.logger import LoggerPort
from application.ports.observer import WorkflowObserver


class RecordingLogger(LoggerPort):
    def __init__(self, bound: Optional[Dict[str, Any]] = None, events: Optional[List[Dict[str, Any]]] = None) -> None:
        self.bound = bound or {}
        self.events = [] if events is None else events

    def bind(self, **fields: Any) -> "RecordingLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return RecordingLogger(bound=merged, events=self.events)

    def debug(self, event: str, **fields: Any) -> None:
        self._record("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._record("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._record("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._record("error", event, fields)

    def _record(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        payload = dict(self.bound)
        payload.update(fields)
        payload["type"] = event
        payload["level"] = level
        self.events.append(payload)

    def of_type(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["type"] == event]


class RecordingObserver(WorkflowObserver):
    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def before_send(self, template, resolved) -> None:
        self.calls.append(("before_send", template.name, resolved))

    def after_receive(self, template, resolved, response) -> None:
        self.calls.append(("after_receive", template.name, response))


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()

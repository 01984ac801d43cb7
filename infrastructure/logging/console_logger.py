# infrastructure/logging/console_logger.py
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TextIO

from application.ports.logger import LoggerPort

LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


def level_enabled(level: str, min_level: str) -> bool:
    return LEVELS[level] >= LEVELS.get(min_level.lower(), 10)


@dataclass(frozen=True)
class ConsoleLogger(LoggerPort):
    """One JSON line per event: `<event> {...fields, "type": event, "level": level}`"""

    bound: Dict[str, Any] = field(default_factory=dict)
    min_level: str = "debug"
    stream: Optional[TextIO] = field(default=None, compare=False)

    def bind(self, **fields: Any) -> "ConsoleLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return ConsoleLogger(bound=merged, min_level=self.min_level, stream=self.stream)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        if not level_enabled(level, self.min_level):
            return
        payload = dict(self.bound)
        payload.update(fields)
        payload.setdefault("type", event)
        payload.setdefault("level", level)
        print(f"{event} {json.dumps(payload, ensure_ascii=False, default=str)}", file=self.stream or sys.stdout)

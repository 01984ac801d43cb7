# infrastructure/logging/loguru_logger.py
from __future__ import annotations

from typing import Any, Optional

from loguru import logger as _loguru

from application.ports.logger import LoggerPort


class LoguruLogger(LoggerPort):
    """
    LoggerPort -> loguru.
    bind() のフィールドは loguru の extra に載せ、イベント固有のフィールドはメッセージに付与する。
    """

    def __init__(self, logger: Optional[Any] = None):
        self._logger = logger if logger is not None else _loguru

    def bind(self, **fields: Any) -> "LoguruLogger":
        return LoguruLogger(self._logger.bind(**fields))

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("DEBUG", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("INFO", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("WARNING", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("ERROR", event, fields)

    def _emit(self, level: str, event: str, fields: dict) -> None:
        message = event
        if fields:
            message += " " + " ".join(f"{k}={v!r}" for k, v in fields.items())
        self._logger.opt(depth=2).bind(event=event, **fields).log(level, message)

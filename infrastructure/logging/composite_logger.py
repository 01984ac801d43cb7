# infrastructure/logging/composite_logger.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from application.ports.logger import LoggerPort
from infrastructure.logging.console_logger import level_enabled


@dataclass(frozen=True)
class CompositeLogger(LoggerPort):
    """
    Fan one event out to several sinks (console JSON lines, loguru, ...).

    - min_level より低いイベントはどの出力先にも渡さない
    - 出力先の1つが例外を出しても残りには配送し、失敗は "logger.failed" として
      成功した出力先へ報告する。全滅した場合は最初の例外をそのまま送出する
    """

    loggers: List[LoggerPort]
    min_level: str = "debug"

    def bind(self, **fields: Any) -> "CompositeLogger":
        return CompositeLogger([logger.bind(**fields) for logger in self.loggers], min_level=self.min_level)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        if not self.loggers or not level_enabled(level, self.min_level):
            return

        delivered: List[LoggerPort] = []
        failures: List[Tuple[LoggerPort, Exception]] = []
        for logger in self.loggers:
            try:
                getattr(logger, level)(event, **fields)
            except Exception as exc:
                failures.append((logger, exc))
            else:
                delivered.append(logger)

        if failures and not delivered:
            raise failures[0][1]
        for failed, exc in failures:
            for logger in delivered:
                logger.warning(
                    "logger.failed",
                    sink=type(failed).__name__,
                    failed_event=event,
                    error=f"{type(exc).__name__}: {exc}",
                )

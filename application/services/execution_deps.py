# application/services/execution_deps.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Protocol

from application.ports.logger import LoggerPort
from application.ports.observer import NullObserver, WorkflowObserver


class UrlResolverPort(Protocol):
    def resolve_url(self, url: str) -> str:
        ...


class VariableFileLoaderPort(Protocol):
    def load(self, path: str) -> Dict[str, Optional[str]]:
        ...


@dataclass(frozen=True)
class ExecutionDeps:
    logger: LoggerPort
    observer: WorkflowObserver = field(default_factory=NullObserver)
    url_resolver: Optional[UrlResolverPort] = None
    variable_file_loader: Optional[VariableFileLoaderPort] = None

    def resolve_url(self, url: str) -> str:
        if self.url_resolver is None:
            return url
        return self.url_resolver.resolve_url(url)

    def with_logger(self, logger: LoggerPort) -> "ExecutionDeps":
        return replace(self, logger=logger)

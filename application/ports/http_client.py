# application/ports/http_client.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from application.services.request_builder import ResolvedRequest


@dataclass(frozen=True)
class HttpResponse:
    status: int
    headers: Dict[str, str]
    content: bytes
    time_to_headers: timedelta = field(default_factory=timedelta)
    time_total: timedelta = field(default_factory=timedelta)


class HttpClientPort(ABC):
    @abstractmethod
    def send(self, request: "ResolvedRequest") -> HttpResponse:
        """
        Transmit a fully resolved request.

        Connection failures and timeouts must be raised as TransportError.
        """
        ...

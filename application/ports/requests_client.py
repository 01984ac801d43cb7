# application/ports/requests_client.py
from __future__ import annotations

import time
from datetime import timedelta
from typing import TYPE_CHECKING, Dict, Optional

import requests

from application.ports.http_client import HttpClientPort, HttpResponse
from domain.exceptions import TransportError

if TYPE_CHECKING:
    from application.services.request_builder import ResolvedRequest


class RequestsSessionHttpClient(HttpClientPort):
    def __init__(self, base_headers: Optional[Dict[str, str]] = None, timeout_sec: float = 30):
        self._session = requests.Session()
        self._base_headers = base_headers or {}
        self._timeout = timeout_sec

    def send(self, request: "ResolvedRequest") -> HttpResponse:
        merged = dict(self._base_headers)
        merged.update(request.headers)

        body = request.body.encode("utf-8") if request.body is not None else None

        t0 = time.perf_counter()
        try:
            # stream=True: ヘッダ受信時点で戻るので time_to_headers を計測できる
            resp = self._session.request(
                method=request.method.value,
                url=request.full_url,
                headers=merged,
                data=body,
                timeout=self._timeout,
                stream=True,
            )
            t_headers = time.perf_counter()
            content = resp.content
        except requests.RequestException as exc:
            raise TransportError(f"HTTP request failed: {exc}", request_name=request.name) from exc
        t_end = time.perf_counter()

        return HttpResponse(
            status=resp.status_code,
            headers=dict(resp.headers),
            content=content or b"",
            time_to_headers=timedelta(seconds=t_headers - t0),
            time_total=timedelta(seconds=t_end - t0),
        )

    def close(self) -> None:
        self._session.close()

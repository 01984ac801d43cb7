# infrastructure/display/trace_logger.py
from __future__ import annotations

from application.ports.logger import LoggerPort
from application.ports.observer import WorkflowObserver
from application.services.redactor import mask_dict, mask_pairs


class TraceLoggingObserver(WorkflowObserver):
    """Structured http.request / http.response events, sensitive values masked."""

    def __init__(self, logger: LoggerPort):
        self._logger = logger

    def before_send(self, template, resolved) -> None:
        self._logger.info(
            "http.request",
            request=template.name,
            method=resolved.method.value,
            url=resolved.uri,
            query=mask_pairs(resolved.query),
            headers=mask_dict(resolved.headers),
            body_len=len(resolved.body or ""),
        )
        self._logger.debug(
            "http.request_detail",
            request=template.name,
            variables=sorted(resolved.variables),
        )

    def after_receive(self, template, resolved, response) -> None:
        self._logger.info(
            "http.response",
            request=template.name,
            status=response.status_code,
            headers=mask_dict(response.headers),
            time_to_headers_ms=int(response.time_to_headers.total_seconds() * 1000),
            time_total_ms=int(response.time_total.total_seconds() * 1000),
            body_len=len(response.body),
            extracted=sorted(response.extracted_variables),
        )

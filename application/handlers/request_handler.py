# application/handlers/request_handler.py
from __future__ import annotations

from typing import Optional

from application.ports.http_client import HttpClientPort
from application.services.execution_deps import ExecutionDeps
from application.services.request_builder import RequestBuilder, ResolvedRequest
from application.services.response_interpreter import ResponseInterpreter
from domain.exceptions import WorkflowError
from domain.run import StepResponse
from domain.steps.http import RequestTemplate
from domain.variables import VariableStore


class RequestExecutor:
    """
    1 リクエスト分の処理: build -> before_send -> send -> interpret -> after_receive

    失敗は WorkflowError（request_name 付き）として送出する。
    ステータスコードの判定は呼び出し側（WorkflowExecutor）が行う。
    """

    def __init__(
        self,
        http_client: HttpClientPort,
        builder: Optional[RequestBuilder] = None,
        interpreter: Optional[ResponseInterpreter] = None,
    ):
        self._http = http_client
        self._builder = builder or RequestBuilder()
        self._interpreter = interpreter or ResponseInterpreter()

    def execute(self, template: RequestTemplate, store: VariableStore, deps: ExecutionDeps) -> StepResponse:
        resolved = self._builder.build(template, store, deps)

        deps.logger.debug(
            "http.request_built",
            request=template.name,
            method=resolved.method.value,
            url=resolved.full_url,
        )
        self._notify_before(template, resolved, deps)

        try:
            raw = self._http.send(resolved)
            response = self._interpreter.interpret(template, raw)
        except WorkflowError as e:
            raise e.with_request(template.name)

        deps.logger.info(
            "http.received",
            request=template.name,
            status=response.status_code,
            elapsed_ms=int(response.time_total.total_seconds() * 1000),
            extracted=sorted(response.extracted_variables),
        )
        self._notify_after(template, resolved, response, deps)
        return response

    def _notify_before(self, template: RequestTemplate, resolved: ResolvedRequest, deps: ExecutionDeps) -> None:
        try:
            deps.observer.before_send(template, resolved)
        except Exception as e:
            deps.logger.error("observer.failed", hook="before_send", request=template.name, error=str(e))

    def _notify_after(
        self,
        template: RequestTemplate,
        resolved: ResolvedRequest,
        response: StepResponse,
        deps: ExecutionDeps,
    ) -> None:
        try:
            deps.observer.after_receive(template, resolved, response)
        except Exception as e:
            deps.logger.error("observer.failed", hook="after_receive", request=template.name, error=str(e))

# application/executor/workflow_executor.py
from __future__ import annotations

import time
import uuid
from pathlib import Path
from typing import List, Optional

from application.handlers.request_handler import RequestExecutor
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import UnsuccessfulStatusError, WorkflowError, WorkflowLoadError
from domain.run import StepResponse, WorkflowResult
from domain.variables import VariableItems, VariableStore
from domain.workflow import Workflow


class WorkflowExecutor:
    """
    Runs the requests of a workflow strictly in order.

    各リクエストの抽出結果を VariableStore にマージして次へ渡す。
    2xx 以外のステータス、または WorkflowError が発生した時点で中断する。
    """

    def __init__(self, request_executor: RequestExecutor):
        self._requests = request_executor

    def execute(
        self,
        workflow: Workflow,
        deps: ExecutionDeps,
        variables: Optional[VariableItems] = None,
        run_id: str = "",
    ) -> WorkflowResult:
        # run_id を logger に bind して、以後のログに自動付与
        run_id = run_id or uuid.uuid4().hex
        deps = deps.with_logger(deps.logger.bind(run_id=run_id, workflow=workflow.name))

        deps.logger.info("workflow.start", requests=len(workflow.requests))
        store = VariableStore.of(variables)
        responses: List[StepResponse] = []

        try:
            store = self._load_variable_files(workflow, store, deps)
        except WorkflowError as e:
            return self._abort(responses, store, e, deps)

        for index, template in enumerate(workflow.requests, start=1):
            deps.logger.info("request.start", request=template.name, index=index)
            t0 = time.perf_counter()

            try:
                response = self._requests.execute(template, store, deps)
            except WorkflowError as e:
                return self._abort(responses, store, e.with_request(template.name), deps)

            responses.append(response)
            deps.logger.info(
                "request.end",
                request=template.name,
                index=index,
                status=response.status_code,
                elapsed_ms=int((time.perf_counter() - t0) * 1000),
            )

            if not response.is_success:
                error = UnsuccessfulStatusError(response.status_code, request_name=template.name)
                return self._abort(responses, store, error, deps)

            store = store.merged(response.extracted_variables)

        deps.logger.info("workflow.end", status="completed", responses=len(responses))
        return WorkflowResult.completed(responses, store)

    def _load_variable_files(self, workflow: Workflow, store: VariableStore, deps: ExecutionDeps) -> VariableStore:
        if not workflow.variable_files:
            return store
        if deps.variable_file_loader is None:
            raise WorkflowLoadError("Workflow declares variable files but no loader is configured")

        for path in workflow.variable_files:
            resolved = self._resolve_variable_file(workflow, path)
            deps.logger.debug("variables.file_loaded", path=resolved)
            store = store.merged(deps.variable_file_loader.load(resolved))
        return store

    def _resolve_variable_file(self, workflow: Workflow, path: str) -> str:
        # 相対パスはワークフロー文書のディレクトリ基準
        p = Path(path)
        if p.is_absolute() or workflow.source_path is None:
            return str(p)
        return str(Path(workflow.source_path).parent / p)

    def _abort(
        self,
        responses: List[StepResponse],
        store: VariableStore,
        error: WorkflowError,
        deps: ExecutionDeps,
    ) -> WorkflowResult:
        deps.logger.error(
            "workflow.aborted",
            code=error.code,
            request=error.request_name,
            error=str(error),
            responses=len(responses),
        )
        return WorkflowResult.aborted(responses, store, error)

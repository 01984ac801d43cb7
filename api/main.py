"""FastAPI アプリケーション - REST API エンドポイント"""
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import Body, FastAPI, HTTPException
from pydantic import BaseModel, Field

from application.executor.workflow_executor import WorkflowExecutor
from application.handlers.request_handler import RequestExecutor
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.execution_deps import ExecutionDeps
from application.services.execution_error_builder import ExecutionErrorBuilder
from domain.exceptions import WorkflowLoadError
from domain.run import WorkflowResult
from domain.workflow import Workflow
from infrastructure.display.trace_logger import TraceLoggingObserver
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.workflow.document import workflow_json_schema
from infrastructure.workflow.file_finder import WorkflowFileFinder
from infrastructure.workflow.loader_registry import WorkflowLoaderRegistry
from infrastructure.workflow.variable_file_loader import VariableFileLoader


# リクエストモデル
class RunWorkflowRequest(BaseModel):
    """ワークフロー実行リクエスト"""
    variables: Dict[str, Optional[str]] = Field(default_factory=dict, description="初期変数")


class ErrorDetailResponse(BaseModel):
    """Structured error detail"""
    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    request_name: Optional[str] = Field(default=None, description="Failed request name")
    status_code: Optional[int] = Field(default=None, description="Last response status")


class StepResponseSummary(BaseModel):
    name: str
    status_code: int
    time_total_ms: int
    extracted: Dict[str, Optional[str]] = Field(default_factory=dict)


class RunWorkflowResponse(BaseModel):
    """ワークフロー実行レスポンス"""
    success: bool = Field(description="実行成功フラグ")
    status: str = Field(description="completed / aborted")
    responses: List[StepResponseSummary] = Field(default_factory=list)
    variables: Dict[str, Optional[str]] = Field(default_factory=dict, description="最終的な変数")
    error_detail: Optional[ErrorDetailResponse] = Field(
        default=None,
        description="Structured error detail",
    )


# FastAPIアプリケーション
app = FastAPI(
    title="httpflow",
    description="宣言的な HTTP ワークフローの実行エンジン",
    version="0.1.0"
)

# 設定
DEFAULT_WORKFLOWS_DIR = "workflows"


def _workflows_dir() -> Path:
    return Path(os.environ.get("HTTPFLOW_WORKFLOWS_DIR", DEFAULT_WORKFLOWS_DIR))


@app.get("/")
def read_root():
    """ヘルスチェック"""
    return {"status": "ok", "service": "httpflow"}


@app.get("/schema")
def get_schema() -> Dict[str, Any]:
    return workflow_json_schema()


def _build_logger() -> CompositeLogger:
    return CompositeLogger([ConsoleLogger(), LoguruLogger()], min_level="info")


def _build_request_executor() -> RequestExecutor:
    return RequestExecutor(RequestsSessionHttpClient())


def _load_workflow(workflow_id: str) -> Workflow:
    finder = WorkflowFileFinder(_workflows_dir())
    workflow_file = finder.find_by_id(workflow_id)

    if workflow_file is None:
        raise HTTPException(
            status_code=404,
            detail=f"Workflow file not found: {workflow_id}",
        )

    registry = WorkflowLoaderRegistry()
    loader = registry.get_loader(workflow_file)
    return loader.load_from_file(workflow_file)


def _build_response(result: WorkflowResult) -> RunWorkflowResponse:
    detail = ExecutionErrorBuilder().build_from_result(result)
    return RunWorkflowResponse(
        success=result.ok,
        status=result.status.value,
        responses=[
            StepResponseSummary(
                name=r.request_name,
                status_code=r.status_code,
                time_total_ms=int(r.time_total.total_seconds() * 1000),
                extracted=r.extracted_variables,
            )
            for r in result.responses
        ],
        variables=result.variables.as_dict(),
        error_detail=ErrorDetailResponse(**detail.__dict__) if detail else None,
    )


@app.post("/workflows/{workflow_id}/runs", response_model=RunWorkflowResponse)
def run_workflow(
    workflow_id: str,
    request: Optional[RunWorkflowRequest] = Body(default=None),
) -> RunWorkflowResponse:
    """
    指定されたワークフローを同期実行する

    Args:
        workflow_id: ワークフローID（ファイル名の拡張子を除いた部分）
        request: 実行リクエスト（variables）

    Returns:
        実行結果。中断した場合も 200 で success=False を返す
    """
    run_id = uuid4().hex
    logger = _build_logger().bind(run_id=run_id, workflow_id=workflow_id)

    try:
        workflow = _load_workflow(workflow_id)
    except WorkflowLoadError as e:
        logger.error("workflow.load_failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    deps = ExecutionDeps(
        logger=logger,
        observer=TraceLoggingObserver(logger),
        variable_file_loader=VariableFileLoader(),
    )
    executor = WorkflowExecutor(_build_request_executor())
    variables = request.variables if request is not None else {}
    result = executor.execute(workflow, deps, variables, run_id=run_id)
    return _build_response(result)

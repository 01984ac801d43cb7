# application/services/execution_error_builder.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.exceptions import UnsuccessfulStatusError, WorkflowError
from domain.run import WorkflowResult


@dataclass(frozen=True)
class ExecutionErrorDetail:
    code: str
    message: str
    request_name: Optional[str]
    status_code: Optional[int]


class ExecutionErrorBuilder:
    def build_from_result(self, result: WorkflowResult) -> Optional[ExecutionErrorDetail]:
        if result.ok or result.error is None:
            return None
        return self.build_from_error(result.error)

    def build_from_error(self, error: WorkflowError) -> ExecutionErrorDetail:
        # status_code は失敗したリクエスト自身の応答がある場合のみ
        status_code = error.status_code if isinstance(error, UnsuccessfulStatusError) else None
        return ExecutionErrorDetail(
            code=error.code,
            message=str(error),
            request_name=error.request_name,
            status_code=status_code,
        )

# domain/run.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Dict, List, Optional

from domain.exceptions import WorkflowError
from domain.variables import VariableStore


@dataclass(frozen=True)
class StepResponse:
    request_name: str
    status_code: int
    time_to_headers: timedelta
    time_total: timedelta
    headers: Dict[str, str]
    body: str
    extracted_variables: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class WorkflowStatus(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class WorkflowResult:
    status: WorkflowStatus
    responses: List[StepResponse]
    variables: VariableStore
    error: Optional[WorkflowError] = None
    failed_request: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == WorkflowStatus.COMPLETED

    @classmethod
    def completed(cls, responses: List[StepResponse], variables: VariableStore) -> "WorkflowResult":
        return cls(status=WorkflowStatus.COMPLETED, responses=list(responses), variables=variables)

    @classmethod
    def aborted(
        cls,
        responses: List[StepResponse],
        variables: VariableStore,
        error: WorkflowError,
    ) -> "WorkflowResult":
        return cls(
            status=WorkflowStatus.ABORTED,
            responses=list(responses),
            variables=variables,
            error=error,
            failed_request=error.request_name,
        )

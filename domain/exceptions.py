# domain/exceptions.py
from __future__ import annotations

from typing import Optional


class WorkflowError(Exception):
    """
    Base class of every error that stops a workflow at the current request.

    code は結果や CLI / API で失敗種別を区別するための安定した識別子。
    """

    code = "workflow_error"

    def __init__(
        self,
        message: str,
        request_name: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.request_name = request_name
        self.field = field

    def with_request(self, request_name: str) -> "WorkflowError":
        if self.request_name is None:
            self.request_name = request_name
        return self

    def __str__(self) -> str:
        parts = []
        if self.request_name:
            parts.append(f"request={self.request_name}")
        if self.field:
            parts.append(f"field={self.field}")
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class ConfigurationError(WorkflowError):
    code = "configuration"


class WorkflowLoadError(ConfigurationError):
    pass


class RequestBuildError(ConfigurationError):
    pass


class InvalidJsonPathError(ConfigurationError):
    pass


class UnresolvedVariableError(ConfigurationError):
    pass


class TransportError(WorkflowError):
    code = "transport"


class ContentError(WorkflowError):
    code = "content"


class UnsuccessfulStatusError(WorkflowError):
    code = "unsuccessful_status"

    def __init__(self, status_code: int, request_name: Optional[str] = None) -> None:
        super().__init__(f"Unsuccessful response status: {status_code}", request_name=request_name)
        self.status_code = status_code


class TemplateRenderError(Exception):
    # 非致命: TemplateRenderer がログに残して元の文字列を返す
    pass

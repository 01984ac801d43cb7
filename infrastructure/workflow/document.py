# infrastructure/workflow/document.py
"""
Workflow document schema
------------------------
pydantic models for the YAML / JSON workflow document. They validate the
external shape (camelCase keys such as ``queryParams``) and convert to and
from the frozen domain dataclasses. The JSON schema export is derived from
the same models.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from domain.exceptions import WorkflowLoadError
from domain.steps.http import (
    BasicAuth,
    BearerAuth,
    FileBody,
    InlineBody,
    Method,
    RequestTemplate,
)
from domain.workflow import Workflow


def parse_method(value: Any) -> Method:
    """Case-insensitive method parser used at the document boundary."""
    if isinstance(value, Method):
        return value
    if not isinstance(value, str):
        raise ValueError("method must be a string")
    try:
        return Method(value.strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in Method)
        raise ValueError(f"unsupported method {value!r} (expected one of {allowed})") from None


# ---------- Document models ----------


class _Document(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FileBodyDocument(_Document):
    file: str = Field(..., description="Path of a file sent as the request body")


class InlineBodyDocument(_Document):
    content: str = Field(..., description="Inline request body")
    trim: Optional[bool] = Field(default=None, description="Strip surrounding whitespace before substitution")


class BasicAuthDocument(_Document):
    type: Literal["basic"]
    username: str
    password: Optional[str] = None


class BearerAuthDocument(_Document):
    type: Literal["bearer"]
    token: str


ParamValueDocument = Union[StrictStr, StrictBool, StrictInt, StrictFloat, List[Any]]
BodyDocument = Union[FileBodyDocument, InlineBodyDocument]
AuthenticationDocument = Annotated[
    Union[BasicAuthDocument, BearerAuthDocument],
    Field(discriminator="type"),
]


class RequestDocument(_Document):
    name: str
    uri: str
    method: Method
    query_params: Optional[Dict[str, ParamValueDocument]] = Field(default=None, alias="queryParams")
    headers: Optional[Dict[str, str]] = None
    body: Optional[BodyDocument] = None
    authentication: Optional[AuthenticationDocument] = None
    extractors: Optional[Dict[str, str]] = Field(
        default=None,
        description="Output variable name -> JSON path evaluated against a JSON response",
    )

    @field_validator("method", mode="before")
    @classmethod
    def _parse_method(cls, value: Any) -> Method:
        return parse_method(value)

    def to_template(self) -> RequestTemplate:
        body = None
        if isinstance(self.body, FileBodyDocument):
            body = FileBody(file=self.body.file)
        elif isinstance(self.body, InlineBodyDocument):
            body = InlineBody(content=self.body.content, trim=bool(self.body.trim))

        auth = None
        if isinstance(self.authentication, BasicAuthDocument):
            auth = BasicAuth(username=self.authentication.username, password=self.authentication.password)
        elif isinstance(self.authentication, BearerAuthDocument):
            auth = BearerAuth(token=self.authentication.token)

        return RequestTemplate(
            name=self.name,
            uri=self.uri,
            method=self.method,
            query_params=dict(self.query_params) if self.query_params is not None else None,
            headers=dict(self.headers) if self.headers is not None else None,
            body=body,
            authentication=auth,
            extractors=dict(self.extractors) if self.extractors is not None else None,
        )

    @classmethod
    def from_template(cls, template: RequestTemplate) -> "RequestDocument":
        body: Optional[BodyDocument] = None
        if isinstance(template.body, FileBody):
            body = FileBodyDocument(file=template.body.file)
        elif isinstance(template.body, InlineBody):
            body = InlineBodyDocument(content=template.body.content, trim=template.body.trim or None)

        auth: Optional[Union[BasicAuthDocument, BearerAuthDocument]] = None
        if isinstance(template.authentication, BasicAuth):
            auth = BasicAuthDocument(
                type="basic",
                username=template.authentication.username,
                password=template.authentication.password,
            )
        elif isinstance(template.authentication, BearerAuth):
            auth = BearerAuthDocument(type="bearer", token=template.authentication.token)

        return cls(
            name=template.name,
            uri=template.uri,
            method=template.method,
            query_params=template.query_params,
            headers=template.headers,
            body=body,
            authentication=auth,
            extractors=template.extractors,
        )


class WorkflowDocument(_Document):
    name: str
    variable_files: Optional[List[str]] = Field(
        default=None,
        alias="variableFiles",
        description="Variable files merged into the initial variables, relative to this document",
    )
    requests: List[RequestDocument] = Field(default_factory=list)

    def to_workflow(self, source_path: Optional[str] = None) -> Workflow:
        return Workflow(
            name=self.name,
            requests=[r.to_template() for r in self.requests],
            variable_files=list(self.variable_files or []),
            source_path=source_path,
        )

    @classmethod
    def from_workflow(cls, workflow: Workflow) -> "WorkflowDocument":
        return cls(
            name=workflow.name,
            variable_files=list(workflow.variable_files) or None,
            requests=[RequestDocument.from_template(r) for r in workflow.requests],
        )


# ---------- Conversion helpers ----------


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def workflow_from_data(data: Any, source_path: Optional[str] = None) -> Workflow:
    if not isinstance(data, dict):
        raise WorkflowLoadError(f"Workflow document must be a mapping: {source_path or '<data>'}")
    try:
        document = WorkflowDocument.model_validate(data)
    except ValidationError as exc:
        raise WorkflowLoadError(f"Invalid workflow document: {_format_validation_error(exc)}") from exc
    return document.to_workflow(source_path)


def request_from_data(data: Any) -> RequestTemplate:
    if not isinstance(data, dict):
        raise WorkflowLoadError("Request document must be a mapping")
    try:
        document = RequestDocument.model_validate(data)
    except ValidationError as exc:
        raise WorkflowLoadError(
            f"Invalid request document: {_format_validation_error(exc)}",
            request_name=data.get("name") if isinstance(data.get("name"), str) else None,
        ) from exc
    return document.to_template()


def dump_workflow(workflow: Workflow) -> Dict[str, Any]:
    return WorkflowDocument.from_workflow(workflow).model_dump(by_alias=True, exclude_none=True, mode="json")


def dump_request(template: RequestTemplate) -> Dict[str, Any]:
    return RequestDocument.from_template(template).model_dump(by_alias=True, exclude_none=True, mode="json")


def workflow_json_schema() -> Dict[str, Any]:
    return WorkflowDocument.model_json_schema(by_alias=True)

# application/services/request_builder.py
from __future__ import annotations

import base64
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode, urlsplit, urlunsplit

from application.services.execution_deps import ExecutionDeps
from application.services.template_renderer import TemplateRenderer
from domain.exceptions import RequestBuildError, WorkflowError
from domain.steps.http import (
    Authentication,
    BasicAuth,
    BearerAuth,
    Body,
    FileBody,
    InlineBody,
    Method,
    ParamValue,
    RequestTemplate,
)
from domain.variables import VariableStore

QueryPairs = Tuple[Tuple[str, str], ...]

_HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
# 先頭の空白は requests が送信時に拒否するので、ここで構成エラーにする
_HEADER_VALUE = re.compile(r"(?:[\x21-\x7e][\t\x20-\x7e]*)?")


@dataclass(frozen=True)
class ResolvedRequest:
    """
    Fully substituted request. Observers and the transport both consume this
    object, so what is displayed is what is sent.
    """

    name: str
    method: Method
    uri: str
    query: QueryPairs = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    variables: VariableStore = field(default_factory=VariableStore)

    def __post_init__(self) -> None:
        # observer がヘッダを書き換えても送信内容に影響しないように
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def full_url(self) -> str:
        if not self.query:
            return self.uri
        parts = urlsplit(self.uri)
        encoded = urlencode(list(self.query))
        query = f"{parts.query}&{encoded}" if parts.query else encoded
        return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def stringify_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float, str)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _expand_param(value: ParamValue) -> List[str]:
    # list は同じキーで複数の値として送る（順序維持）
    if isinstance(value, list):
        return [v if isinstance(v, str) else stringify_param(v) for v in value]
    return [stringify_param(value)]


class RequestBuilder:
    """
    Build ResolvedRequest from a RequestTemplate and a VariableStore snapshot.
    """

    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self._renderer = renderer or TemplateRenderer()

    def build(self, template: RequestTemplate, store: VariableStore, deps: ExecutionDeps) -> ResolvedRequest:
        try:
            uri = self._resolve_uri(template.uri, store, deps)
            query = self._resolve_query(template.query_params or {}, store, deps)
            headers = self._resolve_headers(template.headers or {}, store, deps)
            body = self._resolve_body(template.body, store, deps)
            if template.authentication is not None:
                # authentication が指定されていればテンプレートの Authorization より優先
                for key in [k for k in headers if k.lower() == "authorization"]:
                    del headers[key]
                headers["Authorization"] = self._resolve_auth(template.authentication, store, deps)
        except WorkflowError as e:
            raise e.with_request(template.name)

        return ResolvedRequest(
            name=template.name,
            method=template.method,
            uri=uri,
            query=query,
            headers=headers,
            body=body,
            variables=store,
        )

    def _render(self, value: str, store: VariableStore, deps: ExecutionDeps) -> str:
        return self._renderer.render(value, store, deps.logger)

    def _resolve_uri(self, uri: str, store: VariableStore, deps: ExecutionDeps) -> str:
        resolved = deps.resolve_url(self._render(uri, store, deps))
        parts = urlsplit(resolved)
        if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
            raise RequestBuildError(f"Invalid request URI: {resolved!r}", field="uri")
        return resolved

    def _resolve_query(
        self,
        query_params: Dict[str, ParamValue],
        store: VariableStore,
        deps: ExecutionDeps,
    ) -> QueryPairs:
        pairs: List[Tuple[str, str]] = []
        for key, value in query_params.items():
            for item in _expand_param(value):
                pairs.append((key, self._render(item, store, deps)))
        return tuple(pairs)

    def _resolve_headers(self, headers: Dict[str, str], store: VariableStore, deps: ExecutionDeps) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for name, value in headers.items():
            if not _HEADER_NAME.fullmatch(name):
                raise RequestBuildError(f"Invalid header name: {name!r}", field=f"headers.{name}")
            resolved = self._render(value, store, deps)
            if not _HEADER_VALUE.fullmatch(resolved):
                raise RequestBuildError(f"Invalid value for header {name!r}", field=f"headers.{name}")
            out[name] = resolved
        return out

    def _resolve_body(self, body: Optional[Body], store: VariableStore, deps: ExecutionDeps) -> Optional[str]:
        if body is None:
            return None
        if isinstance(body, FileBody):
            try:
                raw = Path(body.file).read_bytes()
            except OSError as exc:
                raise RequestBuildError(f"Unable to read body file: {exc}", field="body.file") from exc
            text = raw.decode("utf-8", errors="replace")
        elif isinstance(body, InlineBody):
            text = body.content.strip() if body.trim else body.content
        else:
            raise RequestBuildError(f"Unsupported body: {type(body).__name__}", field="body")
        return self._render(text, store, deps)

    def _resolve_auth(self, auth: Authentication, store: VariableStore, deps: ExecutionDeps) -> str:
        if isinstance(auth, BasicAuth):
            username = self._render(auth.username, store, deps)
            password = self._render(auth.password, store, deps) if auth.password is not None else ""
            token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
            return f"Basic {token}"
        if isinstance(auth, BearerAuth):
            value = f"Bearer {self._render(auth.token, store, deps)}"
            if not _HEADER_VALUE.fullmatch(value):
                raise RequestBuildError("Invalid bearer token", field="authentication.token")
            return value
        raise RequestBuildError(f"Unsupported authentication: {type(auth).__name__}", field="authentication")

# application/services/response_interpreter.py
from __future__ import annotations

import json
import re
from typing import Any, Dict, Mapping, Optional

from jsonpath_ng.ext import parse as parse_jsonpath

from application.ports.http_client import HttpResponse
from domain.exceptions import ContentError, InvalidJsonPathError
from domain.run import StepResponse
from domain.steps.http import Method, RequestTemplate

# 本文を持たないレスポンス（HEAD / 204 / 304）は JSON として解釈しない
_NO_BODY_STATUSES = (204, 304)


def header_value(headers: Mapping[str, str], name: str) -> Optional[str]:
    lowered = name.lower()
    for k, v in (headers or {}).items():
        if k.lower() == lowered:
            return v
    return None


def is_json_content(headers: Mapping[str, str]) -> bool:
    ctype = header_value(headers, "content-type") or ""
    return ctype.strip().lower().startswith("application/json")


def decode_body(raw: Optional[bytes], headers: Mapping[str, str]) -> str:
    """
    raw bytes + headers から本文を復元する。
    Content-Type の charset を優先し、なければ UTF-8（不正なバイトは置換）。
    """
    if not raw:
        return ""

    ctype = header_value(headers, "content-type") or ""
    m = re.search(r"charset\s*=\s*([^\s;]+)", ctype, re.I)
    if m:
        enc = m.group(1).strip().strip('"').strip("'")
        try:
            return raw.decode(enc, errors="replace")
        except LookupError:
            pass

    return raw.decode("utf-8", errors="replace")


def json_text(value: Any) -> str:
    """Canonical compact JSON text; strings are returned unwrapped."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class ResponseInterpreter:
    def __init__(self) -> None:
        self._compiled: Dict[str, Any] = {}

    def interpret(self, template: RequestTemplate, response: HttpResponse) -> StepResponse:
        body = decode_body(response.content, response.headers)

        extracted: Dict[str, Optional[str]] = {}
        if self._has_json_body(template, response):
            try:
                document = json.loads(body)
            except ValueError as exc:
                raise ContentError(
                    f"Response declared JSON but could not be parsed: {exc}",
                    request_name=template.name,
                ) from exc
            extracted = self.extract(template, document)

        return StepResponse(
            request_name=template.name,
            status_code=response.status,
            time_to_headers=response.time_to_headers,
            time_total=response.time_total,
            headers=dict(response.headers),
            body=body,
            extracted_variables=extracted,
        )

    def extract(self, template: RequestTemplate, document: Any) -> Dict[str, Optional[str]]:
        out: Dict[str, Optional[str]] = {}
        for name, path in (template.extractors or {}).items():
            expr = self._compile(path, name, template.name)
            matches = expr.find(document)
            # 先頭一致のみ採用。一致なしは None（既知だが未設定）として残す
            out[name] = json_text(matches[0].value) if matches else None
        return out

    def _compile(self, path: str, name: str, request_name: str) -> Any:
        expr = self._compiled.get(path)
        if expr is None:
            try:
                expr = parse_jsonpath(path)
            except Exception as exc:
                raise InvalidJsonPathError(
                    f"Invalid JSON path for extractor '{name}': {path} ({exc})",
                    request_name=request_name,
                    field=f"extractors.{name}",
                ) from exc
            self._compiled[path] = expr
        return expr

    def _has_json_body(self, template: RequestTemplate, response: HttpResponse) -> bool:
        if not is_json_content(response.headers):
            return False
        if template.method == Method.HEAD or response.status in _NO_BODY_STATUSES:
            return False
        # 非 2xx はステップ失敗として扱うので本文の解釈も抽出もしない
        if not 200 <= response.status < 300:
            return False
        return True

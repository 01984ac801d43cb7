from __future__ import annotations

import re
from typing import List, Optional

from application.ports.logger import LoggerPort, NullLogger
from domain.exceptions import TemplateRenderError, UnresolvedVariableError
from domain.variables import VariableStore

_BARE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_BRACED_NAME = re.compile(r"[A-Za-z0-9_.\-]+")


class TemplateRenderer:
    """
    ${name} と $name を VariableStore の値で展開する。
    - 未定義・未設定 (None) の参照はそのまま残す（strict=True なら UnresolvedVariableError）
    - 構文エラー（閉じていない ${ など）はログに残し、元の文字列を返す
    """

    def __init__(self, strict: bool = False):
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def render(self, template: str, store: VariableStore, logger: Optional[LoggerPort] = None) -> str:
        if "$" not in template:
            return template
        try:
            return self._render_str(template, store)
        except TemplateRenderError as e:
            (logger or NullLogger()).error("template.render_failed", template=template, error=str(e))
            return template

    def _render_str(self, s: str, store: VariableStore) -> str:
        out: List[str] = []
        i = 0
        while i < len(s):
            start = s.find("$", i)
            if start < 0:
                out.append(s[i:])
                break
            out.append(s[i:start])
            name, end = self._scan_reference(s, start)
            if name is None:
                out.append(s[start:end])
            else:
                out.append(self._lookup(name, s[start:end], store))
            i = end
        return "".join(out)

    def _scan_reference(self, s: str, start: int) -> tuple[Optional[str], int]:
        """
        s[start] == "$" から参照を読み取る。
        戻り値: (変数名 or None, 参照の直後の位置)
        """
        if s.startswith("${", start):
            end = s.find("}", start + 2)
            if end < 0:
                raise TemplateRenderError(f"unclosed template at position {start}")
            name = s[start + 2 : end].strip()
            if not _BRACED_NAME.fullmatch(name):
                raise TemplateRenderError(f"invalid variable reference: {s[start:end + 1]}")
            return name, end + 1

        m = _BARE_NAME.match(s, start + 1)
        if m is None:
            return None, start + 1
        return m.group(0), m.end()

    def _lookup(self, name: str, literal: str, store: VariableStore) -> str:
        value = store.get(name)
        if value is not None:
            return value
        if self._strict:
            state = "unset" if name in store else "undefined"
            raise UnresolvedVariableError(f"Variable '{name}' is {state}", field=literal)
        return literal

# infrastructure/display/console_printer.py
from __future__ import annotations

import sys
from typing import Iterable, Optional, TextIO, Tuple

from application.ports.observer import WorkflowObserver
from application.services.redactor import mask_value


def status_marker(status_code: int) -> str:
    if 200 <= status_code < 300:
        return "[OK]"
    if 300 <= status_code < 400:
        return "[REDIRECT]"
    if 400 <= status_code < 500:
        return "[CLIENT ERROR]"
    if 500 <= status_code < 600:
        return "[SERVER ERROR]"
    return ""


def _ms(delta) -> int:
    return int(delta.total_seconds() * 1000)


class ConsolePrinter(WorkflowObserver):
    """
    人が読むための表示。ステップ名・変数表・リクエスト/レスポンスの内容を出力する。

    mask_secrets=True の場合、機密ヘッダの値は伏せ字にする。
    """

    def __init__(self, stream: Optional[TextIO] = None, mask_secrets: bool = False):
        self._stream = stream
        self._mask = mask_secrets

    def print_workflow_header(self, name: str) -> None:
        self._line(f"# Executing workflow: {name}")
        self._line()

    def before_send(self, template, resolved) -> None:
        self._line(f"# Executing step: {template.name}")
        self._line("* Variables:")
        self._table(
            ("Variable", "Value"),
            ((k, "" if v is None else v) for k, v in sorted(resolved.variables.as_dict().items())),
        )
        self._line()
        self._line("## Request properties")
        self._line(f"* Method: {resolved.method.value}")
        self._line(f"* URL: {resolved.full_url}")
        self._line("* Headers:")
        self._table(("Header", "Value"), self._headers(resolved.headers))
        self._line("* Body:")
        self._block(resolved.body or "")
        self._line()

    def after_receive(self, template, resolved, response) -> None:
        self._line("## Response properties")
        self._line(f"* Status: {status_marker(response.status_code)} {response.status_code}")
        self._line(f"* Time to Headers: {_ms(response.time_to_headers)}ms")
        self._line(f"* Time total: {_ms(response.time_total)}ms")
        self._line("* Headers:")
        self._table(("Header", "Value"), self._headers(response.headers))
        self._line("* Extracted variables:")
        self._table(
            ("Variable", "Value"),
            ((k, "" if v is None else v) for k, v in response.extracted_variables.items()),
        )
        self._line("* Body:")
        self._block(response.body)
        self._line()

    def _headers(self, headers) -> Iterable[Tuple[str, str]]:
        for k, v in headers.items():
            yield k, (mask_value(k, v) if self._mask else v)

    def _table(self, titles: Tuple[str, str], rows: Iterable[Tuple[str, str]]) -> None:
        rows = list(rows)
        width = max([len(titles[0])] + [len(k) for k, _ in rows])
        self._line(f"  {titles[0]:<{width}} | {titles[1]}")
        self._line(f"  {'-' * width}-+-{'-' * max(len(titles[1]), 5)}")
        for k, v in rows:
            self._line(f"  {k:<{width}} | {v}")

    def _block(self, text: str) -> None:
        self._line("```")
        for line in text.splitlines():
            self._line(line)
        self._line("```")

    def _line(self, text: str = "") -> None:
        print(text, file=self._stream or sys.stdout)

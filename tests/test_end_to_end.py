"""Runs a workflow against a local http.server instance through the real requests transport."""
from __future__ import annotations

import base64
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import pytest

from application.executor.workflow_executor import WorkflowExecutor
from application.handlers.request_handler import RequestExecutor
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.execution_deps import ExecutionDeps
from domain.run import WorkflowStatus
from infrastructure.url.base_url_resolver import BaseUrlResolver
from infrastructure.workflow.variable_file_loader import VariableFileLoader
from infrastructure.workflow.yaml_loader import YamlWorkflowLoader


class _Handler(BaseHTTPRequestHandler):
    def log_message(self, format, *args):  # noqa: A002
        return None

    def _send_json(self, status, payload):
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_POST(self):
        length = int(self.headers.get("Content-Length") or 0)
        payload = json.loads(self.rfile.read(length) or b"{}")
        expected = "Basic " + base64.b64encode(b"alice:secret").decode("ascii")
        if urlsplit(self.path).path == "/login" and self.headers.get("Authorization") == expected:
            self._send_json(200, {"token": "tok-" + payload.get("device", "?")})
        else:
            self._send_json(401, {"error": "denied"})

    def do_GET(self):
        parts = urlsplit(self.path)
        if parts.path != "/items":
            self._send_json(404, {})
            return
        if self.headers.get("Authorization") != "Bearer tok-laptop":
            self._send_json(403, {"error": "forbidden"})
            return
        tags = parse_qs(parts.query).get("tag", [])
        self._send_json(200, {"items": [{"id": f"item-{t}"} for t in tags]})


@pytest.fixture
def server_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


WORKFLOW = """
name: e2e
variableFiles:
  - vars.yaml
requests:
  - name: login
    uri: /login
    method: POST
    headers:
      Content-Type: application/json
    body:
      content: |
        {"device": "$device"}
      trim: true
    authentication:
      type: basic
      username: $user
      password: $password
    extractors:
      auth: $.token
  - name: items
    uri: /items
    method: GET
    queryParams:
      tag: [a, b]
    authentication:
      type: bearer
      token: $auth
    extractors:
      first_item: $.items[0].id
      items: $.items
"""


def _run(tmp_path: Path, server_url: str, logger, password: str):
    (tmp_path / "vars.yaml").write_text("device: laptop\n", encoding="utf-8")
    path = tmp_path / "e2e.yaml"
    path.write_text(WORKFLOW, encoding="utf-8")
    workflow = YamlWorkflowLoader().load_from_file(path)

    client = RequestsSessionHttpClient(timeout_sec=5)
    deps = ExecutionDeps(
        logger=logger,
        url_resolver=BaseUrlResolver(server_url),
        variable_file_loader=VariableFileLoader(),
    )
    try:
        return WorkflowExecutor(RequestExecutor(client)).execute(
            workflow, deps, {"user": "alice", "password": password}
        )
    finally:
        client.close()


def test_login_then_authorized_call(tmp_path, server_url, logger) -> None:
    result = _run(tmp_path, server_url, logger, "secret")

    assert result.status == WorkflowStatus.COMPLETED
    assert [r.status_code for r in result.responses] == [200, 200]
    assert result.variables.get("auth") == "tok-laptop"
    assert result.variables.get("first_item") == "item-a"
    assert result.variables.get("items") == '[{"id":"item-a"},{"id":"item-b"}]'
    assert result.responses[0].time_total >= result.responses[0].time_to_headers


def test_rejected_login_aborts_after_first_request(tmp_path, server_url, logger) -> None:
    result = _run(tmp_path, server_url, logger, "wrong")

    assert result.status == WorkflowStatus.ABORTED
    assert len(result.responses) == 1
    assert result.responses[0].status_code == 401
    assert result.error.code == "unsuccessful_status"
    assert "auth" not in result.variables

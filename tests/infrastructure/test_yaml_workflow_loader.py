from __future__ import annotations

from pathlib import Path

import pytest

from domain.exceptions import WorkflowLoadError
from domain.steps.http import BearerAuth, Method
from infrastructure.workflow.loader_registry import WorkflowLoaderRegistry
from infrastructure.workflow.yaml_loader import YamlWorkflowLoader


def test_yaml_loader_parses_requests(tmp_path: Path) -> None:
    workflow_path = tmp_path / "login.yaml"
    workflow_path.write_text(
        """
name: login flow
requests:
  - name: login
    uri: https://api.test/login
    method: POST
    body:
      content: |
        {"user": "$user"}
      trim: true
    extractors:
      auth: $.token
  - name: profile
    uri: https://api.test/me
    method: get
    authentication:
      type: bearer
      token: $auth
""",
        encoding="utf-8",
    )

    workflow = YamlWorkflowLoader().load_from_file(workflow_path)

    assert workflow.name == "login flow"
    assert [r.name for r in workflow.requests] == ["login", "profile"]
    assert workflow.requests[0].extractors == {"auth": "$.token"}
    assert workflow.requests[1].method == Method.GET
    assert workflow.requests[1].authentication == BearerAuth(token="$auth")
    assert workflow.source_path == str(workflow_path)


def test_yaml_loader_single_request(tmp_path: Path) -> None:
    request_path = tmp_path / "ping.yml"
    request_path.write_text("name: ping\nuri: https://x.test/ping\nmethod: HEAD\n", encoding="utf-8")

    loader = WorkflowLoaderRegistry().get_loader(request_path)
    template = loader.load_request_from_file(request_path)

    assert template.method == Method.HEAD


def test_invalid_yaml_is_a_load_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("name: [unclosed\n", encoding="utf-8")

    with pytest.raises(WorkflowLoadError) as excinfo:
        YamlWorkflowLoader().load_from_file(path)

    assert "Invalid YAML" in str(excinfo.value)


def test_empty_and_missing_files(tmp_path: Path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    with pytest.raises(WorkflowLoadError):
        YamlWorkflowLoader().load_from_file(empty)
    with pytest.raises(WorkflowLoadError):
        YamlWorkflowLoader().load_from_file(tmp_path / "missing.yaml")


def test_registry_rejects_unknown_extension() -> None:
    with pytest.raises(WorkflowLoadError):
        WorkflowLoaderRegistry().get_loader("workflow.toml")


def test_non_utf8_file_is_a_load_error(tmp_path: Path) -> None:
    path = tmp_path / "latin.yaml"
    path.write_bytes(b"name: \xff\xfe\n")

    with pytest.raises(WorkflowLoadError) as excinfo:
        YamlWorkflowLoader().load_from_file(path)

    assert "not valid UTF-8" in str(excinfo.value)
    assert excinfo.value.code == "configuration"

from __future__ import annotations

from pathlib import Path

import pytest

from domain.exceptions import WorkflowLoadError
from infrastructure.workflow.variable_file_loader import VariableFileLoader, variables_from_data


def test_scalars_are_stringified() -> None:
    result = variables_from_data({"a": "x", "n": 3, "f": 1.5, "t": True, "off": False, "none": None})

    assert result == {"a": "x", "n": "3", "f": "1.5", "t": "true", "off": "false", "none": None}


def test_nested_values_are_rejected() -> None:
    with pytest.raises(WorkflowLoadError) as excinfo:
        variables_from_data({"list": [1, 2]})

    assert excinfo.value.field == "list"


def test_loads_yaml_and_json_files(tmp_path: Path) -> None:
    yaml_path = tmp_path / "vars.yaml"
    yaml_path.write_text("host: api.test\nport: 8080\n", encoding="utf-8")
    json_path = tmp_path / "vars.json"
    json_path.write_text('{"debug": true}', encoding="utf-8")

    loader = VariableFileLoader()

    assert loader.load(str(yaml_path)) == {"host": "api.test", "port": "8080"}
    assert loader.load(str(json_path)) == {"debug": "true"}


def test_non_mapping_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "vars.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(WorkflowLoadError):
        VariableFileLoader().load(str(path))

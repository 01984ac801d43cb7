# infrastructure/workflow/yaml_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from domain.exceptions import WorkflowLoadError
from infrastructure.workflow.base_loader import WorkflowLoaderBase


class YamlWorkflowLoader(WorkflowLoaderBase):
    def _load_file(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as f:
            try:
                return yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise WorkflowLoadError(f"Invalid YAML in {path}: {exc}") from exc

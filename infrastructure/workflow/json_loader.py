# infrastructure/workflow/json_loader.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from domain.exceptions import WorkflowLoadError
from infrastructure.workflow.base_loader import WorkflowLoaderBase


class JsonWorkflowLoader(WorkflowLoaderBase):
    def _load_file(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            try:
                return json.load(handle)
            except json.JSONDecodeError as exc:
                raise WorkflowLoadError(f"Invalid JSON in {path}: {exc}") from exc

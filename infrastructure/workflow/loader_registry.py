# infrastructure/workflow/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Union

from domain.exceptions import WorkflowLoadError
from infrastructure.workflow.base_loader import WorkflowLoaderBase
from infrastructure.workflow.json_loader import JsonWorkflowLoader
from infrastructure.workflow.yaml_loader import YamlWorkflowLoader


class WorkflowLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, WorkflowLoaderBase] = {
            ".yaml": YamlWorkflowLoader(),
            ".yml": YamlWorkflowLoader(),
            ".json": JsonWorkflowLoader(),
        }

    def get_loader(self, path: Union[str, Path]) -> WorkflowLoaderBase:
        ext = Path(path).suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise WorkflowLoadError(f"Unsupported document format: {ext or '<none>'}")
        return loader

# infrastructure/workflow/variable_file_loader.py
from __future__ import annotations

from typing import Any, Dict, Optional

from domain.exceptions import WorkflowLoadError
from infrastructure.workflow.loader_registry import WorkflowLoaderRegistry


def variables_from_data(data: Any, source: str = "<data>") -> Dict[str, Optional[str]]:
    """
    Flat mapping name -> scalar | null.
    スカラー値は文字列化する（bool は true / false）。入れ子はエラー。
    """
    if not isinstance(data, dict):
        raise WorkflowLoadError(f"Variable file must be a mapping: {source}")

    out: Dict[str, Optional[str]] = {}
    for key, value in data.items():
        name = str(key)
        if value is None:
            out[name] = None
        elif isinstance(value, bool):
            out[name] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            out[name] = str(value)
        else:
            raise WorkflowLoadError(
                f"Variable '{name}' must be a scalar or null in {source}",
                field=name,
            )
    return out


class VariableFileLoader:
    def __init__(self, registry: Optional[WorkflowLoaderRegistry] = None):
        self._registry = registry or WorkflowLoaderRegistry()

    def load(self, path: str) -> Dict[str, Optional[str]]:
        loader = self._registry.get_loader(path)
        return variables_from_data(loader.load_data(path), source=path)

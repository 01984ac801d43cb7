# infrastructure/workflow/base_loader.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Union

from domain.exceptions import WorkflowLoadError
from domain.steps.http import RequestTemplate
from domain.workflow import Workflow
from infrastructure.workflow.document import request_from_data, workflow_from_data

PathLike = Union[str, Path]


class WorkflowLoaderBase(ABC):
    """ファイル形式ごとの読み込みだけをサブクラスが実装する"""

    def load_from_file(self, path: PathLike) -> Workflow:
        p = Path(path)
        data = self.load_data(p)
        return workflow_from_data(data, source_path=str(p))

    def load_request_from_file(self, path: PathLike) -> RequestTemplate:
        data = self.load_data(Path(path))
        return request_from_data(data)

    def load_data(self, path: PathLike) -> Any:
        p = Path(path)
        if not p.exists():
            raise WorkflowLoadError(f"File not found: {p}")
        try:
            data = self._load_file(p)
        except OSError as exc:
            raise WorkflowLoadError(f"Unable to read {p}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise WorkflowLoadError(f"File is not valid UTF-8: {p} ({exc.reason} at byte {exc.start})") from exc
        if data is None:
            raise WorkflowLoadError(f"File is empty: {p}")
        return data

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        ...

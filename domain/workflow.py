# domain/workflow.py
"""
Workflow domain model
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from domain.steps.http import RequestTemplate


@dataclass(frozen=True)
class Workflow:
    """
    Workflow aggregate root

    variable_files は実行前に読み込まれ、初期変数にマージされる。
    source_path はドキュメントから読み込まれた場合のみ設定される。
    """
    name: str
    requests: List[RequestTemplate] = field(default_factory=list)
    variable_files: List[str] = field(default_factory=list)
    source_path: Optional[str] = field(default=None, compare=False)

# infrastructure/variables/dict_variable_provider.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class DictVariableProvider:
    variables: Dict[str, Optional[str]]

    def get(self) -> Dict[str, Optional[str]]:
        return dict(self.variables)

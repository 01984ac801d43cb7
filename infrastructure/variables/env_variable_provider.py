# infrastructure/variables/env_variable_provider.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values


class EnvVariableProvider:
    """
    環境変数と .env ファイルから変数を提供するプロバイダ

    .env に定義された値が優先され、未定義のものはプロセス環境変数で補う。
    ワークフローからは ${変数名} として参照できる。
    """

    def __init__(self, env_path: Optional[Union[str, Path]] = ".env"):
        self._env_path = Path(env_path) if env_path else None

    def get(self) -> Dict[str, Optional[str]]:
        values: Dict[str, Optional[str]] = {}
        if self._env_path is not None and self._env_path.exists():
            values.update(dotenv_values(self._env_path))

        for key, value in os.environ.items():
            if key not in values:
                values[key] = value
        return values

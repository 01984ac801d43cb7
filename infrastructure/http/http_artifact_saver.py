# infrastructure/http/http_artifact_saver.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from application.ports.observer import WorkflowObserver
from application.services.response_interpreter import is_json_content


class HttpArtifactSaver(WorkflowObserver):
    """
    1 request  -> NNN_<name>.req
    2 response -> NNN_<name>.resp
    3 body     -> NNN_<name>.json / .txt

    1 インスタンス = 1 run。初回書き込み時にタイムスタンプ付きのフォルダを作る。
    """

    def __init__(self, root: str = "tmp/http", run_id: str = ""):
        self._root = Path(root)
        self._run_id = run_id
        self._dir: Optional[Path] = None
        self._index: int = 0

    @property
    def directory(self) -> Optional[Path]:
        return self._dir

    def before_send(self, template, resolved) -> None:
        self._index += 1
        req_path = self._base() / f"{self._index:03}_{_safe(template.name)}.req"
        with req_path.open("w", encoding="utf-8", errors="ignore") as f:
            f.write(f"{resolved.method.value} {resolved.full_url}\n")
            for k, v in resolved.headers.items():
                f.write(f"{k}: {v}\n")
            f.write("\n")
            if resolved.body:
                f.write(resolved.body)

    def after_receive(self, template, resolved, response) -> None:
        stem = f"{self._index:03}_{_safe(template.name)}"
        base = self._base()

        with (base / f"{stem}.resp").open("w", encoding="utf-8", errors="ignore") as f:
            f.write(f"HTTP {response.status_code}\n")
            for k, v in response.headers.items():
                f.write(f"{k}: {v}\n")

        ext = ".json" if is_json_content(response.headers) else ".txt"
        (base / f"{stem}{ext}").write_text(response.body, encoding="utf-8", errors="ignore")

    def _base(self) -> Path:
        if self._dir is None:
            ts = datetime.now().strftime("%Y%m%d_%H%M%S%f")[:-3]
            name = f"{ts}_{self._run_id}" if self._run_id else ts
            self._dir = self._root / name
            self._dir.mkdir(parents=True, exist_ok=True)
        return self._dir


def _safe(name: str) -> str:
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in name) or "request"

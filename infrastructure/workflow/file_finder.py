"""Find workflow documents by ID."""
from pathlib import Path
from typing import List, Optional, Union

# 同じ ID で複数の形式がある場合の優先順位
SUFFIX_PRIORITY = (".json", ".yaml", ".yml")


class WorkflowFileFinder:
    """Search workflow documents under the given base directory (recursively)."""

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)

    def find_by_id(self, workflow_id: str) -> Optional[Path]:
        """
        Args:
            workflow_id: File name without extension (e.g., "login-flow")

        Returns:
            The Path if found, otherwise None. Path separators in the ID are
            not accepted, so lookups cannot leave base_dir.
        """
        if not workflow_id or "/" in workflow_id or "\\" in workflow_id or workflow_id.startswith("."):
            return None
        if not self.base_dir.is_dir():
            return None

        candidates: List[Path] = [
            path
            for suffix in SUFFIX_PRIORITY
            for path in self.base_dir.rglob(f"{workflow_id}{suffix}")
            if path.is_file()
        ]
        if not candidates:
            return None

        candidates.sort(key=lambda path: (SUFFIX_PRIORITY.index(path.suffix), len(path.parts), str(path)))
        return candidates[0]

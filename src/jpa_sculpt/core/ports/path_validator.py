from pathlib import Path
from typing import Protocol


class PathValidator(Protocol):
    def validate(self, candidate: Path, project_root: Path) -> Path:
        """Return the canonical ``candidate`` or raise ``PathEscape`` when it leaves ``project_root``."""
        ...

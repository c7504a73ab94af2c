import logging
from pathlib import Path

from jpa_sculpt.core.errors import PathEscape

logger = logging.getLogger(__name__)


class ProjectRootPathValidator:
    """Keeps writes inside the project root, following symlinks and ``..`` segments."""

    def validate(self, candidate: Path, project_root: Path) -> Path:
        try:
            root = project_root.resolve(strict=True)
        except (FileNotFoundError, RuntimeError) as exc:
            raise PathEscape(f"Project root '{project_root}' cannot be resolved: {exc}") from exc
        if not root.is_dir():
            raise PathEscape(f"Project root '{root}' is not a directory")

        target = candidate if candidate.is_absolute() else root / candidate
        resolved = target.resolve()
        if not resolved.is_relative_to(root):
            logger.warning("Blocked path traversal: '%s' resolves outside '%s'", candidate, root)
            raise PathEscape(f"Path '{candidate}' is outside the project root '{root}'")
        return resolved

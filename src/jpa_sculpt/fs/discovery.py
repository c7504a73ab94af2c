import logging
import os
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = frozenset({"target", "build", "out", "bin", "node_modules"})


def _walk(root: Path) -> Iterator[tuple[Path, list[str]]]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d not in SKIPPED_DIRECTORIES)
        yield Path(dirpath), sorted(filenames)


def iter_java_files(project_root: Path, source_root: str | None = None) -> Iterator[Path]:
    """Java files below ``project_root`` (or its ``source_root``), in path order."""
    base = project_root / source_root if source_root else project_root
    if not base.is_dir():
        logger.info("Source root %s does not exist", base)
        return
    for directory, filenames in _walk(base):
        for filename in filenames:
            if filename.endswith(".java"):
                yield directory / filename


def list_packages(project_root: Path, source_root: str) -> list[str]:
    """Dotted names of every directory below the source root."""
    base = project_root / source_root
    if not base.is_dir():
        return []
    packages = []
    for directory, _ in _walk(base):
        if directory == base:
            continue
        packages.append(".".join(directory.relative_to(base).parts))
    return packages

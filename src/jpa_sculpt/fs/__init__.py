from jpa_sculpt.fs.discovery import iter_java_files, list_packages
from jpa_sculpt.fs.path_security import ProjectRootPathValidator

__all__ = [
    "ProjectRootPathValidator",
    "iter_java_files",
    "list_packages",
]

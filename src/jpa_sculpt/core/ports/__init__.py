from jpa_sculpt.core.ports.path_validator import PathValidator

__all__ = ["PathValidator"]

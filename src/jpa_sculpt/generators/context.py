"""Request context and result types shared by every generator."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import ParamSpec

from jpa_sculpt.config import GeneratorSettings
from jpa_sculpt.core.errors import JpaSculptError, PartialRelationshipFailure, WriteFailed
from jpa_sculpt.core.locators import find_type_declaration, package_name, type_name
from jpa_sculpt.core.ports.path_validator import PathValidator
from jpa_sculpt.core.source_unit import SourceUnit
from jpa_sculpt.models import ErrorDetail, FileResponse, Response

logger = logging.getLogger(__name__)

P = ParamSpec("P")

ByteRange = tuple[int, int]


@dataclass(frozen=True)
class GenerationContext:
    """Everything a generator needs from the request; nothing is read from process state."""

    project_root: Path
    path_validator: PathValidator
    settings: GeneratorSettings = field(default_factory=GeneratorSettings)
    write: bool = False

    def write_unit(self, unit: SourceUnit, path: Path | None = None) -> Path:
        target_path = path or unit.path
        if target_path is None:
            raise ValueError(f"{unit!r} has no path to write to")
        target = self.path_validator.validate(target_path, self.project_root)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(unit.source)
        except OSError as exc:
            raise WriteFailed(f"Could not write {target}: {exc.strerror or exc}") from exc
        unit.path = target
        unit.modified = False
        logger.info("Wrote %s (%d bytes)", target, len(unit.source))
        return target

    def flush(self, unit: SourceUnit, path: Path | None = None) -> bool:
        """Write ``unit`` when the context asks for writes and the unit has somewhere to go."""
        if not self.write or (path is None and unit.path is None):
            return False
        self.write_unit(unit, path)
        return True


@dataclass(frozen=True)
class FileChange:
    unit: SourceUnit
    path: Path | None = None
    inserted_range: ByteRange | None = None
    written: bool = False
    side: str | None = None


@dataclass(frozen=True)
class GenerationResult:
    changes: tuple[FileChange, ...] = ()
    error: JpaSculptError | None = None
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def change(self) -> FileChange:
        if not self.changes:
            raise LookupError("Generation produced no file changes")
        return self.changes[0]

    @property
    def unit(self) -> SourceUnit:
        return self.change.unit

    @classmethod
    def failure(cls, error: JpaSculptError, warnings: list[str] | tuple[str, ...] = ()) -> GenerationResult:
        return cls(error=error, warnings=tuple(warnings))

    def to_response(self) -> Response[FileResponse]:
        if self.error is not None:
            detail = ErrorDetail(kind=self.error.kind, message=self.error.message)
            if isinstance(self.error, PartialRelationshipFailure):
                detail.committed_side = self.error.committed_side
                detail.committed_path = self.error.committed_path
            return Response[FileResponse](succeed=False, error=detail, warnings=list(self.warnings))

        unit = self.change.unit
        declaration = find_type_declaration(unit)
        data = FileResponse(
            file_type=type_name(unit, declaration) if declaration is not None else "",
            file_package=package_name(unit),
            file_path=str(self.change.path) if self.change.path else None,
        )
        return Response[FileResponse](succeed=True, data=data, warnings=list(self.warnings))


def generator(func: Callable[P, GenerationResult]) -> Callable[P, GenerationResult]:
    """Turn domain errors raised by ``func`` into a failed result."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> GenerationResult:
        try:
            return func(*args, **kwargs)
        except JpaSculptError as exc:
            logger.info("%s failed: %s", func.__name__, exc.message)
            return GenerationResult.failure(exc, exc.warnings)

    return wrapper


@contextmanager
def collecting_warnings() -> Iterator[list[str]]:
    """Collect warnings for a generator run; a domain error leaving the block carries them."""
    warnings: list[str] = []
    try:
        yield warnings
    except JpaSculptError as exc:
        exc.warnings.extend(w for w in warnings if w not in exc.warnings)
        raise

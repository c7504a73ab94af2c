"""New Java source files: plain types and JPA entity skeletons."""

from __future__ import annotations

import logging
from pathlib import Path

from jpa_sculpt.core import java_types
from jpa_sculpt.core.errors import NotFound, TargetExists, UnsupportedDeclaration
from jpa_sculpt.core.kinds import DeclarationKind, JpaRole
from jpa_sculpt.core.locators import find_annotation, require_type_declaration
from jpa_sculpt.core.mutation import insert_text
from jpa_sculpt.core.source_unit import SourceUnit, load
from jpa_sculpt.core.validators import to_snake_case, validate_identifier, validate_package
from jpa_sculpt.generators.annotations import add_annotation, add_annotation_argument, quoted
from jpa_sculpt.generators.context import FileChange, GenerationContext, GenerationResult, generator
from jpa_sculpt.generators.imports import ensure_import

logger = logging.getLogger(__name__)


def declaration_header(kind: DeclarationKind, name: str) -> str:
    match kind:
        case DeclarationKind.RECORD:
            return f"public record {name}()"
        case _:
            return f"public {kind.keyword} {name}"


def skeleton(package: str, name: str, kind: DeclarationKind) -> str:
    return f"package {package};\n\n{declaration_header(kind, name)} {{\n}}\n"


def source_path(ctx: GenerationContext, package: str, name: str, source_root: str | None = None) -> Path:
    root = source_root or ctx.settings.main_source_root
    return ctx.project_root.joinpath(root, *package.split("."), f"{name}.java")


def write_new_file(ctx: GenerationContext, unit: SourceUnit, path: Path) -> bool:
    """Write a freshly generated unit, refusing to replace an existing file."""
    unit.path = path
    if not ctx.write:
        return False
    target = ctx.path_validator.validate(path, ctx.project_root)
    if target.exists():
        raise TargetExists(f"File already exists: {target}")
    ctx.write_unit(unit, target)
    return True


def _role_annotations(ctx: GenerationContext, role: JpaRole) -> list[tuple[str, str]]:
    match role:
        case JpaRole.ENTITY:
            return [("Entity", ctx.settings.persistence("Entity")), ("Table", ctx.settings.persistence("Table"))]
        case JpaRole.MAPPED_SUPERCLASS:
            return [("MappedSuperclass", ctx.settings.persistence("MappedSuperclass"))]
        case JpaRole.EMBEDDABLE:
            return [("Embeddable", ctx.settings.persistence("Embeddable"))]


def _add_superclass(unit: SourceUnit, superclass: str, superclass_package: str | None) -> None:
    java_type = java_types.resolve(superclass, superclass_package)
    validate_identifier(java_type.base_name, "Superclass name")
    if java_type.import_name:
        ensure_import(unit, java_type.import_name)
    declaration = require_type_declaration(unit)
    anchor = declaration.child("type_parameters") or declaration.child("name")
    if anchor is None:
        raise NotFound("Generated declaration has no name")
    insert_text(unit, anchor.end_byte, f" extends {java_type.name}")


@generator
def create_type(
    ctx: GenerationContext,
    package: str,
    name: str,
    kind: DeclarationKind = DeclarationKind.CLASS,
    role: JpaRole | None = None,
    table_name: str | None = None,
    superclass: str | None = None,
    superclass_package: str | None = None,
    source_root: str | None = None,
) -> GenerationResult:
    """Build a new source file for ``package.name``.

    ``role`` turns a class into an entity, mapped superclass or embeddable;
    entities get ``@Table`` named after ``table_name`` or the snake-cased type
    name. Other declaration kinds accept no role and no superclass.
    """
    validate_package(package)
    validate_identifier(name, "Type name")
    if role is not None or superclass:
        match kind:
            case DeclarationKind.CLASS:
                pass
            case _:
                raise UnsupportedDeclaration(f"A {kind} cannot carry a JPA role or a superclass")

    unit = load(skeleton(package, name, kind))
    if role is not None:
        for annotation_name, qualified_name in _role_annotations(ctx, role):
            ensure_import(unit, qualified_name)
            add_annotation(unit, require_type_declaration(unit), f"@{annotation_name}")
        if role == JpaRole.ENTITY:
            table = find_annotation(unit, require_type_declaration(unit), "Table")
            if table is None:
                raise NotFound("@Table was not placed on the generated entity")
            add_annotation_argument(unit, table, "name", quoted(table_name or to_snake_case(name)))
    if superclass:
        _add_superclass(unit, superclass, superclass_package)

    path = source_path(ctx, package, name, source_root)
    written = write_new_file(ctx, unit, path)
    logger.debug("Created %s %s.%s", kind, package, name)
    change = FileChange(unit=unit, path=path, inserted_range=(0, len(unit.source)), written=written)
    return GenerationResult(changes=(change,))

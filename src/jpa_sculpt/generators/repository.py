from __future__ import annotations

import logging

from jpa_sculpt.core.errors import MissingIdField
from jpa_sculpt.core.kinds import DeclarationKind, JpaRole
from jpa_sculpt.core.locators import package_name, require_type_declaration, type_name
from jpa_sculpt.core.source_unit import SourceUnit, load
from jpa_sculpt.core.validators import validate_package
from jpa_sculpt.generators.context import (
    FileChange,
    GenerationContext,
    GenerationResult,
    collecting_warnings,
    generator,
)
from jpa_sculpt.generators.entity_info import boxed, id_type, jpa_role
from jpa_sculpt.generators.imports import ensure_import
from jpa_sculpt.generators.types import declaration_header, source_path, write_new_file

logger = logging.getLogger(__name__)


@generator
def create_repository(
    ctx: GenerationContext,
    entity_unit: SourceUnit,
    repository_package: str | None = None,
    superclass_unit: SourceUnit | None = None,
) -> GenerationResult:
    """Create ``<Entity>Repository`` extending the configured repository base.

    The id type comes from the entity's ``@Id`` field, falling back to
    ``superclass_unit`` when the identifier is inherited.
    """
    with collecting_warnings() as warnings:
        return _repository(ctx, entity_unit, repository_package, superclass_unit, warnings)


def _repository(
    ctx: GenerationContext,
    entity_unit: SourceUnit,
    repository_package: str | None,
    superclass_unit: SourceUnit | None,
    warnings: list[str],
) -> GenerationResult:
    entity_type = require_type_declaration(entity_unit, warnings)
    entity_name = type_name(entity_unit, entity_type)
    entity_package = package_name(entity_unit)
    if jpa_role(entity_unit, entity_type) != JpaRole.ENTITY:
        warnings.append(f"{entity_name} is not annotated with @Entity")

    resolved_id = id_type(entity_unit, entity_type)
    if resolved_id is None and superclass_unit is not None:
        resolved_id = id_type(superclass_unit, require_type_declaration(superclass_unit, warnings))
    if resolved_id is None:
        raise MissingIdField(entity_name)

    package = validate_package(repository_package or entity_package or "")
    repository_name = f"{entity_name}Repository"
    base = ctx.settings.repository_base_name
    id_name = boxed(resolved_id.name)
    header = declaration_header(DeclarationKind.INTERFACE, repository_name)
    unit = load(f"package {package};\n\n{header} extends {base}<{entity_name}, {id_name}> {{\n}}\n")

    ensure_import(unit, ctx.settings.repository_base)
    if entity_package:
        ensure_import(unit, f"{entity_package}.{entity_name}")
    if resolved_id.import_name:
        ensure_import(unit, resolved_id.import_name)

    path = source_path(ctx, package, repository_name)
    written = write_new_file(ctx, unit, path)
    logger.debug("Created repository %s.%s for %s", package, repository_name, entity_name)
    change = FileChange(unit=unit, path=path, inserted_range=(0, len(unit.source)), written=written)
    return GenerationResult(changes=(change,), warnings=tuple(warnings))

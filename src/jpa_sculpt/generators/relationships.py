"""One-to-one and many-to-one relationship generators.

A relationship touches two files. Both sides are validated and rendered before
either is edited; the owning side is applied (and flushed) first. When the
inverse side then fails, the caller gets a ``PartialRelationshipFailure`` that
names the side already in effect.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from jpa_sculpt.config import GeneratorSettings
from jpa_sculpt.core.errors import DuplicateField, InvalidFieldOption, JpaSculptError, PartialRelationshipFailure
from jpa_sculpt.core.kinds import CascadeType, FetchType, RelationshipSide
from jpa_sculpt.core.locators import find_field, package_name, require_type_declaration, type_name
from jpa_sculpt.core.source_unit import SourceUnit
from jpa_sculpt.core.validators import to_snake_case, validate_identifier
from jpa_sculpt.generators.annotations import RenderedAnnotation, array_or_single, build, quoted
from jpa_sculpt.generators.context import (
    FileChange,
    GenerationContext,
    GenerationResult,
    collecting_warnings,
    generator,
)
from jpa_sculpt.generators.imports import ensure_imports
from jpa_sculpt.generators.members import confirm_field, field_line, insert_member, require_class
from jpa_sculpt.models import InverseSideSpec, OwningSideSpec, RelationshipSpec

logger = logging.getLogger(__name__)

INDIVIDUAL_CASCADES = frozenset(cascade for cascade in CascadeType if cascade != CascadeType.ALL)


class Cardinality(StrEnum):
    ONE_TO_ONE = "one_to_one"
    MANY_TO_ONE = "many_to_one"


@dataclass(frozen=True)
class SidePlan:
    unit: SourceUnit
    side: RelationshipSide
    field_name: str
    lines: tuple[str, ...]
    imports: tuple[str, ...]


@dataclass(frozen=True)
class RelationshipPlan:
    owning: SidePlan
    inverse: SidePlan | None


def normalize_cascades(cascades: Iterable[CascadeType]) -> list[CascadeType]:
    """Drop repeats; ``ALL`` absorbs the rest and the full individual set becomes ``ALL``."""
    unique = list(dict.fromkeys(cascades))
    if CascadeType.ALL in unique or INDIVIDUAL_CASCADES <= set(unique):
        return [CascadeType.ALL]
    return unique


def _common_arguments(
    settings: GeneratorSettings,
    cascades: Iterable[CascadeType],
    fetch: FetchType,
) -> tuple[list[tuple[str, str]], list[str]]:
    arguments: list[tuple[str, str]] = []
    imports: list[str] = []
    normalized = normalize_cascades(cascades)
    if normalized:
        arguments.append(("cascade", array_or_single([f"CascadeType.{cascade}" for cascade in normalized])))
        imports.append(settings.persistence("CascadeType"))
    if fetch != FetchType.DEFAULT:
        arguments.append(("fetch", f"FetchType.{fetch}"))
        imports.append(settings.persistence("FetchType"))
    return arguments, imports


def join_column_name(owning: OwningSideSpec) -> str:
    return owning.join_column or f"{to_snake_case(owning.field_name)}_id"


def owning_annotations(
    settings: GeneratorSettings, owning: OwningSideSpec, cardinality: Cardinality
) -> list[RenderedAnnotation]:
    annotation_name = "OneToOne" if cardinality == Cardinality.ONE_TO_ONE else "ManyToOne"
    arguments, imports = _common_arguments(settings, owning.cascades, owning.fetch)
    if not owning.optional:
        arguments.append(("optional", "false"))
    if owning.orphan_removal:
        arguments.append(("orphanRemoval", "true"))
    imports.append(settings.persistence(annotation_name))

    join_arguments = [("name", quoted(join_column_name(owning)))]
    if not owning.optional:
        join_arguments.append(("nullable", "false"))
    if owning.unique:
        join_arguments.append(("unique", "true"))
    return [
        build(annotation_name, arguments, imports),
        build("JoinColumn", join_arguments, [settings.persistence("JoinColumn")]),
    ]


def inverse_annotations(
    settings: GeneratorSettings, inverse: InverseSideSpec, mapped_by: str, cardinality: Cardinality
) -> list[RenderedAnnotation]:
    annotation_name = "OneToOne" if cardinality == Cardinality.ONE_TO_ONE else "OneToMany"
    arguments, imports = _common_arguments(settings, inverse.cascades, inverse.fetch)
    arguments.insert(0, ("mappedBy", quoted(mapped_by)))
    if inverse.orphan_removal:
        arguments.append(("orphanRemoval", "true"))
    imports.append(settings.persistence(annotation_name))
    return [build(annotation_name, arguments, imports)]


def _qualified(name: str, package: str | None) -> list[str]:
    return [f"{package}.{name}"] if package else []


def plan_relationship(
    ctx: GenerationContext,
    owning_unit: SourceUnit,
    inverse_unit: SourceUnit | None,
    spec: RelationshipSpec,
    cardinality: Cardinality,
    warnings: list[str],
) -> RelationshipPlan:
    """Validate both sides and render their text without touching either unit."""
    owning, inverse = spec.owning, spec.inverse
    validate_identifier(owning.field_name, "Owning field name")
    if cardinality == Cardinality.MANY_TO_ONE and owning.orphan_removal:
        raise InvalidFieldOption("orphanRemoval is not available on @ManyToOne")

    owning_type = require_type_declaration(owning_unit, warnings)
    require_class(owning_unit, owning_type)
    owner_name = type_name(owning_unit, owning_type)
    owner_package = package_name(owning_unit)
    if find_field(owning_unit, owning.field_name, owning_type) is not None:
        raise DuplicateField(owning.field_name, owner_name)

    if inverse_unit is not None:
        inverse_type = require_type_declaration(inverse_unit, warnings)
        target_name = type_name(inverse_unit, inverse_type)
        target_package = package_name(inverse_unit)
        if owning.target_type and owning.target_type != target_name:
            raise InvalidFieldOption(f"Target type {owning.target_type} does not match inverse entity {target_name}")
    elif owning.target_type:
        target_name, target_package = owning.target_type, owning.target_package
    else:
        raise InvalidFieldOption("A relationship needs either the inverse entity or an explicit target type")

    annotations = owning_annotations(ctx.settings, owning, cardinality)
    owning_plan = SidePlan(
        unit=owning_unit,
        side=RelationshipSide.OWNING,
        field_name=owning.field_name,
        lines=(*(a.text for a in annotations), field_line("private", target_name, owning.field_name)),
        imports=(*(i for a in annotations for i in a.imports), *_qualified(target_name, target_package)),
    )
    if inverse is None:
        return RelationshipPlan(owning=owning_plan, inverse=None)

    if inverse_unit is None:
        raise InvalidFieldOption("A bidirectional relationship needs the inverse entity source")
    validate_identifier(inverse.field_name, "Inverse field name")
    require_class(inverse_unit, inverse_type)
    if find_field(inverse_unit, inverse.field_name, inverse_type) is not None:
        raise DuplicateField(inverse.field_name, target_name)
    if inverse_unit is owning_unit and inverse.field_name == owning.field_name:
        raise DuplicateField(inverse.field_name, target_name)

    inverse_imports = _qualified(owner_name, owner_package)
    if cardinality == Cardinality.ONE_TO_ONE:
        inverse_type_text = owner_name
    else:
        inverse_type_text = f"{inverse.collection}<{owner_name}>"
        inverse_imports.append(f"java.util.{inverse.collection}")
    annotations = inverse_annotations(ctx.settings, inverse, owning.field_name, cardinality)
    inverse_plan = SidePlan(
        unit=inverse_unit,
        side=RelationshipSide.INVERSE,
        field_name=inverse.field_name,
        lines=(*(a.text for a in annotations), field_line("private", inverse_type_text, inverse.field_name)),
        imports=(*(i for a in annotations for i in a.imports), *inverse_imports),
    )
    return RelationshipPlan(owning=owning_plan, inverse=inverse_plan)


def _apply_side(ctx: GenerationContext, plan: SidePlan) -> FileChange:
    unit = plan.unit
    with unit.transaction():
        ensure_imports(unit, list(dict.fromkeys(plan.imports)))
        type_node = require_type_declaration(unit)
        inserted = insert_member(unit, type_node, list(plan.lines), ctx.settings)
        confirm_field(unit, plan.field_name)
        written = ctx.flush(unit)
    logger.debug("Applied %s side field %s to %r", plan.side, plan.field_name, unit)
    return FileChange(unit=unit, path=unit.path, inserted_range=inserted, written=written, side=plan.side)


def _add_relationship(
    ctx: GenerationContext,
    owning_unit: SourceUnit,
    inverse_unit: SourceUnit | None,
    spec: RelationshipSpec,
    cardinality: Cardinality,
) -> GenerationResult:
    with collecting_warnings() as warnings:
        return _apply_relationship(ctx, owning_unit, inverse_unit, spec, cardinality, warnings)


def _apply_relationship(
    ctx: GenerationContext,
    owning_unit: SourceUnit,
    inverse_unit: SourceUnit | None,
    spec: RelationshipSpec,
    cardinality: Cardinality,
    warnings: list[str],
) -> GenerationResult:
    plan = plan_relationship(ctx, owning_unit, inverse_unit, spec, cardinality, warnings)
    owning_change = _apply_side(ctx, plan.owning)
    if plan.inverse is None:
        return GenerationResult(changes=(owning_change,), warnings=tuple(warnings))

    try:
        inverse_change = _apply_side(ctx, plan.inverse)
    except JpaSculptError as exc:
        committed_path = str(owning_change.path) if owning_change.written else None
        logger.warning("Inverse side of %s failed after the owning side was applied: %s", cardinality, exc.message)
        raise PartialRelationshipFailure(RelationshipSide.OWNING.value, exc, committed_path) from exc
    return GenerationResult(changes=(owning_change, inverse_change), warnings=tuple(warnings))


@generator
def add_one_to_one(
    ctx: GenerationContext,
    owning_unit: SourceUnit,
    inverse_unit: SourceUnit | None,
    owning_spec: OwningSideSpec,
    inverse_spec: InverseSideSpec | None = None,
) -> GenerationResult:
    spec = RelationshipSpec(owning=owning_spec, inverse=inverse_spec)
    return _add_relationship(ctx, owning_unit, inverse_unit, spec, Cardinality.ONE_TO_ONE)


@generator
def add_many_to_one(
    ctx: GenerationContext,
    owning_unit: SourceUnit,
    inverse_unit: SourceUnit | None,
    owning_spec: OwningSideSpec,
    inverse_spec: InverseSideSpec | None = None,
) -> GenerationResult:
    spec = RelationshipSpec(owning=owning_spec, inverse=inverse_spec)
    return _add_relationship(ctx, owning_unit, inverse_unit, spec, Cardinality.MANY_TO_ONE)

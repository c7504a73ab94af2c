"""Basic, identifier and enum field generators."""

from __future__ import annotations

import logging

from jpa_sculpt.config import GeneratorSettings
from jpa_sculpt.core import java_types
from jpa_sculpt.core.errors import DuplicateField, DuplicateIdField, InvalidFieldOption
from jpa_sculpt.core.java_types import JavaType
from jpa_sculpt.core.kinds import EnumStorage, IdGeneration, TemporalType
from jpa_sculpt.core.locators import field_names, find_field, find_id_field, require_type_declaration, type_name
from jpa_sculpt.core.source_unit import SourceUnit
from jpa_sculpt.core.validators import validate_identifier
from jpa_sculpt.generators.annotations import RenderedAnnotation, build, quoted
from jpa_sculpt.generators.context import (
    FileChange,
    GenerationContext,
    GenerationResult,
    collecting_warnings,
    generator,
)
from jpa_sculpt.generators.imports import ensure_imports, type_imports
from jpa_sculpt.generators.members import confirm_field, field_line, insert_member, require_class
from jpa_sculpt.models import FieldSpec, IdGeneratorSpec

logger = logging.getLogger(__name__)


def column_annotation(settings: GeneratorSettings, spec: FieldSpec) -> RenderedAnnotation:
    arguments: list[tuple[str, str]] = []
    if spec.column_name:
        arguments.append(("name", quoted(spec.column_name)))
    if not spec.nullable:
        arguments.append(("nullable", "false"))
    if spec.unique:
        arguments.append(("unique", "true"))
    if spec.length is not None:
        arguments.append(("length", str(spec.length)))
    if spec.precision is not None:
        arguments.append(("precision", str(spec.precision)))
    if spec.scale is not None:
        arguments.append(("scale", str(spec.scale)))
    return build("Column", arguments, [settings.persistence("Column")])


def _check_basic_options(spec: FieldSpec, java_type: JavaType) -> None:
    qualified = java_type.qualified_name
    if spec.length is not None and qualified not in java_types.TYPES_WITH_LENGTH:
        raise InvalidFieldOption(f"length is not supported for {java_type.name}")
    if (spec.precision is not None or spec.scale is not None) and qualified not in java_types.TYPES_WITH_PRECISION_SCALE:
        raise InvalidFieldOption(f"precision and scale are not supported for {java_type.name}")
    if spec.large_object and qualified not in java_types.LOB_CAPABLE_TYPES:
        raise InvalidFieldOption(f"{java_type.name} cannot be mapped as a large object")
    if spec.temporal is not None and qualified not in java_types.TYPES_WITH_TEMPORAL:
        raise InvalidFieldOption(f"@Temporal does not apply to {java_type.name}")
    if spec.time_zone_storage is not None and qualified not in java_types.TYPES_WITH_TIME_ZONE_STORAGE:
        raise InvalidFieldOption(f"@TimeZoneStorage does not apply to {java_type.name}")


def basic_annotations(settings: GeneratorSettings, spec: FieldSpec, java_type: JavaType) -> list[RenderedAnnotation]:
    qualified = java_type.qualified_name
    annotations = [column_annotation(settings, spec)]
    if spec.large_object or qualified in java_types.LOB_REQUIRED_TYPES:
        annotations.append(build("Lob", imports=[settings.persistence("Lob")]))
    if qualified in java_types.TYPES_WITH_TEMPORAL:
        temporal = spec.temporal or TemporalType.TIMESTAMP
        annotations.append(
            build(
                "Temporal",
                [("value", f"TemporalType.{temporal}")],
                [settings.persistence("Temporal"), settings.persistence("TemporalType")],
            )
        )
    if spec.time_zone_storage is not None:
        annotations.append(
            build(
                "TimeZoneStorage",
                [("value", f"TimeZoneStorageType.{spec.time_zone_storage}")],
                ["org.hibernate.annotations.TimeZoneStorage", "org.hibernate.annotations.TimeZoneStorageType"],
            )
        )
    return annotations


def _check_id_strategy(strategy: IdGeneration, java_type: JavaType, id_generator: IdGeneratorSpec | None) -> None:
    qualified = java_type.qualified_name
    match strategy:
        case IdGeneration.IDENTITY | IdGeneration.SEQUENCE | IdGeneration.TABLE:
            if qualified not in java_types.NUMERIC_TYPES:
                raise InvalidFieldOption(f"{strategy} generation needs a numeric id, got {java_type.name}")
        case IdGeneration.UUID:
            if qualified not in ("java.util.UUID", "java.lang.String"):
                raise InvalidFieldOption(f"UUID generation needs a UUID or String id, got {java_type.name}")
    if id_generator is not None and strategy not in (IdGeneration.SEQUENCE, IdGeneration.TABLE):
        raise InvalidFieldOption(f"A named generator needs SEQUENCE or TABLE generation, got {strategy}")


def id_annotations(
    settings: GeneratorSettings,
    spec: FieldSpec,
    strategy: IdGeneration,
    id_generator: IdGeneratorSpec | None = None,
) -> list[RenderedAnnotation]:
    annotations = [build("Id", imports=[settings.persistence("Id")])]
    if strategy != IdGeneration.NONE:
        arguments = [("strategy", f"GenerationType.{strategy}")]
        if id_generator is not None:
            arguments.append(("generator", quoted(id_generator.name)))
        annotations.append(
            build("GeneratedValue", arguments, [settings.persistence("GeneratedValue"), settings.persistence("GenerationType")])
        )
    if id_generator is not None:
        generator_name = "SequenceGenerator" if strategy == IdGeneration.SEQUENCE else "TableGenerator"
        target_key = "sequenceName" if strategy == IdGeneration.SEQUENCE else "table"
        arguments = [("name", quoted(id_generator.name))]
        if id_generator.sequence_name:
            arguments.append((target_key, quoted(id_generator.sequence_name)))
        if id_generator.initial_value != 1:
            arguments.append(("initialValue", str(id_generator.initial_value)))
        if id_generator.allocation_size != 50:
            arguments.append(("allocationSize", str(id_generator.allocation_size)))
        annotations.append(build(generator_name, arguments, [settings.persistence(generator_name)]))
    if spec.has_column_options:
        annotations.append(column_annotation(settings, spec))
    return annotations


def enum_annotations(settings: GeneratorSettings, spec: FieldSpec, storage: EnumStorage) -> list[RenderedAnnotation]:
    return [
        build(
            "Enumerated",
            [("value", f"EnumType.{storage}")],
            [settings.persistence("Enumerated"), settings.persistence("EnumType")],
        ),
        column_annotation(settings, spec),
    ]


def _check_new_field(unit: SourceUnit, spec: FieldSpec, warnings: list[str]) -> None:
    validate_identifier(spec.name, "Field name")
    type_node = require_type_declaration(unit, warnings)
    require_class(unit, type_node)
    if find_field(unit, spec.name, type_node) is not None:
        raise DuplicateField(spec.name, type_name(unit, type_node))


def _apply_field(
    ctx: GenerationContext,
    unit: SourceUnit,
    spec: FieldSpec,
    java_type: JavaType,
    annotations: list[RenderedAnnotation],
    warnings: list[str],
) -> GenerationResult:
    needed = [name for annotation in annotations for name in annotation.imports]
    needed += type_imports(spec.type, spec.type_package)
    lines = [annotation.text for annotation in annotations]
    lines.append(field_line(spec.visibility, java_type.name, spec.name))

    with unit.transaction():
        ensure_imports(unit, list(dict.fromkeys(needed)))
        type_node = require_type_declaration(unit)
        inserted = insert_member(unit, type_node, lines, ctx.settings)
        confirm_field(unit, spec.name)
        written = ctx.flush(unit)

    logger.debug("Added field %s %s to %r", java_type.name, spec.name, unit)
    change = FileChange(unit=unit, path=unit.path, inserted_range=inserted, written=written)
    return GenerationResult(changes=(change,), warnings=tuple(warnings))


@generator
def add_basic_field(ctx: GenerationContext, unit: SourceUnit, spec: FieldSpec) -> GenerationResult:
    with collecting_warnings() as warnings:
        _check_new_field(unit, spec, warnings)
        java_type = java_types.resolve(spec.type, spec.type_package)
        _check_basic_options(spec, java_type)
        annotations = basic_annotations(ctx.settings, spec, java_type)
        return _apply_field(ctx, unit, spec, java_type, annotations, warnings)


@generator
def add_id_field(
    ctx: GenerationContext,
    unit: SourceUnit,
    spec: FieldSpec,
    strategy: IdGeneration = IdGeneration.AUTO,
    id_generator: IdGeneratorSpec | None = None,
) -> GenerationResult:
    with collecting_warnings() as warnings:
        _check_new_field(unit, spec, warnings)
        type_node = require_type_declaration(unit)
        existing = find_id_field(unit, type_node)
        if existing is not None:
            raise DuplicateIdField(", ".join(field_names(unit, existing)), type_name(unit, type_node))
        java_type = java_types.resolve(spec.type, spec.type_package)
        _check_id_strategy(strategy, java_type, id_generator)
        annotations = id_annotations(ctx.settings, spec, strategy, id_generator)
        return _apply_field(ctx, unit, spec, java_type, annotations, warnings)


@generator
def add_enum_field(
    ctx: GenerationContext,
    unit: SourceUnit,
    spec: FieldSpec,
    storage: EnumStorage = EnumStorage.STRING,
) -> GenerationResult:
    with collecting_warnings() as warnings:
        _check_new_field(unit, spec, warnings)
        java_type = java_types.resolve(spec.type, spec.type_package)
        validate_identifier(java_type.base_name, "Enum type")
        if spec.precision is not None or spec.scale is not None or spec.large_object:
            raise InvalidFieldOption("Enum fields support only name, nullable, unique and length column options")
        annotations = enum_annotations(ctx.settings, spec, storage)
        return _apply_field(ctx, unit, spec, java_type, annotations, warnings)

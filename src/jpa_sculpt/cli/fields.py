from pathlib import Path
from typing import Annotated

import typer

from jpa_sculpt.cli.common import build_context, emit_result, load_unit
from jpa_sculpt.cli.create import CwdOption
from jpa_sculpt.core.kinds import EnumStorage, IdGeneration, TemporalType, TimeZoneStorage
from jpa_sculpt.generators.fields import add_basic_field, add_enum_field, add_id_field
from jpa_sculpt.models import FieldSpec, IdGeneratorSpec

EntityPathOption = Annotated[str | None, typer.Option(help="Entity source file, relative to --cwd.")]
B64SourceOption = Annotated[str | None, typer.Option(help="Base64 entity source; the result carries the edited source.")]
NameOption = Annotated[str, typer.Option("--name", help="Field name.")]
ColumnOption = Annotated[str | None, typer.Option("--column", help="Column name.")]
NullableOption = Annotated[bool, typer.Option("--nullable/--not-null", help="Whether the column accepts NULL.")]
UniqueOption = Annotated[bool, typer.Option(help="Add a unique constraint.")]
LengthOption = Annotated[int | None, typer.Option(help="Column length.")]


def basic_field(
    name: NameOption,
    field_type: Annotated[str, typer.Option("--type", help="Java type, simple or qualified.")],
    type_package: Annotated[str | None, typer.Option(help="Package of the type when not in the catalog.")] = None,
    column: ColumnOption = None,
    nullable: NullableOption = True,
    unique: UniqueOption = False,
    length: LengthOption = None,
    precision: Annotated[int | None, typer.Option(help="Numeric precision.")] = None,
    scale: Annotated[int | None, typer.Option(help="Numeric scale.")] = None,
    lob: Annotated[bool, typer.Option("--lob", help="Map as a large object.")] = False,
    temporal: Annotated[TemporalType | None, typer.Option(help="Temporal precision for legacy date types.")] = None,
    time_zone_storage: Annotated[TimeZoneStorage | None, typer.Option(help="Hibernate time zone storage.")] = None,
    entity_path: EntityPathOption = None,
    b64_source: B64SourceOption = None,
    cwd: CwdOption = Path("."),
) -> None:
    """Add a mapped basic field to an entity."""
    spec = FieldSpec(
        name=name,
        type=field_type,
        type_package=type_package,
        column_name=column,
        nullable=nullable,
        unique=unique,
        length=length,
        precision=precision,
        scale=scale,
        large_object=lob,
        temporal=temporal,
        time_zone_storage=time_zone_storage,
    )
    inline = b64_source is not None
    ctx = build_context(cwd, write=not inline)
    emit_result(add_basic_field(ctx, load_unit(cwd, entity_path, b64_source), spec), inline=inline)


def id_field(
    name: NameOption = "id",
    field_type: Annotated[str, typer.Option("--type", help="Identifier type.")] = "Long",
    strategy: Annotated[IdGeneration, typer.Option(help="Value generation strategy.")] = IdGeneration.AUTO,
    generator_name: Annotated[str | None, typer.Option(help="Name of a sequence or table generator.")] = None,
    sequence_name: Annotated[str | None, typer.Option(help="Database sequence or table backing the generator.")] = None,
    initial_value: Annotated[int, typer.Option(help="Generator initial value.")] = 1,
    allocation_size: Annotated[int, typer.Option(help="Generator allocation size.")] = 50,
    column: ColumnOption = None,
    nullable: NullableOption = True,
    unique: UniqueOption = False,
    entity_path: EntityPathOption = None,
    b64_source: B64SourceOption = None,
    cwd: CwdOption = Path("."),
) -> None:
    """Add the identifier field to an entity."""
    spec = FieldSpec(name=name, type=field_type, column_name=column, nullable=nullable, unique=unique)
    id_generator = None
    if generator_name:
        id_generator = IdGeneratorSpec(
            name=generator_name,
            sequence_name=sequence_name,
            initial_value=initial_value,
            allocation_size=allocation_size,
        )
    inline = b64_source is not None
    ctx = build_context(cwd, write=not inline)
    unit = load_unit(cwd, entity_path, b64_source)
    emit_result(add_id_field(ctx, unit, spec, strategy, id_generator), inline=inline)


def enum_field(
    name: NameOption,
    enum_type: Annotated[str, typer.Option("--type", help="Enum type name.")],
    type_package: Annotated[str | None, typer.Option(help="Package of the enum type.")] = None,
    storage: Annotated[EnumStorage, typer.Option(help="How the enum is stored.")] = EnumStorage.STRING,
    column: ColumnOption = None,
    nullable: NullableOption = True,
    unique: UniqueOption = False,
    length: LengthOption = None,
    entity_path: EntityPathOption = None,
    b64_source: B64SourceOption = None,
    cwd: CwdOption = Path("."),
) -> None:
    """Add an enum-typed field to an entity."""
    spec = FieldSpec(
        name=name,
        type=enum_type,
        type_package=type_package,
        column_name=column,
        nullable=nullable,
        unique=unique,
        length=length,
    )
    inline = b64_source is not None
    ctx = build_context(cwd, write=not inline)
    emit_result(add_enum_field(ctx, load_unit(cwd, entity_path, b64_source), spec, storage), inline=inline)

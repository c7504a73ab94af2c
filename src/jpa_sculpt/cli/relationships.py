from pathlib import Path
from typing import Annotated

import typer

from jpa_sculpt.cli.common import build_context, emit_result, load_unit
from jpa_sculpt.cli.create import CwdOption
from jpa_sculpt.core.kinds import CascadeType, CollectionType, FetchType
from jpa_sculpt.generators.context import GenerationResult
from jpa_sculpt.generators.relationships import add_many_to_one, add_one_to_one
from jpa_sculpt.models import InverseSideSpec, OwningSideSpec

OwningPathOption = Annotated[str, typer.Option(help="Owning entity source file, relative to --cwd.")]
InversePathOption = Annotated[str | None, typer.Option(help="Inverse entity source file; required for bidirectional mappings.")]
OwningFieldOption = Annotated[str, typer.Option(help="Field name on the owning side.")]
InverseFieldOption = Annotated[str | None, typer.Option(help="Field name on the inverse side; omit for a unidirectional mapping.")]
TargetTypeOption = Annotated[str | None, typer.Option(help="Target entity type for unidirectional mappings.")]
TargetPackageOption = Annotated[str | None, typer.Option(help="Package of the target entity type.")]
CascadeOption = Annotated[list[CascadeType] | None, typer.Option("--cascade", help="Owning side cascade, repeatable.")]
InverseCascadeOption = Annotated[list[CascadeType] | None, typer.Option("--inverse-cascade", help="Inverse side cascade, repeatable.")]
FetchOption = Annotated[FetchType, typer.Option(help="Owning side fetch type.")]
InverseFetchOption = Annotated[FetchType, typer.Option(help="Inverse side fetch type.")]
MandatoryOption = Annotated[bool, typer.Option(help="The owning side must reference a target.")]
InverseOrphanRemovalOption = Annotated[bool, typer.Option(help="Remove orphans from the inverse side.")]


def _run(
    cwd: Path,
    owning_path: str,
    inverse_path: str | None,
    owning: OwningSideSpec,
    inverse: InverseSideSpec | None,
    many_to_one: bool,
) -> GenerationResult:
    ctx = build_context(cwd, write=True)
    owning_unit = load_unit(cwd, owning_path, None, what="owning")
    inverse_unit = None
    if inverse_path is not None:
        inverse_unit = owning_unit if Path(inverse_path) == Path(owning_path) else load_unit(cwd, inverse_path, None, what="inverse")
    generate = add_many_to_one if many_to_one else add_one_to_one
    return generate(ctx, owning_unit, inverse_unit, owning, inverse)


def one_to_one(
    owning_path: OwningPathOption,
    owning_field: OwningFieldOption,
    inverse_path: InversePathOption = None,
    inverse_field: InverseFieldOption = None,
    target_type: TargetTypeOption = None,
    target_package: TargetPackageOption = None,
    cascade: CascadeOption = None,
    fetch: FetchOption = FetchType.DEFAULT,
    mandatory: MandatoryOption = False,
    unique: Annotated[bool, typer.Option(help="Add a unique constraint to the join column.")] = False,
    orphan_removal: Annotated[bool, typer.Option(help="Remove the target when it is dereferenced.")] = False,
    inverse_cascade: InverseCascadeOption = None,
    inverse_fetch: InverseFetchOption = FetchType.DEFAULT,
    inverse_orphan_removal: InverseOrphanRemovalOption = False,
    cwd: CwdOption = Path("."),
) -> None:
    """Add a one-to-one relationship between two entities."""
    owning = OwningSideSpec(
        field_name=owning_field,
        target_type=target_type,
        target_package=target_package,
        cascades=tuple(cascade or ()),
        fetch=fetch,
        optional=not mandatory,
        orphan_removal=orphan_removal,
        unique=unique,
    )
    inverse = None
    if inverse_field is not None:
        inverse = InverseSideSpec(
            field_name=inverse_field,
            cascades=tuple(inverse_cascade or ()),
            fetch=inverse_fetch,
            orphan_removal=inverse_orphan_removal,
        )
    emit_result(_run(cwd, owning_path, inverse_path, owning, inverse, many_to_one=False))


def many_to_one(
    owning_path: OwningPathOption,
    owning_field: OwningFieldOption,
    inverse_path: InversePathOption = None,
    inverse_field: InverseFieldOption = None,
    target_type: TargetTypeOption = None,
    target_package: TargetPackageOption = None,
    cascade: CascadeOption = None,
    fetch: FetchOption = FetchType.DEFAULT,
    mandatory: MandatoryOption = False,
    collection: Annotated[CollectionType, typer.Option(help="Collection type of the inverse field.")] = CollectionType.SET,
    inverse_cascade: InverseCascadeOption = None,
    inverse_fetch: InverseFetchOption = FetchType.DEFAULT,
    inverse_orphan_removal: InverseOrphanRemovalOption = False,
    cwd: CwdOption = Path("."),
) -> None:
    """Add a many-to-one relationship, optionally with its one-to-many inverse."""
    owning = OwningSideSpec(
        field_name=owning_field,
        target_type=target_type,
        target_package=target_package,
        cascades=tuple(cascade or ()),
        fetch=fetch,
        optional=not mandatory,
    )
    inverse = None
    if inverse_field is not None:
        inverse = InverseSideSpec(
            field_name=inverse_field,
            cascades=tuple(inverse_cascade or ()),
            fetch=inverse_fetch,
            orphan_removal=inverse_orphan_removal,
            collection=collection,
        )
    emit_result(_run(cwd, owning_path, inverse_path, owning, inverse, many_to_one=True))

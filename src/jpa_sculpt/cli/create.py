from pathlib import Path
from typing import Annotated

import typer

from jpa_sculpt.cli.common import build_context, emit_result, load_unit
from jpa_sculpt.core.kinds import DeclarationKind, JpaRole
from jpa_sculpt.generators.repository import create_repository
from jpa_sculpt.generators.types import create_type

CwdOption = Annotated[Path, typer.Option("--cwd", help="Project root directory.")]


def create_java_file(
    package: Annotated[str, typer.Option(help="Package of the new type.")],
    name: Annotated[str, typer.Option(help="Simple name of the new type.")],
    kind: Annotated[DeclarationKind, typer.Option(help="Kind of declaration.")] = DeclarationKind.CLASS,
    test_sources: Annotated[bool, typer.Option("--test", help="Place the file under the test source root.")] = False,
    dry_run: Annotated[bool, typer.Option(help="Print the result without writing the file.")] = False,
    cwd: CwdOption = Path("."),
) -> None:
    """Create an empty class, interface, enum, record or annotation type."""
    ctx = build_context(cwd, write=not dry_run)
    source_root = ctx.settings.test_source_root if test_sources else None
    emit_result(create_type(ctx, package, name, kind, source_root=source_root), inline=dry_run)


def create_entity(
    package: Annotated[str, typer.Option(help="Package of the entity.")],
    name: Annotated[str, typer.Option(help="Entity class name.")],
    table: Annotated[str | None, typer.Option(help="Table name, defaults to the snake-cased class name.")] = None,
    role: Annotated[JpaRole, typer.Option(help="JPA role of the class.")] = JpaRole.ENTITY,
    superclass: Annotated[str | None, typer.Option(help="Class to extend.")] = None,
    superclass_package: Annotated[str | None, typer.Option(help="Package of the superclass.")] = None,
    dry_run: Annotated[bool, typer.Option(help="Print the result without writing the file.")] = False,
    cwd: CwdOption = Path("."),
) -> None:
    """Create a JPA entity, mapped superclass or embeddable."""
    ctx = build_context(cwd, write=not dry_run)
    result = create_type(
        ctx,
        package,
        name,
        DeclarationKind.CLASS,
        role=role,
        table_name=table,
        superclass=superclass,
        superclass_package=superclass_package,
    )
    emit_result(result, inline=dry_run)


def repository(
    entity_path: Annotated[str | None, typer.Option(help="Entity source file, relative to --cwd.")] = None,
    b64_source: Annotated[str | None, typer.Option(help="Base64 entity source instead of a file.")] = None,
    package: Annotated[str | None, typer.Option(help="Repository package, defaults to the entity's.")] = None,
    superclass_path: Annotated[str | None, typer.Option(help="Mapped superclass holding the @Id field.")] = None,
    b64_superclass_source: Annotated[str | None, typer.Option(help="Base64 superclass source.")] = None,
    dry_run: Annotated[bool, typer.Option(help="Print the result without writing the file.")] = False,
    cwd: CwdOption = Path("."),
) -> None:
    """Create a Spring Data repository interface for an entity."""
    ctx = build_context(cwd, write=not dry_run)
    entity = load_unit(cwd, entity_path, b64_source)
    superclass = None
    if superclass_path is not None or b64_superclass_source is not None:
        superclass = load_unit(cwd, superclass_path, b64_superclass_source, what="superclass")
    emit_result(create_repository(ctx, entity, package, superclass), inline=dry_run)

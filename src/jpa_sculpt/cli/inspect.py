from pathlib import Path
from typing import Annotated

import typer

from jpa_sculpt.cli.common import emit, fail, load_unit, render_table
from jpa_sculpt.cli.create import CwdOption
from jpa_sculpt.config import settings_from_env
from jpa_sculpt.core.java_types import BASIC_TYPES, ID_TYPES
from jpa_sculpt.core.kinds import JpaRole
from jpa_sculpt.fs import iter_java_files, list_packages
from jpa_sculpt.generators.entity_info import describe_entity, list_entities
from jpa_sculpt.models import EntityInfo, ErrorDetail, Response

TableOption = Annotated[bool, typer.Option("--table", help="Render a table instead of JSON.")]


def entity_info(
    entity_path: Annotated[str | None, typer.Option(help="Entity source file, relative to --cwd.")] = None,
    b64_source: Annotated[str | None, typer.Option(help="Base64 entity source instead of a file.")] = None,
    table: TableOption = False,
    cwd: CwdOption = Path("."),
) -> None:
    """Describe the type declared in a Java source file."""
    info = describe_entity(load_unit(cwd, entity_path, b64_source))
    if info is None:
        fail(ErrorDetail(kind="not_found", message="No type declaration found"))
    if table:
        render_table(["field", "type", "package", "annotations"], [
            (f.name, f.type, f.package, " ".join(f"@{a}" for a in f.annotations)) for f in info.fields
        ])
        return
    emit(Response[EntityInfo](succeed=True, data=info))


def java_files(
    all_roots: Annotated[bool, typer.Option("--all", help="Search the whole project, not just the main source root.")] = False,
    table: TableOption = False,
    cwd: CwdOption = Path("."),
) -> None:
    """List Java source files in the project."""
    source_root = None if all_roots else settings_from_env().main_source_root
    paths = [str(p.relative_to(cwd)) for p in iter_java_files(cwd, source_root)]
    if table:
        render_table(["path"], [(p,) for p in paths])
        return
    emit(Response[list[str]](succeed=True, data=paths))


def packages(
    test_sources: Annotated[bool, typer.Option("--test", help="List packages under the test source root.")] = False,
    table: TableOption = False,
    cwd: CwdOption = Path("."),
) -> None:
    """List packages below the source root."""
    settings = settings_from_env()
    source_root = settings.test_source_root if test_sources else settings.main_source_root
    names = list_packages(cwd, source_root)
    if table:
        render_table(["package"], [(n,) for n in names])
        return
    emit(Response[list[str]](succeed=True, data=names))


def entities(
    role: Annotated[list[JpaRole] | None, typer.Option("--role", help="JPA roles to include, repeatable.")] = None,
    table: TableOption = False,
    cwd: CwdOption = Path("."),
) -> None:
    """List JPA entities found in the main source root."""
    paths = iter_java_files(cwd, settings_from_env().main_source_root)
    found = list_entities(paths, roles=role or (JpaRole.ENTITY,))
    for info in found:
        if info.path:
            info.path = str(Path(info.path).relative_to(cwd))
    if table:
        render_table(["name", "package", "role", "id", "id type", "path"], [
            (e.name, e.package, e.jpa_role, e.id_field_name, e.id_field_type, e.path) for e in found
        ])
        return
    emit(Response[list[EntityInfo]](succeed=True, data=found))


def basic_types(table: TableOption = False) -> None:
    """List the Java types supported for basic fields."""
    names = [t.qualified_name for t in BASIC_TYPES]
    if table:
        render_table(["type"], [(n,) for n in names])
        return
    emit(Response[list[str]](succeed=True, data=names))


def id_types(table: TableOption = False) -> None:
    """List the Java types supported for identifier fields."""
    names = [t.qualified_name for t in ID_TYPES]
    if table:
        render_table(["type"], [(n,) for n in names])
        return
    emit(Response[list[str]](succeed=True, data=names))

"""Import maintenance: one import per missing type, placed where the file's convention puts it."""

from __future__ import annotations

import logging
import re

from jpa_sculpt.core import java_types
from jpa_sculpt.core.locators import ImportDecl, find_package_declaration, list_imports, package_name
from jpa_sculpt.core.mutation import insert_lines
from jpa_sculpt.core.source_unit import EditDelta, SourceUnit

logger = logging.getLogger(__name__)

_TYPE_ARGUMENTS = re.compile(r"<(.*)>")


def is_covered(unit: SourceUnit, qualified_name: str, imports: list[ImportDecl] | None = None) -> bool:
    """Whether ``qualified_name`` is usable by simple name without a new import."""
    if "." not in qualified_name:
        return True
    package, _ = qualified_name.rsplit(".", 1)
    if package == "java.lang" or package == package_name(unit):
        return True
    if imports is None:
        imports = list_imports(unit)
    return any(decl.covers(qualified_name) for decl in imports)


def _sort_key(decl: ImportDecl) -> str:
    return decl.name + (".*" if decl.wildcard else "")


def _groups(unit: SourceUnit, imports: list[ImportDecl]) -> list[list[ImportDecl]]:
    groups: list[list[ImportDecl]] = [[imports[0]]]
    for previous, current in zip(imports, imports[1:]):
        gap = unit.source[previous.node.end_byte : current.node.start_byte]
        if gap.count(b"\n") >= 2:
            groups.append([current])
        else:
            groups[-1].append(current)
    return groups


def _package_of(decl: ImportDecl) -> str:
    return decl.name if decl.wildcard else decl.name.rsplit(".", 1)[0]


def _shared_segments(left: str, right: str) -> int:
    count = 0
    for a, b in zip(left.split("."), right.split(".")):
        if a != b:
            break
        count += 1
    return count


def ensure_import(unit: SourceUnit, qualified_name: str) -> tuple[SourceUnit, EditDelta | None]:
    """Add ``import qualified_name;`` unless something already covers it.

    Inside an existing block the line is sorted into the group sharing the
    longest package prefix; a name unrelated to every group of a multi-group
    block starts a new group at the end.
    """
    imports = [decl for decl in list_imports(unit) if not decl.static]
    if is_covered(unit, qualified_name, imports):
        return unit, None

    line = f"import {qualified_name};"
    logger.debug("Adding %s to %r", line, unit)
    if not imports:
        package_decl = find_package_declaration(unit)
        if package_decl is not None:
            return insert_lines(unit, package_decl.end_byte, f"\n\n{line}")
        return insert_lines(unit, 0, f"{line}\n\n")

    package = qualified_name.rsplit(".", 1)[0]
    groups = _groups(unit, imports)
    scores = [max(_shared_segments(package, _package_of(decl)) for decl in group) for group in groups]
    best_score = max(scores)
    best = groups[scores.index(best_score)]
    if len(groups) > 1 and best_score == 0:
        return insert_lines(unit, imports[-1].node.end_byte, f"\n\n{line}")

    for decl in best:
        if _sort_key(decl) > qualified_name:
            return insert_lines(unit, decl.node.start_byte, f"{line}\n")
    return insert_lines(unit, best[-1].node.end_byte, f"\n{line}")


def type_imports(type_text: str, package: str | None = None) -> list[str]:
    """Qualified names a declaration of ``type_text`` needs, type arguments included."""
    names: list[str] = []
    outer = java_types.resolve(type_text, package)
    if outer.import_name:
        names.append(outer.import_name)
    arguments = _TYPE_ARGUMENTS.search(type_text)
    if arguments:
        for argument in arguments.group(1).split(","):
            argument = argument.strip().removeprefix("? extends ").removeprefix("? super ")
            if not argument or argument == "?":
                continue
            inner = java_types.resolve(argument)
            if inner.import_name and inner.import_name not in names:
                names.append(inner.import_name)
    return names


def ensure_imports(unit: SourceUnit, qualified_names: list[str]) -> SourceUnit:
    for qualified_name in qualified_names:
        ensure_import(unit, qualified_name)
    return unit

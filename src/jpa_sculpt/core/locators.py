"""Read-only finders for Java constructs.

All finders query the current tree of a unit and return fresh nodes; the nodes
must be re-read after any edit to that unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jpa_sculpt.core.errors import NotFound
from jpa_sculpt.core.kinds import DeclarationKind
from jpa_sculpt.core.query import captures, load_pattern, run
from jpa_sculpt.core.source_unit import Node, SourceUnit

logger = logging.getLogger(__name__)

ID_ANNOTATIONS = ("Id", "EmbeddedId")


@dataclass(frozen=True)
class ImportDecl:
    node: Node
    name: str
    wildcard: bool = False
    static: bool = False

    @property
    def line(self) -> str:
        static = "static " if self.static else ""
        star = ".*" if self.wildcard else ""
        return f"import {static}{self.name}{star};"

    def covers(self, qualified_name: str) -> bool:
        if self.static:
            return False
        if self.wildcard:
            return qualified_name.rsplit(".", 1)[0] == self.name
        return qualified_name == self.name


@dataclass(frozen=True)
class ImportBlock:
    start_byte: int
    end_byte: int
    imports: tuple[ImportDecl, ...]


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def list_type_declarations(unit: SourceUnit) -> list[Node]:
    return captures(load_pattern("types"), unit, "type.decl")


def find_type_declaration(unit: SourceUnit, warnings: list[str] | None = None) -> Node | None:
    """First top-level type of the file.

    Extra top-level types do not fail the lookup; they are reported through
    ``warnings`` instead.
    """
    declarations = list_type_declarations(unit)
    if not declarations:
        return None
    if len(declarations) > 1:
        names = ", ".join(type_name(unit, decl) for decl in declarations)
        message = f"File declares {len(declarations)} top-level types ({names}); using the first"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
    return declarations[0]


def require_type_declaration(unit: SourceUnit, warnings: list[str] | None = None) -> Node:
    declaration = find_type_declaration(unit, warnings)
    if declaration is None:
        where = unit.path or "source"
        raise NotFound(f"No type declaration found in {where}")
    return declaration


def declaration_kind(type_node: Node) -> DeclarationKind:
    return DeclarationKind.from_node_kind(type_node.kind)


def type_name(unit: SourceUnit, type_node: Node) -> str:
    name = type_node.child("name")
    if name is None:
        raise NotFound(f"Declaration {type_node!r} has no name")
    return unit.text_of(name)


def superclass_name(unit: SourceUnit, type_node: Node) -> str | None:
    superclass = type_node.child("superclass")
    if superclass is None or not superclass.named_children:
        return None
    return unit.text_of(superclass.named_children[0])


def find_class_body(type_node: Node) -> Node:
    body = type_node.child("body")
    if body is None:
        raise NotFound(f"Declaration {type_node!r} has no body")
    return body


def member_container(type_node: Node) -> Node | None:
    """Node whose direct children are the members; enum members live after the constants."""
    body = find_class_body(type_node)
    match declaration_kind(type_node):
        case DeclarationKind.ENUM:
            return body.first_child_of_kind("enum_body_declarations")
        case _:
            return body


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


def list_fields(unit: SourceUnit, type_node: Node) -> list[Node]:
    """Fields declared directly in ``type_node``, nested types excluded."""
    container = member_container(type_node)
    if container is None:
        return []
    fields: list[Node] = []
    for capture_set in run(load_pattern("fields"), unit, container):
        decl = capture_set["field.decl"]
        parent = decl.parent
        if parent is None or parent.node_id != container.node_id:
            continue
        if decl not in fields:
            fields.append(decl)
    return fields


def field_names(unit: SourceUnit, field_node: Node) -> list[str]:
    names = []
    for declarator in field_node.children_of_kind("variable_declarator"):
        name = declarator.child("name")
        if name is not None:
            names.append(unit.text_of(name))
    return names


def field_type(unit: SourceUnit, field_node: Node) -> str:
    type_node = field_node.child("type")
    if type_node is None:
        raise NotFound(f"Field {field_node!r} has no type")
    return unit.text_of(type_node)


def find_field(unit: SourceUnit, name: str, type_node: Node | None = None) -> Node | None:
    if type_node is None:
        type_node = find_type_declaration(unit)
        if type_node is None:
            return None
    for field_node in list_fields(unit, type_node):
        if name in field_names(unit, field_node):
            return field_node
    return None


def find_id_field(unit: SourceUnit, type_node: Node) -> Node | None:
    for field_node in list_fields(unit, type_node):
        if any(find_annotation(unit, field_node, name) is not None for name in ID_ANNOTATIONS):
            return field_node
    return None


# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------


def list_annotations(unit: SourceUnit, node: Node) -> list[Node]:
    """Annotations placed directly on ``node`` (a type, field or method)."""
    modifiers = node.first_child_of_kind("modifiers")
    if modifiers is None:
        return []
    return [
        annotation
        for annotation in captures(load_pattern("annotations"), unit, "annotation", modifiers)
        if annotation.parent is not None and annotation.parent.node_id == modifiers.node_id
    ]


def annotation_name(unit: SourceUnit, annotation: Node) -> str:
    name = annotation.child("name")
    if name is None:
        raise NotFound(f"Annotation {annotation!r} has no name")
    return unit.text_of(name)


def _same_annotation(found: str, wanted: str) -> bool:
    if found == wanted:
        return True
    if "." in found and "." in wanted:
        return False
    return found.rsplit(".", 1)[-1] == wanted.rsplit(".", 1)[-1]


def find_annotation(unit: SourceUnit, node: Node, name: str) -> Node | None:
    wanted = name.removeprefix("@")
    for annotation in list_annotations(unit, node):
        if _same_annotation(annotation_name(unit, annotation), wanted):
            return annotation
    return None


def annotation_arguments(unit: SourceUnit, annotation: Node) -> dict[str, str]:
    """Arguments as written; a lone value is reported under ``value``."""
    arguments = annotation.child("arguments")
    if arguments is None:
        return {}
    pairs = arguments.children_of_kind("element_value_pair")
    if not pairs:
        values = arguments.named_children
        return {"value": unit.text_of(values[0])} if values else {}
    result: dict[str, str] = {}
    for pair in pairs:
        key, value = pair.child("key"), pair.child("value")
        if key is not None and value is not None:
            result[unit.text_of(key)] = unit.text_of(value)
    return result


# ---------------------------------------------------------------------------
# Package and imports
# ---------------------------------------------------------------------------


def find_package_declaration(unit: SourceUnit) -> Node | None:
    declarations = captures(load_pattern("package"), unit, "package.decl")
    return declarations[0] if declarations else None


def package_name(unit: SourceUnit) -> str | None:
    for capture_set in run(load_pattern("package"), unit):
        return unit.text_of(capture_set["package.name"])
    return None


def list_imports(unit: SourceUnit) -> list[ImportDecl]:
    imports = []
    for capture_set in run(load_pattern("imports"), unit):
        decl = capture_set["import.decl"]
        imports.append(
            ImportDecl(
                node=decl,
                name=unit.text_of(capture_set["import.name"]),
                wildcard=decl.first_child_of_kind("asterisk") is not None,
                static=any(child.kind == "static" for child in decl.children),
            )
        )
    return imports


def find_import_block(unit: SourceUnit) -> ImportBlock | None:
    imports = list_imports(unit)
    if not imports:
        return None
    return ImportBlock(
        start_byte=imports[0].node.start_byte,
        end_byte=imports[-1].node.end_byte,
        imports=tuple(imports),
    )


# ---------------------------------------------------------------------------
# Methods
# ---------------------------------------------------------------------------


def list_methods(unit: SourceUnit, type_node: Node) -> list[Node]:
    container = member_container(type_node)
    if container is None:
        return []
    return [
        method
        for method in captures(load_pattern("methods"), unit, "method.decl", container)
        if method.parent is not None and method.parent.node_id == container.node_id
    ]


def find_method(unit: SourceUnit, name: str, type_node: Node | None = None) -> Node | None:
    if type_node is None:
        type_node = find_type_declaration(unit)
        if type_node is None:
            return None
    for method in list_methods(unit, type_node):
        method_name = method.child("name")
        if method_name is not None and unit.text_of(method_name) == name:
            return method
    return None

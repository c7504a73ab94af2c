"""Read-only description of entity sources."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from jpa_sculpt.core import java_types
from jpa_sculpt.core.java_types import JavaType
from jpa_sculpt.core.kinds import JpaRole
from jpa_sculpt.core.locators import (
    annotation_name,
    declaration_kind,
    field_names,
    field_type,
    find_annotation,
    find_id_field,
    find_type_declaration,
    list_annotations,
    list_fields,
    list_imports,
    package_name,
    superclass_name,
    type_name,
)
from jpa_sculpt.core.source_unit import Node, SourceUnit, load_file
from jpa_sculpt.models import EntityInfo, FieldInfo

logger = logging.getLogger(__name__)

_ROLE_ANNOTATIONS = {
    "Entity": JpaRole.ENTITY,
    "MappedSuperclass": JpaRole.MAPPED_SUPERCLASS,
    "Embeddable": JpaRole.EMBEDDABLE,
}

_BOXED = {
    "boolean": "Boolean",
    "byte": "Byte",
    "char": "Character",
    "short": "Short",
    "int": "Integer",
    "long": "Long",
    "float": "Float",
    "double": "Double",
}


def boxed(type_text: str) -> str:
    return _BOXED.get(type_text, type_text)


def jpa_role(unit: SourceUnit, type_node: Node) -> JpaRole | None:
    for name, role in _ROLE_ANNOTATIONS.items():
        if find_annotation(unit, type_node, name) is not None:
            return role
    return None


def resolve_field_type(unit: SourceUnit, type_text: str) -> JavaType:
    """Resolve a type as written in ``unit`` using its imports, then the catalog, then its package."""
    if "." in type_text.split("<", 1)[0] or java_types.is_primitive(type_text):
        return java_types.resolve(type_text)
    simple = java_types.base_name(type_text)
    for decl in list_imports(unit):
        if decl.static:
            continue
        if not decl.wildcard and decl.name.rsplit(".", 1)[-1] == simple:
            return java_types.resolve(type_text, decl.name.rsplit(".", 1)[0])
    package = java_types.known_package(simple) or package_name(unit)
    return JavaType(type_text, package)


def id_type(unit: SourceUnit, type_node: Node) -> JavaType | None:
    id_field = find_id_field(unit, type_node)
    if id_field is None:
        return None
    return resolve_field_type(unit, field_type(unit, id_field))


def describe_entity(unit: SourceUnit) -> EntityInfo | None:
    type_node = find_type_declaration(unit)
    if type_node is None:
        return None
    role = jpa_role(unit, type_node)
    info = EntityInfo(
        name=type_name(unit, type_node),
        kind=declaration_kind(type_node).value,
        package=package_name(unit),
        path=str(unit.path) if unit.path else None,
        is_jpa_entity=role == JpaRole.ENTITY,
        jpa_role=role.value if role else None,
        superclass=superclass_name(unit, type_node),
    )
    id_field = find_id_field(unit, type_node)
    for field_node in list_fields(unit, type_node):
        resolved = resolve_field_type(unit, field_type(unit, field_node))
        annotations = [annotation_name(unit, annotation) for annotation in list_annotations(unit, field_node)]
        for name in field_names(unit, field_node):
            info.fields.append(FieldInfo(name=name, type=resolved.name, package=resolved.package, annotations=annotations))
            if id_field is not None and field_node == id_field and info.id_field_name is None:
                info.id_field_name = name
                info.id_field_type = resolved.name
                info.id_field_package = resolved.package
    return info


def list_entities(paths: Iterable[Path], roles: Iterable[JpaRole] = (JpaRole.ENTITY,)) -> list[EntityInfo]:
    wanted = {role.value for role in roles}
    entities = []
    for path in paths:
        try:
            unit = load_file(path)
        except OSError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        info = describe_entity(unit)
        if info is not None and info.jpa_role in wanted:
            entities.append(info)
    return entities

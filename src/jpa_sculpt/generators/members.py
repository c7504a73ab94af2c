"""Placement of new members inside a type body."""

from __future__ import annotations

import logging

from jpa_sculpt.config import GeneratorSettings
from jpa_sculpt.core.errors import NotFound, UnsupportedDeclaration
from jpa_sculpt.core.kinds import DeclarationKind
from jpa_sculpt.core.locators import (
    declaration_kind,
    find_class_body,
    find_field,
    list_annotations,
    list_fields,
    require_type_declaration,
    type_name,
)
from jpa_sculpt.core.mutation import (
    detect_indent_unit,
    insert_text,
    line_indent,
    line_separator,
    reindent,
    replace_range,
)
from jpa_sculpt.core.source_unit import Node, SourceUnit

logger = logging.getLogger(__name__)

ByteRange = tuple[int, int]


def require_class(unit: SourceUnit, type_node: Node) -> None:
    """Mapped fields only make sense on classes."""
    match declaration_kind(type_node):
        case DeclarationKind.CLASS:
            return
        case kind:
            raise UnsupportedDeclaration(f"Cannot add a mapped field to {kind} {type_name(unit, type_node)}")


def field_line(visibility: str, type_text: str, name: str) -> str:
    modifier = "" if visibility == "package" else f"{visibility} "
    return f"{modifier}{type_text} {name};"


def insert_member(unit: SourceUnit, type_node: Node, lines: list[str], settings: GeneratorSettings) -> ByteRange:
    """Insert ``lines`` as one member after the last field, or first in the body.

    Returns the byte range the member occupies after the edit.
    """
    annotated = len(lines) > 1
    newline = line_separator(unit)
    fields = list_fields(unit, type_node)
    if fields:
        last = fields[-1]
        indent = line_indent(unit, last.start_byte)
        if len(fields) >= 2:
            gap = unit.source[fields[-2].end_byte : last.start_byte]
            blank_line = gap.count(b"\n") >= 2
        else:
            blank_line = annotated or bool(list_annotations(unit, last))
        offset = last.end_byte
        if unit.source[offset : unit.line_end(offset)].strip().startswith(b"//"):
            offset = unit.line_end(offset)
        separator = newline * 2 if blank_line else newline
        block = reindent("\n".join(lines), indent).replace("\n", newline)
        _, delta = insert_text(unit, offset, separator + block)
        start = delta.start_byte + len(separator)
        return (start, delta.new_end_byte)

    body = find_class_body(type_node)
    decl_indent = line_indent(unit, type_node.start_byte)
    block = reindent("\n".join(lines), decl_indent + detect_indent_unit(unit, settings.default_indent))
    block = block.replace("\n", newline)
    size = len(block.encode("utf-8"))
    if not body.named_children:
        _, delta = replace_range(unit, body, "{" + newline + block + newline + decl_indent + "}")
        start = delta.start_byte + 1 + len(newline)
    else:
        _, delta = insert_text(unit, body.start_byte + 1, newline + block + newline)
        start = delta.start_byte + len(newline)
    return (start, start + size)


def confirm_field(unit: SourceUnit, name: str) -> Node:
    type_node = require_type_declaration(unit)
    field_node = find_field(unit, name, type_node)
    if field_node is None:
        raise NotFound(f"Field '{name}' not found after insertion into {type_name(unit, type_node)}")
    logger.debug("Confirmed field %s in %r", name, unit)
    return field_node

"""Text splicing on top of :func:`source_unit.apply_edit`."""

from __future__ import annotations

import re

from jpa_sculpt.core.source_unit import EditDelta, Node, SourceUnit, apply_edit

ByteRange = tuple[int, int]

_LEADING_WS = re.compile(rb"[ \t]*")


def insert_text(unit: SourceUnit, byte_offset: int, text: str) -> tuple[SourceUnit, EditDelta]:
    data = text.encode("utf-8")
    delta = unit.delta_for(byte_offset, byte_offset, data)
    return apply_edit(unit, delta, data), delta


def replace_range(unit: SourceUnit, target: Node | ByteRange, text: str) -> tuple[SourceUnit, EditDelta]:
    if isinstance(target, Node):
        unit.ensure_current(target)
        start, end = target.start_byte, target.end_byte
    else:
        start, end = target
    data = text.encode("utf-8")
    delta = unit.delta_for(start, end, data)
    return apply_edit(unit, delta, data), delta


def line_indent(unit: SourceUnit, byte_offset: int) -> str:
    """Whitespace leading the line that contains ``byte_offset``."""
    unit.check_range(byte_offset, byte_offset)
    start = unit.line_start(byte_offset)
    match = _LEADING_WS.match(unit.source, start)
    return match.group(0).decode("utf-8") if match else ""


def detect_indent_unit(unit: SourceUnit, default: str = "    ") -> str:
    """Smallest indentation step used in the file, ``default`` for flat files."""
    smallest: str | None = None
    for line in unit.source.splitlines():
        # blank lines and comment continuation lines say nothing about the step
        if not line.strip() or line.lstrip().startswith(b"*"):
            continue
        match = _LEADING_WS.match(line)
        indent = match.group(0) if match else b""
        if not indent:
            continue
        if indent.startswith(b"\t"):
            return "\t"
        if smallest is None or len(indent) < len(smallest):
            smallest = indent.decode("utf-8")
    return smallest or default


def reindent(text: str, indent: str) -> str:
    """Prefix every non-empty line of ``text`` with ``indent``."""
    return "\n".join(f"{indent}{line}" if line else line for line in text.split("\n"))


def line_separator(unit: SourceUnit) -> str:
    """``\\r\\n`` when the file's first line break is CRLF, ``\\n`` otherwise."""
    first = unit.source.find(b"\n")
    return "\r\n" if first > 0 and unit.source[first - 1 : first] == b"\r" else "\n"


def insert_lines(unit: SourceUnit, byte_offset: int, text: str) -> tuple[SourceUnit, EditDelta]:
    """:func:`insert_text` with the ``\\n`` breaks of ``text`` written in the file's own style."""
    return insert_text(unit, byte_offset, text.replace("\n", line_separator(unit)))

"""Owns a Java source buffer together with its tree-sitter tree.

Every textual change goes through :func:`apply_edit`, which tells the old tree
about the change and reparses incrementally. Each change bumps the unit's
``generation``; nodes handed out by the unit remember the generation they were
read from and are rejected once the buffer has moved on.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Node as TsNode
from tree_sitter import Parser, Tree
from tree_sitter_language_pack import get_parser

from jpa_sculpt.core.errors import InvalidRange, StaleNode

logger = logging.getLogger(__name__)

LANGUAGE = "java"

Point = tuple[int, int]

_unit_ids = itertools.count(1)


@dataclass(frozen=True)
class EditDelta:
    start_byte: int
    old_end_byte: int
    new_end_byte: int
    start_point: Point
    old_end_point: Point
    new_end_point: Point


@dataclass(frozen=True, eq=False)
class Node:
    """A generation-tagged view of a tree-sitter node."""

    raw: TsNode
    unit_id: int
    generation: int

    @property
    def kind(self) -> str:
        return self.raw.type

    @property
    def start_byte(self) -> int:
        return self.raw.start_byte

    @property
    def end_byte(self) -> int:
        return self.raw.end_byte

    @property
    def start_point(self) -> Point:
        return (self.raw.start_point[0], self.raw.start_point[1])

    @property
    def end_point(self) -> Point:
        return (self.raw.end_point[0], self.raw.end_point[1])

    @property
    def node_id(self) -> int:
        return self.raw.id

    @property
    def has_error(self) -> bool:
        return self.raw.has_error

    @property
    def key(self) -> tuple[int, int, str, int, int]:
        return (self.unit_id, self.generation, self.kind, self.start_byte, self.end_byte)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Node({self.kind}, {self.start_byte}..{self.end_byte}, gen={self.generation})"

    def _wrap(self, raw: TsNode | None) -> Node | None:
        if raw is None:
            return None
        return Node(raw, self.unit_id, self.generation)

    @property
    def parent(self) -> Node | None:
        return self._wrap(self.raw.parent)

    @property
    def children(self) -> list[Node]:
        return [Node(child, self.unit_id, self.generation) for child in self.raw.children]

    @property
    def named_children(self) -> list[Node]:
        return [Node(child, self.unit_id, self.generation) for child in self.raw.named_children]

    def child(self, field_name: str) -> Node | None:
        return self._wrap(self.raw.child_by_field_name(field_name))

    def children_of_kind(self, *kinds: str) -> list[Node]:
        return [child for child in self.named_children if child.kind in kinds]

    def first_child_of_kind(self, *kinds: str) -> Node | None:
        for child in self.named_children:
            if child.kind in kinds:
                return child
        return None

    def contains(self, other: Node) -> bool:
        return self.start_byte <= other.start_byte and other.end_byte <= self.end_byte


class SourceUnit:
    """One parsed Java file: the byte buffer is authoritative, the tree follows it."""

    def __init__(self, source: bytes, path: Path | None = None) -> None:
        self._parser: Parser = get_parser(LANGUAGE)
        self._buffer = source
        self._tree: Tree = self._parser.parse(source)
        self.unit_id = next(_unit_ids)
        self.generation = 0
        self.path = path
        self.modified = False

    def __repr__(self) -> str:
        where = str(self.path) if self.path else "<memory>"
        return f"SourceUnit({where}, {len(self._buffer)} bytes, gen={self.generation})"

    @property
    def source(self) -> bytes:
        return self._buffer

    @property
    def text(self) -> str:
        return self._buffer.decode("utf-8")

    @property
    def tree(self) -> Tree:
        return self._tree

    @property
    def root(self) -> Node:
        return self.wrap(self._tree.root_node)

    @property
    def has_errors(self) -> bool:
        return self._tree.root_node.has_error

    def wrap(self, raw: TsNode) -> Node:
        return Node(raw, self.unit_id, self.generation)

    def ensure_current(self, node: Node) -> None:
        if node.unit_id != self.unit_id:
            raise StaleNode(f"{node!r} belongs to another source unit")
        if node.generation != self.generation:
            raise StaleNode(f"{node!r} was read at generation {node.generation}, unit is at {self.generation}")

    def text_of(self, node: Node) -> str:
        self.ensure_current(node)
        return self._buffer[node.start_byte : node.end_byte].decode("utf-8")

    def slice(self, start: int, end: int) -> str:
        self.check_range(start, end)
        return self._buffer[start:end].decode("utf-8")

    def check_range(self, start: int, end: int) -> None:
        if start < 0 or end < start or end > len(self._buffer):
            raise InvalidRange(f"Range {start}..{end} outside buffer of {len(self._buffer)} bytes")

    def point_at(self, byte_offset: int) -> Point:
        if byte_offset < 0 or byte_offset > len(self._buffer):
            raise InvalidRange(f"Offset {byte_offset} outside buffer of {len(self._buffer)} bytes")
        row = self._buffer.count(b"\n", 0, byte_offset)
        line_start = self._buffer.rfind(b"\n", 0, byte_offset) + 1
        return (row, byte_offset - line_start)

    def line_start(self, byte_offset: int) -> int:
        return self._buffer.rfind(b"\n", 0, byte_offset) + 1

    def line_end(self, byte_offset: int) -> int:
        end = self._buffer.find(b"\n", byte_offset)
        if end == -1:
            return len(self._buffer)
        return end - 1 if end > byte_offset and self._buffer[end - 1 : end] == b"\r" else end

    def delta_for(self, start: int, old_end: int, replacement: bytes) -> EditDelta:
        """Describe replacing ``[start, old_end)`` with ``replacement``."""
        self.check_range(start, old_end)
        start_point = self.point_at(start)
        newlines = replacement.count(b"\n")
        if newlines:
            new_end_point = (start_point[0] + newlines, len(replacement) - replacement.rfind(b"\n") - 1)
        else:
            new_end_point = (start_point[0], start_point[1] + len(replacement))
        return EditDelta(
            start_byte=start,
            old_end_byte=old_end,
            new_end_byte=start + len(replacement),
            start_point=start_point,
            old_end_point=self.point_at(old_end),
            new_end_point=new_end_point,
        )

    @contextmanager
    def transaction(self) -> Iterator[SourceUnit]:
        """Restore the buffer when the block raises; the exception still propagates."""
        snapshot = self._buffer
        modified = self.modified
        try:
            yield self
        except BaseException:
            if self._buffer != snapshot:
                logger.debug("Rolling back %r", self)
                self._buffer = snapshot
                full_reparse(self)
            self.modified = modified
            raise

    def _replace(self, delta: EditDelta, replacement: bytes) -> None:
        self._buffer = self._buffer[: delta.start_byte] + replacement + self._buffer[delta.old_end_byte :]
        self._tree.edit(
            start_byte=delta.start_byte,
            old_end_byte=delta.old_end_byte,
            new_end_byte=delta.new_end_byte,
            start_point=delta.start_point,
            old_end_point=delta.old_end_point,
            new_end_point=delta.new_end_point,
        )
        self._tree = self._parser.parse(self._buffer, self._tree)
        self.generation += 1
        self.modified = True

    def _reparse(self) -> None:
        self._tree = self._parser.parse(self._buffer)
        self.generation += 1


def load(text: str | bytes, path: Path | str | None = None) -> SourceUnit:
    source = text.encode("utf-8") if isinstance(text, str) else text
    return SourceUnit(source, Path(path) if path is not None else None)


def load_file(path: Path | str) -> SourceUnit:
    file_path = Path(path)
    try:
        source = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None
    return load(source, file_path)


def apply_edit(unit: SourceUnit, delta: EditDelta, replacement: str | bytes) -> SourceUnit:
    """Splice ``replacement`` over the delta's old range and reparse incrementally."""
    data = replacement.encode("utf-8") if isinstance(replacement, str) else replacement
    unit.check_range(delta.start_byte, delta.old_end_byte)
    if delta.new_end_byte != delta.start_byte + len(data):
        raise InvalidRange(
            f"Delta new end {delta.new_end_byte} does not match replacement of {len(data)} bytes at {delta.start_byte}"
        )
    expected = unit.delta_for(delta.start_byte, delta.old_end_byte, data)
    if expected != delta:
        raise InvalidRange(f"Delta {delta} is inconsistent with the current buffer, expected {expected}")
    unit._replace(delta, data)
    logger.debug(
        "Edited %r at %d..%d (+%d bytes)",
        unit,
        delta.start_byte,
        delta.old_end_byte,
        delta.new_end_byte - delta.old_end_byte,
    )
    return unit


def full_reparse(unit: SourceUnit) -> SourceUnit:
    unit._reparse()
    return unit

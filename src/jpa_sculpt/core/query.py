"""Structural queries over a :class:`SourceUnit` tree."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from tree_sitter import Node as TsNode
from tree_sitter import Query, QueryCursor, QueryError
from tree_sitter_language_pack import get_language

from jpa_sculpt.core.errors import InvalidPattern, NotFound
from jpa_sculpt.core.source_unit import LANGUAGE, Node, SourceUnit

logger = logging.getLogger(__name__)

QUERIES_DIR = Path(__file__).parent.parent / "queries"


@dataclass(frozen=True)
class QueryPattern:
    """A compiled pattern; safe to share between units."""

    query: Query
    text: str
    capture_names: tuple[str, ...]


@dataclass(frozen=True)
class CaptureSet:
    """The captures of one match, keyed by capture name."""

    pattern_index: int
    captures: Mapping[str, tuple[Node, ...]]

    def __getitem__(self, name: str) -> Node:
        nodes = self.captures.get(name)
        if not nodes:
            raise NotFound(f"Capture '{name}' is not part of this match")
        return nodes[0]

    def __contains__(self, name: object) -> bool:
        return bool(self.captures.get(name))  # type: ignore[call-overload]

    def get(self, name: str) -> Node | None:
        nodes = self.captures.get(name)
        return nodes[0] if nodes else None

    def all(self, name: str) -> tuple[Node, ...]:
        return self.captures.get(name, ())

    @property
    def start_byte(self) -> int:
        return min(node.start_byte for nodes in self.captures.values() for node in nodes)


@lru_cache(maxsize=None)
def compile_pattern(text: str) -> QueryPattern:
    try:
        query = Query(get_language(LANGUAGE), text)
    except QueryError as exc:
        raise InvalidPattern(f"Invalid query pattern: {exc}") from exc
    names = tuple(query.capture_name(index) for index in range(query.capture_count))
    return QueryPattern(query=query, text=text, capture_names=names)


@lru_cache(maxsize=None)
def load_pattern(name: str) -> QueryPattern:
    query_path = QUERIES_DIR / f"{LANGUAGE}_{name}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    return compile_pattern(query_path.read_text(encoding="utf-8"))


def run(pattern: QueryPattern, unit: SourceUnit, scope: Node | None = None) -> Iterator[CaptureSet]:
    """Yield the matches of ``pattern`` in source order.

    With ``scope`` only matches lying entirely inside that node are produced.
    Calling again re-runs the query against the unit's current tree.
    """
    if scope is None:
        scope = unit.root
    else:
        unit.ensure_current(scope)

    cursor = QueryCursor(pattern.query)
    cursor.set_byte_range(scope.start_byte, scope.end_byte)
    matches = cursor.matches(scope.raw)
    # tree-sitter reports a match once its last step completes, not where it starts
    matches.sort(key=_match_start)
    logger.debug("Query found %d raw matches in %r", len(matches), unit)
    for pattern_index, raw_captures in matches:
        if not raw_captures:
            continue
        captures = {
            name: tuple(sorted((unit.wrap(raw) for raw in nodes), key=lambda n: n.start_byte))
            for name, nodes in raw_captures.items()
        }
        if not all(scope.contains(node) for nodes in captures.values() for node in nodes):
            continue
        yield CaptureSet(pattern_index=pattern_index, captures=captures)


def _match_start(match: tuple[int, dict[str, list[TsNode]]]) -> int:
    return min((raw.start_byte for nodes in match[1].values() for raw in nodes), default=-1)


def captures(pattern: QueryPattern, unit: SourceUnit, name: str, scope: Node | None = None) -> list[Node]:
    """Every node captured as ``name``, in source order and without repeats."""
    seen: set[Node] = set()
    nodes: list[Node] = []
    for capture_set in run(pattern, unit, scope):
        for node in capture_set.all(name):
            if node not in seen:
                seen.add(node)
                nodes.append(node)
    nodes.sort(key=lambda n: n.start_byte)
    return nodes

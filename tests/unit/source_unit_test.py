"""Tests for the source unit store: loading, edits, generations and rollback."""

from __future__ import annotations

from pathlib import Path

import pytest
from tree_sitter import Node as TsNode

from jpa_sculpt.core.errors import InvalidRange, StaleNode
from jpa_sculpt.core.locators import field_names, list_fields, require_type_declaration
from jpa_sculpt.core.source_unit import SourceUnit, apply_edit, full_reparse, load, load_file
from jpa_sculpt.generators.context import GenerationContext
from jpa_sculpt.generators.fields import add_basic_field, add_id_field
from jpa_sculpt.generators.imports import ensure_import
from jpa_sculpt.models import FieldSpec


def _shape(node: TsNode) -> list[tuple[str, int, int]]:
    """Flatten a tree into (kind, start, end) triples for comparison."""
    out = [(node.type, node.start_byte, node.end_byte)]
    for child in node.children:
        out.extend(_shape(child))
    return out


SOURCE = "package a;\n\nclass A {\n    int x;\n}\n"


def test_load_round_trips_bytes() -> None:
    unit = load(SOURCE)
    assert unit.source == SOURCE.encode("utf-8")
    assert unit.text == SOURCE
    assert unit.generation == 0
    assert not unit.modified
    assert not unit.has_errors


def test_load_keeps_non_ascii_bytes() -> None:
    text = 'class A {\n    String s = "héllo wörld";\n}\n'
    unit = load(text)
    assert unit.text == text
    assert len(unit.source) > len(text)


def test_load_reports_syntax_errors_without_raising() -> None:
    unit = load("class A { int }")
    assert unit.has_errors


def test_load_file_sets_path(tmp_path: Path) -> None:
    path = tmp_path / "A.java"
    path.write_text(SOURCE, encoding="utf-8")
    unit = load_file(path)
    assert unit.path == path
    assert unit.text == SOURCE


def test_load_file_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="File not found"):
        load_file(tmp_path / "Missing.java")


def test_apply_edit_matches_fresh_parse() -> None:
    unit = load(SOURCE)
    offset = SOURCE.index("int x;") + len("int x;")
    replacement = "\n    String name;"
    delta = unit.delta_for(offset, offset, replacement.encode("utf-8"))
    apply_edit(unit, delta, replacement)

    fresh = SourceUnit(unit.source)
    assert unit.text == SOURCE[:offset] + replacement + SOURCE[offset:]
    assert _shape(unit.tree.root_node) == _shape(fresh.tree.root_node)
    assert unit.generation == 1
    assert unit.modified


def test_generator_edits_match_fresh_parse(ctx: GenerationContext) -> None:
    unit = load("package com.example;\n\nclass Event {\n    private int a;\n}\n")

    assert add_id_field(ctx, unit, FieldSpec(name="id", type="Long")).ok
    assert add_basic_field(ctx, unit, FieldSpec(name="when", type="LocalDate")).ok
    ensure_import(unit, "java.util.UUID")
    assert add_basic_field(ctx, unit, FieldSpec(name="total", type="BigDecimal", precision=10, scale=2)).ok

    fresh = SourceUnit(unit.source)
    assert _shape(unit.tree.root_node) == _shape(fresh.tree.root_node)
    assert not unit.has_errors
    names = [name for node in list_fields(unit, require_type_declaration(unit)) for name in field_names(unit, node)]
    assert names == ["a", "id", "when", "total"]


def test_apply_edit_replacement_across_lines() -> None:
    unit = load(SOURCE)
    start = SOURCE.index("int x;")
    end = start + len("int x;")
    replacement = "long y;\n    long z;"
    apply_edit(unit, unit.delta_for(start, end, replacement.encode("utf-8")), replacement)

    fresh = SourceUnit(unit.source)
    assert "long z;" in unit.text
    assert _shape(unit.tree.root_node) == _shape(fresh.tree.root_node)


def test_delta_points_account_for_newlines() -> None:
    unit = load(SOURCE)
    offset = SOURCE.index("int x;")
    delta = unit.delta_for(offset, offset, b"a\nbc")
    assert delta.start_point == (3, 4)
    assert delta.new_end_point == (4, 2)
    assert delta.new_end_byte == offset + 4


@pytest.mark.parametrize(
    ("start", "end"),
    [(-1, 0), (5, 2), (0, 10_000)],
    ids=["negative", "reversed", "past-end"],
)
def test_invalid_ranges_are_rejected(start: int, end: int) -> None:
    unit = load(SOURCE)
    with pytest.raises(InvalidRange):
        unit.check_range(start, end)


def test_apply_edit_rejects_inconsistent_delta() -> None:
    unit = load(SOURCE)
    delta = unit.delta_for(0, 0, b"// x\n")
    with pytest.raises(InvalidRange):
        apply_edit(unit, delta, "// longer comment\n")
    assert unit.text == SOURCE
    assert unit.generation == 0


def test_apply_edit_rejects_delta_from_older_buffer() -> None:
    unit = load(SOURCE)
    stale = unit.delta_for(len(SOURCE) - 2, len(SOURCE), b"")
    apply_edit(unit, unit.delta_for(0, len("package a;"), b""), "")
    with pytest.raises(InvalidRange):
        apply_edit(unit, stale, "")


class TestStaleNodes:
    def test_node_from_previous_generation_is_rejected(self) -> None:
        unit = load(SOURCE)
        old_root = unit.root
        apply_edit(unit, unit.delta_for(0, 0, b"// header\n"), "// header\n")
        with pytest.raises(StaleNode):
            unit.text_of(old_root)

    def test_node_from_another_unit_is_rejected(self) -> None:
        first, second = load(SOURCE), load(SOURCE)
        with pytest.raises(StaleNode, match="another source unit"):
            second.text_of(first.root)

    def test_full_reparse_bumps_generation(self) -> None:
        unit = load(SOURCE)
        node = unit.root
        full_reparse(unit)
        assert unit.generation == 1
        assert not unit.modified
        with pytest.raises(StaleNode):
            unit.ensure_current(node)

    def test_current_nodes_compare_by_position(self) -> None:
        unit = load(SOURCE)
        assert unit.root == unit.root
        assert len({unit.root, unit.root}) == 1


class TestTransaction:
    def test_rollback_restores_buffer(self) -> None:
        unit = load(SOURCE)
        with pytest.raises(RuntimeError), unit.transaction():
            apply_edit(unit, unit.delta_for(0, 0, b"// gone\n"), "// gone\n")
            raise RuntimeError("boom")
        assert unit.text == SOURCE
        assert not unit.modified
        assert not unit.has_errors

    def test_commit_keeps_edits(self) -> None:
        unit = load(SOURCE)
        with unit.transaction():
            apply_edit(unit, unit.delta_for(0, 0, b"// kept\n"), "// kept\n")
        assert unit.text.startswith("// kept\n")
        assert unit.modified

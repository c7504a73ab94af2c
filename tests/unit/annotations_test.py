"""Tests for annotation rendering and placement."""

from __future__ import annotations

import pytest

from jpa_sculpt.core.locators import find_annotation, find_field, require_type_declaration
from jpa_sculpt.core.source_unit import Node, SourceUnit, load
from jpa_sculpt.generators.annotations import add_annotation, add_annotation_argument, quoted, render
from jpa_sculpt.models import AnnotationSpec


@pytest.mark.parametrize(
    ("arguments", "expected"),
    [
        ({}, "@Entity"),
        ({"value": '"t"'}, '@Entity("t")'),
        ({"name": '"t"', "schema": '"s"'}, '@Entity(name = "t", schema = "s")'),
    ],
    ids=["marker", "lone-value", "pairs"],
)
def test_render(arguments: dict[str, str], expected: str) -> None:
    assert render("Entity", arguments) == expected


def test_quoted_escapes() -> None:
    assert quoted('say "hi"\\') == '"say \\"hi\\"\\\\"'


class TestAddAnnotation:
    def test_on_bare_class(self) -> None:
        unit = load("public class A {}\n")
        add_annotation(unit, require_type_declaration(unit), "@Entity")
        assert unit.text == "@Entity\npublic class A {}\n"

    def test_after_existing_annotations(self) -> None:
        unit = load("@Entity\npublic class A {}\n")
        add_annotation(unit, require_type_declaration(unit), AnnotationSpec(name="Table", arguments={"name": '"a"'}))
        assert unit.text == '@Entity\n@Table(name = "a")\npublic class A {}\n'

    def test_keeps_member_indent(self) -> None:
        unit = load("class A {\n    private int x;\n}\n")
        field = find_field(unit, "x")
        assert field is not None
        add_annotation(unit, field, "@Transient")
        assert unit.text == "class A {\n    @Transient\n    private int x;\n}\n"

    def test_present_annotation_is_skipped(self) -> None:
        unit = load("@Entity\nclass A {}\n")
        _, delta = add_annotation(unit, require_type_declaration(unit), "@Entity")
        assert delta is None
        assert unit.generation == 0


def _table(unit: SourceUnit) -> Node:
    table = find_annotation(unit, require_type_declaration(unit), "Table")
    assert table is not None
    return table


class TestAddAnnotationArgument:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("@Table\nclass A {}", '@Table(name = "a")\nclass A {}'),
            ("@Table()\nclass A {}", '@Table(name = "a")\nclass A {}'),
            ('@Table(schema = "s")\nclass A {}', '@Table(schema = "s", name = "a")\nclass A {}'),
            ('@Table(name = "old")\nclass A {}', '@Table(name = "a")\nclass A {}'),
            ('@Table("s")\nclass A {}', '@Table(value = "s", name = "a")\nclass A {}'),
        ],
        ids=["marker", "empty-list", "append", "replace", "lone-value"],
    )
    def test_argument_forms(self, source: str, expected: str) -> None:
        unit = load(source)
        add_annotation_argument(unit, _table(unit), "name", '"a"')
        assert unit.text == expected
        assert not unit.has_errors

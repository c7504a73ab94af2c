"""Render annotations and place them on declarations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from jpa_sculpt.core.errors import NotFound
from jpa_sculpt.core.locators import annotation_name, find_annotation, list_annotations
from jpa_sculpt.core.mutation import insert_lines, insert_text, line_indent, replace_range
from jpa_sculpt.core.source_unit import EditDelta, Node, SourceUnit
from jpa_sculpt.models import AnnotationSpec

logger = logging.getLogger(__name__)

Arguments = Mapping[str, str] | Iterable[tuple[str, str]]


def render(name: str, arguments: Arguments = ()) -> str:
    """``@Name``, ``@Name(value)`` or ``@Name(a = 1, b = 2)``."""
    pairs = list(arguments.items()) if isinstance(arguments, Mapping) else list(arguments)
    head = name if name.startswith("@") else f"@{name}"
    if not pairs:
        return head
    if len(pairs) == 1 and pairs[0][0] == "value":
        return f"{head}({pairs[0][1]})"
    return f"{head}({', '.join(f'{key} = {value}' for key, value in pairs)})"


def render_spec(spec: AnnotationSpec) -> str:
    return render(spec.name, spec.arguments)


def quoted(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def array_or_single(values: list[str]) -> str:
    return values[0] if len(values) == 1 else "{" + ", ".join(values) + "}"


def add_annotation(unit: SourceUnit, declaration: Node, spec: AnnotationSpec | str) -> tuple[SourceUnit, EditDelta | None]:
    """Place an annotation on its own line above ``declaration``.

    The new annotation goes after the existing ones. Nothing happens when an
    annotation of the same name is already present.
    """
    text = spec if isinstance(spec, str) else render_spec(spec)
    name = text.removeprefix("@").split("(", 1)[0].strip()
    if find_annotation(unit, declaration, name) is not None:
        logger.debug("@%s already present on %r", name, declaration)
        return unit, None

    indent = line_indent(unit, declaration.start_byte)
    existing = list_annotations(unit, declaration)
    if existing:
        return insert_lines(unit, existing[-1].end_byte, f"\n{indent}{text}")
    return insert_lines(unit, declaration.start_byte, f"{text}\n{indent}")


def add_annotation_argument(
    unit: SourceUnit, annotation: Node, key: str, value: str
) -> tuple[SourceUnit, EditDelta]:
    """Set ``key = value`` on an existing annotation, replacing a previous value for ``key``."""
    unit.ensure_current(annotation)
    if annotation.kind == "marker_annotation":
        return insert_text(unit, annotation.end_byte, f"({key} = {value})")
    if annotation.kind != "annotation":
        raise NotFound(f"{annotation!r} is not an annotation")

    arguments = annotation.child("arguments")
    if arguments is None:
        raise NotFound(f"Annotation @{annotation_name(unit, annotation)} has no argument list")

    for pair in arguments.children_of_kind("element_value_pair"):
        pair_key, pair_value = pair.child("key"), pair.child("value")
        if pair_key is not None and pair_value is not None and unit.text_of(pair_key) == key:
            return replace_range(unit, pair_value, value)

    values = arguments.named_children
    closing = arguments.end_byte - 1
    if not values:
        return insert_text(unit, closing, f"{key} = {value}")
    if not arguments.children_of_kind("element_value_pair"):
        # a lone `@X(v)` has to name its value once a second argument appears
        lone = unit.text_of(values[0])
        return replace_range(unit, arguments, f"(value = {lone}, {key} = {value})")
    return insert_text(unit, values[-1].end_byte, f", {key} = {value}")


@dataclass(frozen=True)
class RenderedAnnotation:
    """Annotation text plus the imports it relies on."""

    text: str
    imports: tuple[str, ...] = ()


def build(name: str, arguments: Arguments = (), imports: Iterable[str] = ()) -> RenderedAnnotation:
    return RenderedAnnotation(render(name, arguments), tuple(imports))

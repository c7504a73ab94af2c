"""Tests for import maintenance."""

from __future__ import annotations

import pytest

from jpa_sculpt.core.source_unit import load
from jpa_sculpt.generators.imports import ensure_import, ensure_imports, is_covered, type_imports


def test_adds_first_import_after_package() -> None:
    unit = load("package a;\n\nclass A {}\n")
    _, delta = ensure_import(unit, "java.util.List")
    assert delta is not None
    assert unit.text == "package a;\n\nimport java.util.List;\n\nclass A {}\n"


def test_adds_first_import_without_package() -> None:
    unit = load("class A {}\n")
    ensure_import(unit, "java.util.List")
    assert unit.text == "import java.util.List;\n\nclass A {}\n"


@pytest.mark.parametrize(
    "name",
    ["String", "java.lang.String", "a.Sibling", "java.util.List", "jakarta.persistence.Column"],
    ids=["simple", "java-lang", "same-package", "explicit", "wildcard"],
)
def test_covered_names_add_nothing(name: str) -> None:
    source = "package a;\n\nimport java.util.List;\nimport jakarta.persistence.*;\n\nclass A {}\n"
    unit = load(source)
    assert is_covered(unit, name)
    _, delta = ensure_import(unit, name)
    assert delta is None
    assert unit.text == source


def test_static_import_does_not_cover_type() -> None:
    unit = load("import static java.util.Objects.requireNonNull;\n\nclass A {}\n")
    assert not is_covered(unit, "java.util.Objects")


def test_sorted_into_group() -> None:
    unit = load(
        "package a;\n\n"
        "import jakarta.persistence.Entity;\n"
        "import jakarta.persistence.Table;\n\n"
        "class A {}\n"
    )
    ensure_import(unit, "jakarta.persistence.Id")
    assert unit.text == (
        "package a;\n\n"
        "import jakarta.persistence.Entity;\n"
        "import jakarta.persistence.Id;\n"
        "import jakarta.persistence.Table;\n\n"
        "class A {}\n"
    )


def test_appended_to_end_of_group() -> None:
    unit = load("package a;\n\nimport jakarta.persistence.Entity;\n\nclass A {}\n")
    ensure_import(unit, "jakarta.persistence.Table")
    assert "import jakarta.persistence.Entity;\nimport jakarta.persistence.Table;\n\nclass" in unit.text


def test_joins_best_matching_group() -> None:
    unit = load(
        "package a;\n\n"
        "import jakarta.persistence.Entity;\n\n"
        "import java.util.List;\n"
        "import java.util.Set;\n\n"
        "class A {}\n"
    )
    ensure_import(unit, "java.util.Map")
    assert "import java.util.List;\nimport java.util.Map;\nimport java.util.Set;" in unit.text


def test_unrelated_name_starts_new_group() -> None:
    unit = load(
        "package a;\n\n"
        "import jakarta.persistence.Entity;\n\n"
        "import java.util.List;\n\n"
        "class A {}\n"
    )
    ensure_import(unit, "org.hibernate.annotations.TimeZoneStorage")
    assert unit.text.endswith("import java.util.List;\n\nimport org.hibernate.annotations.TimeZoneStorage;\n\nclass A {}\n")


def test_no_duplicate_on_repeat() -> None:
    unit = load("package a;\n\nclass A {}\n")
    ensure_imports(unit, ["java.util.UUID", "java.util.UUID"])
    assert unit.text.count("import java.util.UUID;") == 1


def test_type_imports_include_type_arguments() -> None:
    assert type_imports("Map<UUID, BigDecimal>") == ["java.util.Map", "java.util.UUID", "java.math.BigDecimal"]
    assert type_imports("String") == []
    assert type_imports("Money", "com.acme") == ["com.acme.Money"]

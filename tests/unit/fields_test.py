"""Tests for the basic, id and enum field generators."""

from __future__ import annotations

from pathlib import Path

import pytest

from jpa_sculpt.config import GeneratorSettings
from jpa_sculpt.core.errors import (
    DuplicateField,
    DuplicateIdField,
    InvalidFieldOption,
    UnsupportedDeclaration,
    WriteFailed,
)
from jpa_sculpt.core.kinds import EnumStorage, IdGeneration, TemporalType
from jpa_sculpt.core.source_unit import SourceUnit, load, load_file
from jpa_sculpt.fs.path_security import ProjectRootPathValidator
from jpa_sculpt.generators.context import GenerationContext
from jpa_sculpt.generators.fields import add_basic_field, add_enum_field, add_id_field
from jpa_sculpt.models import FieldSpec, IdGeneratorSpec

EMPTY_USER = "package com.example;\n\nclass User {}\n"


class TestBasicField:
    def test_adds_annotated_field_to_empty_class(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        result = add_basic_field(ctx, unit, FieldSpec(name="email", type="String", nullable=False, unique=True))

        assert result.ok
        assert unit.text == (
            "package com.example;\n\n"
            "import jakarta.persistence.Column;\n\n"
            "class User {\n"
            "    @Column(nullable = false, unique = true)\n"
            "    private String email;\n"
            "}\n"
        )
        assert "java.lang" not in unit.text
        assert not unit.has_errors

    def test_duplicate_leaves_buffer_untouched(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        spec = FieldSpec(name="email", type="String", nullable=False, unique=True)
        assert add_basic_field(ctx, unit, spec).ok
        before = unit.source

        result = add_basic_field(ctx, unit, spec)

        assert not result.ok
        assert isinstance(result.error, DuplicateField)
        assert unit.source == before

    def test_appends_after_last_field_with_blank_line(self, ctx: GenerationContext, user_unit: SourceUnit) -> None:
        result = add_basic_field(ctx, user_unit, FieldSpec(name="email", type="String"))
        assert result.ok
        assert "    private String name;\n\n    @Column\n    private String email;\n}\n" in user_unit.text

    def test_follows_compact_field_spacing(self, ctx: GenerationContext) -> None:
        unit = load("class A {\n  private int a;\n  private int b;\n}\n")
        assert add_basic_field(ctx, unit, FieldSpec(name="c", type="int")).ok
        assert unit.text.startswith("import jakarta.persistence.Column;\n\n")
        assert unit.text.endswith("class A {\n  private int a;\n  private int b;\n  @Column\n  private int c;\n}\n")

    def test_keeps_crlf_line_endings(self, ctx: GenerationContext) -> None:
        unit = load("class A {\r\n    private int a;\r\n}\r\n")
        assert add_basic_field(ctx, unit, FieldSpec(name="b", type="int")).ok
        assert unit.text == (
            "import jakarta.persistence.Column;\r\n\r\n"
            "class A {\r\n    private int a;\r\n\r\n    @Column\r\n    private int b;\r\n}\r\n"
        )
        assert unit.source.count(b"\n") == unit.source.count(b"\r\n")

    def test_keeps_crlf_in_empty_body(self, ctx: GenerationContext) -> None:
        unit = load("package a;\r\n\r\nclass A {}\r\n")
        result = add_basic_field(ctx, unit, FieldSpec(name="b", type="int"))
        assert result.ok
        assert unit.text.endswith("class A {\r\n    @Column\r\n    private int b;\r\n}\r\n")
        assert unit.source.count(b"\n") == unit.source.count(b"\r\n")
        start, end = result.change.inserted_range or (0, 0)
        assert unit.source[start:end] == b"    @Column\r\n    private int b;"

    def test_failure_keeps_warnings(self, ctx: GenerationContext) -> None:
        unit = load("class A {\n    private int a;\n}\n\nclass B {}\n")
        result = add_basic_field(ctx, unit, FieldSpec(name="a", type="int"))
        assert isinstance(result.error, DuplicateField)
        assert len(result.warnings) == 1
        assert "A, B" in result.warnings[0]
        assert result.to_response().warnings == list(result.warnings)

    def test_write_error_rolls_back(self, writing_ctx: GenerationContext, tmp_path: Path) -> None:
        (tmp_path / "blocker").write_text("not a directory", encoding="utf-8")
        unit = load(EMPTY_USER, tmp_path / "blocker" / "User.java")
        result = add_basic_field(writing_ctx, unit, FieldSpec(name="email", type="String"))
        assert isinstance(result.error, WriteFailed)
        assert result.error.kind == "write_failed"
        assert unit.text == EMPTY_USER

    def test_inserts_before_methods_when_no_fields(self, ctx: GenerationContext) -> None:
        unit = load("class A {\n    void run() {\n    }\n}\n")
        assert add_basic_field(ctx, unit, FieldSpec(name="count", type="Integer")).ok
        assert unit.text.index("private Integer count;") < unit.text.index("void run()")
        assert not unit.has_errors

    def test_imports_non_lang_type_once(self, ctx: GenerationContext) -> None:
        unit = load("package a;\n\nimport java.math.BigDecimal;\n\nclass A {\n    private BigDecimal x;\n}\n")
        assert add_basic_field(ctx, unit, FieldSpec(name="price", type="BigDecimal", precision=10, scale=2)).ok
        assert unit.text.count("import java.math.BigDecimal;") == 1
        assert "@Column(precision = 10, scale = 2)" in unit.text

    def test_column_name_and_length(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        spec = FieldSpec(name="displayName", type="String", column_name="display_name", length=80)
        assert add_basic_field(ctx, unit, spec).ok
        assert '@Column(name = "display_name", length = 80)' in unit.text

    def test_legacy_date_gets_temporal(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        assert add_basic_field(ctx, unit, FieldSpec(name="born", type="Date", temporal=TemporalType.DATE)).ok
        assert "@Temporal(TemporalType.DATE)" in unit.text
        assert "import java.util.Date;" in unit.text
        assert "import jakarta.persistence.TemporalType;" in unit.text

    def test_blob_is_always_lob(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        assert add_basic_field(ctx, unit, FieldSpec(name="data", type="Blob")).ok
        assert "    @Column\n    @Lob\n    private Blob data;" in unit.text
        assert "import java.sql.Blob;" in unit.text

    @pytest.mark.parametrize(
        "spec",
        [
            FieldSpec(name="n", type="Integer", length=10),
            FieldSpec(name="n", type="String", precision=5),
            FieldSpec(name="n", type="Long", large_object=True),
            FieldSpec(name="n", type="Instant", temporal=TemporalType.DATE),
        ],
        ids=["length-on-integer", "precision-on-string", "lob-on-long", "temporal-on-instant"],
    )
    def test_rejects_options_for_type(self, ctx: GenerationContext, spec: FieldSpec) -> None:
        unit = load(EMPTY_USER)
        result = add_basic_field(ctx, unit, spec)
        assert isinstance(result.error, InvalidFieldOption)
        assert unit.text == EMPTY_USER

    def test_rejects_interface(self, ctx: GenerationContext) -> None:
        unit = load("interface Named {}\n")
        result = add_basic_field(ctx, unit, FieldSpec(name="name", type="String"))
        assert isinstance(result.error, UnsupportedDeclaration)

    def test_javax_namespace(self, tmp_path: Path) -> None:
        ctx = GenerationContext(
            project_root=tmp_path,
            path_validator=ProjectRootPathValidator(),
            settings=GeneratorSettings(persistence_namespace="javax.persistence"),
        )
        unit = load(EMPTY_USER)
        assert add_basic_field(ctx, unit, FieldSpec(name="email", type="String")).ok
        assert "import javax.persistence.Column;" in unit.text

    def test_writes_file_when_requested(self, writing_ctx: GenerationContext, tmp_path: Path) -> None:
        path = tmp_path / "User.java"
        path.write_text(EMPTY_USER, encoding="utf-8")
        unit = load_file(path)

        result = add_basic_field(writing_ctx, unit, FieldSpec(name="email", type="String"))

        assert result.ok
        assert result.change.written
        assert path.read_text(encoding="utf-8") == unit.text
        assert not unit.modified


class TestIdField:
    def test_auto_id(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        assert add_id_field(ctx, unit, FieldSpec(name="id", type="Long")).ok
        assert "    @Id\n    @GeneratedValue(strategy = GenerationType.AUTO)\n    private Long id;\n" in unit.text
        assert "import jakarta.persistence.GenerationType;" in unit.text

    def test_assigned_id_has_no_generated_value(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        assert add_id_field(ctx, unit, FieldSpec(name="code", type="String"), IdGeneration.NONE).ok
        assert "@GeneratedValue" not in unit.text
        assert "@Id\n    private String code;" in unit.text

    def test_sequence_generator(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        generator_spec = IdGeneratorSpec(name="user_seq", sequence_name="users_seq", allocation_size=1)
        assert add_id_field(ctx, unit, FieldSpec(name="id", type="Long"), IdGeneration.SEQUENCE, generator_spec).ok
        assert '@GeneratedValue(strategy = GenerationType.SEQUENCE, generator = "user_seq")' in unit.text
        assert '@SequenceGenerator(name = "user_seq", sequenceName = "users_seq", allocationSize = 1)' in unit.text

    def test_uuid_id_imports_uuid(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        assert add_id_field(ctx, unit, FieldSpec(name="id", type="UUID"), IdGeneration.UUID).ok
        assert "import java.util.UUID;" in unit.text

    def test_identity_needs_numeric_type(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        result = add_id_field(ctx, unit, FieldSpec(name="id", type="String"), IdGeneration.IDENTITY)
        assert isinstance(result.error, InvalidFieldOption)

    def test_generator_needs_sequence_or_table(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        result = add_id_field(ctx, unit, FieldSpec(name="id", type="Long"), IdGeneration.AUTO, IdGeneratorSpec(name="g"))
        assert isinstance(result.error, InvalidFieldOption)

    def test_second_id_rejected(self, ctx: GenerationContext, user_unit: SourceUnit) -> None:
        before = user_unit.source
        result = add_id_field(ctx, user_unit, FieldSpec(name="uuid", type="UUID"), IdGeneration.UUID)
        assert isinstance(result.error, DuplicateIdField)
        assert user_unit.source == before

    def test_same_name_reports_duplicate_field(self, ctx: GenerationContext, user_unit: SourceUnit) -> None:
        result = add_id_field(ctx, user_unit, FieldSpec(name="id", type="Long"))
        assert isinstance(result.error, DuplicateField)


class TestEnumField:
    def test_string_storage(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        spec = FieldSpec(name="status", type="Status", type_package="com.example.model", nullable=False)
        assert add_enum_field(ctx, unit, spec).ok
        assert "    @Enumerated(EnumType.STRING)\n    @Column(nullable = false)\n    private Status status;" in unit.text
        assert "import com.example.model.Status;" in unit.text

    def test_ordinal_storage_same_package(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        spec = FieldSpec(name="role", type="Role", type_package="com.example")
        assert add_enum_field(ctx, unit, spec, EnumStorage.ORDINAL).ok
        assert "@Enumerated(EnumType.ORDINAL)" in unit.text
        assert "import com.example.Role;" not in unit.text

    def test_rejects_precision(self, ctx: GenerationContext) -> None:
        unit = load(EMPTY_USER)
        result = add_enum_field(ctx, unit, FieldSpec(name="role", type="Role", precision=3))
        assert isinstance(result.error, InvalidFieldOption)

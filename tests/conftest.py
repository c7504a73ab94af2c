"""Shared fixtures and helpers for tests."""

import logging
from pathlib import Path

import pytest
from tree_sitter import Language, Parser
from tree_sitter_language_pack import get_language, get_parser

from jpa_sculpt.config import GeneratorSettings
from jpa_sculpt.core.source_unit import SourceUnit, load
from jpa_sculpt.fs.path_security import ProjectRootPathValidator
from jpa_sculpt.generators.context import GenerationContext

logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Sample sources
# ---------------------------------------------------------------------------

USER_ENTITY = """\
package com.example.domain;

import jakarta.persistence.Entity;
import jakarta.persistence.Id;

@Entity
public class User {

    @Id
    private Long id;

    private String name;
}
"""

ADDRESS_ENTITY = """\
package com.example.domain;

import jakarta.persistence.Entity;
import jakarta.persistence.Id;

@Entity
public class Address {

    @Id
    private Long id;
}
"""


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def queries_dir() -> Path:
    """Return the path to the queries directory."""
    return Path(__file__).parent.parent / "src" / "jpa_sculpt" / "queries"


@pytest.fixture
def java_parser() -> Parser:
    """Return a tree-sitter parser for Java."""
    return get_parser("java")


@pytest.fixture
def java_language() -> Language:
    """Return the tree-sitter Java language."""
    return get_language("java")


@pytest.fixture
def user_unit() -> SourceUnit:
    return load(USER_ENTITY)


@pytest.fixture
def address_unit() -> SourceUnit:
    return load(ADDRESS_ENTITY)


@pytest.fixture
def ctx(tmp_path: Path) -> GenerationContext:
    """In-memory generation context rooted at a temporary project."""
    return GenerationContext(project_root=tmp_path, path_validator=ProjectRootPathValidator())


@pytest.fixture
def writing_ctx(tmp_path: Path) -> GenerationContext:
    """Generation context that writes files below a temporary project."""
    return GenerationContext(
        project_root=tmp_path,
        path_validator=ProjectRootPathValidator(),
        settings=GeneratorSettings(),
        write=True,
    )


@pytest.fixture
def java_project(tmp_path: Path) -> Path:
    """Project with ``User`` and ``Address`` entities under the main source root."""
    package_dir = tmp_path / "src" / "main" / "java" / "com" / "example" / "domain"
    package_dir.mkdir(parents=True)
    (package_dir / "User.java").write_text(USER_ENTITY, encoding="utf-8")
    (package_dir / "Address.java").write_text(ADDRESS_ENTITY, encoding="utf-8")
    return tmp_path

"""Java naming rules and case conversions."""

import re

from jpa_sculpt.core.errors import InvalidIdentifier, InvalidPackage

RESERVED_WORDS = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char", "class", "const",
        "continue", "default", "do", "double", "else", "enum", "extends", "final", "finally", "float",
        "for", "goto", "if", "implements", "import", "instanceof", "int", "interface", "long", "native",
        "new", "package", "private", "protected", "public", "return", "short", "static", "strictfp",
        "super", "switch", "synchronized", "this", "throw", "throws", "transient", "try", "void",
        "volatile", "while", "true", "false", "null",
    }
)  # fmt: skip

_IDENTIFIER = re.compile(r"[^\W\d]\w*")
_PACKAGE_CHARS = re.compile(r"[\w.]+")
_WORD_BOUNDARY = re.compile(r"[-_\s]+")


def validate_identifier(name: str, what: str = "Java identifier") -> str:
    if not name or not name.strip():
        raise InvalidIdentifier(f"{what} cannot be empty")
    if not _IDENTIFIER.fullmatch(name):
        raise InvalidIdentifier(
            f"{what} '{name}' must start with a letter or underscore and contain only letters, digits and underscores"
        )
    if name in RESERVED_WORDS:
        raise InvalidIdentifier(f"'{name}' is a Java reserved word and cannot be used as an identifier")
    return name


def validate_package(package: str) -> str:
    if not package or not package.strip():
        raise InvalidPackage("Package name cannot be empty")
    if not _PACKAGE_CHARS.fullmatch(package):
        raise InvalidPackage(f"Package name '{package}' can only contain letters, numbers, dots and underscores")
    if package.startswith(".") or package.endswith(".") or ".." in package:
        raise InvalidPackage(f"Package name '{package}' cannot start or end with a dot or contain consecutive dots")
    for segment in package.split("."):
        if not _IDENTIFIER.fullmatch(segment) or segment in RESERVED_WORDS:
            raise InvalidPackage(f"Package segment '{segment}' of '{package}' is not a valid Java identifier")
    return package


def to_snake_case(name: str) -> str:
    """Convert CamelCase to snake_case (e.g. OrderLine -> order_line)."""
    s = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s)
    return _WORD_BOUNDARY.sub("_", s).strip("_").lower()

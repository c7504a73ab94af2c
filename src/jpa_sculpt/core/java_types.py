"""Catalog of Java types the generators know how to map and import."""

from __future__ import annotations

import re
from dataclasses import dataclass

PRIMITIVES = frozenset({"boolean", "byte", "char", "short", "int", "long", "float", "double"})

NUMERIC_TYPES = frozenset(
    {
        "byte", "short", "int", "long",
        "java.lang.Byte", "java.lang.Short", "java.lang.Integer", "java.lang.Long",
        "java.math.BigInteger", "java.math.BigDecimal",
    }
)  # fmt: skip


@dataclass(frozen=True)
class JavaType:
    name: str
    package: str | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name

    @property
    def base_name(self) -> str:
        return base_name(self.name)

    @property
    def import_name(self) -> str | None:
        """Name to import, ``None`` for primitives and ``java.lang`` types."""
        if self.package is None or self.package == "java.lang":
            return None
        return f"{self.package}.{self.base_name}"


BASIC_TYPES: tuple[JavaType, ...] = (
    JavaType("String", "java.lang"),
    JavaType("Long", "java.lang"),
    JavaType("Integer", "java.lang"),
    JavaType("Boolean", "java.lang"),
    JavaType("Double", "java.lang"),
    JavaType("BigDecimal", "java.math"),
    JavaType("Instant", "java.time"),
    JavaType("LocalDateTime", "java.time"),
    JavaType("LocalDate", "java.time"),
    JavaType("LocalTime", "java.time"),
    JavaType("OffsetDateTime", "java.time"),
    JavaType("OffsetTime", "java.time"),
    JavaType("Date", "java.util"),
    JavaType("Date", "java.sql"),
    JavaType("Time", "java.sql"),
    JavaType("Timestamp", "java.sql"),
    JavaType("TimeZone", "java.util"),
    JavaType("Byte[]", "java.lang"),
    JavaType("Blob", "java.sql"),
    JavaType("Byte", "java.lang"),
    JavaType("Character", "java.lang"),
    JavaType("Short", "java.lang"),
    JavaType("Float", "java.lang"),
    JavaType("BigInteger", "java.math"),
    JavaType("URL", "java.net"),
    JavaType("Duration", "java.time"),
    JavaType("ZonedDateTime", "java.time"),
    JavaType("Calendar", "java.util"),
    JavaType("Locale", "java.util"),
    JavaType("Currency", "java.util"),
    JavaType("Class", "java.lang"),
    JavaType("UUID", "java.util"),
    JavaType("Character[]", "java.lang"),
    JavaType("Clob", "java.sql"),
    JavaType("NClob", "java.sql"),
    JavaType("boolean"),
    JavaType("byte"),
    JavaType("float"),
    JavaType("char"),
    JavaType("int"),
    JavaType("double"),
    JavaType("short"),
    JavaType("long"),
    JavaType("byte[]"),
    JavaType("char[]"),
    JavaType("InetAddress", "java.net"),
    JavaType("ZoneOffset", "java.time"),
)

ID_TYPES: tuple[JavaType, ...] = (
    JavaType("Long", "java.lang"),
    JavaType("Integer", "java.lang"),
    JavaType("String", "java.lang"),
    JavaType("UUID", "java.util"),
)

TYPES_WITH_LENGTH = frozenset(
    {
        "java.lang.String", "java.net.URL", "java.util.Locale", "java.util.Currency", "java.lang.Class",
        "java.lang.Character[]", "char[]", "java.util.TimeZone", "java.time.ZoneOffset",
    }
)  # fmt: skip

TYPES_WITH_PRECISION_SCALE = frozenset({"java.math.BigDecimal"})

TYPES_WITH_TIME_ZONE_STORAGE = frozenset({"java.time.OffsetDateTime", "java.time.OffsetTime", "java.time.ZonedDateTime"})

TYPES_WITH_TEMPORAL = frozenset({"java.util.Date", "java.util.Calendar"})

LOB_CAPABLE_TYPES = frozenset(
    {
        "java.lang.String", "java.lang.Byte[]", "byte[]", "char[]", "java.lang.Character[]",
        "java.sql.Blob", "java.sql.Clob", "java.sql.NClob",
    }
)  # fmt: skip

LOB_REQUIRED_TYPES = frozenset({"java.sql.Blob", "java.sql.Clob", "java.sql.NClob"})

# Simple names resolved without an explicit package; `Date` prefers java.util.
_KNOWN_PACKAGES: dict[str, str] = {
    "Set": "java.util",
    "List": "java.util",
    "Collection": "java.util",
    "Map": "java.util",
    "Optional": "java.util",
}

_GENERIC_OR_ARRAY = re.compile(r"(<.*>)?(\[\])*$")


def base_name(type_text: str) -> str:
    """``List<Foo>`` -> ``List``, ``byte[]`` -> ``byte``, ``a.b.C`` -> ``C``."""
    stripped = _GENERIC_OR_ARRAY.sub("", type_text.strip())
    return stripped.rsplit(".", 1)[-1]


for _type in reversed(BASIC_TYPES):
    if _type.package:
        _KNOWN_PACKAGES[base_name(_type.name)] = _type.package


def is_primitive(type_text: str) -> bool:
    return base_name(type_text) in PRIMITIVES


def known_package(simple_name: str) -> str | None:
    return _KNOWN_PACKAGES.get(base_name(simple_name))


def resolve(type_text: str, package: str | None = None) -> JavaType:
    """Split ``type_text`` into simple name and package.

    A qualified name keeps its own package; otherwise ``package`` wins, then
    the catalog. Primitives never carry a package.
    """
    text = type_text.strip()
    suffix = _GENERIC_OR_ARRAY.search(text)
    tail = suffix.group(0) if suffix else ""
    head = text[: len(text) - len(tail)] if tail else text
    if "." in head:
        qualifier, simple = head.rsplit(".", 1)
        return JavaType(simple + tail, qualifier)
    if head in PRIMITIVES:
        return JavaType(text)
    return JavaType(text, package or known_package(head))

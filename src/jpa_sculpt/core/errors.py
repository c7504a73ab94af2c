"""Error hierarchy shared by the store, query, locator and generator layers."""

from __future__ import annotations


class JpaSculptError(Exception):
    """Base class for every failure raised by jpa_sculpt.

    ``kind`` is a stable identifier that survives into the response envelope.
    ``warnings`` holds what the failing operation had reported before it gave up.
    """

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.warnings: list[str] = []


class InvalidRange(JpaSculptError):
    kind = "invalid_range"


class StaleNode(JpaSculptError):
    kind = "stale_node"


class InvalidPattern(JpaSculptError):
    kind = "invalid_pattern"


class NotFound(JpaSculptError):
    kind = "not_found"


class DuplicateField(JpaSculptError):
    kind = "duplicate_field"

    def __init__(self, field_name: str, type_name: str | None = None) -> None:
        where = f" in {type_name}" if type_name else ""
        super().__init__(f"Field '{field_name}' already exists{where}")
        self.field_name = field_name


class DuplicateIdField(JpaSculptError):
    kind = "duplicate_id_field"

    def __init__(self, existing: str, type_name: str | None = None) -> None:
        where = f"{type_name} " if type_name else ""
        super().__init__(f"{where}already declares an identifier field '{existing}'".strip())
        self.existing = existing


class InvalidIdentifier(JpaSculptError):
    kind = "invalid_identifier"


class InvalidPackage(JpaSculptError):
    kind = "invalid_package"


class InvalidFieldOption(JpaSculptError):
    kind = "invalid_field_option"


class UnsupportedDeclaration(JpaSculptError):
    kind = "unsupported_declaration"


class MissingIdField(JpaSculptError):
    kind = "missing_id_field"

    def __init__(self, type_name: str) -> None:
        super().__init__(f"No @Id field found in {type_name} or its superclass")
        self.type_name = type_name


class TargetExists(JpaSculptError):
    kind = "target_exists"


class PathEscape(JpaSculptError):
    kind = "path_escape"


class WriteFailed(JpaSculptError):
    kind = "write_failed"


class PartialRelationshipFailure(JpaSculptError):
    """The owning side was applied but the inverse side was not.

    ``committed_side`` names the side whose edit is in effect and
    ``committed_path`` the file that was written, if any.
    """

    kind = "partial_relationship_failure"

    def __init__(
        self,
        committed_side: str,
        cause: JpaSculptError,
        committed_path: str | None = None,
    ) -> None:
        target = f" ({committed_path})" if committed_path else ""
        super().__init__(f"{committed_side} side committed{target}, other side failed: {cause.message}")
        self.committed_side = committed_side
        self.committed_path = committed_path
        self.cause = cause

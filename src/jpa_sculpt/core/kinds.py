from enum import StrEnum


class DeclarationKind(StrEnum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION_TYPE = "annotation_type"

    @property
    def keyword(self) -> str:
        match self:
            case DeclarationKind.ANNOTATION_TYPE:
                return "@interface"
            case _:
                return self.value

    @classmethod
    def from_node_kind(cls, node_kind: str) -> "DeclarationKind":
        match node_kind:
            case "class_declaration":
                return cls.CLASS
            case "interface_declaration":
                return cls.INTERFACE
            case "enum_declaration":
                return cls.ENUM
            case "record_declaration":
                return cls.RECORD
            case "annotation_type_declaration":
                return cls.ANNOTATION_TYPE
        raise ValueError(f"Not a type declaration: {node_kind}")


class JpaRole(StrEnum):
    ENTITY = "entity"
    MAPPED_SUPERCLASS = "mapped_superclass"
    EMBEDDABLE = "embeddable"


class IdGeneration(StrEnum):
    NONE = "NONE"
    AUTO = "AUTO"
    IDENTITY = "IDENTITY"
    SEQUENCE = "SEQUENCE"
    TABLE = "TABLE"
    UUID = "UUID"


class EnumStorage(StrEnum):
    STRING = "STRING"
    ORDINAL = "ORDINAL"


class CascadeType(StrEnum):
    ALL = "ALL"
    PERSIST = "PERSIST"
    MERGE = "MERGE"
    REMOVE = "REMOVE"
    REFRESH = "REFRESH"
    DETACH = "DETACH"


class FetchType(StrEnum):
    DEFAULT = "DEFAULT"
    LAZY = "LAZY"
    EAGER = "EAGER"


class CollectionType(StrEnum):
    SET = "Set"
    LIST = "List"
    COLLECTION = "Collection"


class TemporalType(StrEnum):
    DATE = "DATE"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"


class TimeZoneStorage(StrEnum):
    NATIVE = "NATIVE"
    NORMALIZE = "NORMALIZE"
    NORMALIZE_UTC = "NORMALIZE_UTC"
    COLUMN = "COLUMN"
    AUTO = "AUTO"
    DEFAULT = "DEFAULT"


class RelationshipSide(StrEnum):
    OWNING = "owning"
    INVERSE = "inverse"

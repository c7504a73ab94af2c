from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from jpa_sculpt.core.kinds import (
    CascadeType,
    CollectionType,
    FetchType,
    TemporalType,
    TimeZoneStorage,
)

Visibility = Literal["private", "protected", "public", "package"]


class FieldSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    type_package: str | None = None
    visibility: Visibility = "private"
    column_name: str | None = None
    nullable: bool = True
    unique: bool = False
    length: int | None = Field(default=None, gt=0)
    precision: int | None = Field(default=None, gt=0)
    scale: int | None = Field(default=None, ge=0)
    large_object: bool = False
    temporal: TemporalType | None = None
    time_zone_storage: TimeZoneStorage | None = None

    @property
    def has_column_options(self) -> bool:
        return (
            self.column_name is not None
            or not self.nullable
            or self.unique
            or self.length is not None
            or self.precision is not None
            or self.scale is not None
        )


class IdGeneratorSpec(BaseModel):
    """Named sequence or table generator backing ``@GeneratedValue``."""

    model_config = ConfigDict(frozen=True)

    name: str
    sequence_name: str | None = None
    initial_value: int = 1
    allocation_size: int = 50


class AnnotationSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    package: str | None = None
    arguments: dict[str, str] = Field(default_factory=dict)

    @property
    def qualified_name(self) -> str | None:
        return f"{self.package}.{self.name}" if self.package else None


class OwningSideSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    target_type: str | None = None
    target_package: str | None = None
    cascades: tuple[CascadeType, ...] = ()
    fetch: FetchType = FetchType.DEFAULT
    optional: bool = True
    orphan_removal: bool = False
    unique: bool = False
    join_column: str | None = None


class InverseSideSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    cascades: tuple[CascadeType, ...] = ()
    fetch: FetchType = FetchType.DEFAULT
    orphan_removal: bool = False
    collection: CollectionType = CollectionType.SET


class RelationshipSpec(BaseModel):
    """Both halves of a relationship; ``inverse`` is ``None`` for unidirectional mappings."""

    model_config = ConfigDict(frozen=True)

    owning: OwningSideSpec
    inverse: InverseSideSpec | None = None


class FieldInfo(BaseModel):
    name: str
    type: str
    package: str | None = None
    annotations: list[str] = Field(default_factory=list)


class EntityInfo(BaseModel):
    name: str
    kind: str
    package: str | None = None
    path: str | None = None
    is_jpa_entity: bool = False
    jpa_role: str | None = None
    superclass: str | None = None
    id_field_name: str | None = None
    id_field_type: str | None = None
    id_field_package: str | None = None
    fields: list[FieldInfo] = Field(default_factory=list)


class FileResponse(BaseModel):
    file_type: str
    file_package: str | None = None
    file_path: str | None = None
    b64_source: str | None = None


class ErrorDetail(BaseModel):
    kind: str
    message: str
    committed_side: str | None = None
    committed_path: str | None = None


T = TypeVar("T")


class Response(BaseModel, Generic[T]):
    succeed: bool
    data: T | None = None
    error: ErrorDetail | None = None
    warnings: list[str] = Field(default_factory=list)

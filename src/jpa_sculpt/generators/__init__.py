from jpa_sculpt.generators.annotations import add_annotation, add_annotation_argument
from jpa_sculpt.generators.context import FileChange, GenerationContext, GenerationResult
from jpa_sculpt.generators.entity_info import describe_entity, list_entities
from jpa_sculpt.generators.fields import add_basic_field, add_enum_field, add_id_field
from jpa_sculpt.generators.imports import ensure_import
from jpa_sculpt.generators.relationships import add_many_to_one, add_one_to_one, normalize_cascades
from jpa_sculpt.generators.repository import create_repository
from jpa_sculpt.generators.types import create_type

__all__ = [
    "FileChange",
    "GenerationContext",
    "GenerationResult",
    "add_annotation",
    "add_annotation_argument",
    "add_basic_field",
    "add_enum_field",
    "add_id_field",
    "add_many_to_one",
    "add_one_to_one",
    "create_repository",
    "create_type",
    "describe_entity",
    "ensure_import",
    "list_entities",
    "normalize_cascades",
]

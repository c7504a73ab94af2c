import os
from typing import Literal

from pydantic import BaseModel, ConfigDict

ENV_PREFIX = "JPA_SCULPT_"


class GeneratorSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    persistence_namespace: Literal["jakarta.persistence", "javax.persistence"] = "jakarta.persistence"
    repository_base: str = "org.springframework.data.jpa.repository.JpaRepository"
    default_indent: str = "    "
    main_source_root: str = "src/main/java"
    test_source_root: str = "src/test/java"

    def persistence(self, annotation: str) -> str:
        return f"{self.persistence_namespace}.{annotation}"

    @property
    def repository_base_name(self) -> str:
        return self.repository_base.rsplit(".", 1)[-1]


def settings_from_env() -> GeneratorSettings:
    """Build settings from ``JPA_SCULPT_*`` variables; unset ones keep their defaults."""
    values: dict[str, str] = {}
    for field_name in GeneratorSettings.model_fields:
        value = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            values[field_name] = value
    return GeneratorSettings.model_validate(values)


def log_level_from_env(default: str = "WARNING") -> str:
    return os.getenv(f"{ENV_PREFIX}LOG_LEVEL", default).upper()

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from schemas.errors import ConfigMissing

PROPERTIES_PATH_ENV = "UAC_ANALYZER_PROPERTIES"
DEFAULT_PROPERTIES_PATH = "environment.properties"


def read_properties(path: Path) -> dict[str, str]:
    """Parse a Java-style ``key=value`` properties file.

    Dotted keys are mapped onto settings field names, so ``jira.host``
    becomes ``jira_host``. Lines starting with ``#`` or ``!`` are comments.
    """
    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue
        sep = min((i for i in (line.find("="), line.find(":")) if i != -1), default=-1)
        if sep == -1:
            continue
        key = line[:sep].strip().replace(".", "_").lower()
        values[key] = line[sep + 1:].strip()
    return values


class PropertiesFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by ``environment.properties``."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        path = Path(os.environ.get(PROPERTIES_PATH_ENV, DEFAULT_PROPERTIES_PATH))
        self._values = read_properties(path) if path.is_file() else {}

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._values.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field, field_name)
            if value is not None:
                data[key] = value
        return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ── Jira ─────────────────────────────────────────────────────────────────
    jira_host: str
    jira_user: str
    jira_password: str
    jira_timeout_seconds: float = 30.0

    # ── Ollama ───────────────────────────────────────────────────────────────
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "mistral"
    # None waits for as long as the model needs to answer
    ollama_timeout_seconds: Optional[float] = None

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    activity_log_path: str = "logs/activity.jsonl"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PropertiesFileSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(**overrides: Any) -> Settings:
    """Build the settings object, raising ConfigMissing if Jira access is not configured."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        missing = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        raise ConfigMissing(missing) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

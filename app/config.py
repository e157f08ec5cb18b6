from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import EQUALITY_TOLERANCE, INTERSECTION_TOLERANCE

DEFAULT_CONFIG_PATH = Path("config/shape_graph.yaml")
CONFIG_PATH_ENV = "SHAPEGRAPH_CONFIG_PATH"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class EditorSettings(BaseModel):
    equality_tolerance: float = Field(default=EQUALITY_TOLERANCE, gt=0)
    intersection_tolerance: float = Field(default=INTERSECTION_TOLERANCE, ge=0, lt=0.5)
    legacy_shape: Literal["polygon", "path"] = "polygon"
    json_indent: bool = True
    log_level: str = "WARNING"

    @field_validator("legacy_shape", mode="before")
    @classmethod
    def normalize_legacy_shape(cls, value: object) -> str:
        return str(value).strip().lower() if value else "polygon"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value).strip().upper() if value else "WARNING"
        if level not in _LOG_LEVELS:
            msg = f"editor.log_level must be one of {sorted(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHAPEGRAPH_", env_nested_delimiter="__")

    editor: EditorSettings = EditorSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv(CONFIG_PATH_ENV)
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import DEFAULT_SEGMENT_LENGTH, MAX_SEGMENT_LENGTH, MIN_SEGMENT_LENGTH
from domain.services.layer_stack import LAYER_PALETTE
from domain.services.loop_growth import LoopConfig

DEFAULT_CONFIG_PATH = Path("config/editor.yaml")


def _split_string_list_value(raw_value: str) -> list[str]:
    raw = raw_value.strip()
    if raw.startswith("[") and raw.endswith("]"):
        raw = raw[1:-1].strip()
    if not raw:
        return []
    return [
        token for token in (part.strip().strip("'").strip('"') for part in raw.split(",")) if token
    ]


class EditorSettings(BaseModel):
    title: str = "Layer Composer"
    theme: Literal["light", "dark"] = "light"
    initial_text: str = "Hello World"
    default_segment_length: int = Field(
        DEFAULT_SEGMENT_LENGTH, ge=MIN_SEGMENT_LENGTH, le=MAX_SEGMENT_LENGTH
    )
    palette: list[str] = Field(default_factory=lambda: list(LAYER_PALETTE))
    canvas_width: float = Field(800.0, gt=0)
    canvas_height: float = Field(600.0, gt=0)

    @field_validator("theme", mode="before")
    @classmethod
    def normalize_theme(cls, value: object) -> str:
        return str(value).strip().lower() if value else "light"

    @field_validator("palette", mode="before")
    @classmethod
    def normalize_palette(cls, value: object) -> list[str]:
        if value is None or value == "":
            return list(LAYER_PALETTE)
        if isinstance(value, str):
            colors = _split_string_list_value(value)
        elif isinstance(value, list):
            colors = [str(item).strip() for item in value if str(item).strip()]
        else:
            colors = _split_string_list_value(str(value))
        if not colors:
            msg = "editor.palette must contain at least one color"
            raise ValueError(msg)
        return [color.lower() for color in colors]


class LoopSettings(BaseModel):
    tick_interval_ms: float = Field(15.0, gt=0)
    closure_tolerance: float = Field(0.5, gt=0)
    min_length_factor: int = Field(4, ge=1)
    min_length_floor: int = Field(40, ge=0)
    max_text_length: int = Field(8000, ge=1)

    def to_loop_config(self) -> LoopConfig:
        return LoopConfig(
            tick_interval_seconds=self.tick_interval_ms / 1000.0,
            closure_tolerance=self.closure_tolerance,
            min_length_factor=self.min_length_factor,
            min_length_floor=self.min_length_floor,
            max_text_length=self.max_text_length,
        )


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(8080, ge=1, le=65535)
    log_level: str = "info"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return str(value).strip().lower() if value else "info"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CURVES_", env_nested_delimiter="__")

    editor: EditorSettings = EditorSettings()
    loop: LoopSettings = LoopSettings()
    server: ServerSettings = ServerSettings()

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
    env_path = os.getenv("CURVES_CONFIG_PATH")
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

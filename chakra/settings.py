from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from chakra.exceptions import ConfigurationError
from chakra.layout.config import DEFAULT_PAGE_LAYERS, LayoutOptions, OverlayLayer

DEFAULT_CONFIG_PATH = Path("config/default.yaml")

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


class ExportSettings(BaseModel):
    output_dir: Path = Path("out")
    page_margin_pt: float = Field(36.0, ge=0.0, le=288.0)
    include_chart_page: bool = True
    include_metadata_page: bool = True
    preview_max_dimension: int = Field(2400, ge=64, le=16384)
    pages: list[str] = Field(default_factory=lambda: list(DEFAULT_PAGE_LAYERS))

    @field_validator("pages", mode="before")
    @classmethod
    def _default_pages(cls, value: object) -> object:
        if value is None:
            return list(DEFAULT_PAGE_LAYERS)
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("pages")
    @classmethod
    def _known_layers(cls, value: list[str]) -> list[str]:
        for spec in value:
            OverlayLayer.parse(spec)
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    log_file: Path | None = None

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


class Settings(BaseModel):
    layout: LayoutOptions = Field(default_factory=LayoutOptions)
    export: ExportSettings = Field(default_factory=ExportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                CHAKRA_CONFIG environment variable or defaults to config/default.yaml.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigurationError: If the file does not exist or its content is invalid.
        """
        config_path = path or Path(os.getenv("CHAKRA_CONFIG", str(DEFAULT_CONFIG_PATH)))
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)},
            )
        with config_path.open("r", encoding="utf-8") as fp:
            try:
                payload = yaml.safe_load(fp) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}", {"path": str(config_path)}) from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}", {"path": str(config_path)})
        try:
            return cls(**payload)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", {"path": str(config_path)}) from exc


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    """Cached settings. Falls back to built-in defaults when no file is configured at all."""
    if path is None and not os.getenv("CHAKRA_CONFIG") and not DEFAULT_CONFIG_PATH.exists():
        return Settings()
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "ExportSettings",
    "LoggingSettings",
    "get_settings",
]

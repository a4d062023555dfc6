"""Configuration system for ReelSub.

Layered config loading (lowest to highest priority):
1. config/default.toml (shipped with package)
2. ~/.config/reelsub/config.toml (user-level)
3. ./reelsub.toml (project-level)
4. Environment variables (REELSUB_TRANSCRIPTION__MODEL, etc.)
5. CLI flags
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_DEFAULT_CONFIG = _PACKAGE_ROOT / "config" / "default.toml"
_USER_CONFIG = Path.home() / ".config" / "reelsub" / "config.toml"
_PROJECT_CONFIG = Path("reelsub.toml")


class TranscriptionConfig(BaseModel):
    model: str = "gemini/gemini-3-flash-preview"
    api_base: str | None = None  # Custom endpoint (e.g. a proxy in front of Gemini)
    temperature: float = 0.2
    max_tokens: int = 8192
    languages: list[str] = ["ru", "fr"]
    max_file_mb: int = 20  # Inline upload limit for the model API


class NotifierConfig(BaseModel):
    duration: float = 2.0  # seconds
    message: str = "Copied!"


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8321
    open_browser: bool = True


class ReelsubConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REELSUB_",
        env_nested_delimiter="__",
    )

    transcription: TranscriptionConfig = TranscriptionConfig()
    notifier: NotifierConfig = NotifierConfig()
    server: ServerConfig = ServerConfig()
    workspace_dir: Path = Path("./reelsub_workspace")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Env beats the TOML layers, which arrive as init arguments
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def media_dir(self) -> Path:
        """Directory holding media handles of live sessions."""
        return self.workspace_dir / ".media"


def _load_toml(path: Path) -> dict:
    """Load a TOML file if it exists, return empty dict otherwise."""
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(**cli_overrides: object) -> ReelsubConfig:
    """Load configuration from all layers and merge.

    Args:
        **cli_overrides: Direct overrides from CLI flags. Keys can be
            dot-separated (e.g. server.port=9000).
    """
    config_data: dict = {}
    for path in (_DEFAULT_CONFIG, _USER_CONFIG, _PROJECT_CONFIG):
        layer = _load_toml(path)
        config_data = _deep_merge(config_data, layer)

    # Flatten 'general' section into top-level
    if "general" in config_data:
        general = config_data.pop("general")
        config_data = _deep_merge(config_data, general)

    # Env vars are handled by Pydantic BaseSettings
    config = ReelsubConfig(**config_data)

    for key, value in cli_overrides.items():
        if value is None:
            continue
        config = _override(config, key.split("."), value)
    return config


def _override(model: BaseModel, parts: list[str], value: object) -> BaseModel:
    """Return a copy of model with the dotted field path set to value."""
    head, *rest = parts
    if rest:
        value = _override(getattr(model, head), rest, value)
    return model.model_copy(update={head: value})

"""Configuration management using Pydantic Settings.

Loads configuration from multiple sources with the following priority (highest first):
1. Environment variables (SCRIBE_* prefix, ``__`` for nesting)
2. ~/scribe.env file
3. config.local.yaml (if exists)
4. config.yaml
5. Default values
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CorsSettings(BaseModel):
    """CORS configuration."""

    allowed_origins: list[str] = ["http://localhost:3000"]
    allowed_methods: list[str] = ["GET", "POST", "OPTIONS"]
    allowed_headers: list[str] = [
        "Content-Type",
        "X-Request-ID",
    ]


class ServerSettings(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 5000
    workers: int = 1
    cors: CorsSettings = Field(default_factory=CorsSettings)


class CapabilitySettings(BaseModel):
    """Which generation backend serves sessions."""

    provider: Literal["openai", "echo"] = "openai"
    enabled: bool = True


class OpenAISettings(BaseModel):
    """OpenAI (or OpenAI-compatible) provider configuration."""

    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    # Only OpenAI-compatible servers (vLLM, Ollama) accept top_k
    send_top_k: bool = False


class GenerationSettings(BaseModel):
    """Defaults and limits applied to every generation session."""

    default_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    default_sampling_breadth: int = Field(default=40, ge=1)
    max_sampling_breadth: int = Field(default=128, ge=1)
    max_context_chars: int = Field(default=4000, ge=1)
    max_output_units: int = Field(default=1000, ge=1)


class UploadSettings(BaseModel):
    """Document upload limits."""

    max_file_bytes: int = 10 * 1024 * 1024
    allowed_extensions: list[str] = [".pdf", ".txt", ".md"]


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class HealthSettings(BaseModel):
    """Health check configuration."""

    provider_check_enabled: bool = True
    timeout_seconds: int = 5


def _load_yaml_config(config_dir: Path) -> dict:
    """Load configuration from YAML files.

    Loads config.yaml and optionally overlays config.local.yaml.
    """
    config = {}

    config_file = config_dir / "config.yaml"
    if config_file.exists():
        with open(config_file) as f:
            config = yaml.safe_load(f) or {}

    local_config_file = config_dir / "config.local.yaml"
    if local_config_file.exists():
        with open(local_config_file) as f:
            local_config = yaml.safe_load(f) or {}
            config = _deep_merge(config, local_config)

    return config


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Settings(BaseSettings):
    """Application settings loaded from environment, .env, and config files."""

    model_config = SettingsConfigDict(
        env_prefix="SCRIBE_",
        env_nested_delimiter="__",
        env_file=Path.home() / "scribe.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    capability: CapabilitySettings = Field(default_factory=CapabilitySettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)

    # Direct environment variable mappings for common settings
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(default=None, validation_alias="OPENAI_API_BASE_URL")

    def __init__(self, config_dir: Path | None = None, **data):
        """Initialize settings, loading from YAML if config_dir provided."""
        if config_dir is not None:
            yaml_config = _load_yaml_config(config_dir)
            # Explicit data wins over YAML
            merged = _deep_merge(yaml_config, data)
            super().__init__(**merged)
        else:
            super().__init__(**data)

        if self.openai_api_key and not self.openai.api_key:
            self.openai.api_key = self.openai_api_key

        if self.openai_base_url:
            self.openai.base_url = self.openai_base_url

    @model_validator(mode="after")
    def check_sampling_bounds(self) -> "Settings":
        """Keep the default sampling breadth inside the advertised maximum."""
        generation = self.generation
        if generation.default_sampling_breadth > generation.max_sampling_breadth:
            raise ValueError(
                "generation.default_sampling_breadth cannot exceed "
                "generation.max_sampling_breadth"
            )
        return self

    def validate_required(self) -> None:
        """Validate that required settings are present.

        Raises:
            ValueError: If required settings are missing.
        """
        if (
            self.capability.enabled
            and self.capability.provider == "openai"
            and not self.openai.api_key
        ):
            raise ValueError(
                "OPENAI_API_KEY environment variable or openai.api_key config is required"
            )


@lru_cache
def get_settings(config_dir: Path | None = None) -> Settings:
    """Get cached settings instance.

    Args:
        config_dir: Optional path to config directory. If None, only environment
                   variables and .env file are used.

    Returns:
        Settings instance.
    """
    if config_dir is None:
        # Try to find config directory relative to project root
        project_root = Path(__file__).parent.parent.parent
        default_config_dir = project_root / "config"
        if default_config_dir.exists():
            config_dir = default_config_dir

    return Settings(config_dir=config_dir)

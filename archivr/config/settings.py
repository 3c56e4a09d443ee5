"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from archivr.config.constants import (
    APP_TITLE,
    DEFAULT_APP_URL,
    DEFAULT_CONFIG_FILE,
    DEFAULT_COOLDOWN,
    DEFAULT_COURTESY_DELAY,
    DEFAULT_FAILURE_BACKOFF,
    DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_FREE_MODELS,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_TOKENS,
    DEFAULT_PAID_MODELS,
    DEFAULT_PROGRESS_EVERY,
    DEFAULT_RETRY_SETTLE_DELAY,
    DEFAULT_RETRY_SPACING,
    DEFAULT_TEMPERATURE,
    OPENROUTER_BASE_URL,
)


class OpenRouterConfig(BaseModel):
    """Connection settings for the OpenRouter chat-completion endpoint."""

    base_url: str = OPENROUTER_BASE_URL
    api_key: str | None = None
    api_key_env: str | None = None
    timeout: int = Field(default=DEFAULT_LLM_TIMEOUT, ge=1)
    app_url: str = DEFAULT_APP_URL  # Sent as HTTP-Referer
    app_title: str = APP_TITLE  # Sent as X-Title
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1)


class ModelTierConfig(BaseModel):
    """Ordered model identifiers, free tier first."""

    free: list[str] = Field(default_factory=lambda: list(DEFAULT_FREE_MODELS))
    paid: list[str] = Field(default_factory=lambda: list(DEFAULT_PAID_MODELS))

    @field_validator("free", "paid")
    @classmethod
    def _strip_blank(cls, value: list[str]) -> list[str]:
        return [m.strip() for m in value if m and m.strip()]


class BatchConfig(BaseModel):
    """Pacing for batch tagging. All delays are in seconds."""

    courtesy_delay: float = Field(default=DEFAULT_COURTESY_DELAY, ge=0)
    failure_backoff: float = Field(default=DEFAULT_FAILURE_BACKOFF, ge=0)
    failure_threshold: int = Field(default=DEFAULT_FAILURE_THRESHOLD, ge=1)
    cooldown: float = Field(default=DEFAULT_COOLDOWN, ge=0)
    retry_settle_delay: float = Field(default=DEFAULT_RETRY_SETTLE_DELAY, ge=0)
    retry_spacing: float = Field(default=DEFAULT_RETRY_SPACING, ge=0)
    progress_every: int = Field(default=DEFAULT_PROGRESS_EVERY, ge=1)


class ArchivrSettings(BaseSettings):
    """Main configuration class for Archivr."""

    model_config = SettingsConfigDict(
        env_prefix="ARCHIVR_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    openrouter: OpenRouterConfig = Field(default_factory=OpenRouterConfig)
    models: ModelTierConfig = Field(default_factory=ModelTierConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR


@lru_cache
def get_settings() -> ArchivrSettings:
    """Get cached settings instance."""
    return ArchivrSettings()


def reload_settings() -> ArchivrSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()

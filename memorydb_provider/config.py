"""Configuration management for the MemoryDB subnet group provider.

This module handles loading and validating configuration from environment
variables with sensible defaults.
"""

from typing import Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.tag_policy import DefaultTagsConfig, IgnoreTagsConfig


class Settings(BaseSettings):
    """
    Provider settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Collection settings (tags, ignore lists) are given as JSON,
    e.g. DEFAULT_TAGS='{"Owner": "platform"}'.
    """

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region of the managed subnet groups",
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION")
    )
    max_retries: int = Field(
        default=5,
        description="Attempts for throttled API calls",
        ge=1,
        validation_alias="MEMORYDB_MAX_RETRIES"
    )

    # Tag policy
    default_tags: dict[str, str] = Field(
        default_factory=dict,
        description="Tags merged into every managed resource",
        validation_alias="DEFAULT_TAGS"
    )
    ignore_tag_keys: set[str] = Field(
        default_factory=set,
        description="Tag keys never managed nor reported as drift",
        validation_alias="IGNORE_TAG_KEYS"
    )
    ignore_tag_key_prefixes: set[str] = Field(
        default_factory=set,
        description="Tag key prefixes never managed nor reported as drift",
        validation_alias="IGNORE_TAG_KEY_PREFIXES"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="LOG_LEVEL"
    )
    cloudwatch_enabled: bool = Field(
        default=False,
        description="Enable CloudWatch logging",
        validation_alias="CLOUDWATCH_ENABLED"
    )
    cloudwatch_log_group: str = Field(
        default="/memorydb/provider",
        description="CloudWatch log group name",
        validation_alias="CLOUDWATCH_LOG_GROUP"
    )
    cloudwatch_log_stream: Optional[str] = Field(
        default=None,
        description="CloudWatch log stream name (defaults to 'reconciler')",
        validation_alias="CLOUDWATCH_LOG_STREAM"
    )

    model_config = SettingsConfigDict(
        env_prefix="",  # No prefix for environment variables
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def default_tags_config(self) -> DefaultTagsConfig:
        """Default tag policy built from these settings."""
        return DefaultTagsConfig(tags=self.default_tags)

    def ignore_tags_config(self) -> IgnoreTagsConfig:
        """Ignore tag policy built from these settings."""
        return IgnoreTagsConfig(
            keys=self.ignore_tag_keys,
            key_prefixes=self.ignore_tag_key_prefixes,
        )


def get_settings() -> Settings:
    """
    Get provider settings.

    Loads settings from environment variables and .env file.

    Returns:
        Settings instance with all configuration values
    """
    return Settings()


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def settings() -> Settings:
    """
    Get the global settings instance.

    Creates the settings instance on first call and caches it.

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings

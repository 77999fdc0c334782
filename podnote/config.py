"""Configuration management for PodNote."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in config values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

        def replacer(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replacer, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


class AgentConfig(BaseModel):
    """LLM settings used for episode ranking."""
    name: str = "PodNote"
    model: str = "gpt-4o-mini"
    provider: str = "openai"
    temperature: float = 0.7
    max_tokens: int = 2048


class ProviderConfig(BaseModel):
    """LLM provider configuration."""
    api_key: str = ""
    base_url: str | None = None


class ProvidersConfig(BaseModel):
    """All LLM providers configuration."""
    openai: ProviderConfig = Field(default_factory=ProviderConfig)
    openrouter: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://openrouter.ai/api/v1")
    )


class StorageConfig(BaseSettings):
    """Agent working-folder storage configuration.

    Values are populated in priority order:
      1. Environment variables (no prefix required)
      2. Explicitly passed kwargs (from config.yaml via the Config class)
      3. Field defaults

    Env var mapping:
      working_dir        <- AGENT_WORKING_DIR
      github_token       <- GITHUB_TOKEN
      github_repo        <- GITHUB_REPO
      github_branch      <- AGENT_BRANCH
      deployment_marker  <- VERCEL
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    # "auto" | "local" | "github"
    backend: str = Field(default="auto", validation_alias=AliasChoices("backend", "AGENT_FS_BACKEND"))
    working_dir: str = Field(
        default="./AGENT_WORKING_FOLDER",
        validation_alias=AliasChoices("working_dir", "AGENT_WORKING_DIR"),
    )
    github_token: str = Field(default="", validation_alias=AliasChoices("github_token", "GITHUB_TOKEN"))
    github_repo: str = Field(default="", validation_alias=AliasChoices("github_repo", "GITHUB_REPO"))
    github_branch: str = Field(
        default="vercel-agent-commit",
        validation_alias=AliasChoices("github_branch", "AGENT_BRANCH"),
    )
    github_base_path: str = "AGENT_WORKING_FOLDER"
    github_api_url: str = "https://api.github.com"
    deployment_marker: str = Field(default="", validation_alias=AliasChoices("deployment_marker", "VERCEL"))
    timeout_seconds: float = 15.0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        **kwargs,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # env wins over init (YAML kwargs)
        return (env_settings, init_settings, dotenv_settings)


class NotionConfig(BaseModel):
    """Notion API configuration."""
    token: str = ""
    api_url: str = "https://api.notion.com/v1"
    api_version: str = "2025-09-03"
    timeout_seconds: float = 30.0


class RecommendationConfig(BaseModel):
    """Episode recommendation configuration."""
    default_top_n: int = 3
    default_days: int = 90
    max_episodes_per_feed: int = 10
    feed_timeout_seconds: float = 10.0
    max_description_length: int = 5000
    default_criteria: str = (
        "Prefer episodes with substantive, well-researched discussion over news recaps. "
        "Favor technology, history, entrepreneurship and investing topics. "
        "Avoid promotional content and travel logs."
    )


class PodcastConfig(BaseModel):
    """Podcast discovery configuration."""
    itunes_url: str = "https://itunes.apple.com/search"
    search_limit: int = 5
    timeout_seconds: float = 10.0
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)


class APIConfig(BaseModel):
    """API server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "json"


class Config(BaseSettings):
    """Main PodNote configuration."""
    agent: AgentConfig = Field(default_factory=AgentConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    notion: NotionConfig = Field(default_factory=NotionConfig)
    podcast: PodcastConfig = Field(default_factory=PodcastConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("storage", mode="before")
    @classmethod
    def _build_storage(cls, value: Any) -> Any:
        # Nested settings are validated without their env sources unless built explicitly
        if isinstance(value, dict):
            return StorageConfig(**value)
        return value


def load_config(config_path: str | Path = "config.yaml") -> Config:
    """Load configuration from YAML file with environment variable substitution.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Loaded and validated Config object.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return Config()

    config_data = _substitute_env_vars(raw_config)

    return Config(**config_data)


def generate_default_config() -> str:
    """Return the default configuration file contents."""
    return """\
# PodNote Configuration
# Environment variables can be substituted with ${VAR_NAME} syntax

agent:
  name: "PodNote"
  model: "gpt-4o-mini"
  provider: "openai"
  temperature: 0.7
  max_tokens: 2048

providers:
  openai:
    api_key: "${OPENAI_API_KEY}"
  openrouter:
    api_key: "${OPENROUTER_API_KEY}"
    base_url: "https://openrouter.ai/api/v1"

# Storage backend for the agent working folder.
# "auto" uses GitHub when VERCEL is set (GITHUB_TOKEN and GITHUB_REPO are then required),
# otherwise the local filesystem.
storage:
  backend: "auto"
  working_dir: "./AGENT_WORKING_FOLDER"
  github_branch: "vercel-agent-commit"
  github_base_path: "AGENT_WORKING_FOLDER"

notion:
  token: "${NOTION_TOKEN}"

podcast:
  search_limit: 5
  recommendation:
    default_top_n: 3
    default_days: 90
    max_episodes_per_feed: 10
    feed_timeout_seconds: 10

api:
  host: "0.0.0.0"
  port: 8000
  cors_origins:
    - "http://localhost:3000"

logging:
  level: "INFO"
  format: "json"
"""

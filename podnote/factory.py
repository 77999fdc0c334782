"""Factory functions wiring storage, providers, commands and skills together.

Every consumer receives its storage backend from here; nothing looks the
backend up globally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from podnote.storage import AgentFS, GitHubFS, LocalFS, StorageConfigError
from podnote.utils import get_logger

if TYPE_CHECKING:
    from podnote.config import Config, StorageConfig
    from podnote.core import ToolExecutor
    from podnote.gateway import CommandExecutor
    from podnote.notion import DatasourceStore, NotionClient, SkillStore
    from podnote.podcast import FeedFetcher, ITunesClient
    from podnote.providers.base import LLMProvider
    from podnote.skills import SkillLoader

logger = get_logger(__name__)

BACKENDS = ("auto", "local", "github")


def select_backend(config: "StorageConfig") -> str:
    """Decide which storage backend to use.

    ``auto`` picks GitHub when the deployment marker (``VERCEL``) is set and
    the local filesystem otherwise.

    Raises:
        StorageConfigError: On an unknown backend name, or when GitHub is
            selected without ``GITHUB_TOKEN``/``GITHUB_REPO``
    """
    backend = config.backend.strip().lower()
    if backend not in BACKENDS:
        raise StorageConfigError(f"Unknown storage backend: {config.backend}. Supported: {', '.join(BACKENDS)}")

    if backend == "auto":
        backend = "github" if config.deployment_marker else "local"

    if backend == "github" and (not config.github_token or not config.github_repo):
        raise StorageConfigError(
            "GitHub storage selected but GITHUB_TOKEN and GITHUB_REPO are not both set"
        )
    return backend


def create_storage(
    config: "StorageConfig",
    transport: httpx.AsyncBaseTransport | None = None,
) -> AgentFS:
    """Build the storage backend once at startup.

    Args:
        config: Storage configuration
        transport: Optional httpx transport for the GitHub backend

    Returns:
        Configured AgentFS
    """
    backend = select_backend(config)

    if backend == "github":
        fs: AgentFS = GitHubFS(
            token=config.github_token,
            repo=config.github_repo,
            branch=config.github_branch,
            base_path=config.github_base_path,
            api_url=config.github_api_url,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )
    else:
        fs = LocalFS(config.working_dir)

    logger.info("Storage backend selected", extra={"backend": fs.backend_name})
    return fs


def create_provider(config: "Config") -> "LLMProvider | None":
    """Create an LLM provider based on configuration.

    Returns:
        Configured provider, or None when no API key is set
    """
    provider_name = config.agent.provider.lower()
    model = config.agent.model

    if provider_name == "openai":
        settings = config.providers.openai
    elif provider_name == "openrouter":
        settings = config.providers.openrouter
    else:
        raise ValueError(f"Unknown provider: {provider_name}. Supported: openai, openrouter")

    if not settings.api_key:
        logger.warning(f"No API key configured for provider {provider_name}")
        return None

    from podnote.providers.openai import OpenAIProvider
    return OpenAIProvider(
        api_key=settings.api_key,
        model=model,
        base_url=settings.base_url,
        default_temperature=config.agent.temperature,
        default_max_tokens=config.agent.max_tokens,
    )


def create_notion_client(config: "Config") -> "NotionClient | None":
    if not config.notion.token:
        return None

    from podnote.notion import NotionClient
    return NotionClient(
        token=config.notion.token,
        api_url=config.notion.api_url,
        api_version=config.notion.api_version,
        timeout_seconds=config.notion.timeout_seconds,
    )


@dataclass
class Services:
    """Everything a front end (CLI, HTTP API, agent) needs, built once."""

    fs: AgentFS
    datasources: "DatasourceStore"
    skills: "SkillStore"
    gateway: "CommandExecutor"
    loader: "SkillLoader"
    itunes: "ITunesClient"
    fetcher: "FeedFetcher"
    tools: "ToolExecutor"
    notion: "NotionClient | None" = None
    agent_name: str = "PodNote"

    async def instructions(self) -> str:
        """Agent system prompt over the current skills and registered tools."""
        from podnote.core import build_instructions

        return build_instructions(
            await self.skills.skill_index(),
            self.loader.get_tools(),
            agent_name=self.agent_name,
        )

    async def aclose(self) -> None:
        await self.itunes.aclose()
        await self.fetcher.aclose()
        if self.notion is not None:
            await self.notion.aclose()
        await self.fs.aclose()


def create_gateway(
    config: "Config",
    fs: AgentFS,
    provider: "LLMProvider | None" = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple["CommandExecutor", "SkillStore", "ITunesClient", "FeedFetcher"]:
    """Build the command gateway over the notion and podcast command families.

    Returns:
        (executor, skill store, iTunes client, feed fetcher)
    """
    from podnote.gateway import create_command_executor, merge_commands
    from podnote.notion import DatasourceStore, NotionCommands, SkillStore
    from podnote.podcast import (
        EpisodeRecommender,
        FeedFetcher,
        ITunesClient,
        PodcastCommands,
        PodcastStore,
    )

    skills = SkillStore(fs, DatasourceStore(fs))
    podcast_store = PodcastStore(fs)
    itunes = ITunesClient(
        url=config.podcast.itunes_url,
        limit=config.podcast.search_limit,
        timeout_seconds=config.podcast.timeout_seconds,
        transport=transport,
    )
    fetcher = FeedFetcher(config.podcast.recommendation, transport=transport)
    recommender = EpisodeRecommender(podcast_store, fetcher, provider, config.podcast.recommendation)

    commands = merge_commands(
        NotionCommands(skills).commands(),
        PodcastCommands(podcast_store, itunes, recommender).commands(),
    )
    return create_command_executor(commands), skills, itunes, fetcher


def create_skill_loader(
    gateway: "CommandExecutor",
    datasources: "DatasourceStore",
    notion: "NotionClient | None" = None,
) -> "SkillLoader":
    """Register the agent tools: the gateway shell plus the Notion tools."""
    from podnote.notion import NotionSkill
    from podnote.skills import GatewayShellSkill, SkillLoader

    loader = SkillLoader()
    loader.register(GatewayShellSkill(gateway))
    loader.register(NotionSkill(datasources, notion))
    return loader


def create_services(
    config: "Config",
    fs: AgentFS | None = None,
    provider: "LLMProvider | None" = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Services:
    """Build storage, gateway and agent tools from configuration.

    Args:
        config: Full PodNote configuration
        fs: Storage backend override; built from ``config.storage`` if None
        provider: LLM provider override; built from ``config.agent`` if None
        transport: Optional httpx transport for outbound HTTP clients
    """
    from podnote.core import ToolExecutor

    fs = fs or create_storage(config.storage)
    provider = provider or create_provider(config)
    notion = create_notion_client(config)

    gateway, skills, itunes, fetcher = create_gateway(config, fs, provider, transport)
    loader = create_skill_loader(gateway, skills.datasources, notion)

    return Services(
        fs=fs,
        datasources=skills.datasources,
        skills=skills,
        gateway=gateway,
        loader=loader,
        itunes=itunes,
        fetcher=fetcher,
        tools=ToolExecutor(loader),
        notion=notion,
        agent_name=config.agent.name,
    )

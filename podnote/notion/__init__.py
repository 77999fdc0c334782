"""Notion datasources, their skills and the notion command family."""

from podnote.notion.client import NotionAPIError, NotionClient
from podnote.notion.commands import NotionCommands
from podnote.notion.datasources import DatasourceStore, describe_datasource
from podnote.notion.models import (
    CacheCheckResult,
    Datasource,
    DatasourceProperty,
    SaveOutcome,
    SkillMetadata,
)
from podnote.notion.skill import NotionSkill
from podnote.notion.skills import SkillStore

__all__ = [
    "CacheCheckResult",
    "Datasource",
    "DatasourceProperty",
    "DatasourceStore",
    "NotionAPIError",
    "NotionClient",
    "NotionCommands",
    "NotionSkill",
    "SaveOutcome",
    "SkillMetadata",
    "SkillStore",
    "describe_datasource",
]

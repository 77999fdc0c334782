"""Data models for Notion datasources and their skills."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DatasourceProperty(BaseModel):
    """One property (column) of a Notion datasource."""
    type: str
    options: list[str] | None = None


class Datasource(BaseModel):
    """Cached schema of a Notion datasource.

    ``name`` is the display name and doubles as the directory name of the
    datasource in the working folder. ``id`` is Notion's stable identifier.
    """
    name: str
    id: str
    properties: dict[str, DatasourceProperty] = Field(default_factory=dict)


class SaveOutcome(str, Enum):
    """Whether a save created a new record or replaced an existing one."""
    CREATED = "created"
    UPDATED = "updated"


class CacheCheckResult(BaseModel):
    """Answer to "is this datasource already cached?"."""
    is_cached: bool
    datasource: Datasource | None = None
    message: str


class SkillMetadata(BaseModel):
    """Frontmatter of an active SKILL.md plus where it lives."""
    name: str
    description: str
    directory: str

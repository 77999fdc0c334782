"""Per-datasource schema cache stored in the agent working folder.

Directory layout
----------------
  notion/datasources/
    {datasource name}/
      schema.yaml     <- cached Datasource record
      SKILL.md        <- optional committed skill
    _drafts/
      {skill name}/
        SKILL.md      <- staged skill awaiting review
"""

from __future__ import annotations

import yaml
from pydantic import ValidationError

from podnote.notion.models import CacheCheckResult, Datasource, SaveOutcome
from podnote.storage import AgentFS, join_path
from podnote.utils import get_logger, normalize_key

logger = get_logger(__name__)

DATASOURCES_BASE = "notion/datasources"
DRAFTS_DIR_NAME = "_drafts"
SCHEMA_FILE = "schema.yaml"
SKILL_FILE = "SKILL.md"


def directory_name(name: str) -> str:
    """Directory used for a datasource or skill name.

    Path separators cannot appear in a single directory name, so they are
    replaced with dashes.
    """
    return name.strip().replace("/", "-").replace("\\", "-")


def datasource_dir(name: str) -> str:
    return join_path(DATASOURCES_BASE, directory_name(name))


def schema_path(name: str) -> str:
    return join_path(datasource_dir(name), SCHEMA_FILE)


def skill_path(name: str) -> str:
    return join_path(datasource_dir(name), SKILL_FILE)


def drafts_dir() -> str:
    return join_path(DATASOURCES_BASE, DRAFTS_DIR_NAME)


def draft_dir(name: str) -> str:
    return join_path(drafts_dir(), directory_name(name))


def draft_path(name: str) -> str:
    return join_path(draft_dir(name), SKILL_FILE)


def dump_datasource(datasource: Datasource) -> str:
    """Serialize a record as YAML."""
    return yaml.safe_dump(
        datasource.model_dump(exclude_none=True),
        sort_keys=False,
        allow_unicode=True,
    )


def load_datasource(text: str) -> Datasource | None:
    """Parse a schema file; None if it is not a valid record."""
    try:
        data = yaml.safe_load(text)
        return Datasource.model_validate(data)
    except (yaml.YAMLError, ValidationError) as e:
        logger.debug(f"Skipping unparsable schema: {e}")
        return None


def describe_datasource(datasource: Datasource) -> str:
    """Human-readable schema summary for the agent."""
    lines = [f"Database: {datasource.name}", f"ID: {datasource.id}", "", "Properties:"]
    for prop_name, prop in datasource.properties.items():
        line = f"  - {prop_name} ({prop.type})"
        if prop.options:
            line += f": {', '.join(prop.options)}"
        lines.append(line)
    return "\n".join(lines)


class DatasourceStore:
    """Cache of Notion datasource schemas, one directory per datasource.

    Example:
        >>> store = DatasourceStore(fs)
        >>> await store.save(Datasource(name="Books", id="abc", properties={}))
        >>> (await store.check_cached("books")).is_cached
        True
    """

    def __init__(self, fs: AgentFS):
        self.fs = fs

    async def list_names(self) -> list[str]:
        """Directory names of all datasources (drafts excluded)."""
        entries = await self.fs.read_dir(DATASOURCES_BASE)
        return [
            entry.name
            for entry in entries
            if entry.is_directory and entry.name != DRAFTS_DIR_NAME
        ]

    async def _read_schema(self, directory: str) -> Datasource | None:
        content = await self.fs.read_file(join_path(DATASOURCES_BASE, directory, SCHEMA_FILE))
        if not content:
            return None
        return load_datasource(content)

    async def _scan(self) -> list[tuple[str, Datasource]]:
        records = []
        for directory in await self.list_names():
            datasource = await self._read_schema(directory)
            if datasource is not None:
                records.append((directory, datasource))
        return records

    async def read_all(self) -> list[Datasource]:
        """All cached datasources; unparsable schema files are skipped."""
        return [datasource for _, datasource in await self._scan()]

    async def read_by_name(self, name: str) -> Datasource | None:
        """Case-insensitive, trimmed exact name lookup."""
        key = normalize_key(name)
        for datasource in await self.read_all():
            if normalize_key(datasource.name) == key:
                return datasource
        return None

    async def read_by_id(self, datasource_id: str) -> Datasource | None:
        for datasource in await self.read_all():
            if datasource.id == datasource_id:
                return datasource
        return None

    async def save(self, datasource: Datasource) -> SaveOutcome:
        """Create or replace the record for a datasource.

        A record with the same id or the same normalized name stored under a
        different directory (for instance after a rename in Notion) is
        replaced: the new schema is written first, a committed skill in the
        old directory is carried over if the new one has none, and then the
        old directory is removed.
        """
        target = directory_name(datasource.name)
        key = normalize_key(datasource.name)

        stale = [
            directory
            for directory, existing in await self._scan()
            if directory != target
            and (existing.id == datasource.id or normalize_key(existing.name) == key)
        ]
        is_update = bool(stale) or await self.fs.exists(schema_path(datasource.name))

        await self.fs.write_file(schema_path(datasource.name), dump_datasource(datasource))

        for directory in stale:
            old_skill = await self.fs.read_file(join_path(DATASOURCES_BASE, directory, SKILL_FILE))
            if old_skill and not await self.fs.exists(skill_path(datasource.name)):
                await self.fs.write_file(skill_path(datasource.name), old_skill)
            await self.fs.remove(join_path(DATASOURCES_BASE, directory))
            logger.info(
                "Replaced stale datasource directory",
                extra={"old_directory": directory, "new_directory": target},
            )

        outcome = SaveOutcome.UPDATED if is_update else SaveOutcome.CREATED
        logger.info(
            f"Saved datasource {datasource.name}",
            extra={"datasource_id": datasource.id, "outcome": outcome.value},
        )
        return outcome

    async def check_cached(self, name: str) -> CacheCheckResult:
        """Decide in one call whether a Notion lookup can be skipped."""
        datasources = await self.read_all()

        if not datasources:
            return CacheCheckResult(
                is_cached=False,
                message="No datasources cached yet. Will query Notion API.",
            )

        key = normalize_key(name)
        for datasource in datasources:
            if normalize_key(datasource.name) == key:
                return CacheCheckResult(
                    is_cached=True,
                    datasource=datasource,
                    message=(
                        f'Found cached datasource "{datasource.name}" (ID: {datasource.id}). '
                        "No need to query Notion API."
                    ),
                )

        return CacheCheckResult(
            is_cached=False,
            message=f'No cached datasource found for "{name}". Will query Notion API.',
        )

    @staticmethod
    def describe(datasource: Datasource) -> str:
        return describe_datasource(datasource)

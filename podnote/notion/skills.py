"""Draft-commit lifecycle for datasource skills.

A skill is in one of three states per name: absent, draft (staged under
``_drafts/``) or active (next to the datasource schema). Drafts never
overwrite an active skill until committed.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict

from podnote.gateway import CommandResult, ErrorKind
from podnote.notion.datasources import (
    DATASOURCES_BASE,
    DRAFTS_DIR_NAME,
    SKILL_FILE,
    DatasourceStore,
    directory_name,
    draft_dir,
    draft_path,
    skill_path,
)
from podnote.notion.frontmatter import FrontmatterError, parse_frontmatter, validate_skill_content
from podnote.notion.models import SkillMetadata
from podnote.storage import AgentFS, StorageConflictError, join_path
from podnote.utils import get_logger, normalize_key

logger = get_logger(__name__)


def validate_name(name: str) -> str | None:
    """Check that a name maps to a usable skill directory.

    Path separators are folded into ``-`` the same way datasource
    directories are, so only the resulting directory name is checked.

    Returns:
        Error message, or None if the name is usable
    """
    if not name.strip():
        return "Skill name must not be empty"
    directory = directory_name(name)
    if directory in (".", ".."):
        return f'Invalid skill name "{name}"'
    if directory == DRAFTS_DIR_NAME:
        return f'Invalid skill name "{name}": {DRAFTS_DIR_NAME} is reserved'
    return None


class SkillStore:
    """Stage, review, commit and read datasource skills.

    Example:
        >>> store = SkillStore(fs)
        >>> await store.stage("Reading List", content)
        >>> await store.commit("Reading List")
        >>> (await store.read("reading list")).output
    """

    def __init__(self, fs: AgentFS, datasources: DatasourceStore | None = None):
        self.fs = fs
        self.datasources = datasources or DatasourceStore(fs)
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def _lock(self, name: str) -> asyncio.Lock:
        return self._locks[directory_name(name)]

    # ── lifecycle ─────────────────────────────────────────────────────────

    async def stage(self, name: str, content: str) -> CommandResult:
        """Validate and write a draft, replacing any earlier draft."""
        if error := validate_name(name):
            return CommandResult.fail(error, ErrorKind.VALIDATION)
        if error := validate_skill_content(content):
            return CommandResult.fail(error, ErrorKind.VALIDATION)

        async with self._lock(name):
            await self.fs.write_file(draft_path(name), content)

        logger.info("Staged skill draft", extra={"skill": name})
        return CommandResult.ok(
            f"Draft saved for \"{name}\". Use 'notion show-draft \"{name}\"' to review."
        )

    async def commit(self, name: str) -> CommandResult:
        """Promote the draft to the active skill, then drop the draft."""
        if error := validate_name(name):
            return CommandResult.fail(error, ErrorKind.VALIDATION)

        async with self._lock(name):
            content = await self.fs.read_file(draft_path(name))
            if content is None:
                return self._no_draft(name)

            try:
                # Active copy is written before the draft goes away
                await self.fs.write_file(skill_path(name), content)
                await self.fs.remove(draft_dir(name))
            except StorageConflictError as e:
                logger.warning("Commit conflicted", extra={"skill": name, "path": e.path})
                return CommandResult.fail(
                    f'Skill "{name}" was modified concurrently. Please retry the commit.',
                    ErrorKind.CONFLICT,
                )

        logger.info("Committed skill", extra={"skill": name})
        return CommandResult.ok(f'Skill "{name}" committed successfully.')

    async def discard(self, name: str) -> CommandResult:
        """Remove the draft; the active skill is untouched."""
        if error := validate_name(name):
            return CommandResult.fail(error, ErrorKind.VALIDATION)

        async with self._lock(name):
            if not await self.fs.exists(draft_path(name)):
                return self._no_draft(name)
            try:
                await self.fs.remove(draft_dir(name))
            except StorageConflictError as e:
                logger.warning("Discard conflicted", extra={"skill": name, "path": e.path})
                return CommandResult.fail(
                    f'Draft "{name}" was modified concurrently. Please retry.',
                    ErrorKind.CONFLICT,
                )

        logger.info("Discarded skill draft", extra={"skill": name})
        return CommandResult.ok(f'Draft "{name}" discarded.')

    async def peek(self, name: str) -> CommandResult:
        """Return the draft text verbatim."""
        if error := validate_name(name):
            return CommandResult.fail(error, ErrorKind.VALIDATION)
        content = await self.fs.read_file(draft_path(name))
        if content is None:
            return self._no_draft(name)
        return CommandResult.ok(content)

    @staticmethod
    def _no_draft(name: str) -> CommandResult:
        return CommandResult.fail(
            f"No draft found for \"{name}\". Use 'notion draft' first.",
            ErrorKind.NOT_FOUND,
        )

    # ── active skills ─────────────────────────────────────────────────────

    async def list_skills(self) -> list[SkillMetadata]:
        """Enumerate active skills; missing or unparsable files are skipped."""
        skills = []
        for directory in await self.datasources.list_names():
            content = await self.fs.read_file(join_path(DATASOURCES_BASE, directory, SKILL_FILE))
            if not content:
                continue
            try:
                data, _ = parse_frontmatter(content)
            except FrontmatterError:
                logger.debug("Skipping unparsable skill", extra={"directory": directory})
                continue
            skill_name = data.get("name")
            description = data.get("description")
            if not skill_name or not description:
                continue
            skills.append(
                SkillMetadata(
                    name=str(skill_name).strip(),
                    description=str(description).strip(),
                    directory=directory,
                )
            )
        return skills

    async def read(self, name: str) -> CommandResult:
        """Active skill body (frontmatter stripped), case-insensitive.

        The name is matched against the skill directory first, then against
        the frontmatter ``name``.
        """
        skills = await self.list_skills()
        directory = normalize_key(directory_name(name))
        key = normalize_key(name)
        match = next((s for s in skills if normalize_key(s.directory) == directory), None)
        if match is None:
            match = next((s for s in skills if normalize_key(s.name) == key), None)
        if match is None:
            available = ", ".join(s.name for s in skills) or "none"
            return CommandResult.fail(
                f'Skill "{name}" not found. Available: {available}',
                ErrorKind.NOT_FOUND,
            )

        content = await self.fs.read_file(join_path(DATASOURCES_BASE, match.directory, SKILL_FILE))
        if content is None:
            return CommandResult.fail(f'Skill "{name}" not found.', ErrorKind.NOT_FOUND)
        _, body = parse_frontmatter(content)
        return CommandResult.ok(body)

    async def skill_index(self) -> str:
        """Prompt block listing active skills."""
        skills = await self.list_skills()
        if not skills:
            return "## Available Skills\nNo skills configured yet."
        lines = ["## Available Skills"]
        lines.extend(f"- **{s.name}**: {s.description}" for s in skills)
        return "\n".join(lines)

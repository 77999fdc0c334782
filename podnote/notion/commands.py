"""``notion ...`` gateway commands."""

from __future__ import annotations

from podnote.gateway import CommandHandler, CommandResult, ErrorKind, parse_two_args, raw_arguments
from podnote.notion.datasources import DatasourceStore, describe_datasource
from podnote.notion.skills import SkillStore

NOTION_HELP = """\
## Notion Commands

Read:
- notion list                        - List available skills
- notion read "<name>"               - Read skill instructions
- notion check "<name>"              - Show datasource schema from cache

Write:
- notion draft "<name>" "<content>"  - Create/update a draft skill (multiline compatible)
- notion show-draft "<name>"         - Show draft content for review
- notion commit "<name>"             - Move draft to active skills
- notion discard "<name>"            - Delete a draft

## Draft-Commit Workflow
1. Use "notion draft" to save your generated content
2. Show the draft to the user and ask for confirmation
3. Use "notion commit" to move the draft to active skills

## SKILL.md Format
Required: YAML frontmatter with "name" and "description"
Body: Freeform markdown with concise instructions for how to create entries"""


class NotionCommands:
    """Handlers for the notion command family.

    Example:
        >>> commands = NotionCommands(SkillStore(fs)).commands()
        >>> executor = create_command_executor(commands)
        >>> await executor.run('notion read "Reading List"')
    """

    def __init__(self, skills: SkillStore, datasources: DatasourceStore | None = None):
        self.skills = skills
        self.datasources = datasources or skills.datasources

    def commands(self) -> dict[str, CommandHandler]:
        return {
            "notion list": self.list_skills,
            "notion read": self.read,
            "notion check": self.check,
            "notion draft": self.draft,
            "notion show-draft": self.show_draft,
            "notion commit": self.commit,
            "notion discard": self.discard,
            "notion help": self.help,
        }

    def help(self, args: str) -> CommandResult:
        return CommandResult.ok(NOTION_HELP)

    async def list_skills(self, args: str) -> CommandResult:
        skills = await self.skills.list_skills()
        if not skills:
            return CommandResult.ok("No skills available.")
        return CommandResult.ok("\n".join(s.name for s in skills))

    async def read(self, name: str) -> CommandResult:
        if not name:
            return CommandResult.usage('notion read "<name>"')
        return await self.skills.read(name)

    async def check(self, name: str) -> CommandResult:
        if not name:
            return CommandResult.usage('notion check "<name>"')
        datasource = await self.datasources.read_by_name(name)
        if datasource is None:
            return CommandResult.fail(
                f'No cached datasource found for "{name}". Use search_datasource first.',
                ErrorKind.NOT_FOUND,
            )
        return CommandResult.ok(describe_datasource(datasource))

    @raw_arguments
    async def draft(self, args: str) -> CommandResult:
        if not args.strip():
            return CommandResult.usage('notion draft "<name>" "<content>"')
        parsed = parse_two_args(args)
        if parsed is None:
            return CommandResult.usage(
                'notion draft "<name>" "<content>". Both name and content must be quoted.'
            )
        name, content = parsed
        return await self.skills.stage(name, content)

    async def show_draft(self, name: str) -> CommandResult:
        if not name:
            return CommandResult.usage('notion show-draft "<name>"')
        return await self.skills.peek(name)

    async def commit(self, name: str) -> CommandResult:
        if not name:
            return CommandResult.usage('notion commit "<name>"')
        return await self.skills.commit(name)

    async def discard(self, name: str) -> CommandResult:
        if not name:
            return CommandResult.usage('notion discard "<name>"')
        return await self.skills.discard(name)

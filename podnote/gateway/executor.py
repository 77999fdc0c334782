"""Command registry that routes shell-style lines to domain handlers."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Union

from podnote.gateway.parser import strip_quotes
from podnote.gateway.result import CommandResult, ErrorKind
from podnote.utils import get_logger

logger = get_logger(__name__)

HandlerOutput = Union[CommandResult, str]
CommandHandler = Callable[[str], Union[HandlerOutput, Awaitable[HandlerOutput]]]


def raw_arguments(handler: CommandHandler) -> CommandHandler:
    """Mark a handler as wanting its argument string without quote stripping.

    Multi-argument verbs parse their own quotes.
    """
    handler.raw_arguments = True  # type: ignore[attr-defined]
    return handler


def merge_commands(*command_sets: Mapping[str, CommandHandler]) -> dict[str, CommandHandler]:
    """Combine command maps, rejecting duplicate verbs."""
    merged: dict[str, CommandHandler] = {}
    for commands in command_sets:
        for verb, handler in commands.items():
            if verb in merged:
                raise ValueError(f"Duplicate command registered: {verb}")
            merged[verb] = handler
    return merged


class CommandExecutor:
    """Route one input line to the handler with the longest matching verb.

    The executor only dispatches. Handler exceptions propagate unchanged.

    Example:
        >>> executor = CommandExecutor({"skill show": show, "skill show-draft": show_draft})
        >>> await executor.run('skill show-draft "Books"')   # calls show_draft("Books")
    """

    def __init__(self, commands: Mapping[str, CommandHandler]):
        """Initialize executor.

        Args:
            commands: Mapping of verb prefix to handler; fixed for the executor's lifetime
        """
        self._commands = dict(commands)
        # Longest first so "skill show-draft" is tried before "skill show"
        self._ordered = sorted(self._commands, key=len, reverse=True)

    @property
    def verbs(self) -> list[str]:
        """Registered verbs in registration order."""
        return list(self._commands)

    def match(self, line: str) -> tuple[str, str] | None:
        """Find the verb for a line.

        Returns:
            (verb, remainder) or None if no verb matches
        """
        trimmed = line.strip()
        for verb in self._ordered:
            if trimmed == verb:
                return verb, ""
            if trimmed.startswith(verb) and trimmed[len(verb)].isspace():
                return verb, trimmed[len(verb):].strip()
        return None

    def unknown(self) -> CommandResult:
        return CommandResult.fail(
            f"Unknown command. Available commands: {', '.join(self.verbs)}",
            ErrorKind.NOT_FOUND,
        )

    async def execute(self, line: str) -> CommandResult:
        """Execute a command line and return the handler's tagged result."""
        matched = self.match(line)
        if matched is None:
            logger.info("Unknown command", extra={"command": line[:80]})
            return self.unknown()

        verb, remainder = matched
        handler = self._commands[verb]
        args = remainder if getattr(handler, "raw_arguments", False) else strip_quotes(remainder)

        logger.debug("Dispatching command", extra={"verb": verb})

        output = handler(args)
        if inspect.isawaitable(output):
            output = await output

        if isinstance(output, CommandResult):
            return output
        return CommandResult.from_text(str(output))

    async def run(self, line: str) -> str:
        """Execute a command line and return plain text."""
        result = await self.execute(line)
        return result.render()


def create_command_executor(commands: Mapping[str, CommandHandler]) -> CommandExecutor:
    """Build an executor over a fixed command map."""
    return CommandExecutor(commands)

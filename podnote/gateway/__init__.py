"""Command gateway: parse a shell-style line and route it to a handler."""

from podnote.gateway.executor import (
    CommandExecutor,
    CommandHandler,
    create_command_executor,
    merge_commands,
    raw_arguments,
)
from podnote.gateway.parser import parse_options, parse_two_args, strip_quotes
from podnote.gateway.result import ERROR_PREFIX, CommandResult, ErrorKind

__all__ = [
    "CommandExecutor",
    "CommandHandler",
    "CommandResult",
    "ERROR_PREFIX",
    "ErrorKind",
    "create_command_executor",
    "merge_commands",
    "parse_options",
    "parse_two_args",
    "raw_arguments",
    "strip_quotes",
]

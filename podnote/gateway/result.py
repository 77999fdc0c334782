"""Tagged results returned by command handlers."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

ERROR_PREFIX = "Error: "


class ErrorKind(str, Enum):
    """Classification of an expected handler failure."""
    USAGE = "usage"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UPSTREAM = "upstream"


class CommandResult(BaseModel):
    """Outcome of one gateway command.

    Handlers return this instead of encoding failures in the text. The
    ``Error: `` prefix is only added by ``render()`` at the boundary that
    talks to the agent runtime, the CLI or the HTTP API.
    """

    success: bool
    output: str
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, output: str) -> "CommandResult":
        """Create a successful result."""
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, message: str, kind: ErrorKind = ErrorKind.USAGE) -> "CommandResult":
        """Create a failed result.

        Args:
            message: Human/LLM readable explanation, without the error prefix
            kind: Failure category

        Returns:
            CommandResult with success=False
        """
        return cls(success=False, output=message, kind=kind)

    @classmethod
    def usage(cls, form: str) -> "CommandResult":
        """Usage error naming the correct command form."""
        return cls.fail(f"Usage: {form}", ErrorKind.USAGE)

    @classmethod
    def from_text(cls, text: str) -> "CommandResult":
        """Classify plain handler text by the error prefix convention."""
        if text.startswith(ERROR_PREFIX):
            return cls.fail(text[len(ERROR_PREFIX):], ErrorKind.UPSTREAM)
        return cls.ok(text)

    def render(self) -> str:
        """Plain-text form for the agent runtime."""
        if self.success:
            return self.output
        return f"{ERROR_PREFIX}{self.output}"

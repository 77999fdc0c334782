"""PodNote - Notion skills and podcast discovery behind a shell-style command gateway."""

__version__ = "0.1.0"

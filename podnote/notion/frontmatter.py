"""SKILL.md frontmatter parsing and validation."""

from __future__ import annotations

import re
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(r"^\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n(.*))?\Z", re.DOTALL)

REQUIRED_FIELDS = ("name", "description")


class FrontmatterError(ValueError):
    """Content has no parsable YAML frontmatter block."""


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split SKILL.md text into (frontmatter_dict, body).

    The body is returned with surrounding whitespace trimmed.

    Raises:
        FrontmatterError: If there is no frontmatter block or it is not a YAML mapping
    """
    match = FRONTMATTER_RE.match(content.lstrip("\r\n"))
    if not match:
        raise FrontmatterError("No valid YAML frontmatter")

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML in frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter must be a YAML mapping")

    return data, (match.group(2) or "").strip()


def validate_skill_content(content: str) -> str | None:
    """Check that content carries the required frontmatter fields.

    Returns:
        Error message, or None if the content is valid
    """
    try:
        data, _ = parse_frontmatter(content)
    except FrontmatterError:
        return "Invalid frontmatter format"

    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or not str(value).strip():
            return f"Missing required frontmatter field: {field}"
    return None

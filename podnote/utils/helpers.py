"""Utility functions for PodNote."""

import re
from datetime import datetime, timezone

_TAG_RE = re.compile(r"<[^>]*>")
_CJK_RE = re.compile(r"[\u4e00-\u9fff]")


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def truncate_string(s: str, max_length: int = 200) -> str:
    """Truncate string to max length with ellipsis."""
    if len(s) <= max_length:
        return s
    return s[:max_length] + "..."


def strip_html(s: str | None) -> str:
    """Remove HTML tags and surrounding whitespace."""
    if not s:
        return ""
    return _TAG_RE.sub("", s).strip()


def contains_cjk(s: str) -> bool:
    """Check whether a string contains CJK unified ideographs."""
    return bool(_CJK_RE.search(s))


def normalize_key(s: str) -> str:
    """Case-insensitive, whitespace-trimmed lookup key."""
    return s.strip().lower()

"""PodNote utilities."""

from podnote.utils.helpers import (
    contains_cjk,
    normalize_key,
    now_utc,
    strip_html,
    truncate_string,
)
from podnote.utils.logging import get_logger, setup_logging

__all__ = [
    "contains_cjk",
    "normalize_key",
    "now_utc",
    "strip_html",
    "truncate_string",
    "setup_logging",
    "get_logger",
]

"""Shell-style argument parsing for gateway commands.

Only one layer of matching quotes is ever stripped. There is no escape
syntax: quoted content cannot contain its own delimiter except in the last
argument of ``parse_two_args``, which runs to the final character.
"""

from __future__ import annotations

import re

QUOTES = ('"', "'")

_OPTION_RE = re.compile(r"""(\w+)=(?:"([^"]*)"|'([^']*)'|(\S+))""")


def strip_quotes(text: str) -> str:
    """Strip one pair of matching surrounding quotes, like a shell would.

    Examples:
        '"Reading List"'  -> 'Reading List'
        "'x'"             -> 'x'
        '"unterminated'   -> '"unterminated'
        'bare words'      -> 'bare words'
    """
    trimmed = text.strip()
    if len(trimmed) >= 2 and trimmed[0] in QUOTES and trimmed[-1] == trimmed[0]:
        return trimmed[1:-1]
    return trimmed


def parse_two_args(text: str) -> tuple[str, str] | None:
    """Parse ``"first" "second"`` where the second may span many lines.

    The first argument ends at the next occurrence of its opening quote.
    The remainder must start with a quote and end with that same quote as
    its last character; everything in between (newlines and other quotes
    included) is the second argument.

    Returns:
        (first, second), or None if the input does not have that shape
    """
    trimmed = text.strip()
    if not trimmed or trimmed[0] not in QUOTES:
        return None

    first_quote = trimmed[0]
    end = trimmed.find(first_quote, 1)
    if end == -1:
        return None

    first = trimmed[1:end]
    rest = trimmed[end + 1:].strip()

    if len(rest) < 2 or rest[0] not in QUOTES:
        return None
    if not rest.endswith(rest[0]):
        return None

    return first, rest[1:-1]


def parse_options(text: str) -> dict[str, str]:
    """Parse ``key=value`` options; values may be quoted.

    Example:
        'topN=5 criteria="deep dives"' -> {"topN": "5", "criteria": "deep dives"}
    """
    options: dict[str, str] = {}
    for match in _OPTION_RE.finditer(text):
        key, double_quoted, single_quoted, bare = match.groups()
        if double_quoted is not None:
            options[key] = double_quoted
        elif single_quoted is not None:
            options[key] = single_quoted
        else:
            options[key] = bare
    return options

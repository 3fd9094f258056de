"""
utils/parsing.py
----------------
Parsing of `key:value` command arguments.

Commands take their fields as `key:value` pairs where a value runs until the
next known key, so values may contain spaces:

    /review book:3 rating:9 short:Great read long:Best book on the topic.
"""

import re
from datetime import date
from typing import Iterable, Optional


def parse_fields(text: str, keys: Iterable[str]) -> dict[str, str]:
    """
    Split ``text`` into a dict of ``{key: value}`` for the given keys.

    Keys are matched case-insensitively and must start the text or follow
    whitespace. Values are stripped; a repeated key keeps the last value.

    Raises:
        ValueError: Text before the first key (usually a typo in a key name).
    """
    text = text or ""
    keys = list(keys)
    pattern = re.compile(
        r"(?:^|\s)(" + "|".join(re.escape(k) for k in keys) + r"):", re.IGNORECASE
    )
    matches = list(pattern.finditer(text))
    leading = text[: matches[0].start()] if matches else text
    if leading.strip():
        raise ValueError(
            f"Could not understand '{leading.strip()}'. Use key:value with keys: {', '.join(keys)}."
        )

    fields: dict[str, str] = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        fields[match.group(1).lower()] = text[match.end():end].strip()
    return fields


def parse_int(value: Optional[str], name: str) -> Optional[int]:
    """Parse an optional integer field. Empty means None."""
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"{name} must be a whole number.") from None


def parse_date(value: Optional[str], name: str) -> Optional[date]:
    """Parse an optional ISO date (YYYY-MM-DD). Empty means None."""
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f"{name} must be a date like 2018-01-11.") from None

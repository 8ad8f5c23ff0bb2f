"""Utility functions shared across the hierarchy engine."""

import re

# OneNote 2013 XML schema namespace, used by GetHierarchy/GetPageContent
ONE_NS = "http://schemas.microsoft.com/office/onenote/2013/onenote"
NSMAP = {"one": ONE_NS}

_WILDCARDS = "*?"


def one_tag(local_name: str) -> str:
    """Return the Clark-notation tag for a OneNote element name."""
    return f"{{{ONE_NS}}}{local_name}"


def local_name(tag: object) -> str:
    """Strip the namespace from an element tag.

    Comments and processing instructions have non-string tags and
    yield an empty name.
    """
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def wildcard_regex(pattern: str) -> re.Pattern[str]:
    """Compile a ``*``/``?`` wildcard pattern into a case-insensitive regex.

    Every other character is matched literally, so brackets and dots
    in notebook names need no escaping.

    Examples:
        'Wor*'  matches 'Work', 'workshop'
        'W?rk'  matches 'Work', 'Wark'
    """
    parts: list[str] = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def literal_text(pattern: str) -> str:
    """Return the pattern with its wildcard characters removed."""
    return "".join(ch for ch in pattern if ch not in _WILDCARDS)


def name_matches(name: str, pattern: str) -> bool:
    """Match a display name against a pattern.

    A name matches when it satisfies the wildcard pattern as a whole,
    or when it starts with the pattern's literal text (ignoring case).
    The prefix rule lets ``Wor`` find ``Work`` without a trailing ``*``.
    An empty literal never matches by prefix.
    """
    if wildcard_regex(pattern).fullmatch(name):
        return True
    prefix = literal_text(pattern)
    if not prefix:
        return False
    return name.casefold().startswith(prefix.casefold())


def as_bool(value: object) -> bool:
    """Interpret an XML attribute value as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("true", "1", "yes")


def parse_int(value: object, default: int = 0) -> int:
    """Parse an integer attribute, falling back to ``default``."""
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default

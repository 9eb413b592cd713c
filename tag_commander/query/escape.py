"""Escape literals for embedding in FTS5 queries and LIKE patterns."""

from __future__ import annotations

LIKE_ESCAPE_CHAR = "\\"

_LIKE_WILDCARDS = ("%", "_")


def escape_fts5_string(value: str) -> str:
    """Escape a literal for use inside an FTS5 double-quoted string.

    Inside a string every FTS5 operator (``AND``, ``*``, ``^``, ``:`` ...)
    is inert; the only reserved character left is the quote itself,
    which is escaped by doubling it.
    """
    return value.replace('"', '""')


def escape_like_pattern(value: str, escape_char: str = LIKE_ESCAPE_CHAR) -> str:
    """Escape LIKE wildcards so ``value`` matches literally.

    ``escape_char`` must be the character named in the surrounding
    ``ESCAPE`` clause.  It is escaped too, before the wildcards.

    Raises:
        ValueError: If ``escape_char`` is not a single character.
    """
    if len(escape_char) != 1:
        raise ValueError(f"escape_char must be a single character, got {escape_char!r}")
    escaped = value.replace(escape_char, escape_char * 2)
    for wildcard in _LIKE_WILDCARDS:
        if wildcard != escape_char:
            escaped = escaped.replace(wildcard, escape_char + wildcard)
    return escaped


def encode_tag_token(name: str) -> str:
    """Encode a tag as the single FTS5 token stored in ``files_fts.tag_key``.

    Lowercase hex of the UTF-8 bytes, matching SQLite's ``lower(hex(tag))``.
    Every tag, including ones made only of punctuation, becomes exactly one
    token, and distinct tags never share one.
    """
    return name.encode("utf-8").hex()

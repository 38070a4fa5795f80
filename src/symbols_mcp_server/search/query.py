"""Query parsing: raw query string to ordered search terms."""

from __future__ import annotations

import re


_TERM_SEPARATOR = re.compile(r"[,\s]+")


def parse_terms(query: str | None) -> list[str]:
    """Split a query on commas and/or whitespace into lowercase terms.

    An empty or missing query yields ``[]``, which callers treat as
    match-all rather than match-nothing. Input order is preserved and
    duplicates are kept.

    Examples:
        >>> parse_terms("create, User  auth")
        ['create', 'user', 'auth']
        >>> parse_terms("")
        []
    """
    if not query:
        return []
    return [term.strip().lower() for term in _TERM_SEPARATOR.split(query.strip()) if term.strip()]

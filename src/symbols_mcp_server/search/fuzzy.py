"""Fuzzy matching for typo-tolerant symbol search.

This module provides edit distance calculation and a word-level fuzzy
matcher used by the scoring engine.

Matching rules:
- Substring containment always wins and is checked first
- Terms shorter than ``min_term_length`` never fuzzy-match
- Words shorter than 2 chars are skipped
- A word matches when ``1 - distance / max(len(term), len(word)) >= threshold``
"""

from __future__ import annotations


FUZZY_MATCH_THRESHOLD = 0.8
FUZZY_MATCH_TERM_MIN_LENGTH = 3
MIN_WORD_LENGTH = 2


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Uses dynamic programming with two rolling rows, so time is O(m*n) and
    auxiliary space is O(min(m, n)).

    Args:
        s1: First string.
        s2: Second string.

    Returns:
        The minimum number of single-character edits (insertions,
        deletions, substitutions) needed to change s1 into s2.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("hello", "hallo")
        1
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Use shorter string as columns for space efficiency
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def similarity(term: str, word: str) -> float:
    """Normalized similarity in [0, 1] derived from edit distance."""
    longest = max(len(term), len(word))
    if longest == 0:
        return 1.0
    return 1 - levenshtein_distance(term, word) / longest


def fuzzy_match(
    term: str,
    text: str,
    threshold: float = FUZZY_MATCH_THRESHOLD,
    min_term_length: int = FUZZY_MATCH_TERM_MIN_LENGTH,
) -> bool:
    """Check whether ``term`` matches ``text`` exactly or approximately.

    Args:
        term: Search term (case-insensitive).
        text: Text to search in, split on whitespace for approximate matching.
        threshold: Minimum similarity for a word to count as a match.
        min_term_length: Terms shorter than this only match as substrings.

    Returns:
        True on a substring hit or on any sufficiently similar word.

    Examples:
        >>> fuzzy_match("authenicate", "authenticate")
        True
        >>> fuzzy_match("xyz", "completely unrelated text")
        False
    """
    if not term:
        return False

    term_lower = term.lower()
    text_lower = text.lower()

    if term_lower in text_lower:
        return True

    if len(term_lower) < min_term_length:
        return False

    for word in text_lower.split():
        if len(word) < MIN_WORD_LENGTH:
            continue
        if similarity(term_lower, word) >= threshold:
            return True
    return False

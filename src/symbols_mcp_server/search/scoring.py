"""Relevance scoring and ranking for catalog entities.

Each search term is scored independently against three fields and the
per-term sub-scores are summed:

    name         substring 100 / fuzzy 80
    tags         first hit 50 / 40, or every hit 25 / 20 with match_all_tags
                 (a command's namespace counts as a tag)
    description  substring 10 / fuzzy 8

Name is the strongest signal, curated tags come next and free-text
description is the weakest.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from symbols_mcp_server.domain.model import BaseSymbol
from symbols_mcp_server.search.fuzzy import (
    FUZZY_MATCH_TERM_MIN_LENGTH,
    FUZZY_MATCH_THRESHOLD,
    fuzzy_match,
)


@dataclass(frozen=True)
class ScoreWeights:
    name_exact: int = 100
    name_fuzzy: int = 80
    tag_exact: int = 50
    tag_fuzzy: int = 40
    tag_exact_each: int = 25
    tag_fuzzy_each: int = 20
    description_exact: int = 10
    description_fuzzy: int = 8


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass(frozen=True)
class ScoringOptions:
    """Tunables threaded from settings into the scorer."""

    match_all_tags: bool = False
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD
    min_term_length: int = FUZZY_MATCH_TERM_MIN_LENGTH
    weights: ScoreWeights = field(default_factory=ScoreWeights)


DEFAULT_OPTIONS = ScoringOptions()

E = TypeVar("E", bound=BaseSymbol)


def _score_tags(tags: Sequence[str], term: str, options: ScoringOptions) -> int:
    weights = options.weights
    score = 0
    for tag in tags:
        tag_lower = tag.lower()
        if term in tag_lower:
            hit = weights.tag_exact_each if options.match_all_tags else weights.tag_exact
        elif fuzzy_match(term, tag_lower, options.fuzzy_threshold, options.min_term_length):
            hit = weights.tag_fuzzy_each if options.match_all_tags else weights.tag_fuzzy
        else:
            continue
        score += hit
        if not options.match_all_tags:
            break
    return score


def score_entity(
    entity: BaseSymbol,
    terms: Sequence[str],
    options: ScoringOptions = DEFAULT_OPTIONS,
) -> int:
    """Score ``entity`` against already-normalized ``terms``.

    Returns 0 when no term matches any field. A term that matches nothing
    contributes 0 and never lowers the contribution of other terms.
    """
    weights = options.weights
    name_lower = entity.name.lower()
    description_lower = entity.description.lower() if entity.description else None

    score = 0
    for raw_term in terms:
        term = raw_term.lower()
        term_score = 0

        if term in name_lower:
            term_score += weights.name_exact
        elif fuzzy_match(term, name_lower, options.fuzzy_threshold, options.min_term_length):
            term_score += weights.name_fuzzy

        if entity.keywords:
            term_score += _score_tags(entity.keywords, term, options)

        if description_lower:
            if term in description_lower:
                term_score += weights.description_exact
            elif fuzzy_match(term, description_lower, options.fuzzy_threshold, options.min_term_length):
                term_score += weights.description_fuzzy

        score += term_score
    return score


def alphabetical_key(entity: BaseSymbol) -> tuple[str, str]:
    return (entity.name, entity.id)


def rank_entities(
    entities: Iterable[E],
    terms: Sequence[str],
    options: ScoringOptions = DEFAULT_OPTIONS,
) -> list[E]:
    """Order entities by relevance.

    With no terms every entity is returned sorted by name, then id. With
    terms, zero-score entities are dropped and the rest are sorted by score
    descending, then name, then id.
    """
    if not terms:
        return sorted(entities, key=alphabetical_key)

    scored: list[tuple[int, E]] = []
    for entity in entities:
        score = score_entity(entity, terms, options)
        if score > 0:
            scored.append((score, entity))

    scored.sort(key=lambda item: (-item[0], item[1].name, item[1].id))
    return [entity for _, entity in scored]

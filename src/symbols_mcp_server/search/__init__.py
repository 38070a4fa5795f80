"""Fuzzy search, ranking and pagination over catalog entities."""

from symbols_mcp_server.search.fuzzy import fuzzy_match, levenshtein_distance
from symbols_mcp_server.search.pagination import paginate, validate_pagination
from symbols_mcp_server.search.query import parse_terms
from symbols_mcp_server.search.scoring import (
    DEFAULT_WEIGHTS,
    ScoreWeights,
    ScoringOptions,
    rank_entities,
    score_entity,
)


__all__ = [
    "DEFAULT_WEIGHTS",
    "ScoreWeights",
    "ScoringOptions",
    "fuzzy_match",
    "levenshtein_distance",
    "paginate",
    "parse_terms",
    "rank_entities",
    "score_entity",
    "validate_pagination",
]

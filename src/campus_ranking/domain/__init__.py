"""Pure scoring, ranking and search functions."""

from .aggregation import RELEVANCE_THRESHOLD, search_and_rank
from .filters import apply_filters
from .ranking import RankedEntity, assign_ranks, rank_entities, resolve_ties

__all__ = [
    "RELEVANCE_THRESHOLD",
    "RankedEntity",
    "apply_filters",
    "assign_ranks",
    "rank_entities",
    "resolve_ties",
    "search_and_rank",
]

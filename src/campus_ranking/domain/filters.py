"""Exact-match post-filters over search results."""

from __future__ import annotations

from collections.abc import Sequence

from .search_types import SearchFilters, SearchResult


def matches_filters(result: SearchResult, filters: SearchFilters) -> bool:
    """Return True when the result satisfies every set filter field."""
    metadata = result.metadata
    if filters.department and metadata.department != filters.department:
        return False
    if filters.institution and metadata.institution != filters.institution:
        return False
    if filters.skills and filters.skills.isdisjoint(metadata.skills):
        return False
    if filters.year_of_study is not None and metadata.year_of_study != filters.year_of_study:
        return False
    return True


def apply_filters(
    results: Sequence[SearchResult],
    filters: SearchFilters | None,
) -> list[SearchResult]:
    """Keep results matching all filters, preserving order."""
    if filters is None:
        return list(results)
    return [result for result in results if matches_filters(result, filters)]

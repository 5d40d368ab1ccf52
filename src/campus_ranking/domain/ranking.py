"""Competition ranking with category-priority tie-breaking.

Usage example:
    from campus_ranking.domain.ranking import rank_entities
    from campus_ranking.domain.weight_schema import (
        DEFAULT_TIE_BREAK_PRIORITY,
        DEFAULT_WEIGHT_SCHEMA,
    )

    ranked = rank_entities(
        {"Alice": [3, 2, 1], "Bob": [5, 1, 0]},
        DEFAULT_WEIGHT_SCHEMA,
        DEFAULT_TIE_BREAK_PRIORITY,
    )
    [(r.rank, r.entity_id, r.score) for r in ranked]
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from itertools import groupby

from .activity_scoring import ActivityMatrix, ScoredEntity, calculate_scores, count_at
from .weight_schema import DEFAULT_TIE_BREAK_PRIORITY, DEFAULT_WEIGHT_SCHEMA, WeightSchema


@dataclass(frozen=True)
class RankedEntity:
    """An entity with its score and competition rank."""

    entity_id: str
    score: int
    rank: int


class ComparisonOperator(StrEnum):
    """Comparison used by an activity filter."""

    GTE = "gte"
    LTE = "lte"
    EQ = "eq"


_COMPARATORS: dict[ComparisonOperator, Callable[[int, int], bool]] = {
    ComparisonOperator.GTE: lambda count, value: count >= value,
    ComparisonOperator.LTE: lambda count, value: count <= value,
    ComparisonOperator.EQ: lambda count, value: count == value,
}


@dataclass(frozen=True)
class ActivityFilter:
    """Keep entities whose count in ``category`` satisfies ``operator value``."""

    category: str
    value: int
    operator: ComparisonOperator = ComparisonOperator.GTE

    def matches(self, count: int) -> bool:
        return _COMPARATORS[self.operator](count, self.value)


def priority_positions(schema: WeightSchema, priority: Mapping[str, int]) -> tuple[int, ...]:
    """Return vector positions to compare, highest priority first.

    Equal priorities keep the table's own order; categories the schema does not
    score are never consulted.
    """
    ordered = sorted(priority, key=lambda category: priority[category], reverse=True)
    positions: list[int] = []
    for category in ordered:
        index = schema.index_of(category)
        if index is not None:
            positions.append(index)
    return tuple(positions)


def resolve_ties(
    entities: Sequence[ScoredEntity],
    matrix: ActivityMatrix,
    schema: WeightSchema,
    priority: Mapping[str, int],
) -> list[ScoredEntity]:
    """Reorder runs of equal score by tie-break category counts.

    ``entities`` must already be sorted by score, descending. Entities with different
    scores keep their relative order; full ties keep input order.
    """
    positions = priority_positions(schema, priority)

    def tie_key(entity: ScoredEntity) -> tuple[int, ...]:
        vector = matrix[entity.entity_id]
        return tuple(-count_at(vector, index) for index in positions)

    resolved: list[ScoredEntity] = []
    for _, run in groupby(entities, key=lambda entity: entity.raw_score):
        group = list(run)
        if len(group) > 1:
            group.sort(key=tie_key)
        resolved.extend(group)
    return resolved


def assign_ranks(sorted_entities: Sequence[ScoredEntity]) -> list[RankedEntity]:
    """Assign standard competition ranks (90, 90, 80 -> 1, 1, 3)."""
    ranked: list[RankedEntity] = []
    for position, entity in enumerate(sorted_entities, start=1):
        if ranked and entity.raw_score == ranked[-1].score:
            rank = ranked[-1].rank
        else:
            rank = position
        ranked.append(RankedEntity(entity_id=entity.entity_id, score=entity.raw_score, rank=rank))
    return ranked


def rank_entities(
    matrix: ActivityMatrix,
    schema: WeightSchema = DEFAULT_WEIGHT_SCHEMA,
    priority: Mapping[str, int] = DEFAULT_TIE_BREAK_PRIORITY,
) -> list[RankedEntity]:
    """Score, sort, tie-break and rank every entity in the matrix."""
    scored = calculate_scores(matrix, schema)
    scored.sort(key=lambda entity: entity.raw_score, reverse=True)
    return assign_ranks(resolve_ties(scored, matrix, schema, priority))


def select_by_name(matrix: ActivityMatrix, term: str) -> dict[str, Sequence[int]]:
    """Return the sub-matrix whose ids contain ``term`` (case-insensitive)."""
    needle = term.lower()
    return {
        entity_id: vector for entity_id, vector in matrix.items() if needle in entity_id.lower()
    }


def search_by_name(
    matrix: ActivityMatrix,
    term: str,
    schema: WeightSchema = DEFAULT_WEIGHT_SCHEMA,
    priority: Mapping[str, int] = DEFAULT_TIE_BREAK_PRIORITY,
) -> list[RankedEntity]:
    """Rank only the entities whose id contains ``term``."""
    return rank_entities(select_by_name(matrix, term), schema, priority)


def filter_by_activities(
    matrix: ActivityMatrix,
    filters: Sequence[ActivityFilter],
    schema: WeightSchema = DEFAULT_WEIGHT_SCHEMA,
    priority: Mapping[str, int] = DEFAULT_TIE_BREAK_PRIORITY,
) -> list[RankedEntity]:
    """Rank the entities that satisfy every activity filter.

    Any filter naming a category outside the schema yields no matches.
    """
    resolved: list[tuple[int, ActivityFilter]] = []
    for activity_filter in filters:
        index = schema.index_of(activity_filter.category)
        if index is None:
            return []
        resolved.append((index, activity_filter))

    subset = {
        entity_id: vector
        for entity_id, vector in matrix.items()
        if all(item.matches(count_at(vector, index)) for index, item in resolved)
    }
    return rank_entities(subset, schema, priority)


def filter_by_activity(
    matrix: ActivityMatrix,
    category: str,
    min_count: int,
    schema: WeightSchema = DEFAULT_WEIGHT_SCHEMA,
    priority: Mapping[str, int] = DEFAULT_TIE_BREAK_PRIORITY,
) -> list[RankedEntity]:
    """Rank the entities with at least ``min_count`` in ``category``."""
    return filter_by_activities(
        matrix,
        [ActivityFilter(category=category, value=min_count)],
        schema,
        priority,
    )

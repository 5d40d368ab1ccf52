"""Weighted activity scoring for activity-count vectors.

Usage example:
    from campus_ranking.domain.activity_scoring import explain_score, score_activity_vector
    from campus_ranking.domain.weight_schema import DEFAULT_WEIGHT_SCHEMA

    alice = [3, 2, 1, 0, 2, 1, 0, 0, 1, 1, 1, 2, 1, 3, 2, 1, 1]
    score_activity_vector(alice, DEFAULT_WEIGHT_SCHEMA)  # 189
    print(explain_score("Alice", alice, DEFAULT_WEIGHT_SCHEMA).render())
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from ..exceptions import InvalidInputError
from .weight_schema import WeightSchema

ActivityVector: TypeAlias = Sequence[int]
ActivityMatrix: TypeAlias = Mapping[str, ActivityVector]

DEFAULT_TOP_ACTIVITIES = 3


@dataclass(frozen=True)
class ScoredEntity:
    """An entity id with its raw weighted score."""

    entity_id: str
    raw_score: int


@dataclass(frozen=True)
class CategoryContribution:
    """Points earned by one category."""

    category: str
    count: int
    weight: int

    @property
    def points(self) -> int:
        return self.count * self.weight


@dataclass(frozen=True)
class ScoreBreakdown:
    """Detailed per-category calculation behind a raw score."""

    entity_id: str
    contributions: tuple[CategoryContribution, ...]

    @property
    def total(self) -> int:
        return sum(item.points for item in self.contributions)

    def render(self) -> str:
        """Render the calculation as a multi-line report."""
        lines = [f"{self.entity_id}'s Score Calculation:"]
        for item in self.contributions:
            lines.append(f"  {item.category}: {item.count} × {item.weight} = {item.points}")
        lines.append(f"  Total Score: {self.total}")
        return "\n".join(lines)


@dataclass(frozen=True)
class ActivityHighlight:
    """A category label and count, used for "key activities" summaries."""

    label: str
    count: int


def validate_vector(vector: ActivityVector, entity_id: str | None = None) -> tuple[int, ...]:
    """Return the vector as a tuple, rejecting negative or non-integer counts."""
    counts: list[int] = []
    for position, value in enumerate(vector):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidInputError(entity_id, position, value)
        counts.append(value)
    return tuple(counts)


def count_at(vector: ActivityVector, index: int) -> int:
    """Return the count at ``index``; missing trailing positions count as zero."""
    if index < len(vector):
        return vector[index]
    return 0


def score_activity_vector(
    vector: ActivityVector,
    schema: WeightSchema,
    entity_id: str | None = None,
) -> int:
    """Sum ``count * weight`` across the vector, aligned to schema order."""
    counts = validate_vector(vector, entity_id)
    return sum(count * schema.weight_at(index) for index, count in enumerate(counts))


def calculate_scores(matrix: ActivityMatrix, schema: WeightSchema) -> list[ScoredEntity]:
    """Score every entity in the matrix, preserving matrix order."""
    return [
        ScoredEntity(
            entity_id=entity_id, raw_score=score_activity_vector(vector, schema, entity_id)
        )
        for entity_id, vector in matrix.items()
    ]


def explain_score(entity_id: str, vector: ActivityVector, schema: WeightSchema) -> ScoreBreakdown:
    """Return the categories that contributed to an entity's score."""
    counts = validate_vector(vector, entity_id)
    contributions = tuple(
        CategoryContribution(
            category=schema.activities[index].category,
            count=count,
            weight=schema.weight_at(index),
        )
        for index, count in enumerate(counts)
        if count > 0 and index < len(schema)
    )
    return ScoreBreakdown(entity_id=entity_id, contributions=contributions)


def top_activities(
    vector: ActivityVector,
    schema: WeightSchema,
    limit: int = DEFAULT_TOP_ACTIVITIES,
) -> list[ActivityHighlight]:
    """Return the highest non-zero counts, ties kept in schema order."""
    counts = validate_vector(vector)
    indexed = [(index, count) for index, count in enumerate(counts) if count > 0]
    indexed.sort(key=lambda item: item[1], reverse=True)
    return [
        ActivityHighlight(label=schema.label_at(index), count=count)
        for index, count in indexed[:limit]
    ]

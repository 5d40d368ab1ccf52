"""Tests for weighted activity scoring and score explanations."""

import pytest

from campus_ranking.domain.activity_scoring import (
    calculate_scores,
    explain_score,
    score_activity_vector,
    top_activities,
)
from campus_ranking.domain.weight_schema import DEFAULT_WEIGHT_SCHEMA, ActivityWeight, WeightSchema
from campus_ranking.exceptions import InvalidInputError


def test_worked_example_scores_189(alice_vector: list[int]) -> None:
    assert score_activity_vector(alice_vector, DEFAULT_WEIGHT_SCHEMA) == 189


def test_all_zero_vector_scores_zero() -> None:
    assert score_activity_vector([0] * 17, DEFAULT_WEIGHT_SCHEMA) == 0


def test_short_vector_treats_missing_positions_as_zero() -> None:
    assert score_activity_vector([1, 1], DEFAULT_WEIGHT_SCHEMA) == 19


def test_long_vector_ignores_positions_past_schema() -> None:
    vector = [0] * 17 + [50, 50]

    assert score_activity_vector(vector, DEFAULT_WEIGHT_SCHEMA) == 0


def test_score_is_additive_over_counts() -> None:
    base = [0] * 17
    bumped = list(base)
    bumped[3] += 1  # patents

    assert score_activity_vector(bumped, DEFAULT_WEIGHT_SCHEMA) - score_activity_vector(
        base, DEFAULT_WEIGHT_SCHEMA
    ) == 25


@pytest.mark.parametrize("bad_value", [-1, 1.5, float("nan"), True, "3", None])
def test_invalid_counts_are_rejected(bad_value: object) -> None:
    vector: list[object] = [0, 0, bad_value]

    with pytest.raises(InvalidInputError) as excinfo:
        score_activity_vector(vector, DEFAULT_WEIGHT_SCHEMA, "Mallory")  # type: ignore[arg-type]

    assert excinfo.value.position == 2
    assert excinfo.value.entity_id == "Mallory"
    assert "Mallory" in str(excinfo.value)


def test_calculate_scores_preserves_matrix_order() -> None:
    matrix = {"Zed": [1], "Amy": [0, 1], "Bob": []}

    scored = calculate_scores(matrix, DEFAULT_WEIGHT_SCHEMA)

    assert [(item.entity_id, item.raw_score) for item in scored] == [
        ("Zed", 7),
        ("Amy", 12),
        ("Bob", 0),
    ]


def test_explain_score_reproduces_raw_score(alice_vector: list[int]) -> None:
    breakdown = explain_score("Alice", alice_vector, DEFAULT_WEIGHT_SCHEMA)

    assert breakdown.total == score_activity_vector(alice_vector, DEFAULT_WEIGHT_SCHEMA)
    assert all(item.count > 0 for item in breakdown.contributions)
    assert "patents" not in {item.category for item in breakdown.contributions}


def test_explain_score_render_lists_each_contribution(alice_vector: list[int]) -> None:
    rendered = explain_score("Alice", alice_vector, DEFAULT_WEIGHT_SCHEMA).render()
    lines = rendered.splitlines()

    assert lines[0] == "Alice's Score Calculation:"
    assert lines[1] == "  courseCompletion: 3 × 7 = 21"
    assert lines[-1] == "  Total Score: 189"


def test_explain_score_skips_positions_past_schema() -> None:
    schema = WeightSchema((ActivityWeight("mentoring", 8),))

    breakdown = explain_score("Eve", [2, 9], schema)

    assert [item.category for item in breakdown.contributions] == ["mentoring"]
    assert breakdown.total == 16


def test_top_activities_orders_by_count_then_schema_position(alice_vector: list[int]) -> None:
    highlights = top_activities(alice_vector, DEFAULT_WEIGHT_SCHEMA)

    assert [(item.label, item.count) for item in highlights] == [
        ("Course completion", 3),
        ("Volunteering", 3),
        ("High course score", 2),
    ]


def test_top_activities_labels_positions_past_schema() -> None:
    schema = WeightSchema((ActivityWeight("mentoring", 8, "Mentoring"),))

    highlights = top_activities([1, 4], schema)

    assert [(item.label, item.count) for item in highlights] == [
        ("Activity 2", 4),
        ("Mentoring", 1),
    ]


def test_top_activities_empty_for_zero_vector() -> None:
    assert top_activities([0, 0, 0], DEFAULT_WEIGHT_SCHEMA) == []

"""Tests for ranking activity matrix files."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from campus_ranking.application.rank_matrix import (
    load_activity_matrix,
    run_explain_entity,
    run_rank_matrix,
)
from campus_ranking.config import RankingConfig
from campus_ranking.domain.ranking import ActivityFilter, ComparisonOperator
from campus_ranking.domain.weight_schema import DEFAULT_WEIGHT_SCHEMA
from campus_ranking.exceptions import (
    ActivityMatrixError,
    DependencyMissingError,
    InvalidInputError,
    RecordsFileNotFoundError,
)
from campus_ranking.infrastructure import LocalFileSystem
from campus_ranking.schemas import RANKED_EXPLAIN_COLUMNS, RANKED_OUTPUT_COLUMNS
from tests.fakes import InMemoryFileSystem
from tests.support.weight_profiles import write_weight_profile_catalog

MATRIX_PATH = Path("data/raw/activity_matrix.csv")
OUT_DIR = Path("data/processed")


def _write_matrix(fs: InMemoryFileSystem, rows: list[dict[str, str]]) -> None:
    fs.write_csv(pd.DataFrame(rows).fillna(""), MATRIX_PATH)


@pytest.fixture
def fs(in_memory_fs: InMemoryFileSystem) -> InMemoryFileSystem:
    _write_matrix(
        in_memory_fs,
        [
            {"entity_id": "Eli", "researchPaper": "1", "hackathonParticipation": "16"},
            {"entity_id": "Dana", "patents": "1", "hackathonParticipation": "15"},
            {"entity_id": "Alicia", "mentoring": "2", "researchPaper": "3"},
        ],
    )
    return in_memory_fs


def test_run_rank_matrix_writes_ranked_and_explain_tables(fs: InMemoryFileSystem) -> None:
    result = run_rank_matrix(MATRIX_PATH, OUT_DIR, config=RankingConfig(), fs=fs)

    assert result.profile_name == "default"
    assert [(item.entity_id, item.score, item.rank) for item in result.ranked] == [
        ("Dana", 100, 1),
        ("Eli", 100, 1),
        ("Alicia", 76, 3),
    ]
    assert result.outputs == {
        "ranked": OUT_DIR / "ranked_entities.csv",
        "explain": OUT_DIR / "ranked_explain.csv",
    }

    ranked_df = fs.read_csv(OUT_DIR / "ranked_entities.csv")
    assert list(ranked_df.columns) == list(RANKED_OUTPUT_COLUMNS)
    assert ranked_df["entity_id"].tolist() == ["Dana", "Eli", "Alicia"]

    explain_df = fs.read_csv(OUT_DIR / "ranked_explain.csv")
    assert list(explain_df.columns) == list(RANKED_EXPLAIN_COLUMNS)
    totals = explain_df.groupby("entity_id")["points"].sum().to_dict()
    assert totals == {"Alicia": 76, "Dana": 100, "Eli": 100}


def test_run_rank_matrix_defaults_output_dir_from_config(fs: InMemoryFileSystem) -> None:
    result = run_rank_matrix(MATRIX_PATH, config=RankingConfig(output_dir="custom"), fs=fs)

    assert result.outputs["ranked"] == Path("custom/ranked_entities.csv")
    assert fs.exists(Path("custom/ranked_explain.csv"))


def test_run_rank_matrix_can_skip_writing(fs: InMemoryFileSystem) -> None:
    result = run_rank_matrix(MATRIX_PATH, config=RankingConfig(), fs=fs, write_outputs=False)

    assert result.outputs == {}
    assert not fs.exists(OUT_DIR / "ranked_entities.csv")


def test_run_rank_matrix_reports_key_activities(fs: InMemoryFileSystem) -> None:
    result = run_rank_matrix(MATRIX_PATH, config=RankingConfig(), fs=fs, write_outputs=False)

    highlights = result.highlights["Alicia"]
    assert [(item.label, item.count) for item in highlights] == [
        ("Research paper", 3),
        ("Mentoring", 2),
    ]


def test_run_rank_matrix_applies_name_and_activity_filters(fs: InMemoryFileSystem) -> None:
    by_name = run_rank_matrix(
        MATRIX_PATH, config=RankingConfig(), fs=fs, name_filter="ALI", write_outputs=False
    )
    by_activity = run_rank_matrix(
        MATRIX_PATH,
        config=RankingConfig(),
        fs=fs,
        activity_filters=[ActivityFilter("researchPaper", 1, ComparisonOperator.GTE)],
        write_outputs=False,
    )

    assert [item.entity_id for item in by_name.ranked] == ["Alicia"]
    assert [(item.entity_id, item.rank) for item in by_activity.ranked] == [
        ("Eli", 1),
        ("Alicia", 2),
    ]


def test_run_rank_matrix_uses_configured_weight_profile(fs: InMemoryFileSystem) -> None:
    profiles_path = Path("data/reference/activity_weights.json")
    write_weight_profile_catalog(fs=fs, path=profiles_path)
    _write_matrix(
        fs,
        [
            {"entity_id": "Amy", "mentoring": "2"},
            {"entity_id": "Ben", "volunteering": "1"},
        ],
    )
    config = RankingConfig(
        weights_profile_path=str(profiles_path),
        weights_profile_name="community",
    )

    result = run_rank_matrix(MATRIX_PATH, config=config, fs=fs, write_outputs=False)

    assert result.profile_name == "community"
    assert [(item.entity_id, item.score) for item in result.ranked] == [("Amy", 20), ("Ben", 10)]


def test_run_rank_matrix_requires_injected_dependencies(fs: InMemoryFileSystem) -> None:
    with pytest.raises(DependencyMissingError, match="RankingConfig"):
        run_rank_matrix(MATRIX_PATH, fs=fs)
    with pytest.raises(DependencyMissingError, match="FileSystem"):
        run_rank_matrix(MATRIX_PATH, config=RankingConfig())


class TestLoadActivityMatrix:
    def test_csv_columns_are_aligned_by_name(self, in_memory_fs: InMemoryFileSystem) -> None:
        _write_matrix(in_memory_fs, [{"patents": "2", "entity_id": "Ann", "courseCompletion": ""}])

        matrix = load_activity_matrix(
            path=MATRIX_PATH, schema=DEFAULT_WEIGHT_SCHEMA, fs=in_memory_fs
        )

        expected = [0] * len(DEFAULT_WEIGHT_SCHEMA)
        expected[3] = 2
        assert matrix == {"Ann": expected}

    def test_json_matrix_is_positional(self, in_memory_fs: InMemoryFileSystem) -> None:
        path = Path("data/raw/activity_matrix.json")
        in_memory_fs.write_json({"entities": {"Ann": [1, 2], "Bo": []}}, path)

        matrix = load_activity_matrix(path=path, schema=DEFAULT_WEIGHT_SCHEMA, fs=in_memory_fs)

        assert matrix == {"Ann": [1, 2], "Bo": []}

    def test_json_matrix_with_non_integer_counts(self, in_memory_fs: InMemoryFileSystem) -> None:
        path = Path("data/raw/activity_matrix.json")
        in_memory_fs.write_json({"entities": {"Ann": [1.5]}}, path)

        with pytest.raises(ActivityMatrixError):
            load_activity_matrix(path=path, schema=DEFAULT_WEIGHT_SCHEMA, fs=in_memory_fs)

    def test_missing_file(self, in_memory_fs: InMemoryFileSystem) -> None:
        with pytest.raises(RecordsFileNotFoundError):
            load_activity_matrix(path=MATRIX_PATH, schema=DEFAULT_WEIGHT_SCHEMA, fs=in_memory_fs)

    @pytest.mark.parametrize(
        ("rows", "message"),
        [
            ([{"entity_id": "Ann", "juggling": "1"}], "unknown activity columns"),
            ([{"entity_id": "Ann"}, {"entity_id": "Ann"}], "duplicate entity_id"),
            ([{"entity_id": "", "patents": "1"}], "needs an entity_id"),
            ([{"entity_id": "Ann", "patents": "two"}], "non-integer patents count"),
        ],
    )
    def test_invalid_csv_rows(
        self, in_memory_fs: InMemoryFileSystem, rows: list[dict[str, str]], message: str
    ) -> None:
        _write_matrix(in_memory_fs, rows)

        with pytest.raises(ActivityMatrixError, match=message):
            load_activity_matrix(path=MATRIX_PATH, schema=DEFAULT_WEIGHT_SCHEMA, fs=in_memory_fs)

    def test_missing_id_column(self, in_memory_fs: InMemoryFileSystem) -> None:
        _write_matrix(in_memory_fs, [{"patents": "1"}])

        with pytest.raises(ValueError, match="entity_id"):
            load_activity_matrix(path=MATRIX_PATH, schema=DEFAULT_WEIGHT_SCHEMA, fs=in_memory_fs)


def test_negative_counts_are_rejected_when_ranking(in_memory_fs: InMemoryFileSystem) -> None:
    _write_matrix(in_memory_fs, [{"entity_id": "Mallory", "patents": "-1"}])

    with pytest.raises(InvalidInputError, match="Mallory"):
        run_rank_matrix(MATRIX_PATH, config=RankingConfig(), fs=in_memory_fs, write_outputs=False)


def test_run_explain_entity(fs: InMemoryFileSystem) -> None:
    breakdown = run_explain_entity(MATRIX_PATH, "Dana", config=RankingConfig(), fs=fs)

    assert breakdown.total == 100
    assert breakdown.render().splitlines()[1] == "  patents: 1 × 25 = 25"


def test_run_explain_entity_unknown_id(fs: InMemoryFileSystem) -> None:
    with pytest.raises(ActivityMatrixError, match="Zoe"):
        run_explain_entity(MATRIX_PATH, "Zoe", config=RankingConfig(), fs=fs)


def test_shipped_sample_matrix_ranks_with_tie_break() -> None:
    result = run_rank_matrix(
        Path("data/raw/activity_matrix.csv"),
        config=RankingConfig(),
        fs=LocalFileSystem(),
        write_outputs=False,
    )

    assert [(item.entity_id, item.score, item.rank) for item in result.ranked] == [
        ("Chen", 239, 1),
        ("Alice", 189, 2),
        ("Bob", 147, 3),
        ("Dana", 100, 4),
        ("Eli", 100, 4),
    ]

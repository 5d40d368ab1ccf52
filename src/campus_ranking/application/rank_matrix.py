"""Rank an activity matrix file and write ranked and explain tables.

Usage example:
    >>> from campus_ranking.application.rank_matrix import run_rank_matrix
    >>> from campus_ranking.config import RankingConfig
    >>> from campus_ranking.infrastructure import LocalFileSystem
    >>> result = run_rank_matrix(
    ...     matrix_path="data/raw/activity_matrix.csv",
    ...     config=RankingConfig.from_env(),
    ...     fs=LocalFileSystem(),
    ... )
    >>> result.ranked[0].rank
    1
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..config import RankingConfig
from ..domain.activity_scoring import (
    ActivityHighlight,
    ScoreBreakdown,
    explain_score,
    top_activities,
)
from ..domain.ranking import (
    ActivityFilter,
    RankedEntity,
    filter_by_activities,
    rank_entities,
    select_by_name,
)
from ..domain.weight_schema import WeightProfile, WeightSchema
from ..exceptions import ActivityMatrixError, DependencyMissingError, RecordsFileNotFoundError
from ..infrastructure.io.validation import IncomingDataError, parse_activity_matrix
from ..observability import get_logger
from ..protocols import FileSystem
from ..schemas import (
    MATRIX_ID_COLUMN,
    RANKED_EXPLAIN_COLUMNS,
    RANKED_OUTPUT_COLUMNS,
    validate_columns,
)
from .weight_profiles import load_weight_profile


@dataclass(frozen=True)
class RankMatrixResult:
    """Ranked entities plus the files written for them."""

    profile_name: str
    ranked: list[RankedEntity]
    breakdowns: list[ScoreBreakdown]
    highlights: dict[str, list[ActivityHighlight]]
    outputs: dict[str, Path]


def _parse_count(raw: str, *, entity_id: str, column: str, path: Path) -> int:
    text = raw.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError as exc:
        raise ActivityMatrixError(
            str(path), f"{entity_id!r} has a non-integer {column} count: {raw!r}"
        ) from exc


def _matrix_from_csv(df: pd.DataFrame, schema: WeightSchema, path: Path) -> dict[str, list[int]]:
    validate_columns(list(df.columns), frozenset({MATRIX_ID_COLUMN}), "Activity matrix")
    count_columns = [column for column in df.columns if column != MATRIX_ID_COLUMN]
    unknown = [column for column in count_columns if schema.index_of(column) is None]
    if unknown:
        raise ActivityMatrixError(str(path), f"unknown activity columns: {sorted(unknown)}")

    matrix: dict[str, list[int]] = {}
    for _, row in df.iterrows():
        entity_id = str(row[MATRIX_ID_COLUMN]).strip()
        if not entity_id:
            raise ActivityMatrixError(str(path), "every row needs an entity_id")
        if entity_id in matrix:
            raise ActivityMatrixError(str(path), f"duplicate entity_id {entity_id!r}")
        vector = [0] * len(schema)
        for column in count_columns:
            index = schema.index_of(column)
            if index is not None:
                vector[index] = _parse_count(
                    str(row[column]), entity_id=entity_id, column=column, path=path
                )
        matrix[entity_id] = vector
    return matrix


def load_activity_matrix(
    *,
    path: Path,
    schema: WeightSchema,
    fs: FileSystem,
) -> dict[str, list[int]]:
    """Read an activity matrix from CSV (columns named by category) or JSON (positional)."""
    if not fs.exists(path):
        raise RecordsFileNotFoundError(str(path))
    if path.suffix.lower() == ".json":
        try:
            return parse_activity_matrix(fs.read_json(path))
        except IncomingDataError as exc:
            raise ActivityMatrixError(str(path), str(exc)) from exc
    return _matrix_from_csv(fs.read_csv(path), schema, path)


def _ranked_frame(ranked: Sequence[RankedEntity]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"rank": entity.rank, "entity_id": entity.entity_id, "score": entity.score}
            for entity in ranked
        ],
        columns=list(RANKED_OUTPUT_COLUMNS),
    )


def _explain_frame(breakdowns: Sequence[ScoreBreakdown]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "entity_id": breakdown.entity_id,
                "category": item.category,
                "count": item.count,
                "weight": item.weight,
                "points": item.points,
            }
            for breakdown in breakdowns
            for item in breakdown.contributions
        ],
        columns=list(RANKED_EXPLAIN_COLUMNS),
    )


def rank_matrix(
    matrix: dict[str, list[int]],
    profile: WeightProfile,
    *,
    name_filter: str | None = None,
    activity_filters: Sequence[ActivityFilter] = (),
) -> list[RankedEntity]:
    """Apply optional name and activity filters, then rank what remains."""
    subset = select_by_name(matrix, name_filter) if name_filter else dict(matrix)
    if activity_filters:
        return filter_by_activities(
            subset, activity_filters, profile.schema, profile.tie_break_priority
        )
    return rank_entities(subset, profile.schema, profile.tie_break_priority)


def run_rank_matrix(
    matrix_path: str | Path,
    out_dir: str | Path | None = None,
    config: RankingConfig | None = None,
    fs: FileSystem | None = None,
    *,
    name_filter: str | None = None,
    activity_filters: Sequence[ActivityFilter] = (),
    write_outputs: bool = True,
) -> RankMatrixResult:
    """Rank every entity in an activity matrix file.

    Args:
        matrix_path: CSV or JSON activity matrix.
        out_dir: Directory for output files (defaults to ``config.output_dir``).
        config: Ranking configuration (required; load at entry point).
        fs: Filesystem (required; inject at entry point).
        name_filter: Only rank entities whose id contains this text.
        activity_filters: Only rank entities satisfying every filter.
        write_outputs: Write ranked and explain CSVs when True.

    Returns:
        RankMatrixResult with ranked entities, breakdowns and output paths.
    """
    if config is None:
        raise DependencyMissingError("RankingConfig", reason="Load it once at the entry point.")
    if fs is None:
        raise DependencyMissingError("FileSystem", reason="Inject it at the entry point.")

    logger = get_logger("rank_matrix")
    profile = load_weight_profile(
        path=config.weights_profile_path,
        profile_name=config.weights_profile_name,
        fs=fs,
    )
    matrix = load_activity_matrix(path=Path(matrix_path), schema=profile.schema, fs=fs)
    logger.info("Ranking: %s entities with profile %s", len(matrix), profile.name)

    ranked = rank_matrix(
        matrix,
        profile,
        name_filter=name_filter,
        activity_filters=activity_filters,
    )
    breakdowns = [
        explain_score(entity.entity_id, matrix[entity.entity_id], profile.schema)
        for entity in ranked
    ]
    highlights = {
        entity.entity_id: top_activities(matrix[entity.entity_id], profile.schema)
        for entity in ranked
    }
    logger.info("Ranked: %s entities after filters", len(ranked))

    outputs: dict[str, Path] = {}
    if write_outputs:
        out_path = Path(out_dir or config.output_dir)
        fs.mkdir(out_path, parents=True)
        ranked_path = out_path / "ranked_entities.csv"
        fs.write_csv(_ranked_frame(ranked), ranked_path)
        logger.info("Ranked output: %s", ranked_path)
        explain_path = out_path / "ranked_explain.csv"
        fs.write_csv(_explain_frame(breakdowns), explain_path)
        logger.info("Explainability: %s", explain_path)
        outputs = {"ranked": ranked_path, "explain": explain_path}

    return RankMatrixResult(
        profile_name=profile.name,
        ranked=ranked,
        breakdowns=breakdowns,
        highlights=highlights,
        outputs=outputs,
    )


def run_explain_entity(
    matrix_path: str | Path,
    entity_id: str,
    config: RankingConfig | None = None,
    fs: FileSystem | None = None,
) -> ScoreBreakdown:
    """Return the detailed score calculation for one entity in a matrix file."""
    if config is None:
        raise DependencyMissingError("RankingConfig", reason="Load it once at the entry point.")
    if fs is None:
        raise DependencyMissingError("FileSystem", reason="Inject it at the entry point.")

    profile = load_weight_profile(
        path=config.weights_profile_path,
        profile_name=config.weights_profile_name,
        fs=fs,
    )
    path = Path(matrix_path)
    matrix = load_activity_matrix(path=path, schema=profile.schema, fs=fs)
    if entity_id not in matrix:
        raise ActivityMatrixError(str(path), f"no entity named {entity_id!r}")
    return explain_score(entity_id, matrix[entity_id], profile.schema)

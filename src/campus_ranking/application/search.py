"""Search people and documents from a records file.

Usage example:
    >>> from campus_ranking.application.search import run_search
    >>> from campus_ranking.config import RankingConfig
    >>> from campus_ranking.domain.search_types import SearchQuery, SearchRole
    >>> from campus_ranking.infrastructure import LocalFileSystem
    >>> results = run_search(
    ...     query=SearchQuery(text="machine learning research", role=SearchRole.FACULTY),
    ...     records_path="data/raw/search_records.json",
    ...     config=RankingConfig.from_env(),
    ...     fs=LocalFileSystem(),
    ... )
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from ..config import RankingConfig
from ..domain.aggregation import search_and_rank
from ..domain.filters import apply_filters
from ..domain.search_types import DocumentRecord, PersonRecord, SearchQuery, SearchResult
from ..exceptions import DependencyMissingError, RecordsFileNotFoundError
from ..infrastructure.io.validation import parse_search_records
from ..observability import get_logger
from ..protocols import Embedder, FileSystem
from ..schemas import SEARCH_RESULT_COLUMNS


def load_search_records(
    *,
    path: Path,
    fs: FileSystem,
) -> tuple[list[PersonRecord], list[DocumentRecord]]:
    """Read and validate people and document records from JSON."""
    if not fs.exists(path):
        raise RecordsFileNotFoundError(str(path))
    return parse_search_records(fs.read_json(path))


def results_frame(results: Sequence[SearchResult]) -> pd.DataFrame:
    """Flatten search results into the search output table."""
    return pd.DataFrame(
        [
            {
                "result_id": result.result_id,
                "kind": result.kind.value,
                "title": result.title,
                "description": result.description,
                "relevance_score": round(result.relevance_score, 6),
                "department": result.metadata.department or "",
                "institution": result.metadata.institution or "",
                "skills": "|".join(result.metadata.skills),
                "year_of_study": ""
                if result.metadata.year_of_study is None
                else result.metadata.year_of_study,
            }
            for result in results
        ],
        columns=list(SEARCH_RESULT_COLUMNS),
    )


def run_search(
    query: SearchQuery,
    records_path: str | Path,
    config: RankingConfig | None = None,
    fs: FileSystem | None = None,
    *,
    out_path: str | Path | None = None,
    embedder: Embedder | None = None,
) -> list[SearchResult]:
    """Rank, filter and truncate search results for one query.

    Args:
        query: Query text, searcher role and filters.
        records_path: JSON file with ``people`` and ``documents`` arrays.
        config: Ranking configuration (required; load at entry point).
        fs: Filesystem (required; inject at entry point).
        out_path: Optional CSV path for the results table.
        embedder: Optional replacement for the pseudo embedder.

    Returns:
        At most ``config.result_limit`` results, most relevant first.
    """
    if config is None:
        raise DependencyMissingError("RankingConfig", reason="Load it once at the entry point.")
    if fs is None:
        raise DependencyMissingError("FileSystem", reason="Inject it at the entry point.")

    logger = get_logger("search")
    people, documents = load_search_records(path=Path(records_path), fs=fs)
    logger.info(
        "Searching %s people and %s documents as %s", len(people), len(documents), query.role
    )

    ranked = search_and_rank(query, people, documents, embedder=embedder)
    filtered = apply_filters(ranked, query.filters)
    logger.info("Search: %s relevant, %s after filters", len(ranked), len(filtered))
    results = filtered[: config.result_limit]

    if out_path is not None:
        target = Path(out_path)
        fs.write_csv(results_frame(results), target)
        logger.info("Search results: %s", target)

    return results

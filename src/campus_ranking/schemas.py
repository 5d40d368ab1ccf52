"""Schema definitions for ranking inputs and outputs.

These define the expected columns at each file boundary, enabling validation
and clear documentation of data contracts.
"""

from __future__ import annotations

# Activity matrix CSV: one id column, then one count column per schema category in schema order
MATRIX_ID_COLUMN = "entity_id"

# Ranked output
RANKED_OUTPUT_COLUMNS = (
    "rank",
    "entity_id",
    "score",
)

# Per-category explanation of every ranked score
RANKED_EXPLAIN_COLUMNS = (
    "entity_id",
    "category",
    "count",
    "weight",
    "points",
)

# Search output
SEARCH_RESULT_COLUMNS = (
    "result_id",
    "kind",
    "title",
    "description",
    "relevance_score",
    "department",
    "institution",
    "skills",  # pipe-separated
    "year_of_study",
)


def validate_columns(df_columns: list[str], required: frozenset[str], stage_name: str) -> None:
    """Validate that DataFrame has required columns.

    Args:
        df_columns: List of column names from DataFrame.
        required: Set of required column names.
        stage_name: Name of the input or output for error messages.

    Raises:
        ValueError: If required columns are missing.
    """
    missing = required - set(df_columns)
    if missing:
        raise ValueError(f"{stage_name}: Missing required columns: {sorted(missing)}")

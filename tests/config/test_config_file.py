"""Tests for config-file schema parsing and fail-fast validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from campus_ranking.config_file import load_ranking_config_file
from campus_ranking.domain.search_types import SearchRole
from campus_ranking.exceptions import (
    ConfigFileNotFoundError,
    ConfigFileParseError,
    ConfigFileValidationError,
)
from tests.fakes import InMemoryFileSystem

CONFIG_PATH = Path("config/ranking.toml")


def _write(fs: InMemoryFileSystem, content: str) -> None:
    fs.write_text(content.strip(), CONFIG_PATH)


def test_load_ranking_config_file_parses_valid_toml(in_memory_fs: InMemoryFileSystem) -> None:
    _write(
        in_memory_fs,
        """
schema_version = 1

[ranking]
weights_profile_path = "data/reference/activity_weights.json"
weights_profile_name = " research "
default_role = "PLACEMENT"
result_limit = 10
output_dir = "data/processed/ranking"
log_level = "debug"
""",
    )

    parsed = load_ranking_config_file(path=CONFIG_PATH, fs=in_memory_fs)

    assert parsed.weights_profile_path == "data/reference/activity_weights.json"
    assert parsed.weights_profile_name == "research"
    assert parsed.default_role is SearchRole.PLACEMENT
    assert parsed.result_limit == 10
    assert parsed.output_dir == "data/processed/ranking"
    assert parsed.log_level == "DEBUG"


def test_missing_keys_stay_unset(in_memory_fs: InMemoryFileSystem) -> None:
    _write(in_memory_fs, "schema_version = 1\n\n[ranking]\nresult_limit = 3\n")

    parsed = load_ranking_config_file(path=CONFIG_PATH, fs=in_memory_fs)

    assert parsed.result_limit == 3
    assert parsed.weights_profile_path is None
    assert parsed.default_role is None


def test_missing_file_raises(in_memory_fs: InMemoryFileSystem) -> None:
    with pytest.raises(ConfigFileNotFoundError):
        load_ranking_config_file(path=CONFIG_PATH, fs=in_memory_fs)


def test_invalid_toml_raises_parse_error(in_memory_fs: InMemoryFileSystem) -> None:
    _write(in_memory_fs, "schema_version = = 1")

    with pytest.raises(ConfigFileParseError):
        load_ranking_config_file(path=CONFIG_PATH, fs=in_memory_fs)


@pytest.mark.parametrize(
    ("content", "location"),
    [
        ("schema_version = 2\n[ranking]\n", "schema_version"),
        ("schema_version = 1\n[ranking]\nresult_limit = 0\n", "ranking.result_limit"),
        ("schema_version = 1\n[ranking]\ndefault_role = 'dean'\n", "ranking.default_role"),
        ("schema_version = 1\n[ranking]\noutput_dir = '  '\n", "ranking.output_dir"),
        ("schema_version = 1\n[ranking]\nlog_level = 'loud'\n", "ranking.log_level"),
        ("schema_version = 1\n[ranking]\nunknown_key = 1\n", "ranking.unknown_key"),
        ("schema_version = 1\n", "ranking"),
    ],
)
def test_invalid_values_raise_validation_error(
    in_memory_fs: InMemoryFileSystem, content: str, location: str
) -> None:
    _write(in_memory_fs, content)

    with pytest.raises(ConfigFileValidationError, match=location):
        load_ranking_config_file(path=CONFIG_PATH, fs=in_memory_fs)

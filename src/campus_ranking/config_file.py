"""Typed parsing and validation for ranking config files."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .domain.search_types import SearchRole
from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .observability import parse_log_level
from .protocols import FileSystem

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class RankingConfigFile:
    """Validated ranking config values loaded from a TOML file."""

    weights_profile_path: str | None = None
    weights_profile_name: str | None = None
    default_role: SearchRole | None = None
    result_limit: int | None = None
    output_dir: str | None = None
    log_level: str | None = None


class _RankingSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    weights_profile_path: str | None = None
    weights_profile_name: str | None = None
    default_role: SearchRole | None = None
    result_limit: int | None = None
    output_dir: str | None = None
    log_level: str | None = None

    @field_validator("default_role", mode="before")
    @classmethod
    def _normalise_role(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("weights_profile_path", "weights_profile_name", "output_dir")
    @classmethod
    def _validate_non_empty_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return parse_log_level(value)

    @field_validator("result_limit")
    @classmethod
    def _validate_positive_int(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 1:
            raise ValueError
        return value


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    ranking: _RankingSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_ranking_config_file(*, path: Path, fs: FileSystem) -> RankingConfigFile:
    """Load and validate a ranking TOML config file."""
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.ranking
    return RankingConfigFile(
        weights_profile_path=section.weights_profile_path,
        weights_profile_name=section.weights_profile_name,
        default_role=section.default_role,
        result_limit=section.result_limit,
        output_dir=section.output_dir,
        log_level=section.log_level,
    )

"""Centralised, injectable configuration for the campus ranking engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import RankingConfigFile
from .domain.search_types import SearchRole
from .observability import DEFAULT_LOG_LEVEL, parse_log_level


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class PositiveIntegerOverrideError(ValueError):
    """Raised when an override must be a positive integer."""

    def __init__(self, field_name: str, value: int) -> None:
        super().__init__(f"{field_name} must be a positive integer (got {value}).")


class SearchRoleEnvVarError(ValueError):
    """Raised when an environment variable must name a search role."""

    def __init__(self, env_name: str) -> None:
        roles = ", ".join(role.value for role in SearchRole)
        super().__init__(f"{env_name} must be one of: {roles}.")


@dataclass(frozen=True)
class RankingConfig:
    """Immutable configuration object for ranking and search commands.

    Load from environment with `RankingConfig.from_env()` or construct directly for testing.
    """

    # Weight profile (empty path uses the built-in defaults)
    weights_profile_path: str = ""
    weights_profile_name: str = ""

    # Search
    default_role: SearchRole = SearchRole.GENERIC
    result_limit: int = 20

    # Outputs
    output_dir: str = "data/processed"

    # Observability
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            RankingConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            weights_profile_path=os.getenv("WEIGHTS_PROFILE_PATH", "").strip(),
            weights_profile_name=os.getenv("WEIGHTS_PROFILE_NAME", "").strip(),
            default_role=_parse_role(os.getenv("SEARCH_ROLE", ""), env_name="SEARCH_ROLE"),
            result_limit=_parse_positive_int(
                os.getenv("RESULT_LIMIT", ""), default=20, env_name="RESULT_LIMIT"
            ),
            output_dir=os.getenv("OUTPUT_DIR", "data/processed").strip() or "data/processed",
            log_level=parse_log_level(os.getenv("LOG_LEVEL", "").strip() or DEFAULT_LOG_LEVEL),
        )

    def with_overrides(
        self,
        *,
        weights_profile_path: str | None = None,
        weights_profile_name: str | None = None,
        default_role: SearchRole | None = None,
        result_limit: int | None = None,
        output_dir: str | None = None,
        log_level: str | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        if result_limit is not None and result_limit < 1:
            raise PositiveIntegerOverrideError("result_limit", result_limit)
        return replace(
            self,
            weights_profile_path=self.weights_profile_path
            if weights_profile_path is None
            else weights_profile_path.strip(),
            weights_profile_name=self.weights_profile_name
            if weights_profile_name is None
            else weights_profile_name.strip(),
            default_role=self.default_role if default_role is None else default_role,
            result_limit=self.result_limit if result_limit is None else result_limit,
            output_dir=self.output_dir if output_dir is None else output_dir,
            log_level=self.log_level if log_level is None else parse_log_level(log_level),
        )

    def with_file_overrides(self, file_config: RankingConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            weights_profile_path=self.weights_profile_path
            if file_config.weights_profile_path is None
            else file_config.weights_profile_path,
            weights_profile_name=self.weights_profile_name
            if file_config.weights_profile_name is None
            else file_config.weights_profile_name,
            default_role=self.default_role
            if file_config.default_role is None
            else file_config.default_role,
            result_limit=self.result_limit
            if file_config.result_limit is None
            else file_config.result_limit,
            output_dir=self.output_dir
            if file_config.output_dir is None
            else file_config.output_dir,
            log_level=self.log_level if file_config.log_level is None else file_config.log_level,
        )


def _parse_role(value: str, *, env_name: str) -> SearchRole:
    """Parse an optional search role, defaulting to generic."""
    text = value.strip().lower()
    if not text:
        return SearchRole.GENERIC
    try:
        return SearchRole(text)
    except ValueError as exc:
        raise SearchRoleEnvVarError(env_name) from exc


def _parse_positive_int(value: str, *, default: int, env_name: str) -> int:
    """Parse a positive integer from an environment variable."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = int(text)
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed

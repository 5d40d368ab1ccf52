"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from .cli import CliDependencies, create_app
from .config import RankingConfig
from .infrastructure import LocalFileSystem


def build_cli_dependencies(*, config: RankingConfig) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Ranking configuration for the current invocation.
    """
    _ = config
    return CliDependencies(fs=LocalFileSystem())


app = create_app(build_cli_dependencies)

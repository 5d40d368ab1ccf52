"""CLI for the campus ranking engine.

Commands:
- categories: Show the active weight schema and tie-break priorities
- rank: Rank an activity matrix with optional name and activity filters
- explain: Show the detailed score calculation for one entity
- search: Free-text search over people and document records
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich.table import Table

from . import __version__
from .application.rank_matrix import run_explain_entity, run_rank_matrix
from .application.search import run_search
from .application.weight_profiles import load_weight_profile
from .config import RankingConfig
from .config_file import load_ranking_config_file
from .domain.ranking import ActivityFilter, ComparisonOperator
from .domain.search_types import SearchFilters, SearchQuery, SearchRole
from .observability import LogLevelError, configure_logging
from .protocols import FileSystem


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: RankingConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: RankingConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self, *, config: RankingConfig | None = None) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=config or self.config)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the campus-rank entry point.")


class ActivityFilterFormatError(typer.BadParameter):
    """Raised when an --activity value is not CATEGORY>=N, CATEGORY<=N or CATEGORY=N."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid activity filter {value!r}. Use CATEGORY>=N, CATEGORY<=N or CATEGORY=N."
        )


DEFAULT_MATRIX_IN = Path("data/raw/activity_matrix.csv")
DEFAULT_RECORDS_IN = Path("data/raw/search_records.json")

_ACTIVITY_FILTER_RE = re.compile(
    r"^\s*(?P<category>[^<>=\s]+)\s*(?P<op>>=|<=|=)\s*(?P<value>\d+)\s*$"
)
_OPERATORS = {
    ">=": ComparisonOperator.GTE,
    "<=": ComparisonOperator.LTE,
    "=": ComparisonOperator.EQ,
}


def parse_activity_filter(value: str) -> ActivityFilter:
    """Parse ``researchPaper>=1`` style filters."""
    match = _ACTIVITY_FILTER_RE.match(value)
    if match is None:
        raise ActivityFilterFormatError(value)
    return ActivityFilter(
        category=match.group("category"),
        value=int(match.group("value")),
        operator=_OPERATORS[match.group("op")],
    )


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"campus-rank {__version__}")
        raise typer.Exit()


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Campus ranking engine: weighted activity ranking and role-aware search",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file overriding environment settings",
            ),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option(
                "--log-level",
                help="DEBUG, INFO, WARNING or ERROR (default: LOG_LEVEL)",
            ),
        ] = None,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show the package version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        _ = version
        config = RankingConfig.from_env()
        if config_path is not None:
            deps = deps_builder(config=config)
            config = config.with_file_overrides(
                load_ranking_config_file(path=config_path, fs=deps.fs)
            )
        try:
            config = config.with_overrides(log_level=log_level)
        except LogLevelError as exc:
            raise typer.BadParameter(str(exc), param_hint="--log-level") from exc
        configure_logging(config.log_level)
        ctx.obj = CliContext(config=config, deps_builder=deps_builder)

    @app.command()
    def categories(
        ctx: typer.Context,
        profile: Annotated[
            str | None,
            typer.Option("--profile", "-p", help="Weight profile name from the catalogue"),
        ] = None,
    ) -> None:
        """Show scored categories in vector order with weights and tie-break priority."""
        state = _get_context(ctx)
        config = state.config.with_overrides(weights_profile_name=profile)
        deps = state.build_dependencies(config=config)
        weight_profile = load_weight_profile(
            path=config.weights_profile_path,
            profile_name=config.weights_profile_name,
            fs=deps.fs,
        )

        table = Table(title=f"Weight profile: {weight_profile.name}")
        table.add_column("#", justify="right")
        table.add_column("Category")
        table.add_column("Label")
        table.add_column("Points", justify="right")
        table.add_column("Tie-break", justify="right")
        for index, activity in enumerate(weight_profile.schema):
            priority = weight_profile.tie_break_priority.get(activity.category)
            table.add_row(
                str(index + 1),
                activity.category,
                activity.display_name,
                str(activity.weight),
                "-" if priority is None else str(priority),
            )
        rprint(table)

    @app.command()
    def rank(
        ctx: typer.Context,
        matrix_path: Annotated[
            Path,
            typer.Option("--input", "-i", help="Activity matrix CSV or JSON"),
        ] = DEFAULT_MATRIX_IN,
        out_dir: Annotated[
            Path | None,
            typer.Option("--output-dir", "-o", help="Directory for output files"),
        ] = None,
        name: Annotated[
            str | None,
            typer.Option("--name", "-n", help="Only rank ids containing this text"),
        ] = None,
        activity: Annotated[
            list[str] | None,
            typer.Option(
                "--activity",
                "-a",
                help="Activity filter, repeatable (e.g. --activity researchPaper>=1)",
            ),
        ] = None,
        profile: Annotated[
            str | None,
            typer.Option("--profile", "-p", help="Weight profile name from the catalogue"),
        ] = None,
        write: Annotated[
            bool,
            typer.Option("--write/--no-write", help="Write ranked and explain CSV files"),
        ] = True,
    ) -> None:
        """Rank an activity matrix by weighted score with tie-breaking."""
        state = _get_context(ctx)
        config = state.config.with_overrides(weights_profile_name=profile)
        deps = state.build_dependencies(config=config)
        filters = [parse_activity_filter(value) for value in activity or []]
        result = run_rank_matrix(
            matrix_path=matrix_path,
            out_dir=out_dir,
            config=config,
            fs=deps.fs,
            name_filter=name,
            activity_filters=filters,
            write_outputs=write,
        )

        table = Table(title=f"Rankings ({result.profile_name})")
        table.add_column("Rank", justify="right")
        table.add_column("Entity")
        table.add_column("Score", justify="right")
        table.add_column("Key activities")
        for entity in result.ranked:
            highlights = result.highlights.get(entity.entity_id, [])
            table.add_row(
                str(entity.rank),
                entity.entity_id,
                str(entity.score),
                ", ".join(f"{item.label}: {item.count}" for item in highlights),
            )
        rprint(table)
        if not result.ranked:
            rprint("[yellow]No entities match the current filters.[/yellow]")
        for key, path in result.outputs.items():
            rprint(f"[green]✓ {key.capitalize()}:[/green] {path}")

    @app.command()
    def explain(
        ctx: typer.Context,
        entity_id: Annotated[str, typer.Argument(help="Entity id to explain")],
        matrix_path: Annotated[
            Path,
            typer.Option("--input", "-i", help="Activity matrix CSV or JSON"),
        ] = DEFAULT_MATRIX_IN,
        profile: Annotated[
            str | None,
            typer.Option("--profile", "-p", help="Weight profile name from the catalogue"),
        ] = None,
    ) -> None:
        """Show the per-category score calculation for one entity."""
        state = _get_context(ctx)
        config = state.config.with_overrides(weights_profile_name=profile)
        deps = state.build_dependencies(config=config)
        breakdown = run_explain_entity(
            matrix_path=matrix_path,
            entity_id=entity_id,
            config=config,
            fs=deps.fs,
        )
        rprint(breakdown.render())

    @app.command()
    def search(
        ctx: typer.Context,
        query: Annotated[str, typer.Argument(help="Free-text query")],
        records_path: Annotated[
            Path,
            typer.Option("--input", "-i", help="JSON file with people and documents"),
        ] = DEFAULT_RECORDS_IN,
        role: Annotated[
            SearchRole | None,
            typer.Option("--role", "-r", help="Searcher role (default: SEARCH_ROLE)"),
        ] = None,
        department: Annotated[
            str | None,
            typer.Option("--department", help="Exact department filter"),
        ] = None,
        institution: Annotated[
            str | None,
            typer.Option("--institution", help="Exact institution filter"),
        ] = None,
        skill: Annotated[
            list[str] | None,
            typer.Option("--skill", "-s", help="Require any of these skills (repeatable)"),
        ] = None,
        year: Annotated[
            int | None,
            typer.Option("--year", help="Exact year-of-study filter"),
        ] = None,
        limit: Annotated[
            int | None,
            typer.Option(
                "--limit", "-l", min=1, help="Maximum results (default: RESULT_LIMIT)"
            ),
        ] = None,
        out_path: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Write results to this CSV"),
        ] = None,
    ) -> None:
        """Search people and documents with hybrid relevance and role boosts."""
        state = _get_context(ctx)
        config = state.config.with_overrides(default_role=role, result_limit=limit)
        deps = state.build_dependencies(config=config)
        search_query = SearchQuery(
            text=query,
            role=config.default_role,
            filters=SearchFilters(
                department=department,
                institution=institution,
                skills=frozenset(skill or []),
                year_of_study=year,
            ),
        )
        results = run_search(
            query=search_query,
            records_path=records_path,
            config=config,
            fs=deps.fs,
            out_path=out_path,
        )

        table = Table(title=f"Search: {query!r} as {config.default_role.value}")
        table.add_column("Score", justify="right")
        table.add_column("Kind")
        table.add_column("Title")
        table.add_column("Description")
        for result in results:
            table.add_row(
                f"{result.relevance_score:.3f}",
                result.kind.value,
                result.title,
                result.description,
            )
        rprint(table)
        if not results:
            rprint("[yellow]No results found. Try adjusting your search terms or filters.[/yellow]")
        if out_path is not None:
            rprint(f"[green]✓ Results:[/green] {out_path}")

    _ = (main, categories, rank, explain, search)

    return app

import asyncio
import logging
from collections.abc import Callable
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.table import Table

from sleeper_roster_analyzer.aggregation.projection import project_stats, summary_stats
from sleeper_roster_analyzer.config import AnalyzerSettings, FailurePolicy, create_config, load_settings
from sleeper_roster_analyzer.images import headshot_url, position_color
from sleeper_roster_analyzer.models import AggregationReport, PlayerAggregation
from sleeper_roster_analyzer.pipeline import AggregationResult, run_aggregation
from sleeper_roster_analyzer.session import SearchSession

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(help="Aggregate a Sleeper user's rostered players across leagues.")

# Module-level DI factory for testing
_http_client_factory: Callable[[AnalyzerSettings], httpx.AsyncClient] | None = None


def set_http_client_factory(factory: Callable[[AnalyzerSettings], httpx.AsyncClient] | None) -> None:
    global _http_client_factory
    _http_client_factory = factory


async def _run(username: str, settings: AnalyzerSettings) -> AggregationResult:
    if _http_client_factory is None:
        return await run_aggregation(username, settings)
    async with _http_client_factory(settings) as client:
        return await run_aggregation(username, settings, http_client=client)


def _search(
    username: str,
    season: int | None,
    stats_season: int | None,
    policy: FailurePolicy | None,
) -> SearchSession:
    settings = load_settings(create_config(season=season, stats_season=stats_season, failure_policy=policy))
    session = SearchSession(settings, runner=_run)
    try:
        with console.status(f"Loading rosters for {username}..."):
            asyncio.run(session.search(username))
    except ValueError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e
    if session.error_message is not None:
        err_console.print(f"[red]{session.error_message}[/red]")
        raise typer.Exit(code=1)
    return session


def _print_warnings(report: AggregationReport) -> None:
    for failure in report.failed_leagues:
        err_console.print(f"[yellow]Warning:[/yellow] skipped league {failure.league_name}: {failure.error}")
    if report.enrichment_degraded:
        err_console.print("[yellow]Warning:[/yellow] player ID crosswalk unavailable; headshots will use the default image")


def _position_cell(position: str) -> str:
    return f"[{position_color(position)}]{position or '--'}[/]"


def _format_value(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.1f}"


def render_players(report: AggregationReport, limit: int | None = None) -> Table:
    table = Table(title=f"{report.username}: {len(report.players)} players across {report.league_count} leagues")
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("Pos")
    table.add_column("Team")
    table.add_column("Leagues", justify="right")
    table.add_column("ID", style="dim")
    shown = report.players if limit is None else report.players[:limit]
    for rank, player in enumerate(shown, start=1):
        table.add_row(
            str(rank),
            player.full_name,
            _position_cell(player.position),
            player.team,
            str(player.league_count),
            player.player_id,
        )
    return table


def render_player_detail(player: PlayerAggregation, settings: AnalyzerSettings) -> Table:
    table = Table(title=f"{player.full_name} ({player.position} - {player.team})", show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    image = headshot_url(player.external_id, settings.headshot_url_template, settings.default_image_url)
    table.add_row("Image", image)
    for label, value in summary_stats(player.stats) + project_stats(player.position, player.stats):
        table.add_row(label, _format_value(value))
    table.add_row("Leagues", str(player.league_count))
    for league in player.leagues:
        table.add_row("", f"{league.name} (roster {league.roster_id})")
    return table


@app.callback()
def main_callback(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase verbosity (-v debug, -vvv http)."),
) -> None:
    if verbose >= 1:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
        # Suppress noisy HTTP loggers unless -vvv
        if verbose < 3:
            logging.getLogger("httpx").setLevel(logging.WARNING)
            logging.getLogger("httpcore").setLevel(logging.WARNING)


@app.command(name="players")
def players_cmd(
    username: Annotated[str, typer.Argument(help="Sleeper username.")],
    season: Annotated[int | None, typer.Option("--season", help="League season (default from config).")] = None,
    stats_season: Annotated[
        int | None, typer.Option("--stats-season", help="Season to pull stats from (default from config).")
    ] = None,
    policy: Annotated[
        FailurePolicy | None, typer.Option("--policy", help="What a failed league fetch does to the run.")
    ] = None,
    limit: Annotated[int | None, typer.Option("--limit", "-n", help="Show at most N players.")] = None,
) -> None:
    """List every rostered player, ranked by how many leagues they appear in."""
    session = _search(username, season, stats_season, policy)
    report = session.report
    assert report is not None
    _print_warnings(report)
    if not report.players:
        console.print("No players found for this user")
        return
    console.print(render_players(report, limit))


@app.command(name="player")
def player_cmd(
    username: Annotated[str, typer.Argument(help="Sleeper username.")],
    player_id: Annotated[str, typer.Argument(help="Sleeper player ID.")],
    season: Annotated[int | None, typer.Option("--season", help="League season (default from config).")] = None,
    stats_season: Annotated[
        int | None, typer.Option("--stats-season", help="Season to pull stats from (default from config).")
    ] = None,
    policy: Annotated[
        FailurePolicy | None, typer.Option("--policy", help="What a failed league fetch does to the run.")
    ] = None,
) -> None:
    """Show one rostered player's details, stats and leagues."""
    session = _search(username, season, stats_season, policy)
    player = session.select(player_id)
    if player is None:
        err_console.print(f"Player {player_id} is not rostered by {username}")
        raise typer.Exit(code=1)
    console.print(render_player_detail(player, session.settings))

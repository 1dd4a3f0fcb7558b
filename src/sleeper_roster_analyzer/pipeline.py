"""End-to-end search: username in, ranked player aggregation out."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from sleeper_roster_analyzer.aggregation.aggregator import build_partial, enrich
from sleeper_roster_analyzer.errors import SleeperError
from sleeper_roster_analyzer.models import AggregationReport, Player, StatsRecord
from sleeper_roster_analyzer.player_id.mapper import fetch_identifier_map
from sleeper_roster_analyzer.result import Err, Ok
from sleeper_roster_analyzer.roster.collector import collect_rosters
from sleeper_roster_analyzer.sleeper.client import SleeperClient

if TYPE_CHECKING:
    import httpx

    from sleeper_roster_analyzer.config import AnalyzerSettings

logger = logging.getLogger(__name__)

AggregationResult = Ok[AggregationReport] | Err[SleeperError]


async def run_aggregation(
    username: str,
    settings: AnalyzerSettings,
    *,
    season: int | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AggregationResult:
    """Run one complete search for ``username``.

    Returns Ok with the report, or Err carrying ``UserNotFoundError`` or a
    ``NetworkFailureError``. A crosswalk failure does not fail the run; it is
    reported through ``AggregationReport.enrichment_degraded``.

    Args:
        username: Sleeper username to search.
        settings: Loaded analyzer settings.
        season: League season; defaults to ``settings.season``.
        http_client: Client to use instead of a fresh one. Left open afterwards.
    """
    season = settings.season if season is None else season
    client = SleeperClient(settings, http_client)
    try:
        return Ok(await _aggregate(client, username, season, settings))
    except SleeperError as e:
        logger.info("Search for %s failed: %s", username, e)
        return Err(e)
    finally:
        if http_client is None:
            await client.aclose()


async def _aggregate(
    client: SleeperClient,
    username: str,
    season: int,
    settings: AnalyzerSettings,
) -> AggregationReport:
    collection = await collect_rosters(
        client,
        username,
        season,
        policy=settings.failure_policy,
        max_concurrency=settings.max_concurrency,
    )
    partial = build_partial(collection.roster_entries)
    league_total = len(collection.leagues) + len(collection.failed_leagues)
    if not partial:
        logger.info("No rostered players found for %s", username)
        return AggregationReport(
            username=username,
            season=season,
            players=[],
            league_count=league_total,
            failed_leagues=collection.failed_leagues,
        )

    outcomes: list[Any] = await asyncio.gather(
        client.get_players(),
        client.get_stats(settings.stats_season),
        fetch_identifier_map(
            client,
            settings.crosswalk_url,
            settings.crosswalk_source_column,
            settings.crosswalk_target_column,
        ),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    catalog: dict[str, Player] = outcomes[0]
    stats: dict[str, StatsRecord] = outcomes[1]
    id_result = outcomes[2]

    players = enrich(partial, catalog, stats, id_result.unwrap_or({}))
    logger.info("Aggregated %d player(s) across %d league(s) for %s", len(players), league_total, username)
    return AggregationReport(
        username=username,
        season=season,
        players=players,
        league_count=league_total,
        failed_leagues=collection.failed_leagues,
        enrichment_degraded=id_result.is_err(),
    )

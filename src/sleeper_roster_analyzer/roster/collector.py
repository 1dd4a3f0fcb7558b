import asyncio
import logging
from typing import Any

from sleeper_roster_analyzer.aggregation.aggregator import accumulate
from sleeper_roster_analyzer.config import FailurePolicy
from sleeper_roster_analyzer.errors import SleeperError
from sleeper_roster_analyzer.models import League, LeagueFailure, PlayerAggregation, RosterCollection
from sleeper_roster_analyzer.result import Err, Ok
from sleeper_roster_analyzer.sleeper.client import SleeperClient

logger = logging.getLogger(__name__)

RosterOutcome = Ok[dict[str, Any] | None] | Err[SleeperError]


def find_user_roster(rosters: list[dict[str, Any]], user_id: str) -> dict[str, Any] | None:
    for roster in rosters:
        if str(roster.get("owner_id")) == user_id:
            return roster
    return None


class RosterCollector:
    """Collects the rosters a user owns across all their leagues for a season.

    League rosters are fetched concurrently, at most ``max_concurrency`` at a
    time, and merged in league listing order once every fetch has settled.
    Under ``FailurePolicy.ISOLATE`` a failed league is skipped and reported;
    under ``FailurePolicy.ABORT`` the first failure is raised.
    """

    def __init__(
        self,
        client: SleeperClient,
        policy: FailurePolicy = FailurePolicy.ISOLATE,
        max_concurrency: int = 10,
    ) -> None:
        self._client = client
        self._policy = policy
        self._max_concurrency = max_concurrency

    async def collect(self, username: str, season: int) -> RosterCollection:
        user_id = await self._client.get_user_id(username)
        logger.debug("Resolved %s to user %s", username, user_id)

        league_data = await self._client.get_leagues(user_id, season)
        logger.info("User %s has %d league(s) in %d", username, len(league_data), season)
        if not league_data:
            return RosterCollection(leagues=(), roster_entries={})

        semaphore = asyncio.Semaphore(self._max_concurrency)
        outcomes = await asyncio.gather(
            *(self._fetch_user_roster(semaphore, str(league["league_id"]), user_id) for league in league_data)
        )

        leagues: list[League] = []
        failures: list[LeagueFailure] = []
        partial: dict[str, PlayerAggregation] = {}
        for league, outcome in zip(league_data, outcomes, strict=True):
            league_id = str(league["league_id"])
            league_name = str(league.get("name") or league_id)
            if outcome.is_err():
                error = outcome.unwrap_err()
                if self._policy is FailurePolicy.ABORT:
                    raise error
                logger.warning("Skipping league %s (%s): %s", league_name, league_id, error)
                failures.append(LeagueFailure(league_id=league_id, league_name=league_name, error=error))
                continue

            roster = outcome.unwrap()
            if roster is None:
                logger.debug("No roster owned by %s in league %s", user_id, league_id)
                leagues.append(League(name=league_name, roster_id="", league_id=league_id))
                continue

            membership = League(name=league_name, roster_id=str(roster.get("roster_id", "")), league_id=league_id)
            leagues.append(membership)
            accumulate(partial, membership, [str(pid) for pid in roster.get("players") or []])

        return RosterCollection(
            leagues=tuple(leagues),
            roster_entries={pid: list(entry.leagues) for pid, entry in partial.items()},
            failed_leagues=tuple(failures),
        )

    async def _fetch_user_roster(self, semaphore: asyncio.Semaphore, league_id: str, user_id: str) -> RosterOutcome:
        async with semaphore:
            try:
                return Ok(find_user_roster(await self._client.get_rosters(league_id), user_id))
            except SleeperError as e:
                return Err(e)


async def collect_rosters(
    client: SleeperClient,
    username: str,
    season: int,
    policy: FailurePolicy = FailurePolicy.ISOLATE,
    max_concurrency: int = 10,
) -> RosterCollection:
    return await RosterCollector(client, policy, max_concurrency).collect(username, season)

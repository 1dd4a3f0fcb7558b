"""Fake Sleeper API served through httpx.MockTransport."""

from __future__ import annotations

from typing import Any

import httpx

from sleeper_roster_analyzer.config import AnalyzerSettings, FailurePolicy

BASE_URL = "https://api.sleeper.test/v1"
CROSSWALK_URL = "https://crosswalk.test/db_playerids.csv"


def make_settings(**overrides: Any) -> AnalyzerSettings:
    values: dict[str, Any] = {
        "base_url": BASE_URL,
        "sport": "nfl",
        "season": 2025,
        "stats_season": 2024,
        "season_type": "regular",
        "timeout_seconds": 5.0,
        "crosswalk_url": CROSSWALK_URL,
        "crosswalk_source_column": "sleeper_id",
        "crosswalk_target_column": "espn_id",
        "headshot_url_template": "https://a.espncdn.com/i/headshots/nfl/players/full/{external_id}.png",
        "default_image_url": "https://sleepercdn.com/images/v2/icons/player_default.webp",
        "failure_policy": FailurePolicy.ISOLATE,
        "max_concurrency": 4,
    }
    values.update(overrides)
    return AnalyzerSettings(**values)


class FakeSleeperApi:
    """Routes requests by URL to canned responses and records what was fetched.

    A route value may be an ``httpx.Response``, an exception instance to raise,
    or any JSON-serializable object returned with status 200.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requested: list[str] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        if url not in self.routes:
            return httpx.Response(404, json={"error": "not found"})
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, str):
            return httpx.Response(200, text=route)
        return httpx.Response(200, json=route)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


def user_url(username: str) -> str:
    return f"{BASE_URL}/user/{username}"


def leagues_url(user_id: str, season: int = 2025) -> str:
    return f"{BASE_URL}/user/{user_id}/leagues/nfl/{season}"


def rosters_url(league_id: str) -> str:
    return f"{BASE_URL}/league/{league_id}/rosters"


PLAYERS_URL = f"{BASE_URL}/players/nfl"
STATS_URL = f"{BASE_URL}/stats/nfl/regular/2024"

CROSSWALK_CSV = (
    "mfl_id,sportradar_id,espn_id,sleeper_id,name\n"
    "1,a,3139477,4046,Patrick Mahomes\n"
    "2,b,4241457,6794,Justin Jefferson\n"
    "3,c,NA,9999,Practice Squad\n"
    ",,,,\n"
)


def two_league_api() -> FakeSleeperApi:
    """User u1 owns rosters in two leagues sharing one player (6794)."""
    return FakeSleeperApi(
        {
            user_url("alice"): {"user_id": "u1", "username": "alice"},
            leagues_url("u1"): [
                {"league_id": "L1", "name": "Dynasty Bros"},
                {"league_id": "L2", "name": "Work League"},
            ],
            rosters_url("L1"): [
                {"owner_id": "u2", "roster_id": 1, "players": ["1111"]},
                {"owner_id": "u1", "roster_id": 2, "players": ["4046", "6794"]},
            ],
            rosters_url("L2"): [
                {"owner_id": "u1", "roster_id": 7, "players": ["6794", "8150", "999"]},
            ],
            PLAYERS_URL: {
                "4046": {"full_name": "Patrick Mahomes", "position": "QB", "team": "KC"},
                "6794": {"full_name": "Justin Jefferson", "position": "WR", "team": "MIN"},
                "8150": {"full_name": "Free Agent Back", "position": "RB", "team": None},
                "1111": {"full_name": "Someone Else", "position": "TE", "team": "DAL"},
            },
            STATS_URL: {
                "4046": {"gp": 16, "pass_yd": 3928, "pass_td": 26, "rush_yd": 307, "rush_td": 2},
                "6794": {"gp": 17, "rec": 103, "rec_yd": 1533, "rec_td": 10, "pts_ppr": 296.3},
            },
            CROSSWALK_URL: CROSSWALK_CSV,
        }
    )

import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from sleeper_roster_analyzer.config import AnalyzerSettings
from sleeper_roster_analyzer.errors import NetworkFailureError, RequestTimeoutError, UserNotFoundError
from sleeper_roster_analyzer.models import Player, StatsRecord

logger = logging.getLogger(__name__)


def build_http_client(settings: AnalyzerSettings) -> httpx.AsyncClient:
    timeout = httpx.Timeout(settings.timeout_seconds, connect=min(10.0, settings.timeout_seconds))
    return httpx.AsyncClient(timeout=timeout, headers={"User-Agent": "sleeper-roster-analyzer"})


class SleeperClient:
    """Async client for the read-only Sleeper v1 endpoints.

    Every call is a single attempt bounded by the configured timeout. Failures
    surface as ``NetworkFailureError`` (``RequestTimeoutError`` for deadlines),
    except the username lookup, whose non-success responses surface as
    ``UserNotFoundError``.
    """

    def __init__(self, settings: AnalyzerSettings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = client or build_http_client(settings)

    async def __aenter__(self) -> "SleeperClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_user_id(self, username: str) -> str:
        url = f"{self._settings.base_url}/user/{quote(username, safe='')}"
        try:
            data = await self.get_json(url)
        except RequestTimeoutError:
            raise
        except NetworkFailureError as e:
            if isinstance(e.cause, httpx.HTTPStatusError):
                raise UserNotFoundError(username, e.cause) from e
            raise
        # Sleeper answers unknown usernames with 200 and a null body
        if not isinstance(data, dict) or not data.get("user_id"):
            raise UserNotFoundError(username)
        return str(data["user_id"])

    async def get_leagues(self, user_id: str, season: int) -> list[dict[str, Any]]:
        url = f"{self._settings.base_url}/user/{user_id}/leagues/{self._settings.sport}/{season}"
        data = await self.get_json(url)
        if data is None:
            return []
        if not isinstance(data, list):
            raise NetworkFailureError(url, ValueError(f"expected a list of leagues, got {type(data).__name__}"))
        for league in data:
            if not isinstance(league, dict) or not league.get("league_id"):
                raise NetworkFailureError(url, ValueError(f"malformed league entry: {league!r}"))
        return data

    async def get_rosters(self, league_id: str) -> list[dict[str, Any]]:
        url = f"{self._settings.base_url}/league/{league_id}/rosters"
        data = await self.get_json(url)
        if data is None:
            return []
        if not isinstance(data, list):
            raise NetworkFailureError(url, ValueError(f"expected a list of rosters, got {type(data).__name__}"))
        for roster in data:
            if not isinstance(roster, dict):
                raise NetworkFailureError(url, ValueError(f"malformed roster entry: {roster!r}"))
            if not isinstance(roster.get("players") or [], list):
                detail = f"malformed players list in roster {roster.get('roster_id')}"
                raise NetworkFailureError(url, ValueError(detail))
        return data

    async def get_players(self) -> dict[str, Player]:
        url = f"{self._settings.base_url}/players/{self._settings.sport}"
        data = await self.get_json(url)
        if not isinstance(data, dict):
            raise NetworkFailureError(url, ValueError("expected a player catalog object"))
        catalog = {pid: Player.from_api(pid, raw) for pid, raw in data.items() if isinstance(raw, dict)}
        logger.info("Loaded %d players from catalog", len(catalog))
        return catalog

    async def get_stats(self, season: int) -> dict[str, StatsRecord]:
        url = f"{self._settings.base_url}/stats/{self._settings.sport}/{self._settings.season_type}/{season}"
        data = await self.get_json(url)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise NetworkFailureError(url, ValueError("expected a stats object"))
        stats = {pid: StatsRecord.from_api(raw) for pid, raw in data.items() if isinstance(raw, dict)}
        logger.info("Loaded %s %d stats for %d players", self._settings.season_type, season, len(stats))
        return stats

    async def get_json(self, url: str) -> Any:
        response = await self._get(url)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkFailureError(url, e) from e

    async def get_text(self, url: str) -> str:
        response = await self._get(url)
        return response.text

    async def _get(self, url: str) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(url, e) from e
        except httpx.HTTPError as e:
            raise NetworkFailureError(url, e) from e
        logger.debug("%s responded %d", url, response.status_code)
        return response

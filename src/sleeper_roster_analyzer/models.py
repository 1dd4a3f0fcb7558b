"""Data model for a single roster search.

Every object here is created fresh for each search and held only in memory.
``Player``, ``League`` and ``StatsRecord`` are immutable reference data;
``PlayerAggregation`` grows while leagues are merged and is finalized once by
the enrichment pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

FREE_AGENT = "FA"


@dataclass(frozen=True, slots=True)
class Player:
    """Bulk catalog record for one player.

    Attributes:
        player_id: Sleeper player ID.
        full_name: Display name.
        position: Position code, e.g. ``"QB"``.
        team: Team code, or None for a free agent.
    """

    player_id: str
    full_name: str
    position: str
    team: str | None = None

    @classmethod
    def from_api(cls, player_id: str, data: dict[str, Any]) -> Player:
        full_name = data.get("full_name")
        if not full_name:
            # Team defenses carry first/last name only
            parts = [data.get("first_name") or "", data.get("last_name") or ""]
            full_name = " ".join(p for p in parts if p)
        return cls(
            player_id=player_id,
            full_name=full_name,
            position=data.get("position") or "",
            team=data.get("team") or None,
        )


@dataclass(frozen=True, slots=True)
class League:
    """One league in which the user owns a roster."""

    name: str
    roster_id: str
    league_id: str = ""


@dataclass(frozen=True, slots=True)
class StatsRecord:
    """Seasonal statistics; a field is None when the source did not report it."""

    gp: float | None = None
    pts_ppr: float | None = None
    pass_yd: float | None = None
    pass_td: float | None = None
    rush_yd: float | None = None
    rush_td: float | None = None
    rec: float | None = None
    rec_yd: float | None = None
    rec_td: float | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> StatsRecord:
        values: dict[str, float] = {}
        for f in fields(cls):
            raw = data.get(f.name)
            if isinstance(raw, int | float) and not isinstance(raw, bool):
                values[f.name] = float(raw)
        return cls(**values)


@dataclass(slots=True)
class PlayerAggregation:
    """A player's memberships across the user's leagues.

    ``league_count`` always equals ``len(leagues)``; use ``add_league`` to
    record another membership rather than mutating either field directly.
    """

    player_id: str
    full_name: str = ""
    position: str = ""
    team: str = ""
    league_count: int = 0
    leagues: list[League] = field(default_factory=list)
    external_id: str | None = None
    stats: StatsRecord | None = None

    def add_league(self, league: League) -> None:
        self.leagues.append(league)
        self.league_count = len(self.leagues)

    def copy(self) -> PlayerAggregation:
        return PlayerAggregation(
            player_id=self.player_id,
            full_name=self.full_name,
            position=self.position,
            team=self.team,
            league_count=self.league_count,
            leagues=list(self.leagues),
            external_id=self.external_id,
            stats=self.stats,
        )


@dataclass(frozen=True, slots=True)
class LeagueFailure:
    """A league whose roster could not be fetched under the isolate policy."""

    league_id: str
    league_name: str
    error: Exception


@dataclass(frozen=True)
class RosterCollection:
    """Output of roster collection.

    Attributes:
        leagues: Every league the user belongs to, in listing order.
        roster_entries: Player ID to the leagues whose user roster contains it,
            in first-seen order.
        failed_leagues: Leagues skipped because their roster fetch failed.
    """

    leagues: tuple[League, ...]
    roster_entries: dict[str, list[League]]
    failed_leagues: tuple[LeagueFailure, ...] = ()


@dataclass(frozen=True)
class AggregationReport:
    """The successful outcome of a search."""

    username: str
    season: int
    players: list[PlayerAggregation]
    league_count: int
    failed_leagues: tuple[LeagueFailure, ...] = ()
    enrichment_degraded: bool = False

    def find(self, player_id: str) -> PlayerAggregation | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

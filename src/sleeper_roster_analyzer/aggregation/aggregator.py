"""Merge roster memberships into one entry per player and enrich them.

Usage:
    partial = build_partial(collection.roster_entries)
    players = enrich(partial, catalog, stats, id_map)

``enrich`` performs no I/O and never mutates its inputs, so the same four
inputs always give the same ordered output.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sleeper_roster_analyzer.models import FREE_AGENT, PlayerAggregation, StatsRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sleeper_roster_analyzer.models import League, Player

logger = logging.getLogger(__name__)


def accumulate(partial: dict[str, PlayerAggregation], league: League, player_ids: Iterable[str]) -> None:
    """Record one league's roster against every player ID in it.

    A player already present gains another membership; new players start
    with this league as their only one. A player listed twice within the
    same roster is counted once.
    """
    seen: set[str] = set()
    for player_id in player_ids:
        if player_id in seen:
            continue
        seen.add(player_id)
        entry = partial.get(player_id)
        if entry is None:
            entry = PlayerAggregation(player_id=player_id)
            partial[player_id] = entry
        entry.add_league(league)


def build_partial(roster_entries: Mapping[str, Iterable[League]]) -> dict[str, PlayerAggregation]:
    partial: dict[str, PlayerAggregation] = {}
    for player_id, leagues in roster_entries.items():
        entry = PlayerAggregation(player_id=player_id)
        for league in leagues:
            entry.add_league(league)
        if entry.league_count:
            partial[player_id] = entry
    return partial


def enrich(
    partial: Mapping[str, PlayerAggregation],
    catalog: Mapping[str, Player],
    stats: Mapping[str, StatsRecord],
    id_map: Mapping[str, str],
) -> list[PlayerAggregation]:
    """Attach catalog metadata, stats and external IDs, then filter and rank.

    Entries with no catalog record, or a catalog record with no name, are
    dropped. The rest are sorted by league count descending; the sort is
    stable so equal counts keep the order of ``partial``.
    """
    enriched: list[PlayerAggregation] = []
    for player_id, entry in partial.items():
        result = entry.copy()
        player = catalog.get(player_id)
        if player is not None:
            result.full_name = player.full_name
            result.position = player.position
            result.team = player.team or FREE_AGENT
            result.stats = stats.get(player_id) or StatsRecord()
            result.external_id = id_map.get(player_id) or None
        enriched.append(result)

    named = [p for p in enriched if p.full_name]
    dropped = len(enriched) - len(named)
    if dropped:
        logger.debug("Dropped %d rostered player(s) missing from the catalog", dropped)

    return sorted(named, key=lambda p: p.league_count, reverse=True)

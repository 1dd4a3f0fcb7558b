from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sleeper_roster_analyzer.models import StatsRecord

# Stat column specs: (label, StatsRecord field)
_PASSING: tuple[tuple[str, str], ...] = (("Pass YDS", "pass_yd"), ("Pass TD", "pass_td"))
_RUSHING: tuple[tuple[str, str], ...] = (("Rush YDS", "rush_yd"), ("Rush TD", "rush_td"))

STAT_PROJECTIONS: dict[str, tuple[tuple[str, str], ...]] = {
    "QB": _PASSING + _RUSHING,
    "RB": _RUSHING + (("Receptions", "rec"), ("Rec YDS", "rec_yd")),
    "WR": (("Receptions", "rec"), ("Rec YDS", "rec_yd"), ("Rec TD", "rec_td")),
    "TE": (("Receptions", "rec"), ("Rec YDS", "rec_yd"), ("Rec TD", "rec_td")),
}

_SUMMARY: tuple[tuple[str, str], ...] = (("Games", "gp"), ("PPR Pts", "pts_ppr"))


def _select(stats: StatsRecord, columns: tuple[tuple[str, str], ...]) -> list[tuple[str, float]]:
    return [(label, getattr(stats, attr) or 0) for label, attr in columns]


def project_stats(position: str, stats: StatsRecord | None) -> list[tuple[str, float]]:
    """Select the position-relevant stats as ordered (label, value) pairs.

    Positions without an entry in STAT_PROJECTIONS show nothing; missing
    values read as zero.
    """
    if stats is None:
        return []
    return _select(stats, STAT_PROJECTIONS.get(position, ()))


def summary_stats(stats: StatsRecord | None) -> list[tuple[str, float]]:
    if stats is None:
        return []
    return _select(stats, _SUMMARY)

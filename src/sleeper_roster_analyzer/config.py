from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml


class AppConfig(Protocol):
    def __getitem__(self, key: str) -> object: ...


class FailurePolicy(StrEnum):
    """What a failed league roster fetch does to the rest of the run."""

    ISOLATE = "isolate"
    ABORT = "abort"


_DEFAULTS: dict[str, object] = {
    "sleeper": {
        "base_url": "https://api.sleeper.app/v1",
        "sport": "nfl",
        "season": 2025,
        "stats_season": 2024,
        "season_type": "regular",
        "timeout_seconds": 30.0,
    },
    "crosswalk": {
        "url": "https://raw.githubusercontent.com/dynastyprocess/data/master/files/db_playerids.csv",
        "source_column": "sleeper_id",
        "target_column": "espn_id",
    },
    "images": {
        "headshot_url_template": "https://a.espncdn.com/i/headshots/nfl/players/full/{external_id}.png",
        "default_url": "https://sleepercdn.com/images/v2/icons/player_default.webp",
    },
    "aggregation": {
        "failure_policy": "isolate",
        "max_concurrency": 10,
    },
}


@dataclass(frozen=True)
class AnalyzerSettings:
    base_url: str
    sport: str
    season: int
    stats_season: int
    season_type: str
    timeout_seconds: float
    crosswalk_url: str
    crosswalk_source_column: str
    crosswalk_target_column: str
    headshot_url_template: str
    default_image_url: str
    failure_policy: FailurePolicy
    max_concurrency: int


def create_config(
    yaml_path: str = "config.yaml",
    env_prefix: str = "SLEEPER",
    defaults: dict[str, object] | None = None,
    *,
    season: int | None = None,
    stats_season: int | None = None,
    failure_policy: FailurePolicy | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file.
        env_prefix: Prefix for environment variables, e.g. ``SLEEPER__SLEEPER__SEASON``.
        defaults: Default configuration values.
        season: Override the league season.
        stats_season: Override the season used for statistics.
        failure_policy: Override the per-league failure policy.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]

    overrides = _build_overrides(season, stats_season, failure_policy)
    if overrides:
        layers.insert(0, config_from_dict(overrides))

    return ConfigurationSet(*layers)


def _build_overrides(
    season: int | None,
    stats_season: int | None,
    failure_policy: FailurePolicy | None,
) -> dict[str, object]:
    overrides: dict[str, object] = {}
    sleeper: dict[str, object] = {}
    if season is not None:
        sleeper["season"] = season
    if stats_season is not None:
        sleeper["stats_season"] = stats_season
    if sleeper:
        overrides["sleeper"] = sleeper
    if failure_policy is not None:
        overrides["aggregation"] = {"failure_policy": failure_policy.value}
    return overrides


def load_settings(cfg: AppConfig | None = None) -> AnalyzerSettings:
    if cfg is None:
        cfg = create_config()
    max_concurrency = int(str(cfg["aggregation.max_concurrency"]))
    if max_concurrency < 1:
        raise ValueError(f"aggregation.max_concurrency must be at least 1, got {max_concurrency}")
    return AnalyzerSettings(
        base_url=str(cfg["sleeper.base_url"]).rstrip("/"),
        sport=str(cfg["sleeper.sport"]),
        season=int(str(cfg["sleeper.season"])),
        stats_season=int(str(cfg["sleeper.stats_season"])),
        season_type=str(cfg["sleeper.season_type"]),
        timeout_seconds=float(str(cfg["sleeper.timeout_seconds"])),
        crosswalk_url=str(cfg["crosswalk.url"]),
        crosswalk_source_column=str(cfg["crosswalk.source_column"]),
        crosswalk_target_column=str(cfg["crosswalk.target_column"]),
        headshot_url_template=str(cfg["images.headshot_url_template"]),
        default_image_url=str(cfg["images.default_url"]),
        failure_policy=FailurePolicy(str(cfg["aggregation.failure_policy"]).lower()),
        max_concurrency=max_concurrency,
    )

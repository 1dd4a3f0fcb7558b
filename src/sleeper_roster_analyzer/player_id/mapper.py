from __future__ import annotations

import csv
import io
import logging
from typing import TYPE_CHECKING

from sleeper_roster_analyzer.errors import EnrichmentDegradedError, SleeperError
from sleeper_roster_analyzer.result import Err, Ok

if TYPE_CHECKING:
    from sleeper_roster_analyzer.sleeper.client import SleeperClient

logger = logging.getLogger(__name__)

DYNASTYPROCESS_CSV_URL = "https://raw.githubusercontent.com/dynastyprocess/data/master/files/db_playerids.csv"

# The crosswalk is exported from R and writes missing values as NA
_MISSING_VALUES = frozenset({"", "NA"})


def parse_crosswalk_csv(
    csv_text: str,
    source_column: str = "sleeper_id",
    target_column: str = "espn_id",
) -> dict[str, str]:
    """Parse crosswalk CSV text into a source-id to target-id mapping.

    Columns are located by header name. Rows missing either id are skipped.

    Raises:
        ValueError: If the header lacks either column.
    """
    reader = csv.DictReader(io.StringIO(csv_text))
    header = reader.fieldnames or []
    missing = [c for c in (source_column, target_column) if c not in header]
    if missing:
        raise ValueError(f"Crosswalk header is missing column(s): {', '.join(missing)}")

    mapping: dict[str, str] = {}
    for row in reader:
        source_id = (row.get(source_column) or "").strip()
        target_id = (row.get(target_column) or "").strip()
        if source_id in _MISSING_VALUES or target_id in _MISSING_VALUES:
            continue
        mapping[source_id] = target_id

    logger.debug("Crosswalk: %d %s->%s mappings", len(mapping), source_column, target_column)
    return mapping


async def fetch_identifier_map(
    client: SleeperClient,
    csv_url: str = DYNASTYPROCESS_CSV_URL,
    source_column: str = "sleeper_id",
    target_column: str = "espn_id",
) -> Ok[dict[str, str]] | Err[EnrichmentDegradedError]:
    """Download and parse the identifier crosswalk in a single attempt.

    Returns:
        Ok with the mapping, or Err(EnrichmentDegradedError) when the download
        or parse fails. Never raises for those failures.
    """
    try:
        csv_text = await client.get_text(csv_url)
        mapping = parse_crosswalk_csv(csv_text, source_column, target_column)
    except (SleeperError, ValueError, csv.Error) as e:
        logger.warning("Could not load identifier crosswalk from %s: %s", csv_url, e)
        return Err(EnrichmentDegradedError("Identifier crosswalk unavailable", e))
    logger.info("Loaded %d identifier mappings", len(mapping))
    return Ok(mapping)


async def build_identifier_map(
    client: SleeperClient,
    csv_url: str = DYNASTYPROCESS_CSV_URL,
    source_column: str = "sleeper_id",
    target_column: str = "espn_id",
) -> dict[str, str]:
    """Like ``fetch_identifier_map`` but yields an empty mapping on failure."""
    result = await fetch_identifier_map(client, csv_url, source_column, target_column)
    return result.unwrap_or({})

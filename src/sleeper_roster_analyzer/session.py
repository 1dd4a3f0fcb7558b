from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from sleeper_roster_analyzer.config import AnalyzerSettings
from sleeper_roster_analyzer.errors import user_message
from sleeper_roster_analyzer.models import AggregationReport, PlayerAggregation
from sleeper_roster_analyzer.pipeline import AggregationResult, run_aggregation

logger = logging.getLogger(__name__)

SearchRunner = Callable[[str, AnalyzerSettings], Awaitable[AggregationResult]]


async def _default_runner(username: str, settings: AnalyzerSettings) -> AggregationResult:
    return await run_aggregation(username, settings)


class SearchSession:
    """State behind the roster screen: the latest completed search only.

    Each ``search`` takes a new generation number and cancels any search
    still in flight. A result that arrives for an older generation is
    discarded, so a slow earlier search can never overwrite a newer one.
    """

    def __init__(self, settings: AnalyzerSettings, runner: SearchRunner = _default_runner) -> None:
        self._settings = settings
        self._runner = runner
        self._generation = 0
        self._task: asyncio.Task[AggregationResult] | None = None
        self.loading = False
        self.searched = False
        self.error_message: str | None = None
        self.report: AggregationReport | None = None
        self.selected: PlayerAggregation | None = None

    @property
    def settings(self) -> AnalyzerSettings:
        return self._settings

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def players(self) -> list[PlayerAggregation]:
        return self.report.players if self.report is not None else []

    async def search(self, username: str) -> bool:
        """Run a search, superseding any in flight.

        Returns:
            True if this search's outcome was stored, False if a newer search
            superseded it.
        """
        username = username.strip()
        if not username:
            raise ValueError("username must not be empty")

        self._generation += 1
        generation = self._generation
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling in-flight search (generation %d)", generation - 1)
            self._task.cancel()

        self.loading = True
        self.error_message = None
        self.selected = None
        task = asyncio.create_task(self._runner(username, self._settings))
        self._task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug("Search for %s superseded (generation %d)", username, generation)
                return False
            self.loading = False
            raise

        if generation != self._generation:
            logger.debug("Discarding stale result for %s (generation %d)", username, generation)
            return False

        self._task = None
        self.loading = False
        self.searched = True
        if result.is_ok():
            self.report = result.unwrap()
        else:
            self.report = None
            self.error_message = user_message(result.unwrap_err())
        return True

    def select(self, player_id: str) -> PlayerAggregation | None:
        self.selected = self.report.find(player_id) if self.report is not None else None
        return self.selected

    def clear_selection(self) -> None:
        self.selected = None

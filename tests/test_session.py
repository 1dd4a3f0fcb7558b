import asyncio

import pytest

from sleeper_roster_analyzer.config import AnalyzerSettings
from sleeper_roster_analyzer.errors import NetworkFailureError, UserNotFoundError
from sleeper_roster_analyzer.models import AggregationReport, League, PlayerAggregation
from sleeper_roster_analyzer.pipeline import AggregationResult, run_aggregation
from sleeper_roster_analyzer.result import Err, Ok
from sleeper_roster_analyzer.session import SearchSession
from tests.sleeper_fakes import FakeSleeperApi


def _report(username: str, *player_ids: str) -> AggregationReport:
    players = [
        PlayerAggregation(
            player_id=pid,
            full_name=f"Player {pid}",
            position="WR",
            team="KC",
            league_count=1,
            leagues=[League("A", "1")],
        )
        for pid in player_ids
    ]
    return AggregationReport(username=username, season=2025, players=players, league_count=1)


class ScriptedRunner:
    """Returns canned results; searches for usernames in ``gates`` wait until released."""

    def __init__(self, results: dict[str, AggregationResult]) -> None:
        self.results = results
        self.gates: dict[str, asyncio.Event] = {}
        self.cancelled: list[str] = []

    async def __call__(self, username: str, settings: AnalyzerSettings) -> AggregationResult:
        gate = self.gates.get(username)
        if gate is not None:
            try:
                await gate.wait()
            except asyncio.CancelledError:
                self.cancelled.append(username)
                raise
        return self.results[username]


class TestSearchSession:
    def test_successful_search(self, settings: AnalyzerSettings) -> None:
        runner = ScriptedRunner({"alice": Ok(_report("alice", "P1", "P2"))})
        session = SearchSession(settings, runner=runner)

        applied = asyncio.run(session.search("  alice "))

        assert applied is True
        assert session.loading is False
        assert session.searched is True
        assert session.error_message is None
        assert [p.player_id for p in session.players] == ["P1", "P2"]

    def test_user_not_found_sets_message_and_clears_results(self, settings: AnalyzerSettings) -> None:
        runner = ScriptedRunner({"alice": Ok(_report("alice", "P1")), "ghost": Err(UserNotFoundError("ghost"))})
        session = SearchSession(settings, runner=runner)

        async def run() -> None:
            await session.search("alice")
            await session.search("ghost")

        asyncio.run(run())

        assert session.error_message == "User not found"
        assert session.players == []
        assert session.report is None

    def test_other_failures_use_generic_message(self, settings: AnalyzerSettings) -> None:
        runner = ScriptedRunner({"alice": Err(NetworkFailureError("https://x.test"))})
        session = SearchSession(settings, runner=runner)

        asyncio.run(session.search("alice"))

        assert session.error_message == "Could not load data from Sleeper"

    def test_empty_username_rejected(self, settings: AnalyzerSettings) -> None:
        session = SearchSession(settings, runner=ScriptedRunner({}))
        with pytest.raises(ValueError):
            asyncio.run(session.search("   "))
        assert session.generation == 0

    def test_newer_search_supersedes_in_flight_search(self, settings: AnalyzerSettings) -> None:
        runner = ScriptedRunner({"slow": Ok(_report("slow", "S1")), "fast": Ok(_report("fast", "F1"))})
        runner.gates["slow"] = asyncio.Event()
        session = SearchSession(settings, runner=runner)

        async def run() -> tuple[bool, bool]:
            slow = asyncio.create_task(session.search("slow"))
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            assert session.loading is True
            fast_applied = await session.search("fast")
            slow_applied = await slow
            return slow_applied, fast_applied

        slow_applied, fast_applied = asyncio.run(run())

        assert slow_applied is False
        assert fast_applied is True
        assert runner.cancelled == ["slow"]
        assert [p.player_id for p in session.players] == ["F1"]
        assert session.report is not None
        assert session.report.username == "fast"
        assert session.generation == 2

    def test_stale_result_does_not_overwrite_newer(self, settings: AnalyzerSettings) -> None:
        runner = ScriptedRunner({"first": Ok(_report("first", "A")), "second": Ok(_report("second", "B"))})
        session = SearchSession(settings, runner=runner)

        async def run() -> list[bool]:
            return list(await asyncio.gather(session.search("first"), session.search("second")))

        first_applied, second_applied = asyncio.run(run())

        assert first_applied is False
        assert second_applied is True
        assert session.report is not None
        assert session.report.username == "second"

    def test_select_and_clear(self, settings: AnalyzerSettings) -> None:
        session = SearchSession(settings, runner=ScriptedRunner({"alice": Ok(_report("alice", "P1"))}))
        asyncio.run(session.search("alice"))

        assert session.select("P1") is session.players[0]
        assert session.selected is not None
        session.clear_selection()
        assert session.selected is None
        assert session.select("missing") is None

    def test_select_before_search(self, settings: AnalyzerSettings) -> None:
        session = SearchSession(settings, runner=ScriptedRunner({}))
        assert session.select("P1") is None


def test_search_through_pipeline(settings: AnalyzerSettings, api: FakeSleeperApi) -> None:
    async def runner(username: str, s: AnalyzerSettings) -> AggregationResult:
        async with api.client() as client:
            return await run_aggregation(username, s, http_client=client)

    session = SearchSession(settings, runner=runner)
    asyncio.run(session.search("alice"))
    assert [p.player_id for p in session.players] == ["6794", "4046", "8150"]

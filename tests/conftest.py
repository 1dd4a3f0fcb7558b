"""Shared pytest fixtures for test modules."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from sleeper_roster_analyzer.cli import set_http_client_factory
from tests.sleeper_fakes import FakeSleeperApi, make_settings, two_league_api

if TYPE_CHECKING:
    from collections.abc import Generator

    from sleeper_roster_analyzer.config import AnalyzerSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SLEEPER__ env vars so tests are isolated from the shell."""
    for key in list(os.environ):
        if key.startswith("SLEEPER__"):
            monkeypatch.delenv(key)


@pytest.fixture
def settings() -> AnalyzerSettings:
    return make_settings()


@pytest.fixture
def api() -> FakeSleeperApi:
    """A fake Sleeper API where ``alice`` owns rosters in two leagues."""
    return two_league_api()


@pytest.fixture
def reset_http_client_factory() -> Generator[None]:
    """Restore the CLI's default HTTP client after the test."""
    yield
    set_http_client_factory(None)

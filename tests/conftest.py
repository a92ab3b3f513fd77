from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))
sys.path.append(str(Path(__file__).resolve().parent))

# ruff: noqa: E402
from ranchcycle.application.services.cycle_orchestrator import CycleOrchestrator
from ranchcycle.config.settings import Settings
from ranchcycle.infrastructure.clock import FixedClock
from cycle_factories import InMemoryCyclesRepo


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "log_level": "INFO",
            "environment": "test",
            "timezone": "UTC",
            "persistence_timeout_seconds": 0.5,
            "cycle_code_prefix": "REP",
        }
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def repo() -> InMemoryCyclesRepo:
    return InMemoryCyclesRepo()


@pytest.fixture()
def orchestrator(repo, clock, test_settings) -> CycleOrchestrator:
    return CycleOrchestrator(repo, clock=clock, settings=test_settings)

from __future__ import annotations

import logging

import pytest
from cycle_factories import make_heat, make_sire

from ranchcycle.application.use_cases.breeding import open_cycle
from ranchcycle.bootstrap import _configure_logging, build_engine


@pytest.mark.asyncio
async def test_build_engine_wires_storage_and_orchestrator(test_settings, clock):
    engine = await build_engine(test_settings, clock=clock)
    try:
        cycle = await open_cycle.execute(
            engine.repository,
            open_cycle.OpenCycleInput(dam_id="VACA-21", sire=make_sire(), heat=make_heat()),
            settings=test_settings,
            clock=clock,
        )
        assert await engine.orchestrator.repository.load(cycle.code) == cycle
    finally:
        await engine.dispose()


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    _configure_logging("debug")
    handlers = len(root.handlers)
    _configure_logging("warning")
    assert len(root.handlers) == handlers
    assert root.level == logging.WARNING

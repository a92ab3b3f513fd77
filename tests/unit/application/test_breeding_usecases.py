from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest
from cycle_factories import (
    CYCLE_CODE,
    SERVICE_DATE,
    InMemoryCyclesRepo,
    make_calved,
    make_cycle,
    make_heat,
    make_pregnant,
    make_service,
    make_sire,
)

from ranchcycle.application.errors import (
    ConflictError,
    IncompleteSubrecord,
    NotFound,
    OutOfRange,
    PersistenceTimeout,
    TransitionRejected,
)
from ranchcycle.application.services.cycle_orchestrator import CycleOrchestrator
from ranchcycle.application.use_cases.breeding import (
    open_cycle,
    record_transition,
    scan_herd_alerts,
    sire_performance_report,
)
from ranchcycle.domain.models.cycle_stages import HeatInfo
from ranchcycle.domain.models.sire_profile import GermplasmInfo, GermplasmType
from ranchcycle.domain.value_objects.service_status import ServiceStatus


@pytest.mark.asyncio
async def test_open_cycle_generates_code_and_starts_in_heat(repo, clock, test_settings):
    cycle = await open_cycle.execute(
        repo,
        open_cycle.OpenCycleInput(dam_id="vaca-17", sire=make_sire(), heat=make_heat()),
        actor_user_id="user-1",
        settings=test_settings,
        clock=clock,
    )
    assert cycle.code.startswith("REP-2025-VACA17-")
    assert cycle.status is ServiceStatus.IN_HEAT
    assert cycle.season_year == 2025
    assert cycle.created_by == "user-1"
    assert repo.stored[cycle.code] is cycle


@pytest.mark.asyncio
async def test_open_cycle_without_heat_is_planned(repo, clock, test_settings):
    cycle = await open_cycle.execute(
        repo,
        open_cycle.OpenCycleInput(dam_id="VACA-02", sire=make_sire(), code="REP-CUSTOM-1"),
        settings=test_settings,
        clock=clock,
    )
    assert cycle.code == "REP-CUSTOM-1"
    assert cycle.status is ServiceStatus.PLANNED
    assert cycle.season_year == 2025


@pytest.mark.asyncio
async def test_open_cycle_rejects_duplicate_code(repo, clock, test_settings):
    repo.seed(make_cycle())
    with pytest.raises(ConflictError):
        await open_cycle.execute(
            repo,
            open_cycle.OpenCycleInput(dam_id="VACA-01", sire=make_sire(), code=CYCLE_CODE),
            settings=test_settings,
            clock=clock,
        )


@pytest.mark.asyncio
async def test_open_cycle_collects_every_problem(repo, clock, test_settings):
    payload = open_cycle.OpenCycleInput(
        dam_id="VACA-03",
        sire=make_sire(breed=""),
        heat=HeatInfo(detection_date=date(2025, 2, 27)),
    )
    with pytest.raises(TransitionRejected) as excinfo:
        await open_cycle.execute(repo, payload, settings=test_settings, clock=clock)

    fields = sorted(e.field for e in excinfo.value.errors if isinstance(e, IncompleteSubrecord))
    assert fields == ["heat.detection_method", "sire.breed"]
    assert repo.saves == []


@pytest.mark.asyncio
async def test_open_cycle_refuses_expired_germplasm(repo, clock, test_settings):
    germplasm = GermplasmInfo(
        type=GermplasmType.FROZEN_SEMEN,
        batch_number="L-01",
        expiration_date=date(2024, 12, 31),
    )
    payload = open_cycle.OpenCycleInput(dam_id="VACA-04", sire=make_sire(), germplasm=germplasm)
    with pytest.raises(OutOfRange) as excinfo:
        await open_cycle.execute(repo, payload, settings=test_settings, clock=clock)
    assert excinfo.value.field == "germplasm.expiration_date"


@pytest.mark.asyncio
async def test_record_transition_by_code(repo, orchestrator):
    repo.seed(make_cycle(ServiceStatus.IN_HEAT, heat=make_heat()))
    result = await record_transition.execute(
        orchestrator,
        record_transition.RecordTransitionInput(
            code=CYCLE_CODE,
            target="SERVICED",
            payload={
                "service": {
                    "service_date": SERVICE_DATE.isoformat(),
                    "service_method": "ARTIFICIAL_INSEMINATION",
                }
            },
            expected_version=1,
        ),
        actor_user_id="vet-2",
    )
    assert result.ok, result.error_codes
    assert result.cycle.status is ServiceStatus.SERVICED
    assert result.cycle.updated_by == "vet-2"


@pytest.mark.asyncio
async def test_record_transition_unknown_code(orchestrator):
    with pytest.raises(NotFound):
        await record_transition.execute(
            orchestrator, record_transition.RecordTransitionInput(code="NOPE", target="IN_HEAT")
        )


@pytest.mark.asyncio
async def test_record_transition_with_outdated_version(repo, orchestrator):
    repo.seed(replace(make_cycle(), version=4))
    result = await record_transition.execute(
        orchestrator,
        record_transition.RecordTransitionInput(
            code=CYCLE_CODE, target="IN_HEAT", expected_version=3
        ),
    )
    assert result.error_codes == ["concurrent_modification"]
    assert result.retryable
    assert repo.saves == []


@pytest.mark.asyncio
async def test_record_transition_load_honours_timeout(clock, test_settings):
    repo = InMemoryCyclesRepo(load_delay=1.0)
    repo.seed(make_cycle())
    orchestrator = CycleOrchestrator(repo, clock=clock, settings=test_settings)

    result = await record_transition.execute(
        orchestrator,
        record_transition.RecordTransitionInput(
            code=CYCLE_CODE, target="IN_HEAT", payload={}, timeout=0.05
        ),
    )

    assert isinstance(result.errors[0], PersistenceTimeout)
    assert result.errors[0].operation == "load"
    assert result.retryable
    assert repo.saves == []


@pytest.mark.asyncio
async def test_scan_flags_overdue_and_skips_quiet_cycles(repo, orchestrator):
    estimated = SERVICE_DATE + timedelta(days=280)
    overdue = make_pregnant(code="C-OVERDUE")
    quiet = make_pregnant(code="C-QUIET", service=make_service(service_date=date(2025, 6, 1)))
    done = replace(make_calved(code="C-DONE"), status=ServiceStatus.WEANED, is_completed=True)
    repo.seed(overdue, quiet, done)

    flagged = await scan_herd_alerts.execute(orchestrator, now=estimated + timedelta(days=9))

    assert [item.cycle.code for item in flagged] == ["C-OVERDUE"]
    assert flagged[0].alerts[0].priority == 1


@pytest.mark.asyncio
async def test_sire_report(repo):
    repo.seed(
        make_calved(code="C-1"),
        make_pregnant(code="C-2", sire=make_sire(sire_id="SIRE-9")),
    )
    report = await sire_performance_report.execute(repo, season_year=2025)
    assert report.herd.total_cycles == 2
    assert {s.sire_key for s in report.sires} == {"SIRE-1", "SIRE-9"}

    only = await sire_performance_report.execute(repo, sire_key="SIRE-9")
    assert [s.conceptions for s in only.sires] == [1]

    with pytest.raises(NotFound):
        await sire_performance_report.execute(repo, sire_key="SIRE-404")

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from ranchcycle.domain.models.alert import Alert
from ranchcycle.domain.models.breeding_cycle import BreedingCycle, EconomicAnalysis
from ranchcycle.domain.models.cycle_stages import REPRODUCTION_TYPE_LABELS
from ranchcycle.domain.models.sire_profile import GeneticPredictions
from ranchcycle.domain.services.cycle_alerts import (
    APPROACHING_CALVING_DAYS,
    awaiting_calving,
    estimated_calving_date,
    generate_alerts,
)
from ranchcycle.domain.services.economics import days_since_service, summarize_economics
from ranchcycle.domain.services.efficiency import score_cycle
from ranchcycle.domain.value_objects.service_status import ServiceStatus
from ranchcycle.utils.datetime_tz import DEFAULT_TZ, local_date

ESTRUS_CYCLE_DAYS = 21
PREGNANCY_CHECK_WINDOW_DAYS = (35, 50)

_RETURNING_TO_HEAT = frozenset(
    {ServiceStatus.OPEN, ServiceStatus.REPEAT_BREEDING, ServiceStatus.ABORTED}
)


@dataclass(frozen=True, slots=True)
class CycleBasics:
    code: str
    dam_id: str
    type_label: str | None
    status: ServiceStatus
    status_label: str
    service_date: date | None
    service_number: int | None


@dataclass(frozen=True, slots=True)
class CycleTimeline:
    days_since_service: int | None
    estimated_calving_date: date | None
    days_to_calving: int | None
    is_near_calving: bool
    next_heat_date: date | None
    pregnancy_check_due: bool


@dataclass(frozen=True, slots=True)
class SireSummary:
    name: str
    breed: str
    predictions: GeneticPredictions | None


@dataclass(frozen=True, slots=True)
class EfficiencySummary:
    score: int
    category: str
    is_complete: bool
    is_successful: bool


@dataclass(frozen=True, slots=True)
class CycleSummary:
    basics: CycleBasics
    timeline: CycleTimeline
    sire: SireSummary
    efficiency: EfficiencySummary
    economics: EconomicAnalysis
    alerts: list[Alert]


def next_heat_date(cycle: BreedingCycle) -> date | None:
    """Expected return to heat for a dam that did not hold or lost the pregnancy."""
    if cycle.status not in _RETURNING_TO_HEAT:
        return None
    anchors = []
    if cycle.pregnancy and cycle.pregnancy.loss and cycle.pregnancy.loss.loss_date:
        anchors.append(cycle.pregnancy.loss.loss_date)
    if cycle.service and cycle.service.service_date:
        anchors.append(cycle.service.service_date)
    if cycle.heat and cycle.heat.detection_date:
        anchors.append(cycle.heat.detection_date)
    if not anchors:
        return None
    return max(anchors) + timedelta(days=ESTRUS_CYCLE_DAYS)


def pregnancy_check_due(cycle: BreedingCycle, today: date) -> bool:
    if cycle.status is not ServiceStatus.SERVICED or cycle.service is None:
        return False
    if cycle.pregnancy and cycle.pregnancy.diagnosis:
        return False
    if cycle.service.service_date is None:
        return False
    elapsed = (today - cycle.service.service_date).days
    low, high = PREGNANCY_CHECK_WINDOW_DAYS
    return low <= elapsed <= high


def calving_interval(cycle: BreedingCycle, previous_calving_date: date) -> int | None:
    if cycle.calving is None or cycle.calving.calving_date is None:
        return None
    return (cycle.calving.calving_date - previous_calving_date).days


def summarize_cycle(
    cycle: BreedingCycle, now: date | datetime, tz: tzinfo = DEFAULT_TZ
) -> CycleSummary:
    today = local_date(now, tz)
    expected = estimated_calving_date(cycle) if awaiting_calving(cycle) else None
    days_to_calving = (expected - today).days if expected else None
    served = cycle.service is not None and cycle.service.service_date is not None
    score = score_cycle(cycle)

    return CycleSummary(
        basics=CycleBasics(
            code=cycle.code,
            dam_id=cycle.dam_id,
            type_label=REPRODUCTION_TYPE_LABELS.get(cycle.reproduction_type)
            if cycle.reproduction_type
            else None,
            status=cycle.status,
            status_label=cycle.status.label,
            service_date=cycle.service.service_date if cycle.service else None,
            service_number=cycle.service_number,
        ),
        timeline=CycleTimeline(
            days_since_service=days_since_service(cycle, today, tz) if served else None,
            estimated_calving_date=expected,
            days_to_calving=days_to_calving,
            is_near_calving=days_to_calving is not None
            and 0 <= days_to_calving <= APPROACHING_CALVING_DAYS,
            next_heat_date=next_heat_date(cycle),
            pregnancy_check_due=pregnancy_check_due(cycle, today),
        ),
        sire=SireSummary(
            name=cycle.sire.name,
            breed=cycle.sire.breed,
            predictions=cycle.sire.predictions,
        ),
        efficiency=EfficiencySummary(
            score=score.value,
            category=score.category,
            is_complete=cycle.status.is_terminal,
            is_successful=cycle.is_successful,
        ),
        economics=summarize_economics(cycle, today, tz),
        alerts=generate_alerts(cycle, today, tz),
    )

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from ranchcycle.domain.models.breeding_cycle import BreedingCycle, ReproductiveEfficiency
from ranchcycle.domain.models.cycle_stages import (
    CalfViability,
    CalvingDifficulty,
    DiagnosisResult,
)
from ranchcycle.domain.value_objects.service_status import CONCEIVED_STATUSES, ServiceStatus

SERVICE_EFFICIENCY = "service_efficiency"
GESTATION_NORMALCY = "gestation_normalcy"
CALVING_EASE = "calving_ease"
CALF_VIABILITY = "calf_viability"
BIRTH_WEIGHT_NORMALCY = "birth_weight_normalcy"

FACTOR_MAX_POINTS = {
    SERVICE_EFFICIENCY: 30,
    GESTATION_NORMALCY: 20,
    CALVING_EASE: 15,
    CALF_VIABILITY: 20,
    BIRTH_WEIGHT_NORMALCY: 15,
}

_FAILED_STATUSES = frozenset({ServiceStatus.OPEN, ServiceStatus.REPEAT_BREEDING})


@dataclass(frozen=True, slots=True)
class EfficiencyScore:
    value: int
    breakdown: dict[str, int] = field(default_factory=dict)
    applicable_max: int = 0

    @property
    def category(self) -> str:
        return efficiency_category(self.value)


def efficiency_category(score: int) -> str:
    if score >= 85:
        return "EXCELLENT"
    if score >= 70:
        return "GOOD"
    if score >= 50:
        return "FAIR"
    return "POOR"


def has_conceived(cycle: BreedingCycle) -> bool:
    if cycle.calving is not None or cycle.status in CONCEIVED_STATUSES:
        return True
    diagnosis = cycle.pregnancy.diagnosis if cycle.pregnancy else None
    return diagnosis is not None and diagnosis.result is DiagnosisResult.POSITIVE


def _conception_outcome_known(cycle: BreedingCycle) -> bool:
    if has_conceived(cycle) or cycle.status in _FAILED_STATUSES:
        return True
    diagnosis = cycle.pregnancy.diagnosis if cycle.pregnancy else None
    return diagnosis is not None and diagnosis.result is not None


def _service_points(cycle: BreedingCycle) -> int | None:
    if cycle.service is None or cycle.service.service_number is None:
        return None
    if not _conception_outcome_known(cycle):
        return None
    if not has_conceived(cycle):
        return 0
    number = cycle.service.service_number
    if number == 1:
        return 30
    if number <= 2:
        return 20
    return 10


def _gestation_points(cycle: BreedingCycle) -> int | None:
    if cycle.calving is None or cycle.calving.gestation_length is None:
        return None
    days = cycle.calving.gestation_length
    if 275 <= days <= 285:
        return 20
    if 270 <= days <= 290:
        return 15
    return 5


def _calving_ease_points(cycle: BreedingCycle) -> int | None:
    if cycle.calving is None or cycle.calving.difficulty is None:
        return None
    if cycle.calving.difficulty is CalvingDifficulty.EASY:
        return 15
    if cycle.calving.difficulty is CalvingDifficulty.SLIGHT_ASSISTANCE:
        return 10
    return 2


def _viability_points(cycle: BreedingCycle) -> int | None:
    if cycle.calf is None or cycle.calf.viability is None:
        return None
    if cycle.calf.viability is CalfViability.ALIVE_NORMAL:
        return 20
    if cycle.calf.viability is CalfViability.ALIVE_WEAK:
        return 10
    return 0


def _birth_weight_points(cycle: BreedingCycle) -> int | None:
    if cycle.calf is None or cycle.calf.birth_weight is None:
        return None
    weight = cycle.calf.birth_weight
    if 30 <= weight <= 45:
        return 15
    if 25 <= weight <= 50:
        return 10
    return 2


_FACTORS = (
    (SERVICE_EFFICIENCY, _service_points),
    (GESTATION_NORMALCY, _gestation_points),
    (CALVING_EASE, _calving_ease_points),
    (CALF_VIABILITY, _viability_points),
    (BIRTH_WEIGHT_NORMALCY, _birth_weight_points),
)


def score_cycle(cycle: BreedingCycle) -> EfficiencyScore:
    """Score a cycle 0-100 from the factors observable so far.

    Factors without data are left out of both numerator and denominator, so a
    cycle that has not calved yet is scored only on what is already known.
    """
    breakdown: dict[str, int] = {}
    for name, rule in _FACTORS:
        points = rule(cycle)
        if points is not None:
            breakdown[name] = points

    applicable_max = sum(FACTOR_MAX_POINTS[name] for name in breakdown)
    if applicable_max == 0:
        return EfficiencyScore(value=0, breakdown={}, applicable_max=0)

    ratio = Decimal(sum(breakdown.values())) / Decimal(applicable_max) * 100
    value = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return EfficiencyScore(value=value, breakdown=breakdown, applicable_max=applicable_max)


def _first_service_date(cycle: BreedingCycle):
    for attempt in cycle.service_history:
        if attempt.service.service_date is not None:
            return attempt.service.service_date
    return cycle.service.service_date if cycle.service else None


def summarize_efficiency(cycle: BreedingCycle) -> ReproductiveEfficiency:
    result = score_cycle(cycle)
    conceived = has_conceived(cycle)
    services = cycle.service.service_number if cycle.service and conceived else None

    days_to_conception = None
    first_service = _first_service_date(cycle)
    if conceived and first_service and cycle.service and cycle.service.service_date:
        days_to_conception = (cycle.service.service_date - first_service).days

    return ReproductiveEfficiency(
        score=result.value,
        category=result.category,
        breakdown=dict(result.breakdown),
        services_per_conception=services,
        gestation_length=cycle.calving.gestation_length if cycle.calving else None,
        days_to_conception=days_to_conception,
    )

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from ranchcycle.domain.models.breeding_cycle import BreedingCycle
from ranchcycle.domain.models.cycle_stages import CalvingDifficulty
from ranchcycle.domain.services.efficiency import has_conceived, score_cycle
from ranchcycle.domain.value_objects.service_status import ServiceStatus

_EASY_CALVINGS = frozenset({CalvingDifficulty.EASY, CalvingDifficulty.SLIGHT_ASSISTANCE})


@dataclass(slots=True)
class HerdMetrics:
    total_cycles: int
    serviced_cycles: int
    conceived_cycles: int
    calved_cycles: int
    weaned_cycles: int
    conception_rate: float  # 0.0 - 1.0
    first_service_conception_rate: float  # 0.0 - 1.0
    services_per_conception: float | None
    average_gestation: float | None
    calving_ease_rate: float | None  # 0.0 - 1.0 of calvings
    weaning_rate: float | None  # 0.0 - 1.0 of calvings
    average_score: float | None


@dataclass(slots=True)
class SirePerformance:
    sire_key: str
    sire_name: str
    total_services: int
    conceptions: int
    conception_rate: float  # 0.0 - 1.0


def service_attempts(cycle: BreedingCycle) -> int:
    return len(cycle.service_history) + (1 if cycle.service is not None else 0)


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _mean(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def herd_metrics(cycles: Iterable[BreedingCycle]) -> HerdMetrics:
    active = [c for c in cycles if not c.is_deleted]
    serviced = [c for c in active if c.service is not None]
    conceived = [c for c in serviced if has_conceived(c)]
    calved = [c for c in active if c.calving is not None and c.calving.calving_date is not None]
    weaned = [c for c in active if c.status is ServiceStatus.WEANED]

    first_service = [c for c in conceived if c.service and c.service.service_number == 1]
    services_needed = [
        float(c.service.service_number)
        for c in conceived
        if c.service and c.service.service_number is not None
    ]
    gestations = [
        float(c.calving.gestation_length)
        for c in calved
        if c.calving and c.calving.gestation_length is not None
    ]
    easy = [c for c in calved if c.calving and c.calving.difficulty in _EASY_CALVINGS]
    scores: list[float] = []
    for cycle in serviced:
        result = score_cycle(cycle)
        if result.applicable_max:
            scores.append(float(result.value))

    return HerdMetrics(
        total_cycles=len(active),
        serviced_cycles=len(serviced),
        conceived_cycles=len(conceived),
        calved_cycles=len(calved),
        weaned_cycles=len(weaned),
        conception_rate=_ratio(len(conceived), len(serviced)),
        first_service_conception_rate=_ratio(len(first_service), len(serviced)),
        services_per_conception=_mean(services_needed),
        average_gestation=_mean(gestations),
        calving_ease_rate=_ratio(len(easy), len(calved)) if calved else None,
        weaning_rate=_ratio(len(weaned), len(calved)) if calved else None,
        average_score=_mean(scores),
    )


def sire_performance(cycles: Iterable[BreedingCycle]) -> list[SirePerformance]:
    """Conception rate per sire, counting every service attempt of every cycle."""
    services: dict[str, int] = defaultdict(int)
    conceptions: dict[str, int] = defaultdict(int)
    names: dict[str, str] = {}
    for cycle in cycles:
        if cycle.is_deleted or cycle.service is None:
            continue
        key = cycle.sire.sire_id or cycle.sire.name
        names.setdefault(key, cycle.sire.name)
        services[key] += service_attempts(cycle)
        if has_conceived(cycle):
            conceptions[key] += 1

    report = [
        SirePerformance(
            sire_key=key,
            sire_name=names[key],
            total_services=total,
            conceptions=conceptions[key],
            conception_rate=_ratio(conceptions[key], total),
        )
        for key, total in services.items()
    ]
    return sorted(report, key=lambda p: (-p.conception_rate, p.sire_name))

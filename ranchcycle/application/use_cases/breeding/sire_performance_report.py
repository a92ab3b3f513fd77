from __future__ import annotations

from dataclasses import dataclass

from ranchcycle.application.errors import NotFound
from ranchcycle.application.interfaces.repositories.breeding_cycles import (
    BreedingCyclesRepository,
)
from ranchcycle.domain.services.herd_metrics import (
    HerdMetrics,
    SirePerformance,
    herd_metrics,
    sire_performance,
)


@dataclass(slots=True)
class SirePerformanceOutput:
    herd: HerdMetrics
    sires: list[SirePerformance]


async def execute(
    repository: BreedingCyclesRepository,
    season_year: int | None = None,
    sire_key: str | None = None,
) -> SirePerformanceOutput:
    cycles = await repository.list(season_year=season_year)
    sires = sire_performance(cycles)
    if sire_key is not None:
        sires = [s for s in sires if s.sire_key == sire_key]
        if not sires:
            raise NotFound(f"Sire {sire_key} has no recorded services")
    return SirePerformanceOutput(herd=herd_metrics(cycles), sires=sires)

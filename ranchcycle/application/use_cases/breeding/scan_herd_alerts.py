from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from ranchcycle.application.services.cycle_orchestrator import CycleOrchestrator
from ranchcycle.domain.models.alert import Alert
from ranchcycle.domain.models.breeding_cycle import BreedingCycle
from ranchcycle.domain.services.cycle_alerts import needs_attention

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CycleAttention:
    cycle: BreedingCycle
    alerts: list[Alert]


async def execute(
    orchestrator: CycleOrchestrator,
    now: date | datetime | None = None,
    dam_id: str | None = None,
    season_year: int | None = None,
) -> list[CycleAttention]:
    """Open cycles whose alerts call for attention, most urgent first."""
    cycles = await orchestrator.repository.list(dam_id=dam_id, season_year=season_year)
    flagged: list[CycleAttention] = []
    for cycle in cycles:
        if cycle.is_completed:
            continue
        alerts = orchestrator.alerts(cycle, now)
        if needs_attention(alerts):
            flagged.append(CycleAttention(cycle=cycle, alerts=alerts))

    flagged.sort(key=lambda item: (min(a.priority for a in item.alerts), item.cycle.code))
    if flagged:
        logger.info("%d of %d cycles need attention", len(flagged), len(cycles))
    return flagged

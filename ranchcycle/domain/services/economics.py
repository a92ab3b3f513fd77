from __future__ import annotations

from datetime import date, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ranchcycle.domain.models.breeding_cycle import BreedingCycle, EconomicAnalysis
from ranchcycle.domain.models.cycle_stages import PregnancyInfo
from ranchcycle.utils.datetime_tz import DEFAULT_TZ, days_between

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def _sum(values: Iterable[Decimal | None]) -> Decimal:
    return sum((Decimal(v) for v in values if v is not None), ZERO)


def _pregnancy_costs(pregnancy: PregnancyInfo | None) -> Decimal:
    if pregnancy is None:
        return ZERO
    return _sum(entry.cost for entry in pregnancy.nutrition) + _sum(
        entry.cost for entry in pregnancy.health
    )


def service_costs(cycle: BreedingCycle) -> Decimal:
    total = _sum(attempt.service.cost for attempt in cycle.service_history)
    if cycle.service is not None:
        total += _sum([cycle.service.cost])
    germplasm = cycle.germplasm
    if germplasm is not None and germplasm.cost_per_dose is not None:
        total += Decimal(germplasm.cost_per_dose) * germplasm.doses_used
    return total


def pregnancy_costs(cycle: BreedingCycle) -> Decimal:
    archived = _sum(_pregnancy_costs(a.pregnancy) for a in cycle.service_history)
    return archived + _pregnancy_costs(cycle.pregnancy)


def days_since_service(cycle: BreedingCycle, now: date | datetime, tz: tzinfo = DEFAULT_TZ) -> int:
    if cycle.service is None or cycle.service.service_date is None:
        return 0
    return max(0, days_between(cycle.service.service_date, now, tz))


def summarize_economics(
    cycle: BreedingCycle, now: date | datetime, tz: tzinfo = DEFAULT_TZ
) -> EconomicAnalysis:
    """Aggregate recorded costs against the calf value.

    Plain summation: amounts are assumed to share one currency.
    """
    service = service_costs(cycle)
    pregnancy = pregnancy_costs(cycle)
    calving = _sum([cycle.calving.cost]) if cycle.calving else ZERO
    weaning = _sum([cycle.weaning.cost]) if cycle.weaning else ZERO
    total = service + pregnancy + calving + weaning

    calf_value = _sum([cycle.calf.calf_value]) if cycle.calf else ZERO
    net_return = calf_value - total
    roi = None
    if total != ZERO:
        roi = (net_return / total * 100).quantize(CENTS, rounding=ROUND_HALF_UP)
    cost_per_day = (total / max(1, days_since_service(cycle, now, tz))).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )

    return EconomicAnalysis(
        service_costs=service,
        pregnancy_costs=pregnancy,
        calving_costs=calving,
        weaning_costs=weaning,
        total_costs=total,
        calf_value=calf_value,
        net_return=net_return,
        cost_per_day=cost_per_day,
        roi=roi,
    )

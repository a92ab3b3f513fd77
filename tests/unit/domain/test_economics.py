from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from cycle_factories import (
    SERVICE_DATE,
    make_calf,
    make_calved,
    make_calving,
    make_cycle,
    make_pregnancy,
    make_service,
)

from ranchcycle.domain.models.cycle_stages import (
    HealthEntry,
    NutritionEntry,
    ServiceAttempt,
)
from ranchcycle.domain.models.sire_profile import GermplasmInfo, GermplasmType
from ranchcycle.domain.services.economics import (
    days_since_service,
    pregnancy_costs,
    service_costs,
    summarize_economics,
)


def _costed_cycle():
    return make_calved(
        service=make_service(cost=Decimal("50")),
        germplasm=GermplasmInfo(
            type=GermplasmType.FROZEN_SEMEN,
            batch_number="L-77",
            doses_used=1,
            cost_per_dose=Decimal("20"),
        ),
        pregnancy=make_pregnancy(
            nutrition=(NutritionEntry("pasture + mineral", cost=Decimal("30")),),
            health=(
                HealthEntry(SERVICE_DATE + timedelta(days=60), "vaccine", cost=Decimal("20")),
            ),
        ),
        calving=make_calving(cost=Decimal("100")),
        calf=make_calf(calf_value=Decimal("500")),
    )


def test_costs_roll_up_into_roi():
    analysis = summarize_economics(_costed_cycle(), SERVICE_DATE + timedelta(days=100))
    assert analysis.service_costs == Decimal("70")
    assert analysis.pregnancy_costs == Decimal("50")
    assert analysis.calving_costs == Decimal("100")
    assert analysis.weaning_costs == Decimal("0")
    assert analysis.total_costs == Decimal("220")
    assert analysis.net_return == Decimal("280")
    assert analysis.roi == Decimal("127.27")
    assert analysis.cost_per_day == Decimal("2.20")


def test_roi_is_undefined_without_costs():
    analysis = summarize_economics(make_cycle(), SERVICE_DATE)
    assert analysis.total_costs == Decimal("0")
    assert analysis.roi is None
    assert analysis.cost_per_day == Decimal("0.00")


def test_cost_per_day_divides_by_at_least_one_day():
    cycle = make_cycle(service=make_service(cost=Decimal("45.5")))
    analysis = summarize_economics(cycle, SERVICE_DATE - timedelta(days=3))
    assert days_since_service(cycle, SERVICE_DATE - timedelta(days=3)) == 0
    assert analysis.cost_per_day == Decimal("45.50")
    assert analysis.net_return == Decimal("-45.5")
    assert analysis.roi == Decimal("-100.00")


def test_archived_attempts_are_counted():
    first = ServiceAttempt(
        service=make_service(cost=Decimal("40")),
        pregnancy=make_pregnancy(nutrition=(NutritionEntry("hay", cost=Decimal("15")),)),
    )
    cycle = make_cycle(
        service=make_service(service_number=2, cost=Decimal("40")),
        service_history=(first,),
    )
    assert service_costs(cycle) == Decimal("80")
    assert pregnancy_costs(cycle) == Decimal("15")

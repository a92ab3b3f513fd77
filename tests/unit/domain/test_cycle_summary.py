from __future__ import annotations

from datetime import date, timedelta

from cycle_factories import (
    SERVICE_DATE,
    make_calved,
    make_cycle,
    make_pregnancy,
    make_pregnant,
    make_serviced,
)

from ranchcycle.domain.models.cycle_stages import DiagnosisResult
from ranchcycle.domain.services.cycle_summary import (
    calving_interval,
    next_heat_date,
    pregnancy_check_due,
    summarize_cycle,
)
from ranchcycle.domain.value_objects.service_status import ServiceStatus


def test_next_heat_only_for_dams_returning_to_heat():
    open_cycle = make_serviced(
        status=ServiceStatus.OPEN,
        pregnancy=make_pregnancy(result=DiagnosisResult.NEGATIVE),
    )
    assert next_heat_date(open_cycle) == SERVICE_DATE + timedelta(days=21)
    assert next_heat_date(make_pregnant()) is None


def test_pregnancy_check_window():
    cycle = make_serviced()
    assert not pregnancy_check_due(cycle, SERVICE_DATE + timedelta(days=34))
    assert pregnancy_check_due(cycle, SERVICE_DATE + timedelta(days=35))
    assert pregnancy_check_due(cycle, SERVICE_DATE + timedelta(days=50))
    assert not pregnancy_check_due(cycle, SERVICE_DATE + timedelta(days=51))


def test_calving_interval_in_days():
    cycle = make_calved()
    previous = date(2024, 1, 1)
    assert calving_interval(cycle, previous) == (cycle.calving.calving_date - previous).days
    assert calving_interval(make_cycle(), previous) is None


def test_summary_for_a_pregnant_dam():
    today = SERVICE_DATE + timedelta(days=270)
    summary = summarize_cycle(make_pregnant(), today)

    assert summary.basics.status_label == "Preñez Confirmada"
    assert summary.basics.type_label == "Inseminación Artificial"
    assert summary.basics.service_number == 1
    assert summary.timeline.days_since_service == 270
    assert summary.timeline.estimated_calving_date == SERVICE_DATE + timedelta(days=280)
    assert summary.timeline.days_to_calving == 10
    assert summary.timeline.is_near_calving
    assert summary.sire.name == "Toro Bravo"
    assert summary.efficiency.category == "EXCELLENT"
    assert not summary.efficiency.is_complete
    assert [a.priority for a in summary.alerts] == [3]


def test_summary_after_calving_has_no_calving_estimate():
    summary = summarize_cycle(make_calved(), SERVICE_DATE + timedelta(days=300))
    assert summary.timeline.estimated_calving_date is None
    assert summary.timeline.days_to_calving is None
    assert not summary.timeline.is_near_calving

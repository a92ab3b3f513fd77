from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

from ranchcycle.domain.models.alert import Alert, AlertCategory, AlertSeverity
from ranchcycle.domain.models.breeding_cycle import BreedingCycle
from ranchcycle.domain.models.cycle_stages import CalfViability
from ranchcycle.domain.services.efficiency import score_cycle
from ranchcycle.domain.value_objects.service_status import ServiceStatus
from ranchcycle.utils.datetime_tz import DEFAULT_TZ, local_date

AVERAGE_GESTATION_DAYS = 280
IMMINENT_CALVING_DAYS = 7
APPROACHING_CALVING_DAYS = 14
CRITICAL_OVERDUE_DAYS = 5
MAX_SERVICES_BEFORE_ALERT = 3
LOW_EFFICIENCY_SCORE = 60

_CALVED_STATUSES = frozenset({ServiceStatus.CALVED, ServiceStatus.WEANED})


def estimated_calving_date(cycle: BreedingCycle) -> date | None:
    diagnosis = cycle.pregnancy.diagnosis if cycle.pregnancy else None
    if diagnosis and diagnosis.expected_calving_date:
        return diagnosis.expected_calving_date
    if cycle.service and cycle.service.service_date:
        return cycle.service.service_date + timedelta(days=AVERAGE_GESTATION_DAYS)
    return None


def awaiting_calving(cycle: BreedingCycle) -> bool:
    return (
        cycle.service is not None
        and cycle.calving is None
        and cycle.status not in _CALVED_STATUSES
    )


def _calving_alerts(cycle: BreedingCycle, today: date) -> list[Alert]:
    if not awaiting_calving(cycle):
        return []
    expected = estimated_calving_date(cycle)
    if expected is None:
        return []

    days_to_calving = (expected - today).days
    if 0 <= days_to_calving <= IMMINENT_CALVING_DAYS:
        return [
            Alert(
                AlertSeverity.WARNING,
                AlertCategory.CALVING,
                f"Expected calving imminent (in {days_to_calving} days)",
                1,
            )
        ]
    if 0 <= days_to_calving <= APPROACHING_CALVING_DAYS:
        return [
            Alert(
                AlertSeverity.INFO,
                AlertCategory.CALVING,
                f"Expected calving approaching (in {days_to_calving} days)",
                3,
            )
        ]
    if days_to_calving < 0:
        overdue = -days_to_calving
        critical = overdue > CRITICAL_OVERDUE_DAYS
        return [
            Alert(
                AlertSeverity.CRITICAL if critical else AlertSeverity.WARNING,
                AlertCategory.GESTATION,
                f"Gestation overdue by {overdue} days",
                1 if critical else 2,
            )
        ]
    return []


def generate_alerts(
    cycle: BreedingCycle, now: date | datetime, tz: tzinfo = DEFAULT_TZ
) -> list[Alert]:
    """Derive the actionable alerts for `cycle` as of `now`, most urgent first."""
    today = local_date(now, tz)
    alerts = _calving_alerts(cycle, today)

    if cycle.service and cycle.service.service_number is not None:
        if cycle.service.service_number > MAX_SERVICES_BEFORE_ALERT:
            alerts.append(
                Alert(
                    AlertSeverity.WARNING,
                    AlertCategory.FERTILITY,
                    f"Repeat breeding, multiple services: {cycle.service.service_number}",
                    2,
                )
            )

    if cycle.calving and cycle.calving.complications:
        alerts.append(
            Alert(
                AlertSeverity.WARNING,
                AlertCategory.CALVING,
                f"Calving complications recorded: {len(cycle.calving.complications)}",
                2,
            )
        )

    if cycle.calf and cycle.calf.viability is CalfViability.ALIVE_WEAK:
        alerts.append(
            Alert(
                AlertSeverity.WARNING,
                AlertCategory.CALF,
                "Weak calf at birth, needs attention",
                1,
            )
        )

    efficiency = score_cycle(cycle)
    if efficiency.applicable_max and efficiency.value < LOW_EFFICIENCY_SCORE:
        alerts.append(
            Alert(
                AlertSeverity.WARNING,
                AlertCategory.EFFICIENCY,
                f"Low reproductive efficiency: {efficiency.value}%",
                2,
            )
        )

    return sorted(alerts, key=lambda a: a.priority)


def needs_attention(alerts: Iterable[Alert]) -> bool:
    return any(alert.is_urgent for alert in alerts)

"""Validation rules for breeding cycles.

Every rule is a pure function returning a list of errors. Rules never raise and
never short-circuit each other, so a rejected mutation can report every
violation in a single round trip.
"""

from __future__ import annotations

from datetime import date

from ranchcycle.application.errors import (
    AppError,
    ChronologyViolation,
    ImplausibleGestation,
    IncompleteSubrecord,
    InvalidTransition,
    OutOfRange,
)
from ranchcycle.domain.models.breeding_cycle import BreedingCycle
from ranchcycle.domain.models.cycle_stages import DiagnosisResult
from ranchcycle.domain.value_objects.service_status import ServiceStatus

MIN_SERVICE_NUMBER = 1
BIRTH_WEIGHT_RANGE_KG = (15.0, 80.0)
GESTATION_RANGE_DAYS = (150, 400)
SEASON_YEAR_RANGE = (2000, 3000)
PERCENT_RANGE = (0.0, 100.0)

_DIAGNOSIS_RESULTS_FOR = {
    ServiceStatus.CONFIRMED_PREGNANT: frozenset({DiagnosisResult.POSITIVE}),
    ServiceStatus.OPEN: frozenset({DiagnosisResult.NEGATIVE}),
    ServiceStatus.REPEAT_BREEDING: frozenset(
        {DiagnosisResult.NEGATIVE, DiagnosisResult.INCONCLUSIVE}
    ),
}


def check_transition(current: ServiceStatus, target: ServiceStatus) -> list[AppError]:
    if current.can_transition_to(target):
        return []
    return [InvalidTransition(current.value, target.value)]


def _not_before(
    earlier: date | None, earlier_field: str, later: date | None, later_field: str
) -> ChronologyViolation | None:
    if earlier is None or later is None:
        return None
    if later < earlier:
        return ChronologyViolation(earlier_field, later_field)
    return None


def check_chronology(cycle: BreedingCycle) -> list[AppError]:
    service_date = cycle.service.service_date if cycle.service else None
    diagnosis = cycle.pregnancy.diagnosis if cycle.pregnancy else None
    loss = cycle.pregnancy.loss if cycle.pregnancy else None
    calving_date = cycle.calving.calving_date if cycle.calving else None
    weaning_date = cycle.weaning.weaning_date if cycle.weaning else None

    candidates = [
        _not_before(
            service_date,
            "service.service_date",
            diagnosis.diagnosis_date if diagnosis else None,
            "pregnancy.diagnosis.diagnosis_date",
        ),
        _not_before(
            service_date,
            "service.service_date",
            loss.loss_date if loss else None,
            "pregnancy.loss.loss_date",
        ),
        _not_before(service_date, "service.service_date", calving_date, "calving.calving_date"),
        _not_before(calving_date, "calving.calving_date", weaning_date, "weaning.weaning_date"),
    ]
    return [c for c in candidates if c is not None]


def _outside(value: float, bounds: tuple[float, float]) -> bool:
    return value < bounds[0] or value > bounds[1]


def check_ranges(cycle: BreedingCycle) -> list[AppError]:
    errors: list[AppError] = []

    number = cycle.service.service_number if cycle.service else None
    if number is not None and number < MIN_SERVICE_NUMBER:
        errors.append(OutOfRange("service.service_number", number, MIN_SERVICE_NUMBER))

    gestation = cycle.calving.gestation_length if cycle.calving else None
    if gestation is not None and _outside(gestation, GESTATION_RANGE_DAYS):
        errors.append(ImplausibleGestation(gestation, *GESTATION_RANGE_DAYS))

    if cycle.calf and cycle.calf.birth_weight is not None:
        if _outside(cycle.calf.birth_weight, BIRTH_WEIGHT_RANGE_KG):
            errors.append(
                OutOfRange("calf.birth_weight", cycle.calf.birth_weight, *BIRTH_WEIGHT_RANGE_KG)
            )

    if cycle.season_year is not None and _outside(cycle.season_year, SEASON_YEAR_RANGE):
        errors.append(OutOfRange("season_year", cycle.season_year, *SEASON_YEAR_RANGE))

    if cycle.heat and cycle.heat.confidence is not None:
        if _outside(cycle.heat.confidence, PERCENT_RANGE):
            errors.append(OutOfRange("heat.confidence", cycle.heat.confidence, *PERCENT_RANGE))

    diagnosis = cycle.pregnancy.diagnosis if cycle.pregnancy else None
    if diagnosis and diagnosis.confidence is not None:
        if _outside(diagnosis.confidence, PERCENT_RANGE):
            errors.append(
                OutOfRange("pregnancy.diagnosis.confidence", diagnosis.confidence, *PERCENT_RANGE)
            )
    return errors


def _require(value: object, field: str) -> list[AppError]:
    if value is None or value == "":
        return [IncompleteSubrecord(field)]
    return []


def check_completeness(cycle: BreedingCycle, target: ServiceStatus) -> list[AppError]:
    """Check that the sub-record justifying `target` is present and filled in."""
    if target is ServiceStatus.IN_HEAT:
        if cycle.heat is None:
            return [IncompleteSubrecord("heat")]
        return _require(cycle.heat.detection_date, "heat.detection_date") + _require(
            cycle.heat.detection_method, "heat.detection_method"
        )

    if target is ServiceStatus.SERVICED:
        if cycle.service is None:
            return [IncompleteSubrecord("service")]
        return (
            _require(cycle.service.service_date, "service.service_date")
            + _require(cycle.service.service_method, "service.service_method")
            + _require(cycle.service.service_number, "service.service_number")
        )

    if target in _DIAGNOSIS_RESULTS_FOR:
        diagnosis = cycle.pregnancy.diagnosis if cycle.pregnancy else None
        if diagnosis is None:
            return [IncompleteSubrecord("pregnancy.diagnosis")]
        errors = _require(diagnosis.diagnosis_date, "pregnancy.diagnosis.diagnosis_date")
        errors += _require(diagnosis.result, "pregnancy.diagnosis.result")
        allowed = _DIAGNOSIS_RESULTS_FOR[target]
        if diagnosis.result is not None and diagnosis.result not in allowed:
            names = " or ".join(sorted(r.value for r in allowed))
            errors.append(
                IncompleteSubrecord(
                    "pregnancy.diagnosis.result",
                    f"{target.value} requires a {names} diagnosis, got {diagnosis.result.value}",
                )
            )
        return errors

    if target is ServiceStatus.ABORTED:
        loss = cycle.pregnancy.loss if cycle.pregnancy else None
        if loss is None:
            return [IncompleteSubrecord("pregnancy.loss")]
        return _require(loss.loss_date, "pregnancy.loss.loss_date") + _require(
            loss.cause, "pregnancy.loss.cause"
        )

    if target is ServiceStatus.CALVED:
        if cycle.calving is None:
            return [IncompleteSubrecord("calving")]
        errors = _require(cycle.calving.calving_date, "calving.calving_date")
        errors += _require(cycle.calving.difficulty, "calving.difficulty")
        if cycle.service is None or cycle.service.service_date is None:
            errors.append(
                IncompleteSubrecord(
                    "service.service_date", "service.service_date is required to compute gestation"
                )
            )
        return errors

    if target is ServiceStatus.WEANED:
        if cycle.weaning is None:
            return [IncompleteSubrecord("weaning")]
        return (
            _require(cycle.weaning.weaning_date, "weaning.weaning_date")
            + _require(cycle.weaning.weaning_weight, "weaning.weaning_weight")
            + _require(cycle.weaning.method, "weaning.method")
        )

    return []


def validate_cycle(cycle: BreedingCycle) -> list[AppError]:
    """Invariants every stored cycle must satisfy regardless of status."""
    return check_chronology(cycle) + check_ranges(cycle)


def validate_transition(candidate: BreedingCycle, target: ServiceStatus) -> list[AppError]:
    """Run every rule against `candidate`, whose status is still the current one."""
    return (
        check_transition(candidate.status, target)
        + check_completeness(candidate, target)
        + check_chronology(candidate)
        + check_ranges(candidate)
    )

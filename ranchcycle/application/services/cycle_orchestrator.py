from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Awaitable, Mapping, TypeVar

from ranchcycle.application.errors import (
    AppError,
    Cancelled,
    ChronologyViolation,
    ConcurrentModification,
    IncompleteSubrecord,
    InvalidTransition,
    NotFound,
    OutOfRange,
    PersistenceFailure,
    PersistenceTimeout,
    TransitionRejected,
)
from ranchcycle.application.interfaces.clock import Clock
from ranchcycle.application.interfaces.repositories.breeding_cycles import (
    BreedingCyclesRepository,
)
from ranchcycle.application.services.cycle_patch import CyclePatch, apply_patch, coerce_patch
from ranchcycle.config.settings import Settings, get_settings
from ranchcycle.domain.models.alert import Alert
from ranchcycle.domain.models.breeding_cycle import (
    BreedingCycle,
    EconomicAnalysis,
    ReproductiveEfficiency,
)
from ranchcycle.domain.models.cycle_stages import CalfViability, ServiceAttempt
from ranchcycle.domain.services.cycle_alerts import (
    AVERAGE_GESTATION_DAYS,
    generate_alerts,
    needs_attention,
)
from ranchcycle.domain.services.cycle_codes import generate_cycle_code
from ranchcycle.domain.services.cycle_summary import CycleSummary, summarize_cycle
from ranchcycle.domain.services.cycle_validation import check_transition, validate_transition
from ranchcycle.domain.services.economics import summarize_economics
from ranchcycle.domain.services.efficiency import EfficiencyScore, score_cycle, summarize_efficiency
from ranchcycle.domain.value_objects.service_status import ServiceStatus
from ranchcycle.infrastructure.clock import SystemClock
from ranchcycle.utils.datetime_tz import local_date, resolve_tz

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Statuses from which a SERVICED transition starts a new service attempt
_RESERVICE_FROM = frozenset(
    {ServiceStatus.REPEAT_BREEDING, ServiceStatus.OPEN, ServiceStatus.IN_HEAT}
)


@dataclass(slots=True)
class TransitionResult:
    cycle: BreedingCycle | None = None
    alerts: list[Alert] = field(default_factory=list)
    errors: list[AppError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.cycle is not None and not self.errors

    @property
    def retryable(self) -> bool:
        return bool(self.errors) and all(e.retryable for e in self.errors)

    @property
    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def unwrap(self) -> BreedingCycle:
        if self.ok and self.cycle is not None:
            return self.cycle
        if len(self.errors) == 1:
            raise self.errors[0]
        raise TransitionRejected(self.errors)


class CycleOrchestrator:
    """Single entry point for mutating a breeding cycle.

    A transition is validated as a whole, derived fields are recomputed, and the
    result is saved; any failure comes back in the TransitionResult and leaves
    the stored cycle untouched.
    """

    def __init__(
        self,
        repository: BreedingCyclesRepository,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._repository = repository
        self._clock = clock or SystemClock()
        self._settings = settings or get_settings()
        self._tz = resolve_tz(self._settings.timezone)
        self._in_flight: set[str] = set()

    @property
    def repository(self) -> BreedingCyclesRepository:
        return self._repository

    # Read-only operations

    def score(self, cycle: BreedingCycle) -> EfficiencyScore:
        return score_cycle(cycle)

    def alerts(self, cycle: BreedingCycle, now: date | datetime | None = None) -> list[Alert]:
        return generate_alerts(cycle, now or self._clock.now(), self._tz)

    def needs_attention(self, cycle: BreedingCycle, now: date | datetime | None = None) -> bool:
        return needs_attention(self.alerts(cycle, now))

    def summary(self, cycle: BreedingCycle, now: date | datetime | None = None) -> CycleSummary:
        return summarize_cycle(cycle, now or self._clock.now(), self._tz)

    async def load(self, code: str, timeout: float | None = None) -> BreedingCycle | None:
        limit = timeout if timeout is not None else self._settings.persistence_timeout_seconds
        return await self._persist("load", self._repository.load(code), limit)

    # Mutation

    def is_in_flight(self, code: str) -> bool:
        return code in self._in_flight

    async def propose_transition(
        self,
        cycle: BreedingCycle,
        target: ServiceStatus | str,
        payload: CyclePatch | Mapping[str, Any] | None = None,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
        actor: str | None = None,
    ) -> TransitionResult:
        try:
            target = ServiceStatus(target)
        except ValueError:
            return TransitionResult(errors=[InvalidTransition(cycle.status.value, str(target))])

        code = cycle.code
        if code in self._in_flight:
            logger.warning("Cycle %s already has a transition in flight", code)
            return TransitionResult(errors=[ConcurrentModification(code)])

        self._in_flight.add(code)
        try:
            return await self._transition(cycle, target, payload, cancel, timeout, actor)
        except (ConcurrentModification, PersistenceTimeout) as exc:
            logger.warning("Cycle %s transition to %s not applied: %s", code, target.value, exc)
            return TransitionResult(errors=[exc])
        except AppError as exc:
            logger.info("Cycle %s transition to %s stopped: %s", code, target.value, exc.code)
            return TransitionResult(errors=[exc])
        except Exception as exc:
            logger.error(
                "Cycle %s transition to %s failed in storage: %s",
                code,
                target.value,
                exc,
                exc_info=True,
            )
            return TransitionResult(errors=[PersistenceFailure(code, exc)])
        finally:
            self._in_flight.discard(code)

    async def _transition(
        self,
        cycle: BreedingCycle,
        target: ServiceStatus,
        payload: CyclePatch | Mapping[str, Any] | None,
        cancel: asyncio.Event | None,
        timeout: float | None,
        actor: str | None,
    ) -> TransitionResult:
        limit = timeout if timeout is not None else self._settings.persistence_timeout_seconds

        self._checkpoint(cancel, "validation")
        stored = await self._persist("load", self._repository.load(cycle.code), limit)
        if stored is not None:
            if stored.is_deleted:
                raise NotFound(f"Cycle {cycle.code} has been deleted")
            if stored.version != cycle.version:
                raise ConcurrentModification(
                    cycle.code,
                    f"Cycle {cycle.code} is at version {stored.version}, "
                    f"request was based on version {cycle.version}",
                )

        patch, errors = coerce_patch(payload)
        if patch is None:
            return self._reject(cycle, target, errors + check_transition(cycle.status, target))

        candidate, errors = self._prepare(cycle, apply_patch(cycle, patch), patch, target)
        errors += validate_transition(candidate, target)
        if errors:
            return self._reject(cycle, target, errors)

        now = self._clock.now()
        advanced = replace(candidate, status=target)

        self._checkpoint(cancel, "scoring")
        efficiency = summarize_efficiency(advanced)
        self._checkpoint(cancel, "alerts")
        alerts = generate_alerts(advanced, now, self._tz)
        self._checkpoint(cancel, "economics")
        economics = summarize_economics(advanced, now, self._tz)

        committed = self._pre_commit(
            advanced,
            now,
            efficiency=efficiency,
            economics=economics,
            updated_by=patch.updated_by or actor,
        )
        self._checkpoint(cancel, "save")
        saved = await self._persist("save", self._repository.save(committed), limit)

        logger.info(
            "Cycle %s moved %s -> %s (version %d, score %d)",
            saved.code,
            cycle.status.value,
            target.value,
            saved.version,
            efficiency.score,
        )
        return TransitionResult(cycle=saved, alerts=alerts)

    def _reject(
        self, cycle: BreedingCycle, target: ServiceStatus, errors: list[AppError]
    ) -> TransitionResult:
        logger.info(
            "Cycle %s transition %s -> %s rejected: %s",
            cycle.code,
            cycle.status.value,
            target.value,
            ", ".join(e.code for e in errors),
        )
        return TransitionResult(errors=errors)

    def _prepare(
        self,
        original: BreedingCycle,
        candidate: BreedingCycle,
        patch: CyclePatch,
        target: ServiceStatus,
    ) -> tuple[BreedingCycle, list[AppError]]:
        """Apply the engine-owned parts of a transition before validation."""
        errors: list[AppError] = []

        if target is ServiceStatus.SERVICED:
            candidate, errors = self._start_service(original, candidate, patch)
        else:
            errors = self._keep_service_number(original, patch)

        if candidate.calving and candidate.calving.calving_date and candidate.service:
            service_date = candidate.service.service_date
            if service_date is not None:
                gestation = (candidate.calving.calving_date - service_date).days
                candidate = replace(
                    candidate, calving=replace(candidate.calving, gestation_length=gestation)
                )

        if target is ServiceStatus.CONFIRMED_PREGNANT:
            candidate = self._with_expected_calving(candidate)

        return candidate, errors

    def _start_service(
        self, original: BreedingCycle, candidate: BreedingCycle, patch: CyclePatch
    ) -> tuple[BreedingCycle, list[AppError]]:
        errors: list[AppError] = []
        previous = original.service
        reservice = previous is not None and original.status in _RESERVICE_FROM

        if reservice:
            if patch.service is None:
                return candidate, [IncompleteSubrecord("service")]
            last_number = previous.service_number or len(original.service_history) + 1
            number = patch.service.service_number
            if number is None:
                number = last_number + 1
            elif number <= last_number:
                errors.append(OutOfRange("service.service_number", number, last_number + 1))
            new_date = patch.service.service_date
            if previous.service_date and new_date and new_date < previous.service_date:
                errors.append(
                    ChronologyViolation(
                        "service_history[-1].service_date", "service.service_date"
                    )
                )
            candidate = replace(
                candidate,
                service=replace(patch.service, service_number=number),
                pregnancy=patch.pregnancy,
                service_history=original.service_history
                + (ServiceAttempt(service=previous, pregnancy=original.pregnancy),),
            )
        else:
            errors += self._keep_service_number(original, patch)
            if candidate.service is not None and candidate.service.service_number is None:
                candidate = replace(
                    candidate, service=replace(candidate.service, service_number=1)
                )

        germplasm = candidate.germplasm
        if germplasm is not None and candidate.service is not None:
            available = germplasm.doses_available
            if available is not None and available < 1:
                errors.append(
                    OutOfRange(
                        "germplasm.doses_available",
                        available,
                        1,
                        message=f"No doses left in germplasm batch {germplasm.batch_number}",
                    )
                )
            else:
                candidate = replace(
                    candidate,
                    germplasm=replace(
                        germplasm,
                        doses_used=germplasm.doses_used + 1,
                        doses_available=available - 1 if available is not None else None,
                    ),
                )
        return candidate, errors

    @staticmethod
    def _keep_service_number(original: BreedingCycle, patch: CyclePatch) -> list[AppError]:
        """Only a new service attempt may change the recorded service number."""
        current = original.service.service_number if original.service else None
        number = patch.service.service_number if patch.service else None
        if current is None or number is None or number == current:
            return []
        return [
            OutOfRange(
                "service.service_number",
                number,
                current,
                current,
                message=f"Service number is {current} until a new service is recorded",
            )
        ]

    def _with_expected_calving(self, candidate: BreedingCycle) -> BreedingCycle:
        pregnancy = candidate.pregnancy
        diagnosis = pregnancy.diagnosis if pregnancy else None
        if pregnancy is None or diagnosis is None or diagnosis.expected_calving_date:
            return candidate
        if candidate.service is None or candidate.service.service_date is None:
            return candidate
        expected = candidate.service.service_date + timedelta(days=AVERAGE_GESTATION_DAYS)
        return replace(
            candidate,
            pregnancy=replace(
                pregnancy, diagnosis=replace(diagnosis, expected_calving_date=expected)
            ),
        )

    def _pre_commit(
        self,
        cycle: BreedingCycle,
        now: datetime,
        *,
        efficiency: ReproductiveEfficiency,
        economics: EconomicAnalysis,
        updated_by: str | None,
    ) -> BreedingCycle:
        season_year = cycle.season_year
        if season_year is None:
            if cycle.service and cycle.service.service_date:
                season_year = cycle.service.service_date.year
            else:
                season_year = local_date(now, self._tz).year

        code = cycle.code or generate_cycle_code(
            self._settings.cycle_code_prefix, cycle.dam_id, season_year
        )
        is_successful = (
            cycle.status is ServiceStatus.WEANED
            and cycle.calf is not None
            and cycle.calf.viability is CalfViability.ALIVE_NORMAL
        )
        return replace(
            cycle,
            code=code,
            season_year=season_year,
            efficiency=efficiency,
            economics=economics,
            quality_score=efficiency.score,
            is_completed=cycle.status.is_terminal,
            is_successful=is_successful,
            updated_by=updated_by or cycle.updated_by,
            updated_at=now,
            version=cycle.version + 1,
        )

    @staticmethod
    def _checkpoint(cancel: asyncio.Event | None, stage: str) -> None:
        if cancel is not None and cancel.is_set():
            raise Cancelled(stage)

    @staticmethod
    async def _persist(operation: str, call: Awaitable[T], limit: float) -> T:
        try:
            return await asyncio.wait_for(call, timeout=limit)
        except asyncio.TimeoutError as exc:
            raise PersistenceTimeout(operation, limit) from exc

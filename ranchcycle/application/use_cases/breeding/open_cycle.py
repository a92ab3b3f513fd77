from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date

from ranchcycle.application.errors import (
    AppError,
    ConflictError,
    IncompleteSubrecord,
    OutOfRange,
    TransitionRejected,
)
from ranchcycle.application.interfaces.clock import Clock
from ranchcycle.application.interfaces.repositories.breeding_cycles import (
    BreedingCyclesRepository,
)
from ranchcycle.config.settings import Settings, get_settings
from ranchcycle.domain.models.breeding_cycle import BreedingCycle
from ranchcycle.domain.models.cycle_stages import HeatInfo, ReproductionType
from ranchcycle.domain.models.sire_profile import GermplasmInfo, SireProfile
from ranchcycle.domain.services.cycle_codes import generate_cycle_code
from ranchcycle.domain.services.cycle_validation import check_completeness, validate_cycle
from ranchcycle.domain.value_objects.service_status import ServiceStatus
from ranchcycle.infrastructure.clock import SystemClock
from ranchcycle.utils.datetime_tz import local_date, resolve_tz

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OpenCycleInput:
    dam_id: str
    sire: SireProfile
    code: str | None = None
    heat: HeatInfo | None = None
    reproduction_type: ReproductionType | None = None
    breeding_season_id: str | None = None
    season_year: int | None = None
    ranch_id: str | None = None
    germplasm: GermplasmInfo | None = None
    notes: str | None = None


def _check_opening(cycle: BreedingCycle, today: date) -> list[AppError]:
    errors: list[AppError] = []
    if not cycle.dam_id:
        errors.append(IncompleteSubrecord("dam_id"))
    if not cycle.sire.name:
        errors.append(IncompleteSubrecord("sire.name"))
    if not cycle.sire.breed:
        errors.append(IncompleteSubrecord("sire.breed"))
    if cycle.heat is not None:
        errors += check_completeness(cycle, ServiceStatus.IN_HEAT)
    germplasm = cycle.germplasm
    if germplasm is not None and germplasm.is_expired(today):
        errors.append(
            OutOfRange(
                "germplasm.expiration_date",
                germplasm.expiration_date,
                today,
                message=f"Germplasm batch {germplasm.batch_number} expired on "
                f"{germplasm.expiration_date}",
            )
        )
    errors += validate_cycle(cycle)
    return errors


async def execute(
    repository: BreedingCyclesRepository,
    payload: OpenCycleInput,
    actor_user_id: str | None = None,
    *,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> BreedingCycle:
    settings = settings or get_settings()
    today = local_date((clock or SystemClock()).now(), resolve_tz(settings.timezone))

    season_year = payload.season_year
    if season_year is None:
        heat = payload.heat
        season_year = heat.detection_date.year if heat and heat.detection_date else today.year

    code = payload.code or generate_cycle_code(
        settings.cycle_code_prefix, payload.dam_id, season_year
    )
    cycle = BreedingCycle.create(
        code=code,
        dam_id=payload.dam_id,
        sire=payload.sire,
        heat=payload.heat,
        reproduction_type=payload.reproduction_type,
        breeding_season_id=payload.breeding_season_id,
        season_year=season_year,
        ranch_id=payload.ranch_id,
        germplasm=payload.germplasm,
        created_by=actor_user_id,
        notes=payload.notes,
    )
    cycle = replace(cycle, updated_by=actor_user_id)

    errors = _check_opening(cycle, today)
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise TransitionRejected(errors)

    if await repository.load(cycle.code) is not None:
        raise ConflictError(f"Cycle code {cycle.code} already exists")

    saved = await repository.save(cycle)
    logger.info("Opened cycle %s for dam %s (%s)", saved.code, saved.dam_id, saved.status.value)
    return saved

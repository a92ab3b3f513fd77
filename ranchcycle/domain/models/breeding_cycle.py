from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from ranchcycle.domain.models.cycle_stages import (
    CalfInfo,
    CalvingInfo,
    HeatInfo,
    PregnancyInfo,
    ReproductionType,
    ServiceAttempt,
    ServiceInfo,
    WeaningInfo,
)
from ranchcycle.domain.models.sire_profile import GermplasmInfo, SireProfile
from ranchcycle.domain.value_objects.service_status import ServiceStatus


@dataclass(frozen=True, slots=True)
class ReproductiveEfficiency:
    score: int
    category: str  # POOR | FAIR | GOOD | EXCELLENT
    breakdown: dict[str, int] = field(default_factory=dict)
    services_per_conception: int | None = None
    gestation_length: int | None = None
    days_to_conception: int | None = None


@dataclass(frozen=True, slots=True)
class EconomicAnalysis:
    service_costs: Decimal
    pregnancy_costs: Decimal
    calving_costs: Decimal
    weaning_costs: Decimal
    total_costs: Decimal
    calf_value: Decimal
    net_return: Decimal
    cost_per_day: Decimal
    # Undefined when nothing has been spent
    roi: Decimal | None = None


@dataclass(frozen=True, slots=True)
class BreedingCycle:
    code: str
    dam_id: str
    sire: SireProfile
    status: ServiceStatus = ServiceStatus.PLANNED
    reproduction_type: ReproductionType | None = None
    breeding_season_id: str | None = None
    season_year: int | None = None
    ranch_id: str | None = None

    germplasm: GermplasmInfo | None = None
    heat: HeatInfo | None = None
    service: ServiceInfo | None = None
    pregnancy: PregnancyInfo | None = None
    calving: CalvingInfo | None = None
    calf: CalfInfo | None = None
    weaning: WeaningInfo | None = None
    service_history: tuple[ServiceAttempt, ...] = ()

    efficiency: ReproductiveEfficiency | None = None
    economics: EconomicAnalysis | None = None
    quality_score: int | None = None
    is_completed: bool = False
    is_successful: bool = False
    notes: str | None = None

    created_by: str | None = None
    updated_by: str | None = None
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        code: str,
        dam_id: str,
        sire: SireProfile,
        heat: HeatInfo | None = None,
        reproduction_type: ReproductionType | None = None,
        breeding_season_id: str | None = None,
        season_year: int | None = None,
        ranch_id: str | None = None,
        germplasm: GermplasmInfo | None = None,
        created_by: str | None = None,
        notes: str | None = None,
    ) -> BreedingCycle:
        now = datetime.now(timezone.utc)
        return cls(
            code=code,
            dam_id=dam_id,
            sire=sire,
            status=ServiceStatus.IN_HEAT if heat is not None else ServiceStatus.PLANNED,
            reproduction_type=reproduction_type,
            breeding_season_id=breeding_season_id,
            season_year=season_year,
            ranch_id=ranch_id,
            germplasm=germplasm,
            heat=heat,
            created_by=created_by,
            notes=notes,
            created_at=now,
            updated_at=now,
            version=1,
        )

    @property
    def service_number(self) -> int | None:
        return self.service.service_number if self.service else None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

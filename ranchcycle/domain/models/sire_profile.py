from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class GermplasmType(str, Enum):
    FRESH_SEMEN = "FRESH_SEMEN"
    FROZEN_SEMEN = "FROZEN_SEMEN"
    FRESH_EMBRYO = "FRESH_EMBRYO"
    FROZEN_EMBRYO = "FROZEN_EMBRYO"
    OOCYTES = "OOCYTES"


@dataclass(frozen=True, slots=True)
class GeneticPredictions:
    """Expected progeny differences; genomic data stays opaque."""

    birth_weight: float | None = None
    weaning_weight: float | None = None
    yearling_weight: float | None = None
    milk_production: float | None = None
    maternal_ability: float | None = None
    marbling: float | None = None
    genomic_test_ids: tuple[str, ...] = ()
    inbreeding_coefficient: float | None = None


@dataclass(frozen=True, slots=True)
class SireServiceHistory:
    total_services: int = 0
    conception_rate: float | None = None  # %
    average_gestation: float | None = None  # days
    calving_ease: float | None = None  # %
    offspring_viability: float | None = None  # %


@dataclass(frozen=True, slots=True)
class SireProfile:
    name: str
    breed: str
    sire_id: str | None = None
    registration: str | None = None
    owner: str | None = None
    predictions: GeneticPredictions | None = None
    service_history: SireServiceHistory | None = None


@dataclass(frozen=True, slots=True)
class GermplasmQuality:
    motility: float | None = None  # %
    concentration: float | None = None
    viability: float | None = None  # %
    morphology: float | None = None  # % normal


@dataclass(frozen=True, slots=True)
class GermplasmInfo:
    type: GermplasmType
    batch_number: str
    supplier: str | None = None
    collection_date: date | None = None
    expiration_date: date | None = None
    storage_location: str | None = None
    quality: GermplasmQuality | None = None
    doses_available: int | None = None
    doses_used: int = 0
    cost_per_dose: Decimal | None = None

    def is_expired(self, on: date) -> bool:
        return self.expiration_date is not None and on > self.expiration_date

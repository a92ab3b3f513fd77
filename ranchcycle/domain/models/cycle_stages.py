from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from enum import Enum


class ReproductionType(str, Enum):
    NATURAL_SERVICE = "NATURAL_SERVICE"
    ARTIFICIAL_INSEMINATION = "ARTIFICIAL_INSEMINATION"
    EMBRYO_TRANSFER = "EMBRYO_TRANSFER"
    IN_VITRO_FERTILIZATION = "IN_VITRO_FERTILIZATION"
    SYNCHRONIZED_BREEDING = "SYNCHRONIZED_BREEDING"
    MULTIPLE_OVULATION = "MULTIPLE_OVULATION"


REPRODUCTION_TYPE_LABELS = {
    ReproductionType.NATURAL_SERVICE: "Monta Natural",
    ReproductionType.ARTIFICIAL_INSEMINATION: "Inseminación Artificial",
    ReproductionType.EMBRYO_TRANSFER: "Transferencia de Embriones",
    ReproductionType.IN_VITRO_FERTILIZATION: "Fertilización in Vitro",
    ReproductionType.SYNCHRONIZED_BREEDING: "Reproducción Sincronizada",
    ReproductionType.MULTIPLE_OVULATION: "Ovulación Múltiple",
}


class HeatDetectionMethod(str, Enum):
    VISUAL_OBSERVATION = "VISUAL_OBSERVATION"
    HEAT_DETECTOR = "HEAT_DETECTOR"
    PEDOMETER = "PEDOMETER"
    ACTIVITY_MONITOR = "ACTIVITY_MONITOR"
    PROGESTERONE_TEST = "PROGESTERONE_TEST"
    ULTRASOUND = "ULTRASOUND"
    MOUNTING_BEHAVIOR = "MOUNTING_BEHAVIOR"


class HeatIntensity(str, Enum):
    WEAK = "WEAK"
    MODERATE = "MODERATE"
    STRONG = "STRONG"


class CycleRegularity(str, Enum):
    REGULAR = "REGULAR"
    IRREGULAR = "IRREGULAR"
    FIRST_HEAT = "FIRST_HEAT"


class PregnancyDiagnosisMethod(str, Enum):
    RECTAL_PALPATION = "RECTAL_PALPATION"
    ULTRASOUND = "ULTRASOUND"
    BLOOD_TEST = "BLOOD_TEST"
    MILK_TEST = "MILK_TEST"
    HORMONE_ASSAY = "HORMONE_ASSAY"


class DiagnosisResult(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    INCONCLUSIVE = "INCONCLUSIVE"


class FetalViability(str, Enum):
    VIABLE = "VIABLE"
    NON_VIABLE = "NON_VIABLE"
    QUESTIONABLE = "QUESTIONABLE"


class CalvingDifficulty(str, Enum):
    EASY = "EASY"
    SLIGHT_ASSISTANCE = "SLIGHT_ASSISTANCE"
    MODERATE_ASSISTANCE = "MODERATE_ASSISTANCE"
    DIFFICULT = "DIFFICULT"
    CESAREAN = "CESAREAN"
    EMBRYOTOMY = "EMBRYOTOMY"
    VETERINARY_ASSISTANCE = "VETERINARY_ASSISTANCE"


class PlacentaExpulsion(str, Enum):
    NORMAL = "NORMAL"
    RETAINED = "RETAINED"
    INCOMPLETE = "INCOMPLETE"


class CalfSex(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class CalfViability(str, Enum):
    ALIVE_NORMAL = "ALIVE_NORMAL"
    ALIVE_WEAK = "ALIVE_WEAK"
    STILLBORN = "STILLBORN"
    DIED_WITHIN_24H = "DIED_WITHIN_24H"
    DIED_WITHIN_WEEK = "DIED_WITHIN_WEEK"
    CONGENITAL_DEFECTS = "CONGENITAL_DEFECTS"


class WeaningMethod(str, Enum):
    NATURAL = "NATURAL"
    EARLY_WEANING = "EARLY_WEANING"
    GRADUAL_WEANING = "GRADUAL_WEANING"
    ABRUPT_WEANING = "ABRUPT_WEANING"
    FENCE_LINE_WEANING = "FENCE_LINE_WEANING"
    TWO_STAGE_WEANING = "TWO_STAGE_WEANING"


# Heat


@dataclass(frozen=True, slots=True)
class HeatInfo:
    detection_date: date | None = None
    detection_time: time | None = None
    detection_method: HeatDetectionMethod | None = None
    intensity: HeatIntensity | None = None
    duration_hours: float | None = None
    behavioral_signs: tuple[str, ...] = ()
    physical_signs: tuple[str, ...] = ()
    previous_heat_date: date | None = None
    cycle_length: int | None = None
    regularity: CycleRegularity | None = None
    synchronized: bool = False
    technician: str | None = None
    confidence: float | None = None  # %
    notes: str | None = None


# Service


@dataclass(frozen=True, slots=True)
class ServiceConditions:
    female_condition: str | None = None  # EXCELLENT | GOOD | FAIR | POOR
    stress_level: str | None = None  # LOW | MEDIUM | HIGH
    restraint_method: str | None = None
    hygiene: str | None = None


@dataclass(frozen=True, slots=True)
class ServiceInfo:
    service_date: date | None = None
    service_time: time | None = None
    # None lets the engine assign the next number on re-service
    service_number: int | None = None
    service_method: ReproductionType | None = None
    technician: str | None = None
    veterinarian: str | None = None
    conditions: ServiceConditions | None = None
    complications: tuple[str, ...] = ()
    cost: Decimal | None = None
    follow_up_date: date | None = None
    notes: str | None = None


# Pregnancy


@dataclass(frozen=True, slots=True)
class PregnancyDiagnosis:
    method: PregnancyDiagnosisMethod | None = None
    diagnosis_date: date | None = None
    result: DiagnosisResult | None = None
    gestation_age: int | None = None
    expected_calving_date: date | None = None
    confidence: float | None = None  # %
    technician: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class PregnancyCheck:
    check_date: date
    gestation_day: int | None = None
    method: str | None = None
    findings: str | None = None
    fetal_viability: FetalViability | None = None
    complications: tuple[str, ...] = ()
    next_check_date: date | None = None
    veterinarian: str | None = None


@dataclass(frozen=True, slots=True)
class NutritionEntry:
    feeding_plan: str
    supplements: tuple[str, ...] = ()
    body_condition_score: float | None = None
    cost: Decimal | None = None


@dataclass(frozen=True, slots=True)
class HealthEntry:
    entry_date: date
    description: str
    treatment: str | None = None
    veterinarian: str | None = None
    cost: Decimal | None = None


@dataclass(frozen=True, slots=True)
class PregnancyLoss:
    loss_date: date | None = None
    cause: str | None = None
    gestation_day: int | None = None
    necropsy: bool = False
    necropsy_findings: str | None = None


@dataclass(frozen=True, slots=True)
class PregnancyInfo:
    diagnosis: PregnancyDiagnosis | None = None
    monitoring: tuple[PregnancyCheck, ...] = ()
    nutrition: tuple[NutritionEntry, ...] = ()
    health: tuple[HealthEntry, ...] = ()
    loss: PregnancyLoss | None = None


# Calving


@dataclass(frozen=True, slots=True)
class CalvingAssistance:
    assistance_required: bool = False
    assisted_by: str | None = None
    veterinarian_called: bool = False
    instruments_used: tuple[str, ...] = ()
    duration_minutes: int | None = None


@dataclass(frozen=True, slots=True)
class CalvingComplication:
    complication: str
    severity: str | None = None  # MILD | MODERATE | SEVERE
    treatment: str | None = None
    outcome: str | None = None


@dataclass(frozen=True, slots=True)
class DamCondition:
    post_calving_health: str | None = None  # EXCELLENT | GOOD | FAIR | POOR
    appetite: str | None = None
    mobility: str | None = None
    udder_condition: str | None = None
    complications: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CalvingInfo:
    calving_date: date | None = None
    calving_time: time | None = None
    # Recomputed from service and calving dates whenever the cycle calves
    gestation_length: int | None = None
    difficulty: CalvingDifficulty | None = None
    assistance: CalvingAssistance | None = None
    complications: tuple[CalvingComplication, ...] = ()
    placenta_expulsion: PlacentaExpulsion | None = None
    dam_condition: DamCondition | None = None
    cost: Decimal | None = None
    notes: str | None = None


# Calf


@dataclass(frozen=True, slots=True)
class BirthCondition:
    vigor: str | None = None
    breathing: str | None = None
    reflexes: str | None = None
    temperature_regulation: str | None = None
    minutes_to_stand: int | None = None
    minutes_to_nurse: int | None = None


@dataclass(frozen=True, slots=True)
class ColostrumInfo:
    first_feeding: date | None = None
    source: str | None = None  # DAM | POOLED | SUPPLEMENT
    quality: str | None = None
    volume_ml: float | None = None
    igg_level: float | None = None
    passive_transfer_adequate: bool | None = None


@dataclass(frozen=True, slots=True)
class CalfIdentification:
    ear_tag_date: date | None = None
    tattoo_date: date | None = None
    microchip_date: date | None = None
    dna_test_date: date | None = None


@dataclass(frozen=True, slots=True)
class CongenitalDefect:
    defect: str
    severity: str | None = None
    prognosis: str | None = None


@dataclass(frozen=True, slots=True)
class CalfInfo:
    sex: CalfSex | None = None
    birth_weight: float | None = None  # kg
    viability: CalfViability | None = None
    calf_id: str | None = None
    tag: str | None = None
    birth_condition: BirthCondition | None = None
    colostrum: ColostrumInfo | None = None
    identification: CalfIdentification | None = None
    congenital_defects: tuple[CongenitalDefect, ...] = ()
    calf_value: Decimal | None = None
    notes: str | None = None


# Weaning


@dataclass(frozen=True, slots=True)
class WeaningCondition:
    body_condition_score: float | None = None
    health_status: str | None = None  # HEALTHY | SICK | RECOVERING
    behavioral_adaptation: str | None = None
    feed_transition: str | None = None


@dataclass(frozen=True, slots=True)
class WeaningInfo:
    weaning_date: date | None = None
    weaning_age: int | None = None  # days
    weaning_weight: float | None = None  # kg
    method: WeaningMethod | None = None
    average_daily_gain: float | None = None  # kg/day
    condition: WeaningCondition | None = None
    cost: Decimal | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class ServiceAttempt:
    """An earlier service of the same cycle, archived on re-service."""

    service: ServiceInfo
    pregnancy: PregnancyInfo | None = None

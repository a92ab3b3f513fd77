from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ranchcycle.application.errors import AppError, IncompleteSubrecord
from ranchcycle.domain.models.breeding_cycle import BreedingCycle
from ranchcycle.domain.models.cycle_stages import (
    CalfInfo,
    CalvingInfo,
    HeatInfo,
    PregnancyInfo,
    ServiceInfo,
    WeaningInfo,
)
from ranchcycle.domain.models.sire_profile import GermplasmInfo


@dataclass(frozen=True, slots=True)
class CyclePatch:
    """Sub-records submitted together with a status change."""

    germplasm: GermplasmInfo | None = None
    heat: HeatInfo | None = None
    service: ServiceInfo | None = None
    pregnancy: PregnancyInfo | None = None
    calving: CalvingInfo | None = None
    calf: CalfInfo | None = None
    weaning: WeaningInfo | None = None
    notes: str | None = None
    updated_by: str | None = None


SUBRECORD_FIELDS = ("germplasm", "heat", "service", "pregnancy", "calving", "calf", "weaning")

_PATCH_ADAPTER: TypeAdapter[CyclePatch] = TypeAdapter(CyclePatch)


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "payload"


def coerce_patch(
    payload: CyclePatch | Mapping[str, Any] | None,
) -> tuple[CyclePatch | None, list[AppError]]:
    """Turn a caller payload into a CyclePatch, collecting every field problem."""
    if payload is None:
        return CyclePatch(), []
    if isinstance(payload, CyclePatch):
        return payload, []
    try:
        return _PATCH_ADAPTER.validate_python(dict(payload)), []
    except PydanticValidationError as exc:
        errors: list[AppError] = []
        for err in exc.errors():
            field = _loc_to_field(err["loc"])
            if err["type"] == "missing":
                errors.append(IncompleteSubrecord(field))
            else:
                errors.append(IncompleteSubrecord(field, f"{field}: {err['msg']}"))
        return None, errors


def _is_blank(value: Any) -> bool:
    return value is None or value == ()


def merge_subrecord(existing: Any, incoming: Any) -> Any:
    """Overlay the filled-in fields of `incoming` on `existing`."""
    if incoming is None:
        return existing
    if existing is None:
        return incoming
    changes = {
        f.name: getattr(incoming, f.name)
        for f in fields(incoming)
        if not _is_blank(getattr(incoming, f.name))
    }
    return replace(existing, **changes)


def apply_patch(cycle: BreedingCycle, patch: CyclePatch) -> BreedingCycle:
    changes: dict[str, Any] = {
        name: merge_subrecord(getattr(cycle, name), getattr(patch, name))
        for name in SUBRECORD_FIELDS
    }
    if patch.notes is not None:
        changes["notes"] = patch.notes
    return replace(cycle, **changes)

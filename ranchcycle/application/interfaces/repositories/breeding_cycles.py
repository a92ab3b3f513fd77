from __future__ import annotations

from typing import Protocol

from ranchcycle.domain.models.breeding_cycle import BreedingCycle


class BreedingCyclesRepository(Protocol):
    async def load(self, code: str) -> BreedingCycle | None: ...

    async def save(self, cycle: BreedingCycle) -> BreedingCycle: ...

    async def list(
        self,
        dam_id: str | None = None,
        season_year: int | None = None,
        status: str | None = None,
        include_deleted: bool = False,
    ) -> list[BreedingCycle]: ...

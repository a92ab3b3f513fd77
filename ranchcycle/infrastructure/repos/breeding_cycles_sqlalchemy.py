from __future__ import annotations

from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ranchcycle.application.errors import ConcurrentModification
from ranchcycle.domain.models.breeding_cycle import BreedingCycle
from ranchcycle.domain.value_objects.service_status import ServiceStatus
from ranchcycle.infrastructure.db.orm.breeding_cycle import BreedingCycleORM

_CYCLE_ADAPTER: TypeAdapter[BreedingCycle] = TypeAdapter(BreedingCycle)


class BreedingCyclesSQLAlchemyRepository:
    """Stores each cycle as one JSON document plus a few indexed columns.

    Every call runs in its own session and commits on exit.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def _to_domain(self, orm: BreedingCycleORM) -> BreedingCycle:
        return _CYCLE_ADAPTER.validate_python(orm.document)

    def _to_document(self, cycle: BreedingCycle) -> dict:
        return _CYCLE_ADAPTER.dump_python(cycle, mode="json")

    async def load(self, code: str) -> BreedingCycle | None:
        async with self._session_factory() as session:
            orm = await session.get(BreedingCycleORM, code)
            return self._to_domain(orm) if orm else None

    async def save(self, cycle: BreedingCycle) -> BreedingCycle:
        async with self._session_factory() as session, session.begin():
            orm = await session.get(BreedingCycleORM, cycle.code, with_for_update=True)
            if orm is None:
                orm = BreedingCycleORM(code=cycle.code, created_at=cycle.created_at)
                session.add(orm)
            elif orm.version != cycle.version - 1:
                raise ConcurrentModification(
                    cycle.code,
                    f"Cycle {cycle.code} is stored at version {orm.version}, "
                    f"cannot write version {cycle.version}",
                )
            orm.dam_id = cycle.dam_id
            orm.status = cycle.status.value
            orm.season_year = cycle.season_year
            orm.document = self._to_document(cycle)
            orm.version = cycle.version
            orm.deleted_at = cycle.deleted_at
            orm.updated_at = cycle.updated_at
            await session.flush()
        return cycle

    async def list(
        self,
        dam_id: str | None = None,
        season_year: int | None = None,
        status: str | None = None,
        include_deleted: bool = False,
    ) -> list[BreedingCycle]:
        stmt = select(BreedingCycleORM)
        if dam_id:
            stmt = stmt.where(BreedingCycleORM.dam_id == dam_id)
        if season_year is not None:
            stmt = stmt.where(BreedingCycleORM.season_year == season_year)
        if status:
            stmt = stmt.where(BreedingCycleORM.status == ServiceStatus(status).value)
        if not include_deleted:
            stmt = stmt.where(BreedingCycleORM.deleted_at.is_(None))
        stmt = stmt.order_by(BreedingCycleORM.created_at.asc(), BreedingCycleORM.code.asc())
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_domain(orm) for orm in result.scalars().all()]

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ranchcycle.application.interfaces.clock import Clock
from ranchcycle.application.services.cycle_orchestrator import CycleOrchestrator
from ranchcycle.config.settings import Settings, get_settings
from ranchcycle.infrastructure.clock import SystemClock
from ranchcycle.infrastructure.db.session import (
    create_engine,
    create_schema,
    create_session_factory,
)
from ranchcycle.infrastructure.repos.breeding_cycles_sqlalchemy import (
    BreedingCyclesSQLAlchemyRepository,
)

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
    # SQL echo stays quiet unless explicitly debugging
    logging.getLogger("sqlalchemy.engine").setLevel(max(level, logging.WARNING))


@dataclass(slots=True)
class Engine:
    settings: Settings
    db_engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    repository: BreedingCyclesSQLAlchemyRepository
    orchestrator: CycleOrchestrator

    async def dispose(self) -> None:
        await self.db_engine.dispose()


async def build_engine(
    settings: Settings | None = None,
    *,
    clock: Clock | None = None,
    create_tables: bool = True,
) -> Engine:
    """Wire settings, storage and the orchestrator into one ready-to-use bundle."""
    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    db_engine = create_engine(settings.database_url)
    if create_tables:
        await create_schema(db_engine)
    session_factory = create_session_factory(db_engine)
    repository = BreedingCyclesSQLAlchemyRepository(session_factory)
    orchestrator = CycleOrchestrator(repository, clock=clock or SystemClock(), settings=settings)

    logger.info(
        "Breeding cycle engine ready (env=%s, tz=%s)", settings.environment, settings.timezone
    )
    return Engine(
        settings=settings,
        db_engine=db_engine,
        session_factory=session_factory,
        repository=repository,
        orchestrator=orchestrator,
    )

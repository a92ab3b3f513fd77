from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from ranchcycle.application.errors import ConcurrentModification, NotFound, PersistenceTimeout
from ranchcycle.application.services.cycle_orchestrator import CycleOrchestrator, TransitionResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RecordTransitionInput:
    code: str
    target: str
    payload: dict[str, Any] = field(default_factory=dict)
    # Version the caller last saw; None skips the check
    expected_version: int | None = None
    timeout: float | None = None


async def execute(
    orchestrator: CycleOrchestrator,
    payload: RecordTransitionInput,
    actor_user_id: str | None = None,
    cancel: asyncio.Event | None = None,
) -> TransitionResult:
    try:
        cycle = await orchestrator.load(payload.code, timeout=payload.timeout)
    except PersistenceTimeout as exc:
        logger.warning("Cycle %s could not be loaded: %s", payload.code, exc)
        return TransitionResult(errors=[exc])
    if cycle is None or cycle.is_deleted:
        raise NotFound(f"Cycle {payload.code} not found")

    if payload.expected_version is not None and payload.expected_version != cycle.version:
        return TransitionResult(
            errors=[
                ConcurrentModification(
                    cycle.code,
                    f"Cycle {cycle.code} is at version {cycle.version}, "
                    f"request was based on version {payload.expected_version}",
                )
            ]
        )

    return await orchestrator.propose_transition(
        cycle,
        payload.target,
        payload.payload,
        cancel=cancel,
        timeout=payload.timeout,
        actor=actor_user_id,
    )

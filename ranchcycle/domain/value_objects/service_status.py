from __future__ import annotations

from enum import Enum


class ServiceStatus(str, Enum):
    PLANNED = "PLANNED"
    IN_HEAT = "IN_HEAT"
    SERVICED = "SERVICED"
    CONFIRMED_PREGNANT = "CONFIRMED_PREGNANT"
    OPEN = "OPEN"
    REPEAT_BREEDING = "REPEAT_BREEDING"
    ABORTED = "ABORTED"
    CALVED = "CALVED"
    WEANED = "WEANED"
    CULLED = "CULLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    def can_transition_to(self, target: ServiceStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self]


TERMINAL_STATUSES = frozenset({ServiceStatus.WEANED, ServiceStatus.CULLED})

ALLOWED_TRANSITIONS: dict[ServiceStatus, frozenset[ServiceStatus]] = {
    ServiceStatus.PLANNED: frozenset({ServiceStatus.IN_HEAT, ServiceStatus.SERVICED}),
    ServiceStatus.IN_HEAT: frozenset({ServiceStatus.SERVICED}),
    ServiceStatus.SERVICED: frozenset(
        {
            ServiceStatus.CONFIRMED_PREGNANT,
            ServiceStatus.OPEN,
            ServiceStatus.REPEAT_BREEDING,
        }
    ),
    ServiceStatus.REPEAT_BREEDING: frozenset({ServiceStatus.SERVICED}),
    ServiceStatus.OPEN: frozenset({ServiceStatus.IN_HEAT, ServiceStatus.SERVICED}),
    ServiceStatus.CONFIRMED_PREGNANT: frozenset({ServiceStatus.ABORTED, ServiceStatus.CALVED}),
    ServiceStatus.CALVED: frozenset({ServiceStatus.WEANED, ServiceStatus.CULLED}),
    ServiceStatus.ABORTED: frozenset({ServiceStatus.CULLED, ServiceStatus.IN_HEAT}),
    ServiceStatus.WEANED: frozenset(),
    ServiceStatus.CULLED: frozenset(),
}

# Statuses in which the dam is known to have conceived in this cycle
CONCEIVED_STATUSES = frozenset(
    {
        ServiceStatus.CONFIRMED_PREGNANT,
        ServiceStatus.ABORTED,
        ServiceStatus.CALVED,
        ServiceStatus.WEANED,
    }
)

STATUS_LABELS = {
    ServiceStatus.PLANNED: "Planeado",
    ServiceStatus.IN_HEAT: "En Celo",
    ServiceStatus.SERVICED: "Servida",
    ServiceStatus.CONFIRMED_PREGNANT: "Preñez Confirmada",
    ServiceStatus.OPEN: "Vacía",
    ServiceStatus.REPEAT_BREEDING: "Repetición de Servicio",
    ServiceStatus.ABORTED: "Aborto",
    ServiceStatus.CALVED: "Parida",
    ServiceStatus.WEANED: "Destetada",
    ServiceStatus.CULLED: "Descartada",
}

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertCategory:
    """Alert category names shared with the notification layer."""

    CALVING = "calving"
    GESTATION = "gestation"
    FERTILITY = "fertility"
    CALF = "calf"
    EFFICIENCY = "efficiency"


@dataclass(frozen=True, slots=True)
class Alert:
    severity: AlertSeverity
    category: str
    message: str
    priority: int  # 1 = most urgent

    @property
    def is_urgent(self) -> bool:
        if self.severity is AlertSeverity.CRITICAL:
            return True
        return self.severity is AlertSeverity.WARNING and self.priority <= 2

from __future__ import annotations

from typing import Any, Iterable, Mapping


class AppError(Exception):
    code = "app_error"
    status_code = 400
    retryable = False

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = dict(self.details)
        return payload


class NotFound(AppError):
    code = "not_found"
    status_code = 404


class ValidationError(AppError):
    code = "validation_error"
    status_code = 422


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class InfrastructureError(AppError):
    code = "infrastructure_error"
    status_code = 500


# Breeding-cycle validation taxonomy


class InvalidTransition(ValidationError):
    code = "invalid_transition"

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot move cycle from {current} to {requested}",
            details={"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class ChronologyViolation(ValidationError):
    code = "chronology_violation"

    def __init__(self, earlier_field: str, later_field: str) -> None:
        super().__init__(
            f"{later_field} cannot be before {earlier_field}",
            details={"fields": [earlier_field, later_field]},
        )
        self.fields = (earlier_field, later_field)


class OutOfRange(ValidationError):
    code = "out_of_range"

    def __init__(
        self,
        field: str,
        value: Any,
        minimum: Any = None,
        maximum: Any = None,
        *,
        message: str | None = None,
    ) -> None:
        low = "-inf" if minimum is None else minimum
        high = "inf" if maximum is None else maximum
        super().__init__(
            message or f"{field}={value} is outside the allowed range [{low}, {high}]",
            details={"field": field, "value": value, "min": minimum, "max": maximum},
        )
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class ImplausibleGestation(OutOfRange):
    code = "implausible_gestation"

    def __init__(self, value: int, minimum: int, maximum: int) -> None:
        super().__init__(
            "calving.gestation_length",
            value,
            minimum,
            maximum,
            message=f"Gestation of {value} days is implausible (expected {minimum}-{maximum})",
        )


class IncompleteSubrecord(ValidationError):
    code = "incomplete_subrecord"

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"{field} is required", details={"field": field})
        self.field = field


# Operational failures


class ConcurrentModification(ConflictError):
    code = "concurrent_modification"
    retryable = True

    def __init__(self, cycle_code: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Cycle {cycle_code} is being modified by another request",
            details={"cycle_code": cycle_code},
        )
        self.cycle_code = cycle_code


class PersistenceTimeout(InfrastructureError):
    code = "persistence_timeout"
    status_code = 504
    retryable = True

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(
            f"Persistence {operation} did not finish within {timeout:g}s",
            details={"operation": operation, "timeout": timeout},
        )
        self.operation = operation
        self.timeout = timeout


class PersistenceFailure(InfrastructureError):
    code = "persistence_failure"

    def __init__(self, cycle_code: str, cause: BaseException) -> None:
        super().__init__(
            f"Cycle {cycle_code} was not saved: {cause}",
            details={"cycle_code": cycle_code, "cause": type(cause).__name__},
        )
        self.cycle_code = cycle_code


class Cancelled(AppError):
    code = "cancelled"
    status_code = 499

    def __init__(self, stage: str) -> None:
        super().__init__(f"Transition cancelled before {stage}", details={"stage": stage})
        self.stage = stage


class TransitionRejected(ValidationError):
    code = "transition_rejected"

    def __init__(self, errors: Iterable[AppError]) -> None:
        self.errors = list(errors)
        super().__init__(
            "; ".join(e.message for e in self.errors) or "Transition rejected",
            details={"errors": [e.as_dict() for e in self.errors]},
        )

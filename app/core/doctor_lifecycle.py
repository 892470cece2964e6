"""Doctor status state machine and suspension escalation policy."""

from dataclasses import dataclass
from enum import StrEnum

from app.core.exceptions import ConflictException


class DoctorStatus(StrEnum):
    """Lifecycle status of a doctor account."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


# Suspension is only reachable through the suspension workflow.
ALLOWED_TRANSITIONS: dict[DoctorStatus, frozenset[DoctorStatus]] = {
    DoctorStatus.PENDING: frozenset({DoctorStatus.APPROVED, DoctorStatus.REJECTED}),
    DoctorStatus.APPROVED: frozenset({DoctorStatus.SUSPENDED, DoctorStatus.REJECTED}),
    DoctorStatus.REJECTED: frozenset({DoctorStatus.APPROVED, DoctorStatus.PENDING}),
    DoctorStatus.SUSPENDED: frozenset({DoctorStatus.APPROVED}),
}


def can_transition(current: DoctorStatus, target: DoctorStatus) -> bool:
    """Check whether a doctor may move from ``current`` to ``target``."""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: str, target: str) -> None:
    """
    Validate a status transition.

    Raises:
        ConflictException: If the transition is not allowed
    """
    current_status = DoctorStatus(current)
    target_status = DoctorStatus(target)
    if not can_transition(current_status, target_status):
        raise ConflictException(
            f"Cannot change doctor status from '{current_status}' to '{target_status}'"
        )


class SuspensionOutcome(StrEnum):
    """What issuing one more suspension does to a doctor."""

    SUSPEND = "suspend"
    DELETE = "delete"


class SuspensionStanding(StrEnum):
    """Where a doctor sits relative to the escalation thresholds."""

    CLEAR = "clear"
    WARNING = "warning"
    FINAL = "final"


@dataclass(frozen=True)
class SuspensionPolicy:
    """
    Escalation thresholds for repeated doctor suspensions.

    ``warning_threshold`` is the count at which admins get a warning.
    ``deletion_threshold`` is the suspension number that deletes the doctor
    instead of suspending it again.
    """

    warning_threshold: int = 5
    deletion_threshold: int = 6

    def __post_init__(self) -> None:
        if self.warning_threshold < 1 or self.deletion_threshold < 1:
            raise ValueError("Suspension thresholds must be positive")
        if self.warning_threshold > self.deletion_threshold:
            raise ValueError("Warning threshold cannot exceed deletion threshold")

    def decide(self, current_count: int) -> SuspensionOutcome:
        """Decide the outcome of a new suspension given the existing count."""
        if current_count >= self.deletion_threshold - 1:
            return SuspensionOutcome.DELETE
        return SuspensionOutcome.SUSPEND

    def is_at_warning(self, count: int) -> bool:
        """Check if the count has reached the warning threshold."""
        return count >= self.warning_threshold

    def next_will_delete(self, count: int) -> bool:
        """Check if the count has reached the deletion threshold."""
        return count >= self.deletion_threshold

    def standing(self, count: int) -> SuspensionStanding:
        """Classify a suspension count."""
        if self.decide(count) is SuspensionOutcome.DELETE:
            return SuspensionStanding.FINAL
        if self.is_at_warning(count):
            return SuspensionStanding.WARNING
        return SuspensionStanding.CLEAR

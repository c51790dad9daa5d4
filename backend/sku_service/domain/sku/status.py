"""SKU status state machine.

State Flow:
    ACTIVE → DISCONTINUED

Terminal States: DISCONTINUED (soft delete, never reversed)
"""

from enum import Enum
from typing import List


class SkuStatus(str, Enum):
    """SKU lifecycle status."""
    ACTIVE = "ACTIVE"
    DISCONTINUED = "DISCONTINUED"


ALLOWED_TRANSITIONS = {
    SkuStatus.ACTIVE: [SkuStatus.DISCONTINUED],
    SkuStatus.DISCONTINUED: [],  # Terminal state
}


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


def validate_transition(current_status: SkuStatus, new_status: SkuStatus) -> None:
    """Validate that a status transition is allowed.

    Args:
        current_status: Current SKU status
        new_status: Target status to transition to

    Raises:
        StateTransitionError: If transition is not allowed
    """
    allowed = ALLOWED_TRANSITIONS.get(current_status, [])
    if new_status not in allowed:
        raise StateTransitionError(
            f"Invalid transition: {current_status.value} -> {new_status.value}. "
            f"Allowed transitions from {current_status.value}: "
            f"{[s.value for s in allowed]}"
        )


def can_transition(current_status: SkuStatus, new_status: SkuStatus) -> bool:
    """Check if a status transition is allowed without raising."""
    return new_status in ALLOWED_TRANSITIONS.get(current_status, [])


def get_allowed_transitions(status: SkuStatus) -> List[SkuStatus]:
    return ALLOWED_TRANSITIONS.get(status, [])

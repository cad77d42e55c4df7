"""
Street turn record lifecycle.

    POTENTIAL -> APPROVED -> LINKED -> COMPLETED
    Any non-terminal status may also go to REJECTED.

The persistence layer stores the record; this module only says which status
changes are legal so callers can reject bad writes before issuing them.
"""

from typing import Dict, FrozenSet, List

from journey_engine.schemas.street_turn import StreetTurnStatus


class StreetTurnTransitionError(ValueError):
    """Raised when a street turn is moved to a status it cannot reach."""


ALLOWED_TRANSITIONS: Dict[StreetTurnStatus, FrozenSet[StreetTurnStatus]] = {
    StreetTurnStatus.POTENTIAL: frozenset({StreetTurnStatus.APPROVED, StreetTurnStatus.REJECTED}),
    StreetTurnStatus.APPROVED: frozenset({StreetTurnStatus.LINKED, StreetTurnStatus.REJECTED}),
    StreetTurnStatus.LINKED: frozenset({StreetTurnStatus.COMPLETED, StreetTurnStatus.REJECTED}),
    StreetTurnStatus.COMPLETED: frozenset(),
    StreetTurnStatus.REJECTED: frozenset(),
}

# Display order for allowed_transitions()
_ORDER = list(StreetTurnStatus)


def allowed_transitions(status: StreetTurnStatus) -> List[StreetTurnStatus]:
    return sorted(ALLOWED_TRANSITIONS[StreetTurnStatus(status)], key=_ORDER.index)


def can_transition(current: StreetTurnStatus, target: StreetTurnStatus) -> bool:
    return StreetTurnStatus(target) in ALLOWED_TRANSITIONS[StreetTurnStatus(current)]


def is_terminal(status: StreetTurnStatus) -> bool:
    return not ALLOWED_TRANSITIONS[StreetTurnStatus(status)]


def advance(current: StreetTurnStatus, target: StreetTurnStatus) -> StreetTurnStatus:
    """
    Validate a status change and return the new status.

    Raises:
        StreetTurnTransitionError: if the change is not allowed.
    """
    current = StreetTurnStatus(current)
    target = StreetTurnStatus(target)
    if not can_transition(current, target):
        allowed = ", ".join(s.value for s in allowed_transitions(current)) or "none (terminal)"
        raise StreetTurnTransitionError(
            f"Street turn cannot move from {current.value} to {target.value}. Allowed: {allowed}"
        )
    return target

"""
Drayage Services - Load-journey engine.

Pure computations over leg snapshots supplied by the caller:
1. Journey aggregation - progress and next action per container
2. Street-turn matching - ranked import-empty / export-booking pairs
3. ISO 6346 container number validation
"""

from journey_engine.services.drayage.container_number import (
    ContainerNumberError,
    ContainerValidationResult,
    compute_check_digit,
    is_valid_container_number,
    normalize_container_number,
    validate_container_number,
)
from journey_engine.services.drayage.journey_definitions import (
    JOURNEY_DEFINITIONS,
    expected_legs,
    leg_type_label,
)
from journey_engine.services.drayage.journey_service import (
    JourneyService,
    aggregate_journeys,
    order_legs,
)
from journey_engine.services.drayage.lfd import lfd_status
from journey_engine.services.drayage.street_turn_lifecycle import (
    StreetTurnTransitionError,
    advance,
    allowed_transitions,
    can_transition,
)
from journey_engine.services.drayage.street_turn_service import (
    StreetTurnService,
    find_street_turns,
)

__all__ = [
    # Container numbers
    "ContainerNumberError",
    "ContainerValidationResult",
    "compute_check_digit",
    "is_valid_container_number",
    "normalize_container_number",
    "validate_container_number",
    # Journeys
    "JOURNEY_DEFINITIONS",
    "expected_legs",
    "leg_type_label",
    "JourneyService",
    "aggregate_journeys",
    "order_legs",
    "lfd_status",
    # Street turns
    "StreetTurnService",
    "find_street_turns",
    "StreetTurnTransitionError",
    "advance",
    "allowed_transitions",
    "can_transition",
]

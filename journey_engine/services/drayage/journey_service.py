"""
Journey Aggregation Service.

Groups dispatch legs by container (one container = one load in drayage) and
derives each container's journey: which required legs are done, which one is
in flight, and what the dispatcher should do next.

The journey is a projection of the current leg snapshot. Nothing here is
stored, and bad records degrade a single journey instead of failing the batch.
"""

import logging
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from journey_engine.core.config import Settings, get_settings
from journey_engine.schemas.journey import (
    Journey,
    JourneyBoardSummary,
    LfdWarningLevel,
    NextAction,
    NextActionKind,
)
from journey_engine.schemas.leg import (
    IN_FLIGHT_STATUSES,
    OPEN_STATUSES,
    Leg,
    LegStatus,
    ShipmentDirection,
)
from journey_engine.services.drayage.journey_definitions import (
    DEFAULT_DIRECTION,
    expected_legs,
    leg_type_label,
)
from journey_engine.services.drayage.lfd import lfd_status

logger = logging.getLogger(__name__)


def _timestamp_key(value: Optional[datetime]) -> Tuple[int, float]:
    """Sort key for created_at: missing timestamps last, naive ones read as UTC."""
    if value is None:
        return (1, 0.0)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (0, value.timestamp())


def order_legs(legs: Iterable[Leg]) -> List[Leg]:
    """
    Display order for a container's legs.

    Uses sequence_number when every leg has one, otherwise created_at.
    Leg id breaks ties so the order is stable across runs.
    """
    legs = list(legs)
    if legs and all(leg.sequence_number is not None for leg in legs):
        return sorted(legs, key=lambda leg: (leg.sequence_number, _timestamp_key(leg.created_at), leg.id))
    return sorted(legs, key=lambda leg: (_timestamp_key(leg.created_at), leg.id))


def _first(legs: List[Leg], attribute: str) -> Any:
    for leg in legs:
        value = getattr(leg, attribute)
        if value is not None:
            return value
    return None


def _board_order(journey: Journey) -> Tuple[bool, bool, date]:
    # Incomplete first, then by LFD (earliest first, no LFD last)
    return (
        journey.is_complete,
        journey.last_free_day is None,
        journey.last_free_day or date.max,
    )


class JourneyService:
    """
    Derives container journeys from a flat list of legs.

    Usage:
        service = JourneyService()
        journeys = service.aggregate(legs)
        summary = service.summarize(journeys)
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    def aggregate(self, legs: Iterable[Leg], as_of: Optional[date] = None) -> List[Journey]:
        """
        Group legs by container and compute one journey per container.

        Args:
            legs: Legs for zero or more containers, in any order
            as_of: Date used for LFD urgency (defaults to today)

        Returns:
            Journeys with incomplete ones first, most urgent LFD on top.
        """
        groups: Dict[str, List[Leg]] = {}
        orphaned = 0

        for leg in legs:
            if not leg.container_id:
                orphaned += 1
                continue
            groups.setdefault(leg.container_id, []).append(leg)

        if orphaned:
            logger.warning(f"Skipped {orphaned} leg(s) without a container_id")

        journeys = [
            self.build_journey(container_id, container_legs, as_of=as_of)
            for container_id, container_legs in groups.items()
        ]
        journeys.sort(key=_board_order)

        logger.info(f"Aggregated {len(journeys)} journeys from {sum(len(g) for g in groups.values())} legs")
        return journeys

    def build_journey(
        self,
        container_id: str,
        legs: Iterable[Leg],
        as_of: Optional[date] = None,
        shipment_direction: Optional[ShipmentDirection] = None,
    ) -> Journey:
        """
        Compute the journey for a single container.

        ``shipment_direction`` is used when none of the legs carry one, which
        lets a caller report on a container that has no legs yet.
        """
        ordered = order_legs(legs)
        anomalies: List[str] = []

        direction = self._direction(ordered, anomalies) or shipment_direction
        if direction is None:
            direction = DEFAULT_DIRECTION
            anomalies.append(f"Missing shipment direction; assumed {DEFAULT_DIRECTION.value}")

        expected = expected_legs(direction)
        active = [leg for leg in ordered if leg.status != LegStatus.CANCELLED]

        for leg in active:
            if not leg.is_known_type:
                anomalies.append(f"Unknown leg type '{leg.leg_type}' on leg {leg.id}")
            if leg.status == LegStatus.UNKNOWN:
                anomalies.append(f"Unknown status '{leg.raw_status or leg.status.value}' on leg {leg.id}; ignored")

        recognized = [leg for leg in active if leg.status != LegStatus.UNKNOWN]
        for leg_type, count in Counter(leg.leg_type for leg in recognized).items():
            if count > 1:
                anomalies.append(f"{count} active {leg_type} legs")

        completed = [leg for leg in active if leg.status == LegStatus.COMPLETED]
        in_flight = [leg for leg in active if leg.status in IN_FLIGHT_STATUSES]
        open_legs = [leg for leg in active if leg.status in OPEN_STATUSES]

        completed_types = {leg.leg_type for leg in completed}
        completed_leg_types = [leg_type for leg_type in expected if leg_type in completed_types]
        missing_leg_types = [leg_type for leg_type in expected if leg_type not in completed_types]

        current_step_index = float(len(completed_leg_types))
        if in_flight:
            current_step_index += 0.5  # Halfway through a step

        next_step = self._next_step(in_flight, open_legs, missing_leg_types)

        if anomalies:
            logger.warning(f"Container {container_id}: {'; '.join(anomalies)}")

        last_free_day = _first(ordered, "last_free_day")
        days_until_lfd, warning_level = lfd_status(last_free_day, as_of=as_of, settings=self.settings)

        return Journey(
            container_id=container_id,
            container_number=_first(ordered, "container_number"),
            container_size=_first(ordered, "container_size"),
            shipment_direction=direction,
            customer_name=_first(ordered, "customer_name"),
            terminal_name=_first(ordered, "terminal_name"),
            steamship_line=_first(ordered, "steamship_line"),
            delivery_city=_first(ordered, "delivery_city"),
            last_free_day=last_free_day,
            is_hazmat=any(leg.is_hazmat for leg in ordered),
            is_overweight=any(leg.is_overweight for leg in ordered),
            legs=ordered,
            expected_leg_types=expected,
            completed_leg_types=completed_leg_types,
            missing_leg_types=missing_leg_types,
            current_step_index=current_step_index,
            total_steps=len(expected),
            next_action=str(next_step) if next_step else None,
            next_step=next_step,
            is_complete=not missing_leg_types,
            days_until_lfd=days_until_lfd,
            lfd_warning_level=warning_level,
            anomalies=anomalies,
        )

    def summarize(self, journeys: Iterable[Journey]) -> JourneyBoardSummary:
        """Counts for the dispatch board header."""
        summary = JourneyBoardSummary()
        for journey in journeys:
            summary.total += 1
            if journey.is_complete:
                summary.complete += 1
            elif journey.lfd_warning_level == LfdWarningLevel.OVERDUE:
                summary.overdue += 1

            if journey.next_step is None:
                continue
            if journey.next_step.kind == NextActionKind.COMPLETE:
                summary.in_progress += 1
            elif journey.next_step.kind == NextActionKind.DISPATCH:
                summary.awaiting_dispatch += 1
            else:
                summary.awaiting_leg_creation += 1
        return summary

    def _direction(self, legs: List[Leg], anomalies: List[str]) -> Optional[ShipmentDirection]:
        directions = []
        for leg in legs:
            if leg.shipment_direction is not None and leg.shipment_direction not in directions:
                directions.append(leg.shipment_direction)

        if len(directions) > 1:
            anomalies.append(
                f"Conflicting shipment directions {', '.join(d.value for d in directions)}; "
                f"using {directions[0].value}"
            )
        return directions[0] if directions else None

    def _next_step(
        self,
        in_flight: List[Leg],
        open_legs: List[Leg],
        missing_leg_types: List[str],
    ) -> Optional[NextAction]:
        if in_flight:
            leg = in_flight[0]
            return NextAction(
                kind=NextActionKind.COMPLETE,
                leg_type=leg.leg_type,
                leg_id=leg.id,
                label=f"Complete {leg_type_label(leg.leg_type)}",
            )

        if open_legs:
            leg = open_legs[0]
            return NextAction(
                kind=NextActionKind.DISPATCH,
                leg_type=leg.leg_type,
                leg_id=leg.id,
                label=f"Dispatch {leg_type_label(leg.leg_type)}",
            )

        if missing_leg_types:
            leg_type = missing_leg_types[0]
            return NextAction(
                kind=NextActionKind.CREATE,
                leg_type=leg_type,
                label=f"Create {leg_type_label(leg_type)} leg",
            )

        return None


def aggregate_journeys(legs: Iterable[Leg], as_of: Optional[date] = None) -> List[Journey]:
    """
    Quick journey aggregation with default settings.

    Args:
        legs: Legs for any number of containers
        as_of: Date used for LFD urgency

    Returns:
        List of Journey
    """
    service = JourneyService()
    return service.aggregate(legs, as_of=as_of)

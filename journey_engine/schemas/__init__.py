"""Pydantic schemas."""

from journey_engine.schemas.container import ContainerValidationRequest, ContainerValidationResponse  # noqa: F401
from journey_engine.schemas.journey import (
    Journey,
    JourneyBoardRequest,
    JourneyBoardResponse,
    JourneyBoardSummary,
    LfdWarningLevel,
    NextAction,
    NextActionKind,
)  # noqa: F401
from journey_engine.schemas.leg import Leg, LegStatus, LegType, ShipmentDirection  # noqa: F401
from journey_engine.schemas.street_turn import (
    MatchingReason,
    StreetTurnCandidate,
    StreetTurnRequest,
    StreetTurnResponse,
    StreetTurnStatus,
)  # noqa: F401

from datetime import datetime

from fastapi import APIRouter, Depends

from journey_engine.core.config import Settings, get_settings
from journey_engine.schemas.journey import (
    JourneyBoardRequest,
    JourneyBoardResponse,
    JourneyDefinition,
    JourneyDefinitionsResponse,
)
from journey_engine.services.drayage.journey_definitions import (
    JOURNEY_DEFINITIONS,
    leg_type_label,
)
from journey_engine.services.drayage.journey_service import JourneyService

router = APIRouter(prefix="/drayage/journeys", tags=["Drayage - Journeys"])


async def _journey_service(settings: Settings = Depends(get_settings)) -> JourneyService:
    return JourneyService(settings)


@router.get("/definitions", response_model=JourneyDefinitionsResponse)
async def get_definitions() -> JourneyDefinitionsResponse:
    """Required legs per shipment direction, in order."""
    return JourneyDefinitionsResponse(
        definitions=[
            JourneyDefinition(
                shipment_direction=direction,
                leg_types=list(leg_types),
                labels=[leg_type_label(leg_type) for leg_type in leg_types],
            )
            for direction, leg_types in JOURNEY_DEFINITIONS.items()
        ]
    )


@router.post("", response_model=JourneyBoardResponse)
async def build_journey_board(
    request: JourneyBoardRequest,
    service: JourneyService = Depends(_journey_service),
) -> JourneyBoardResponse:
    """
    Group legs by container and report each container's journey.

    Incomplete journeys come first, ordered by Last Free Day.
    """
    journeys = service.aggregate(request.legs, as_of=request.as_of)
    return JourneyBoardResponse(
        generated_at=datetime.utcnow(),
        journeys=journeys,
        summary=service.summarize(journeys),
    )
